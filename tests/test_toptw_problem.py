import math

import numpy as np
import pytest

from toptw.classes.TOPTWProblem import InstanceLoadError, TOPTWInstance

SHIFTED_COLUMNS_DATA = """0 1 1
this line is ignored by the loader
0 0.0 0.0 0 0 0 0 5 500
1 3.0 4.0 2 7 0 1 999 10 50
"""


def test_parse_header_and_pois(four_customers_instance):
    instance = four_customers_instance
    assert instance.get_pois() == 4
    assert instance.get_vehicles() == 1
    assert instance.get_max_time_per_route() == 1000
    assert instance.get_max_score() == 20
    assert [instance.get_score(i) for i in range(5)] == [0, 10, 20, 5, 15]
    assert instance.filename == "from_data"


def test_depot_and_poi_time_window_columns_differ():
    instance = TOPTWInstance(data=SHIFTED_COLUMNS_DATA)
    assert instance.get_ready_time(0) == 5
    assert instance.get_due_time(0) == 500
    assert instance.get_max_time_per_route() == 500
    assert instance.get_ready_time(1) == 10
    assert instance.get_due_time(1) == 50
    assert instance.get_service_time(1) == 2
    assert instance.get_score(1) == 7


def test_distance_matrix(four_customers_instance):
    instance = four_customers_instance
    assert instance.get_distance(0, 1) == pytest.approx(10.0)
    assert instance.get_distance(1, 3) == pytest.approx(20.0)
    assert instance.get_distance(1, 2) == pytest.approx(math.sqrt(200))
    assert np.allclose(instance.distances, instance.distances.T)
    assert np.all(np.diag(instance.distances) == 0)
    assert instance.get_time(1, 2) == instance.get_distance(1, 2)


def test_depot_aliases_map_to_depot(four_customers_instance):
    instance = four_customers_instance
    assert not instance.is_depot(0)
    assert not instance.is_depot(4)
    assert instance.is_depot(5)
    assert instance.is_depot(7)
    assert instance.get_distance(5, 1) == instance.get_distance(0, 1)
    assert instance.get_distance(5, 6) == 0
    assert instance.get_due_time(6) == instance.get_due_time(0)
    assert instance.get_score(5) == 0
    assert (instance.get_x(1), instance.get_y(1)) == (10.0, 0.0)
    assert (instance.get_x(2), instance.get_y(2)) == (0.0, 10.0)
    assert (instance.get_x(6), instance.get_y(6)) == (instance.get_x(0), instance.get_y(0))


def test_route_distance(four_customers_instance):
    instance = four_customers_instance
    assert instance.get_route_distance([0, 1, 3, 0]) == pytest.approx(40.0)
    assert instance.get_routes_distance([[0, 1, 0], [0, 2, 0]]) == pytest.approx(40.0)
    assert instance.get_route_distance([0]) == 0


def test_load_from_file_and_folder(tmp_path, four_customers_data):
    path = tmp_path / "instance.txt"
    path.write_text(four_customers_data)

    by_path = TOPTWInstance(filename=str(path))
    by_folder = TOPTWInstance(filename="instance.txt", data=str(tmp_path))

    assert by_path.filename == "instance.txt"
    assert by_folder.get_pois() == by_path.get_pois() == 4


def test_sample_instance(sample_instance):
    assert sample_instance.get_pois() == 10
    assert sample_instance.get_vehicles() == 2
    assert sample_instance.get_max_time_per_route() == 230
    assert sample_instance.get_ready_time(5) == 34
    assert sample_instance.get_due_time(5) == 44
    assert sample_instance.get_max_score() == 26


def test_missing_file_raises_load_error(tmp_path):
    with pytest.raises(InstanceLoadError) as excinfo:
        TOPTWInstance(filename=str(tmp_path / "missing.txt"))
    assert isinstance(excinfo.value, ValueError)


def test_no_source_given():
    with pytest.raises(ValueError):
        TOPTWInstance()


@pytest.mark.parametrize("data, line_number", [
    ("0 1\n0\n0 0 0 0 0 0 0 0 100\n", 1),
    ("0 x 1\n0\n0 0 0 0 0 0 0 0 100\n1 1 1 0 1 0 1 1 0 100\n", 1),
    ("0 0 1\n0\n0 0 0 0 0 0 0 0 100\n1 1 1 0 1 0 1 1 0 100\n", 1),
    ("0 1 1\n0\n0 0 0 0 0 0 0 0 100\n1 1 1 0 1\n", 4),
    ("0 1 1\n0\n0 0 0 0 0 0 0 0 100\n1 abc 1 0 1 0 1 1 0 100\n", 4),
    ("0 1 1\n0\n0 0 0 0\n1 1 1 0 1 0 1 1 0 100\n", 3),
])
def test_malformed_instances(data, line_number):
    with pytest.raises(InstanceLoadError) as excinfo:
        TOPTWInstance(data=data)
    assert excinfo.value.line_number == line_number
    assert f"line {line_number}" in str(excinfo.value)


def test_too_few_poi_lines():
    with pytest.raises(InstanceLoadError, match="expected 4 POI lines"):
        TOPTWInstance(data="0 1 3\n0\n0 0 0 0 0 0 0 0 100\n1 1 1 0 1 0 1 1 0 100\n")


def test_from_arrays():
    instance = TOPTWInstance.from_arrays(2, [0, 3], [0, 4], [0, 9], [0, 1], [50, 20], [0, 2])
    assert instance.get_pois() == 1
    assert instance.get_vehicles() == 2
    assert instance.get_distance(0, 1) == pytest.approx(5.0)
    assert instance.get_max_score() == 9
    assert instance.get_max_time_per_route() == 50


def test_from_arrays_length_mismatch():
    with pytest.raises(ValueError):
        TOPTWInstance.from_arrays(1, [0, 1], [0], [0, 1], [0, 0], [10, 10], [0, 0])


def test_instance_without_pois():
    instance = TOPTWInstance.from_arrays(1, [0], [0], [0], [0], [10], [0])
    assert instance.get_pois() == 0
    assert instance.get_max_score() == 0
