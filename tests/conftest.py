import os

import numpy as np
import pytest

from toptw.classes.TOPTWProblem import TOPTWInstance
from toptw.classes.TOPTWSolution import NO_NODE

DATA_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data")

# depot + 4 customers, 1 vehicle, every window [0, 1000]
FOUR_CUSTOMERS_DATA = """0 1 4
0 1000
0 0.0 0.0 0 0 0 0 0 1000
1 10.0 0.0 0 10 0 1 1 0 1000
2 0.0 10.0 0 20 0 1 1 0 1000
3 -10.0 0.0 0 5 0 1 1 0 1000
4 0.0 -10.0 0 15 0 1 1 0 1000
"""


@pytest.fixture
def four_customers_data():
    return FOUR_CUSTOMERS_DATA


@pytest.fixture
def four_customers_instance():
    return TOPTWInstance(data=FOUR_CUSTOMERS_DATA)


@pytest.fixture
def two_customers_instance():
    """Two customers on opposite sides of the depot; one vehicle can only serve one of them"""
    return TOPTWInstance.from_arrays(
        vehicles=1,
        x=[0.0, 40.0, -40.0],
        y=[0.0, 0.0, 0.0],
        score=[0.0, 10.0, 20.0],
        ready_time=[0.0, 0.0, 0.0],
        due_time=[100.0, 100.0, 100.0],
        service_time=[0.0, 0.0, 0.0],
    )


@pytest.fixture
def sample_instance():
    return TOPTWInstance(filename=os.path.join(DATA_DIR, "sample_toptw.txt"))


def make_random_instance(seed: int, pois: int = 25, vehicles: int = 3, horizon: float = 300.0) -> TOPTWInstance:
    rng = np.random.RandomState(seed)
    x = np.concatenate([[50.0], rng.uniform(0, 100, pois)])
    y = np.concatenate([[50.0], rng.uniform(0, 100, pois)])
    ready = np.concatenate([[0.0], rng.uniform(0, horizon * 0.6, pois)])
    width = rng.uniform(10, 80, pois)
    due = np.concatenate([[horizon], ready[1:] + width])
    service = np.concatenate([[0.0], rng.uniform(1, 10, pois)])
    score = np.concatenate([[0.0], rng.randint(1, 30, pois)])
    return TOPTWInstance.from_arrays(vehicles, x, y, score, ready, due, service)


@pytest.fixture
def random_instance_factory():
    return make_random_instance


def assert_solution_invariants(solution):
    """Link integrity, route closure, disjoint routes and time feasibility"""
    instance = solution.instance
    seen = set()
    for route_index in range(solution.get_created_routes()):
        depot = solution.get_index_route(route_index)
        assert instance.is_depot(depot)

        route = solution.get_route(route_index)
        # closure: len(route) + 1 successor steps lead back to the depot
        node = depot
        for _ in range(len(route) + 1):
            node = solution.get_successor(node)
        assert node == depot

        for node in [depot] + route:
            assert solution.get_successor(solution.get_predecessor(node)) == node
            assert solution.get_predecessor(solution.get_successor(node)) == node

        for node in route:
            assert node not in seen
            seen.add(node)
            start = solution.get_departure_time(route_index, node) - instance.get_service_time(node)
            assert start >= instance.get_ready_time(node) - 1e-9
            assert start <= instance.get_due_time(node) + 1e-9

        assert solution.get_arrival_time_at_depot(route_index) <= instance.get_max_time_per_route() + 1e-9

    for node in range(1, instance.get_pois() + 1):
        if node not in seen:
            assert solution.get_successor(node) == NO_NODE
            assert solution.get_predecessor(node) == NO_NODE


@pytest.fixture
def check_invariants():
    return assert_solution_invariants
