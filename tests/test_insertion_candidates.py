import math

import pytest

from toptw.classes.TOPTWProblem import TOPTWInstance
from toptw.classes.TOPTWSolution import TOPTWSolution
from toptw.functions.InsertionCandidates import (calculate_cost_after_insertion, comprehensive_evaluation,
                                                 evaluate_candidate_for_route, find_best_candidate_for_customer,
                                                 is_valid_insertion)

A, C, B = 1, 2, 3


def make_instance(due_a=1000.0, horizon=1000.0, vehicles=2):
    # A = (10, 0), C = (0, 10), B = (0, 5) on the depot -> C leg
    return TOPTWInstance.from_arrays(
        vehicles=vehicles,
        x=[0.0, 10.0, 0.0, 0.0],
        y=[0.0, 0.0, 10.0, 5.0],
        score=[0.0, 3.0, 8.0, 5.0],
        ready_time=[0.0, 0.0, 0.0, 0.0],
        due_time=[horizon, due_a, 1000.0, 1000.0],
        service_time=[0.0, 0.0, 0.0, 0.0],
    )


def route_a_c(instance, initial_routes=1):
    """Solution with route 0 = depot -> A -> C -> depot"""
    solution = TOPTWSolution(instance)
    solution.init_solution(initial_routes)
    depot = solution.get_index_route(0)
    solution.insert_after(A, depot)
    solution.insert_after(C, A)
    solution.forward_propagate(0, depot)
    return solution


def test_cost_of_insertion():
    solution = TOPTWSolution(make_instance())
    solution.init_solution()
    depot = solution.get_index_route(0)
    assert calculate_cost_after_insertion(solution, B, depot, depot) == pytest.approx(10.0)


def test_first_feasible_position_is_taken_not_the_cheapest():
    solution = route_a_c(make_instance())
    depot = solution.get_index_route(0)

    candidate = evaluate_candidate_for_route(solution, B, 0)

    # the C -> depot position would cost 0, but depot -> A comes first
    assert candidate.predecessor == depot
    assert candidate.route == 0
    assert candidate.customer == B
    assert candidate.score == 5
    assert candidate.cost == pytest.approx(5 + math.sqrt(125) - 10)


def test_delay_pushed_downstream_rejects_position():
    # A is due exactly when a direct trip arrives, so nothing may go in front of it
    solution = route_a_c(make_instance(due_a=10.0))
    depot = solution.get_index_route(0)

    assert not is_valid_insertion(solution, B, depot, A, 0)
    assert is_valid_insertion(solution, B, A, C, 0)

    candidate = evaluate_candidate_for_route(solution, B, 0)
    assert candidate.predecessor == A
    assert candidate.cost == pytest.approx(math.sqrt(125) + 5 - math.sqrt(200))


def test_customer_window_closed():
    instance = TOPTWInstance.from_arrays(1, [0, 30], [0, 40], [0, 1], [0, 0], [1000, 20], [0, 0])
    solution = TOPTWSolution(instance)
    solution.init_solution()
    depot = solution.get_index_route(0)

    assert not is_valid_insertion(solution, 1, depot, depot, 0)
    assert evaluate_candidate_for_route(solution, 1, 0) is None


def test_route_duration_limit():
    solution = TOPTWSolution(make_instance(horizon=15.0))
    solution.init_solution()
    depot = solution.get_index_route(0)

    # B needs 10 for the round trip, A and C need 20
    assert is_valid_insertion(solution, B, depot, depot, 0)
    assert not is_valid_insertion(solution, A, depot, depot, 0)
    assert find_best_candidate_for_customer(solution, A) is None


def test_cheapest_route_wins():
    solution = route_a_c(make_instance(), initial_routes=2)

    candidate = find_best_candidate_for_customer(solution, B)

    # route 1 is empty, its round trip costs 10
    assert candidate.route == 0
    assert candidate.cost < 10


def test_ties_between_routes_keep_the_first_route():
    solution = TOPTWSolution(make_instance())
    solution.init_solution(2)

    candidate = find_best_candidate_for_customer(solution, A)

    assert candidate.route == 0
    assert candidate.predecessor == solution.get_index_route(0)


def test_comprehensive_evaluation_sorted_by_cost():
    solution = TOPTWSolution(make_instance())
    solution.init_solution()

    candidates = comprehensive_evaluation([A, C, B], solution)

    assert [c.customer for c in candidates] == [B, A, C]
    assert [c.cost for c in candidates] == pytest.approx([10.0, 20.0, 20.0])


def test_comprehensive_evaluation_drops_infeasible_customers():
    solution = TOPTWSolution(make_instance(horizon=15.0))
    solution.init_solution()

    candidates = comprehensive_evaluation([A, C, B], solution)

    assert [c.customer for c in candidates] == [B]
    assert comprehensive_evaluation([], solution) == []
