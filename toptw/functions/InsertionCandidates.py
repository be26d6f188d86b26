#-*- coding: utf-8 -*-
"""
Created on Mon October 19 11:27:05 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Insertion candidates: for every unrouted POI, the cheapest first-fit feasible
insertion over all open routes.


@author: Kreecha_P

MIT License

Copyright (c) 2025 Kreecha Puphaiboon

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

from dataclasses import dataclass
from typing import List, Optional

from toptw.classes.TOPTWSolution import TOPTWSolution, TIME_TOLERANCE


@dataclass(frozen=True)
class Candidate:
    """Insertion of customer right after predecessor on the given route"""
    customer: int
    route: int
    predecessor: int
    cost: float
    score: float


def calculate_cost_after_insertion(solution: TOPTWSolution, customer: int, pre: int, suc: int) -> float:
    """Extra distance of the detour pre -> customer -> suc"""
    instance = solution.instance
    return (instance.get_distance(pre, customer) + instance.get_distance(customer, suc)
            - instance.get_distance(pre, suc))


def is_valid_insertion(solution: TOPTWSolution, customer: int, pre: int, suc: int, route_index: int) -> bool:
    """Check time windows and route duration if customer goes between pre and suc.

    The delay is pushed down the route until it is absorbed by waiting time,
    at which point every later visit keeps its current schedule.
    """
    instance = solution.instance
    depot = solution.get_index_route(route_index)

    start = max(solution.get_departure_time(route_index, pre) + instance.get_time(pre, customer),
                instance.get_ready_time(customer))
    if start > instance.get_due_time(customer) + TIME_TOLERANCE:
        return False
    time = start + instance.get_service_time(customer)

    prev, node = customer, suc
    while True:
        arrival = time + instance.get_time(prev, node)
        if node == depot:
            return arrival <= instance.get_max_time_per_route() + TIME_TOLERANCE
        start = max(arrival, instance.get_ready_time(node))
        if start > instance.get_due_time(node) + TIME_TOLERANCE:
            return False
        time = start + instance.get_service_time(node)
        if time <= solution.get_departure_time(route_index, node) + TIME_TOLERANCE:
            # Schedule unchanged from here on, and it was feasible already
            return True
        prev, node = node, solution.get_successor(node)


def evaluate_candidate_for_route(solution: TOPTWSolution, customer: int, route_index: int) -> Optional[Candidate]:
    """First feasible position of customer on the route, walking from its depot"""
    depot = solution.get_index_route(route_index)
    pre = depot
    while True:
        suc = solution.get_successor(pre)
        if is_valid_insertion(solution, customer, pre, suc, route_index):
            return Candidate(customer=customer,
                             route=route_index,
                             predecessor=pre,
                             cost=calculate_cost_after_insertion(solution, customer, pre, suc),
                             score=solution.instance.get_score(customer))
        pre = suc
        if pre == depot:
            return None


def find_best_candidate_for_customer(solution: TOPTWSolution, customer: int) -> Optional[Candidate]:
    """Cheapest of the per-route first-fit insertions of customer"""
    best_candidate = None
    for route_index in range(solution.get_created_routes()):
        candidate = evaluate_candidate_for_route(solution, customer, route_index)
        if candidate is not None and (best_candidate is None or candidate.cost < best_candidate.cost):
            best_candidate = candidate
    return best_candidate


def comprehensive_evaluation(customers: List[int], solution: TOPTWSolution) -> List[Candidate]:
    """Evaluate every unrouted customer and sort the feasible ones by insertion cost"""
    candidates = []
    for customer in customers:
        candidate = find_best_candidate_for_customer(solution, customer)
        if candidate is not None:
            candidates.append(candidate)
    candidates.sort(key=lambda c: c.cost)
    return candidates
