#-*- coding: utf-8 -*-
"""
Created on Mon October 19 10:03:51 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

A solution keeps every route as a circular doubly linked list stored in two
node-indexed arrays (predecessors and successors). Route k is anchored on its
own depot id, pois + 1 + k, which the instance maps back to the depot (index 0)
for distances and time windows. POIs that are not routed hold NO_NODE in both
arrays.


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

import logging
from typing import List, Optional

import numpy as np

from toptw.classes.TOPTWProblem import TOPTWInstance

logger = logging.getLogger(__name__)

NO_NODE = -1
TIME_TOLERANCE = 1e-9


class TOPTWSolution:
    """Represents a (partial) solution to TOPTW built by one GRASP construction"""

    def __init__(self, instance: TOPTWInstance):
        self.instance = instance
        self.n_ids = instance.get_pois() + instance.get_vehicles() + 1
        self.predecessors = np.full(self.n_ids, NO_NODE, dtype=int)
        self.successors = np.full(self.n_ids, NO_NODE, dtype=int)
        self.departure_times: List[np.ndarray] = []
        self.arrival_times_at_depot: List[float] = []
        self.created_routes = 0

    def init_solution(self, initial_routes: int = 1):
        """Reset links and times, then open the starting routes"""
        if initial_routes < 1:
            raise ValueError(f"initial_routes must be at least 1, got {initial_routes}")
        self.predecessors.fill(NO_NODE)
        self.successors.fill(NO_NODE)
        self.departure_times = []
        self.arrival_times_at_depot = []
        self.created_routes = 0
        for _ in range(min(initial_routes, self.instance.get_vehicles())):
            self.add_route()

    def add_route(self) -> Optional[int]:
        """Open a new empty route and return its depot id, or None when the fleet is used up"""
        if self.created_routes >= self.instance.get_vehicles():
            return None
        depot = self.get_index_route(self.created_routes)
        self.predecessors[depot] = depot
        self.successors[depot] = depot
        self.departure_times.append(np.zeros(self.n_ids))
        self.arrival_times_at_depot.append(self.instance.get_ready_time(depot))
        self.created_routes += 1
        logger.debug(f"Opened route {self.created_routes - 1} (depot id {depot})")
        return depot

    def insert_after(self, customer: int, predecessor: int):
        """Splice customer between predecessor and its current successor"""
        if self.is_depot(customer):
            raise ValueError(f"Depot id {customer} cannot be inserted as a customer")
        if self.is_routed(customer):
            raise ValueError(f"Customer {customer} is already routed")
        if self.successors[predecessor] == NO_NODE:
            raise ValueError(f"Node {predecessor} is not part of any route")
        successor = int(self.successors[predecessor])
        self.predecessors[customer] = predecessor
        self.successors[customer] = successor
        self.successors[predecessor] = customer
        self.predecessors[successor] = customer

    def forward_propagate(self, route_index: int, from_node: int):
        """Recompute departure times from from_node up to the closing depot of the route"""
        route = self.departure_times[route_index]
        depot = self.get_index_route(route_index)
        time = self.get_departure_time(route_index, from_node)
        pre = from_node
        while True:
            suc = int(self.successors[pre])
            time += self.instance.get_time(pre, suc)
            if suc == depot:
                self.arrival_times_at_depot[route_index] = time
                break
            time = max(time, self.instance.get_ready_time(suc)) + self.instance.get_service_time(suc)
            route[suc] = time
            pre = suc

    def get_departure_time(self, route_index: int, node: int) -> float:
        """Departure time of node on the route; a depot departs at its ready time"""
        if self.is_depot(node):
            return self.instance.get_ready_time(node)
        return float(self.departure_times[route_index][node])

    def get_arrival_time_at_depot(self, route_index: int) -> float:
        return self.arrival_times_at_depot[route_index]

    def get_index_route(self, route_index: int) -> int:
        """Depot id that anchors the given route"""
        return self.instance.get_pois() + 1 + route_index

    def get_route_index(self, depot: int) -> int:
        return depot - self.instance.get_pois() - 1

    def get_created_routes(self) -> int:
        return self.created_routes

    def get_successor(self, node: int) -> int:
        return int(self.successors[node])

    def get_predecessor(self, node: int) -> int:
        return int(self.predecessors[node])

    def is_depot(self, node: int) -> bool:
        return self.instance.is_depot(node)

    def is_routed(self, node: int) -> bool:
        return bool(self.successors[node] != NO_NODE)

    def get_route(self, route_index: int) -> List[int]:
        """Customers of a route in visiting order (depot excluded)"""
        depot = self.get_index_route(route_index)
        customers = []
        node = self.get_successor(depot)
        while node != depot:
            customers.append(node)
            node = self.get_successor(node)
        return customers

    def get_routes(self) -> List[List[int]]:
        return [self.get_route(k) for k in range(self.created_routes)]

    def get_routed_customers(self) -> List[int]:
        return [node for node in range(1, self.instance.get_pois() + 1) if self.is_routed(node)]

    def evaluate_fitness(self) -> float:
        """Sum of the scores of all routed POIs"""
        return sum(self.instance.get_score(node) for node in self.get_routed_customers())

    def get_distance(self) -> float:
        """Total distance travelled over all routes, depot to depot"""
        return self.instance.get_routes_distance([[0] + route + [0] for route in self.get_routes()])

    def get_info_solution(self) -> str:
        """Human readable summary of the solution"""
        lines = []
        for k, route in enumerate(self.get_routes()):
            score = sum(self.instance.get_score(node) for node in route)
            path = " -> ".join(["0"] + [str(node) for node in route] + ["0"])
            lines.append(f"Route {k + 1}: {path} (score: {score:.2f}, "
                         f"finish: {self.get_arrival_time_at_depot(k):.2f})")
        lines.append(f"Routes: {self.created_routes}, Visited POIs: {len(self.get_routed_customers())}"
                     f"/{self.instance.get_pois()}, Distance: {self.get_distance():.2f}, "
                     f"Fitness: {self.evaluate_fitness():.2f}")
        return "\n".join(lines)


def check_all_nodes_in_solution(solution: TOPTWSolution, verbose: bool = False) -> bool:
    """Check whether every POI of the instance is routed (TOPTW allows leaving some out)"""
    expected_nodes = set(range(1, solution.instance.get_pois() + 1))
    routed_nodes = set(solution.get_routed_customers())
    missing_nodes = expected_nodes - routed_nodes

    if verbose:
        if not missing_nodes:
            print(f"Node check: All {len(expected_nodes)} POIs are routed.")
        else:
            print(f"Node check: {len(routed_nodes)}/{len(expected_nodes)} POIs routed, "
                  f"unrouted {sorted(missing_nodes)}")
    return not missing_nodes


def detailed_feasibility_check(solution: TOPTWSolution, verbose: bool = False) -> dict:
    """
    Comprehensive feasibility check that explains all constraint violations
    Returns a dictionary with detailed violation information
    """
    instance = solution.instance
    violations = {
        'is_feasible': True,
        'link_violations': [],
        'time_window_violations': [],
        'duration_violations': [],
        'duplicate_visits': [],
        'total_violations': 0
    }

    def report(category, message):
        violations[category].append(message)
        violations['is_feasible'] = False
        if verbose:
            print(f"  X {category.upper().replace('_', ' ')}: {message}")

    if verbose:
        print("\n" + "=" * 60)
        print("DETAILED FEASIBILITY ANALYSIS")
        print("=" * 60)

    seen = {}
    for route_index in range(solution.get_created_routes()):
        depot = solution.get_index_route(route_index)
        if verbose:
            print(f"\nRoute {route_index + 1} (depot id {depot})")

        # Walk the circular list; a broken or endless list is a structural violation
        pre = depot
        time = instance.get_ready_time(depot)
        steps = 0
        ended = False
        while steps <= instance.get_pois():
            suc = solution.get_successor(pre)
            if suc == NO_NODE or solution.get_predecessor(suc) != pre:
                report('link_violations', f"Route {route_index + 1}: broken link {pre} -> {suc}")
                ended = True
                break
            arrival = time + instance.get_time(pre, suc)
            steps += 1
            if suc == depot:
                ended = True
                if arrival > instance.get_max_time_per_route() + TIME_TOLERANCE:
                    report('duration_violations',
                           f"Route {route_index + 1}: finishes at {arrival:.2f}, "
                           f"max {instance.get_max_time_per_route():.2f}")
                elif verbose:
                    print(f"  SUMMARY: {steps - 1} POIs, finish at {arrival:.2f}")
                break
            if solution.is_depot(suc):
                report('link_violations', f"Route {route_index + 1}: reaches foreign depot {suc}")
                ended = True
                break
            if suc in seen:
                report('duplicate_visits', f"POI {suc} visited by routes {seen[suc] + 1} and {route_index + 1}")
                ended = True
                break
            seen[suc] = route_index

            start = max(arrival, instance.get_ready_time(suc))
            if start > instance.get_due_time(suc) + TIME_TOLERANCE:
                report('time_window_violations',
                       f"Route {route_index + 1}, POI {suc}: service starts at {start:.2f}, "
                       f"due by {instance.get_due_time(suc):.2f}")
            elif verbose:
                print(f"  OK POI {suc}: start {start:.2f} "
                      f"(window: {instance.get_ready_time(suc)}-{instance.get_due_time(suc)})")
            time = start + instance.get_service_time(suc)
            pre = suc

        if not ended:
            report('link_violations', f"Route {route_index + 1}: does not return to its depot")

    violations['total_violations'] = (len(violations['link_violations']) +
                                      len(violations['time_window_violations']) +
                                      len(violations['duration_violations']) +
                                      len(violations['duplicate_visits']))

    if verbose:
        print(f"\n" + "=" * 60)
        print("FEASIBILITY SUMMARY")
        print("=" * 60)
        print(f"Overall feasible: {violations['is_feasible']}")
        print(f"Total violations: {violations['total_violations']}")
        print("=" * 60)

    if not violations['is_feasible']:
        logger.warning(f"Solution has {violations['total_violations']} violations")
    return violations
