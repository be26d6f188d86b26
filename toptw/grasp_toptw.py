#-*- coding: utf-8 -*-
"""
Created on Mon October 19 15:20:57 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Every iteration builds one complete multi-route solution greedily:
evaluate the cheapest feasible insertion of every unrouted POI, keep the
cheapest ones in a Restricted Candidate List (RCL), pick one with the
configured selection policy, insert it and propagate the new schedule along
its route. When nothing fits any more a new route is opened, until the fleet
is used up. The best solution over all iterations is kept.

Usage:
    toptw-grasp data/sample_toptw.txt --iterations 200 --rcl-size 3 --policy fuzzy-alpha-cut --alpha 0.8


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

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Iterator, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np
from alns.stop import MaxIterations, StoppingCriterion

from toptw.classes.EarlyStopping import EarlyStoppingCriterion
from toptw.classes.GRASPProgressLogger import GRASPProgressLogger
from toptw.classes.TOPTWProblem import InstanceLoadError, TOPTWInstance
from toptw.classes.TOPTWSolution import TOPTWSolution, check_all_nodes_in_solution, detailed_feasibility_check
from toptw.functions.InsertionCandidates import Candidate, comprehensive_evaluation
from toptw.functions.RCLSelection import RCLSelector, SelectionPolicy, build_restricted_candidate_list

logger = logging.getLogger(__name__)


@dataclass
class GRASPConfig:
    """Static configuration of the greedy randomized construction"""
    policy: SelectionPolicy = SelectionPolicy.FUZZY_ALPHA_CUT
    alpha: float = 0.8
    initial_routes: int = 1
    seed: Optional[int] = 42

    def __post_init__(self):
        if not isinstance(self.policy, SelectionPolicy):
            self.policy = SelectionPolicy(self.policy)
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {self.alpha}")
        if self.initial_routes < 1:
            raise ValueError(f"initial_routes must be at least 1, got {self.initial_routes}")


class ConstructionState(Enum):
    INSERT = "insert"
    OPEN_ROUTE = "open_route"
    DONE = "done"


@dataclass
class ConstructionStep:
    """Outcome of one pass of the construction loop"""
    state: ConstructionState
    solution: TOPTWSolution
    candidate: Optional[Candidate] = None
    rcl_size: int = 0


class TOPTWGRASP:
    """Greedy randomized construction of TOPTW solutions"""

    def __init__(self, instance: TOPTWInstance, config: GRASPConfig = None,
                 random_state: np.random.RandomState = None):
        self.instance = instance
        self.config = config if config is not None else GRASPConfig()
        self.random_state = random_state if random_state is not None else np.random.RandomState(self.config.seed)
        self.selector = RCLSelector(self.config.policy, instance.get_max_score(), self.random_state,
                                    alpha=self.config.alpha)

    def iter_greedy_construction(self, max_size_rcl: int) -> Iterator[ConstructionStep]:
        """Build one solution on a fresh route state, yielding after every pass"""
        if max_size_rcl < 1:
            raise ValueError(f"max_size_rcl must be at least 1, got {max_size_rcl}")
        return self._construction_steps(max_size_rcl)

    def _construction_steps(self, max_size_rcl: int) -> Iterator[ConstructionStep]:
        solution = TOPTWSolution(self.instance)
        solution.init_solution(self.config.initial_routes)
        customers = list(range(1, self.instance.get_pois() + 1))

        while customers:
            candidates = comprehensive_evaluation(customers, solution)
            if candidates:
                rcl = build_restricted_candidate_list(candidates, max_size_rcl)
                selected = rcl[self.selector.select(rcl)]
                solution.insert_after(selected.customer, selected.predecessor)
                solution.forward_propagate(selected.route, selected.predecessor)
                customers.remove(selected.customer)
                yield ConstructionStep(ConstructionState.INSERT, solution, selected, len(rcl))
            elif solution.add_route() is not None:
                yield ConstructionStep(ConstructionState.OPEN_ROUTE, solution)
            else:
                break

        logger.debug(f"Construction done: {len(customers)} POIs left unrouted")
        yield ConstructionStep(ConstructionState.DONE, solution)

    def compute_greedy_solution(self, max_size_rcl: int) -> TOPTWSolution:
        step = None
        for step in self.iter_greedy_construction(max_size_rcl):
            pass
        return step.solution

    def grasp(self, max_iterations: int, max_size_rcl: int, stop: StoppingCriterion = None,
              progress_logger: GRASPProgressLogger = None) -> Tuple[Optional[TOPTWSolution], GRASPProgressLogger]:
        """Run constructions until the stopping criterion fires and keep the best one"""
        if stop is None:
            stop = MaxIterations(max_iterations)
        if progress_logger is None:
            progress_logger = GRASPProgressLogger(log_mode='silent')

        best = None
        current = None
        while not stop(self.random_state, best, current):
            current = self.compute_greedy_solution(max_size_rcl)
            progress_logger.log_progress(current)
            if best is None or current.evaluate_fitness() > best.evaluate_fitness():
                best = current
        return best, progress_logger


def solve_toptw_with_grasp(instance: TOPTWInstance, max_iterations: int = 100, max_size_rcl: int = 3,
                           config: GRASPConfig = None, report_interval: int = 10,
                           patience_ratio: float = None,
                           is_plot: bool = False) -> Tuple[Optional[TOPTWSolution], GRASPProgressLogger]:
    """Solve TOPTW using GRASP with progress tracking"""
    solver = TOPTWGRASP(instance, config)

    if patience_ratio is not None:
        stop = EarlyStoppingCriterion(max_iterations, patience_ratio=patience_ratio)
    else:
        stop = MaxIterations(max_iterations)

    progress_logger = GRASPProgressLogger(log_mode='interval', interval=report_interval)

    print(f"\nStarting GRASP for {max_iterations} iterations "
          f"(RCL size {max_size_rcl}, policy {solver.config.policy.value}, alpha {solver.config.alpha})...")
    print(f"Progress will be reported every {report_interval} iterations.")
    print("=" * 60)

    best, progress_logger = solver.grasp(max_iterations, max_size_rcl, stop=stop, progress_logger=progress_logger)

    progress_logger.final_report()

    if is_plot and progress_logger.iteration_count > 0:
        _, ax = plt.subplots(figsize=(12, 6))
        progress_logger.plot_fitness(ax=ax, title=f"GRASP on {instance.filename}")
        plt.show()

    return best, progress_logger


def setup_logging(level: int = logging.INFO, log_file: str = None):
    """Console logging, plus a log file when requested"""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers
    )


def parse_args(argv: List[str] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="GRASP construction for the Team Orienteering Problem "
                                                 "with Time Windows")
    parser.add_argument("instance", help="path to a TOPTW instance file")
    parser.add_argument("--iterations", type=int, default=100, help="number of GRASP iterations")
    parser.add_argument("--rcl-size", type=int, default=3, help="maximum size of the restricted candidate list")
    parser.add_argument("--policy", choices=[p.value for p in SelectionPolicy],
                        default=SelectionPolicy.FUZZY_ALPHA_CUT.value, help="RCL selection policy")
    parser.add_argument("--alpha", type=float, default=0.8, help="alpha-cut threshold for fuzzy-alpha-cut")
    parser.add_argument("--seed", type=int, default=42, help="random seed")
    parser.add_argument("--initial-routes", type=int, default=1, help="routes opened before construction starts")
    parser.add_argument("--patience-ratio", type=float, default=None,
                        help="stop early after this fraction of iterations without improvement")
    parser.add_argument("--report-interval", type=int, default=10, help="iterations between progress reports")
    parser.add_argument("--plot", action="store_true", help="plot fitness per iteration")
    parser.add_argument("--log-file", default=None, help="also write logs to this file")
    parser.add_argument("--verbose", action="store_true", help="debug logging and detailed feasibility report")
    return parser.parse_args(argv)


def main(argv: List[str] = None) -> int:
    """Load an instance, run the GRASP and report the best solution"""
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        instance = TOPTWInstance(filename=args.instance)
        config = GRASPConfig(policy=SelectionPolicy(args.policy), alpha=args.alpha,
                             initial_routes=args.initial_routes, seed=args.seed)
    except (InstanceLoadError, ValueError) as e:
        logger.error(f"Cannot start GRASP: {e}")
        return 1

    print(f"Instance loaded:")
    print(f"- POIs: {instance.get_pois()}")
    print(f"- Vehicles: {instance.get_vehicles()}")
    print(f"- Max time per route: {instance.get_max_time_per_route():.2f}")

    try:
        best, _ = solve_toptw_with_grasp(instance, max_iterations=args.iterations, max_size_rcl=args.rcl_size,
                                         config=config, report_interval=args.report_interval,
                                         patience_ratio=args.patience_ratio, is_plot=args.plot)
    except ValueError as e:
        logger.error(f"Invalid GRASP parameters: {e}")
        return 1

    if best is None:
        print("No iterations were run")
        return 0

    print(f"\nBest solution:")
    print(best.get_info_solution())
    check_all_nodes_in_solution(best, verbose=True)
    feasibility = detailed_feasibility_check(best, verbose=args.verbose)
    return 0 if feasibility['is_feasible'] else 2


if __name__ == "__main__":
    start_time = time.time()
    exit_code = main()
    elapsed = time.time() - start_time

    print("================================================================")
    print('Finished performing everything, time elapsed {}'.format(str(timedelta(seconds=elapsed))))
    print("================================================================")
    sys.exit(exit_code)
