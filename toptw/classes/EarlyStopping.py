#-*- coding: utf-8 -*-
"""
Created on Mon October 19 14:48:10 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Stopping criterion for the GRASP iterations, following the stopping criterion
protocol of the ALNS library https://github.com/N-Wouda/ALNS/tree/master
(called as criterion(rng, best, current) before every iteration).


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

from alns.stop import StoppingCriterion

logger = logging.getLogger(__name__)


class EarlyStoppingCriterion(StoppingCriterion):
    """
    Stops the GRASP after max_iterations, or earlier when the best fitness has
    not improved by at least the improvement threshold for a patience window
    """

    def __init__(self, max_iterations: int, improvement_threshold: float = None,
                 patience_ratio: float = 0.5, adaptive_threshold: bool = True, is_verbose: bool = False):
        """
        Args:
            max_iterations: Maximum number of iterations
            improvement_threshold: Minimum fitness gain to reset the counter
                                 (None = auto-calculate, float = fixed threshold)
            patience_ratio: Fraction of max_iterations to wait (default: 0.5 = 50%)
            adaptive_threshold: Whether to adapt threshold based on the first solution
        """
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}")
        if not 0.0 < patience_ratio <= 1.0:
            raise ValueError(f"patience_ratio must be in (0, 1], got {patience_ratio}")
        self.max_iterations = max_iterations
        self.base_improvement_threshold = improvement_threshold
        self.patience = max(1, int(max_iterations * patience_ratio))
        self.adaptive_threshold = adaptive_threshold

        # Tracking variables
        self.iterations_without_improvement = 0
        self.best_fitness = None
        self.current_iteration = 0
        self.initial_fitness = None
        self.improvement_threshold = improvement_threshold

        # Statistics
        self.total_improvements = 0
        self.improvement_history = []

        self.is_verbose = is_verbose

    def _calculate_adaptive_threshold(self, initial_fitness: float) -> float:
        """Calculate adaptive threshold based on the first fitness value"""
        if initial_fitness <= 0:
            return 1.0

        # 0.1% of the first fitness, kept between 0.1 and 5.0
        adaptive = initial_fitness * 0.001
        adaptive = max(0.1, min(adaptive, 5.0))
        return round(adaptive, 2)

    def __call__(self, rng, best, current) -> bool:
        """
        Check stopping criteria before the next iteration

        Args:
            rng: Random number generator (unused)
            best: Best solution so far, None before the first iteration
            current: Latest solution, None before the first iteration

        Returns:
            bool: True if should stop, False otherwise
        """
        if self.current_iteration >= self.max_iterations:
            logger.info(f"Stopping: reached maximum iterations ({self.max_iterations})")
            self._print_final_stats()
            return True

        if best is not None:
            best_fitness = best.evaluate_fitness()

            if self.initial_fitness is None:
                self.initial_fitness = best_fitness
                self.best_fitness = best_fitness
                if self.base_improvement_threshold is not None:
                    self.improvement_threshold = self.base_improvement_threshold
                elif self.adaptive_threshold:
                    self.improvement_threshold = self._calculate_adaptive_threshold(best_fitness)
                else:
                    self.improvement_threshold = 1.0
                logger.debug(f"Improvement threshold set to: {self.improvement_threshold}")
            else:
                improvement = best_fitness - self.best_fitness
                if improvement >= self.improvement_threshold:
                    self.best_fitness = best_fitness
                    self.iterations_without_improvement = 0
                    self.total_improvements += 1
                    self.improvement_history.append((self.current_iteration, improvement))
                else:
                    self.iterations_without_improvement += 1
                    # Track the best even if the gain is below threshold
                    self.best_fitness = max(self.best_fitness, best_fitness)

            if self.iterations_without_improvement >= self.patience:
                logger.info(f"Early stopping: no improvement >= {self.improvement_threshold} "
                            f"for {self.iterations_without_improvement} iterations "
                            f"(patience {self.patience} of {self.max_iterations})")
                self._print_final_stats()
                return True

        self.current_iteration += 1
        return False

    def _print_final_stats(self):
        """Print final statistics about the run"""
        if not self.is_verbose or self.initial_fitness is None:
            return
        total_improvement = self.best_fitness - self.initial_fitness
        improvement_pct = (total_improvement / self.initial_fitness * 100) if self.initial_fitness > 0 else 0

        print(f"Early Stopping Statistics:")
        print(f"  - Total iterations: {self.current_iteration}")
        print(f"  - Significant improvements: {self.total_improvements}")
        print(f"  - Total improvement: {total_improvement:.2f} ({improvement_pct:.1f}%)")
        print(f"  - Improvement threshold used: {self.improvement_threshold}")
        print(f"  - Iterations without improvement: {self.iterations_without_improvement}")
