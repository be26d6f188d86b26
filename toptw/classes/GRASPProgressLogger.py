#-*- coding: utf-8 -*-
"""
Created on Mon October 19 14:02:36 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Progress tracking of a GRASP run: fitness of every constructed solution, best
fitness so far, mean fitness and the iterations that improved the best.


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

import matplotlib.pyplot as plt

logger = logging.getLogger(__name__)


class GRASPProgressLogger:
    """Progress logger fed with every solution the GRASP constructs"""

    def __init__(self, log_mode: str = 'interval', interval: int = 100):
        """
        Initialize progress logger

        Args:
            log_mode: 'interval' to log every N iterations, 'improvement' to log only on improvements,
                      'silent' to only collect statistics
            interval: Number of iterations between progress reports (if log_mode='interval')
        """
        if log_mode not in ('interval', 'improvement', 'silent'):
            raise ValueError(f"Unknown log_mode: {log_mode}")
        if log_mode == 'interval' and interval < 1:
            raise ValueError(f"interval must be at least 1, got {interval}")
        self.log_mode = log_mode
        self.interval = interval
        self.iteration_count = 0
        self.best_fitnesses = []
        self.current_fitnesses = []
        self.improvements = []

    def log_progress(self, solution):
        """Record the fitness of the solution built in the latest iteration"""
        self.iteration_count += 1
        fitness = solution.evaluate_fitness()
        self.current_fitnesses.append(fitness)

        if not self.best_fitnesses:
            self.best_fitnesses.append(fitness)
        else:
            self.best_fitnesses.append(max(self.best_fitnesses[-1], fitness))
            if self.best_fitnesses[-1] > self.best_fitnesses[-2]:
                self.improvements.append(self.iteration_count)
                if self.log_mode == 'improvement':
                    self._report_improvement()

        logger.debug(f"Iteration {self.iteration_count}: fitness {fitness:.2f}")

        if self.log_mode == 'interval' and self.iteration_count % self.interval == 0:
            self._report_progress()

    @property
    def best_fitness(self) -> float:
        return self.best_fitnesses[-1] if self.best_fitnesses else 0.0

    @property
    def average_fitness(self) -> float:
        if not self.current_fitnesses:
            return 0.0
        return sum(self.current_fitnesses) / len(self.current_fitnesses)

    def _report_progress(self):
        """Report current optimization progress"""
        print(f"Iteration {self.iteration_count:4d}: "
              f"Current = {self.current_fitnesses[-1]:8.2f}, "
              f"Best = {self.best_fitness:8.2f}, "
              f"Mean = {self.average_fitness:8.2f}")

        if self.improvements:
            last_improvement = max(self.improvements)
            iterations_since = self.iteration_count - last_improvement
            print(f"                   Last improvement at iteration {last_improvement} "
                  f"({iterations_since} iterations ago)")

    def _report_improvement(self):
        """Report when improvement occurs"""
        initial = self.current_fitnesses[0]
        gain_pct = (self.best_fitness - initial) / initial * 100 if initial > 0 else 0
        print(f"IMPROVEMENT at iteration {self.iteration_count}: "
              f"New best = {self.best_fitness:.2f} "
              f"(Total improvement: {gain_pct:.1f}%)")

    def final_report(self):
        """Generate final optimization report"""
        if not self.current_fitnesses:
            print("No optimization data available")
            return

        print(f"\n" + "=" * 60)
        print(f"GRASP SUMMARY")
        print(f"=" * 60)
        print(f"Total iterations:     {self.iteration_count}")
        print(f"First fitness:        {self.current_fitnesses[0]:.2f}")
        print(f"Mean fitness:         {self.average_fitness:.2f}")
        print(f"Best fitness:         {self.best_fitness:.2f}")
        print(f"Number of improvements: {len(self.improvements)}")

        if self.improvements:
            print(f"Improvement iterations: {self.improvements}")
            if len(self.improvements) > 1:
                gaps = [self.improvements[i] - self.improvements[i - 1] for i in range(1, len(self.improvements))]
                print(f"Average gap between improvements: {sum(gaps) / len(gaps):.1f} iterations")

        print(f"=" * 60)

    def plot_fitness(self, ax=None, title: str = None):
        """Plot current and best fitness per iteration"""
        if ax is None:
            _, ax = plt.subplots(figsize=(12, 6))

        iterations = range(1, self.iteration_count + 1)
        ax.plot(iterations, self.current_fitnesses, label="Current fitness", lw=1, alpha=0.6)
        ax.plot(iterations, self.best_fitnesses, label="Best fitness", lw=2)
        ax.axhline(self.average_fitness, ls="--", color="grey", label="Mean fitness")
        ax.set_xlabel("Iteration (#)")
        ax.set_ylabel("Fitness (collected score)")
        ax.set_title(title or "GRASP fitness per iteration")
        ax.legend(loc="lower right")
        return ax
