#-*- coding: utf-8 -*-
"""
Created on Mon October 19 12:40:18 2026

GRASP (Greedy Randomized Adaptive Search Procedure) construction for the
Team Orienteering Problem with Time Windows (TOPTW).

Restricted Candidate List (RCL) and the selection policies used to pick one
insertion from it:

RANDOM           uniform pick over the RCL
FUZZY_BEST       candidate with the lowest membership 1 - score / max_score
FUZZY_ALPHA_CUT  uniform pick among candidates with membership <= alpha,
                 uniform over the whole RCL when none passes the cut


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

from enum import Enum
from typing import List

import numpy as np

from toptw.functions.InsertionCandidates import Candidate


class SelectionPolicy(Enum):
    RANDOM = "random"
    FUZZY_BEST = "fuzzy-best"
    FUZZY_ALPHA_CUT = "fuzzy-alpha-cut"


def build_restricted_candidate_list(candidates: List[Candidate], max_size: int) -> List[Candidate]:
    """Cheapest prefix of the sorted candidates"""
    return candidates[:min(max_size, len(candidates))]


def calculate_membership_function(rcl: List[Candidate], max_score: float) -> np.ndarray:
    """Membership 1 - score / max_score of each candidate, lower is better"""
    if max_score <= 0:
        return np.ones(len(rcl))
    scores = np.array([candidate.score for candidate in rcl], dtype=float)
    return 1.0 - scores / max_score


def aleatory_selection_rcl(size: int, random_state: np.random.RandomState) -> int:
    return int(random_state.randint(size))


def fuzzy_selection_best_rcl(rcl: List[Candidate], max_score: float) -> int:
    membership = calculate_membership_function(rcl, max_score)
    return int(np.argmin(membership))


def fuzzy_selection_alpha_cut_rcl(rcl: List[Candidate], max_score: float, alpha: float,
                                  random_state: np.random.RandomState) -> int:
    membership = calculate_membership_function(rcl, max_score)
    rcl_pos = np.flatnonzero(membership <= alpha)
    if rcl_pos.size == 0:
        return aleatory_selection_rcl(len(rcl), random_state)
    return int(rcl_pos[aleatory_selection_rcl(rcl_pos.size, random_state)])


class RCLSelector:
    """Picks one position of the RCL according to the configured policy"""

    def __init__(self, policy: SelectionPolicy, max_score: float, random_state: np.random.RandomState,
                 alpha: float = 0.8):
        if not 0.0 <= alpha <= 1.0:
            raise ValueError(f"alpha must be in [0, 1], got {alpha}")
        self.policy = policy
        self.max_score = max_score
        self.random_state = random_state
        self.alpha = alpha

    def select(self, rcl: List[Candidate]) -> int:
        if not rcl:
            raise ValueError("Cannot select from an empty RCL")
        if self.policy == SelectionPolicy.FUZZY_BEST:
            return fuzzy_selection_best_rcl(rcl, self.max_score)
        if self.policy == SelectionPolicy.FUZZY_ALPHA_CUT:
            return fuzzy_selection_alpha_cut_rcl(rcl, self.max_score, self.alpha, self.random_state)
        return aleatory_selection_rcl(len(rcl), self.random_state)
