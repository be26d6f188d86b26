"""
GRASP construction for the Team Orienteering Problem with Time Windows (TOPTW).
"""

from .classes.TOPTWProblem import TOPTWInstance, InstanceLoadError
from .classes.TOPTWSolution import TOPTWSolution
from .functions.RCLSelection import SelectionPolicy
from .grasp_toptw import GRASPConfig, TOPTWGRASP, solve_toptw_with_grasp

__all__ = [
    'TOPTWInstance',
    'InstanceLoadError',
    'TOPTWSolution',
    'SelectionPolicy',
    'GRASPConfig',
    'TOPTWGRASP',
    'solve_toptw_with_grasp',
]
