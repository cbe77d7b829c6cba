"""
Camera selection module.

This module provides:
    - SetCoverInstance and Solution: Shared set-cover primitives
    - Greedy, randomized greedy and multi-start heuristics
    - Local search, simulated annealing and a genetic algorithm
    - Runner functions for solving and comparing heuristics
"""

from coverplan.optimization.objectives import (
    SetCoverInstance,
    Solution,
    evaluate_solution,
    is_valid,
)
from coverplan.optimization.greedy import (
    greedy,
    multi_start_randomized_greedy,
    randomized_greedy,
)
from coverplan.optimization.local_search import (
    greedy_with_local_search,
    local_search,
    multi_start_greedy_with_local_search,
)
from coverplan.optimization.annealing import simulated_annealing
from coverplan.optimization.genetic import Chromosome, genetic_algorithm
from coverplan.optimization.runner import SOLVERS, SolverResult, run_comparison, solve

__all__ = [
    "SetCoverInstance",
    "Solution",
    "evaluate_solution",
    "is_valid",
    "greedy",
    "multi_start_randomized_greedy",
    "randomized_greedy",
    "greedy_with_local_search",
    "local_search",
    "multi_start_greedy_with_local_search",
    "simulated_annealing",
    "Chromosome",
    "genetic_algorithm",
    "SOLVERS",
    "SolverResult",
    "run_comparison",
    "solve",
]
