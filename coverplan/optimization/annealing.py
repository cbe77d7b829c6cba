"""
Simulated annealing for minimum set cover.

The working solution starts from deterministic greedy and moves through
neighbors built by removing, replacing or adding one camera. Only removals
and replacements are checked for validity when the neighbor is built, so
the working solution may stop covering every cell after an accepted move.
The best-known solution is only replaced by strictly smaller neighbors that
pass an independent validity check.
"""

import math
from typing import Callable, List, Optional, Union

import numpy as np

from coverplan.matrix.coverage import CoverageMatrix
from coverplan.optimization.greedy import greedy
from coverplan.optimization.objectives import SetCoverInstance, Solution

Problem = Union[CoverageMatrix, SetCoverInstance]
Seed = Optional[Union[int, np.random.Generator]]

REMOVE, REPLACE, ADD = 0, 1, 2


def generate_neighbor(
    instance: SetCoverInstance,
    current: Solution,
    rng: np.random.Generator,
) -> Solution:
    """
    Build one neighbor of the current solution.

    A move is drawn uniformly from remove / replace / add. A removal that
    breaks coverage (or is impossible) falls through to a replacement, and
    a replacement that breaks coverage falls through to adding a random
    unselected camera. If no camera is left to add, the neighbor keeps the
    current selection.
    """
    cameras = list(current.selected_cameras)
    selected = set(cameras)
    operation = int(rng.integers(3))
    neighbor: Optional[List[int]] = None

    if operation <= REMOVE and len(cameras) > 1:
        index = int(rng.integers(len(cameras)))
        candidate = cameras[:index] + cameras[index + 1:]
        if instance.is_valid(candidate):
            neighbor = candidate

    if neighbor is None and operation <= REPLACE and cameras:
        index = int(rng.integers(len(cameras)))
        available = [c for c in instance.cameras if c not in selected]
        if available:
            candidate = list(cameras)
            candidate[index] = available[int(rng.integers(len(available)))]
            if instance.is_valid(candidate):
                neighbor = candidate

    if neighbor is None:
        available = [c for c in instance.cameras if c not in selected]
        if available:
            neighbor = cameras + [available[int(rng.integers(len(available)))]]
        else:
            neighbor = cameras

    return instance.make_solution(neighbor)


def acceptance_probability(current_cost: int, new_cost: int, temperature: float) -> float:
    """Metropolis criterion: 1 for no-worse moves, else exp(-delta / T)."""
    if new_cost <= current_cost:
        return 1.0
    return math.exp((current_cost - new_cost) / temperature)


def simulated_annealing(
    problem: Problem,
    initial_temperature: float = 1000.0,
    cooling_rate: float = 0.95,
    min_temperature: float = 0.1,
    max_iterations: int = 80000,
    seed: Seed = None,
    callback: Optional[Callable[[int, Solution, Solution], None]] = None,
) -> Solution:
    """
    Minimize the number of selected cameras by simulated annealing.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        initial_temperature: Starting temperature.
        cooling_rate: Temperature multiplier per step.
        min_temperature: Stop once the temperature drops below this.
        max_iterations: Maximum number of steps.
        seed: Random seed or numpy Generator.
        callback: Optional ``callback(step, current, best)`` called after
            every step.

    Returns:
        The best-known solution (the greedy start unless a smaller valid
        one was found).
    """
    rng = np.random.default_rng(seed)
    instance = SetCoverInstance.of(problem)

    current = greedy(instance)
    best = current.copy()

    temperature = initial_temperature
    step = 0
    while temperature > min_temperature and step < max_iterations:
        neighbor = generate_neighbor(instance, current, rng)

        current_cost = current.total_cameras
        neighbor_cost = neighbor.total_cameras

        if acceptance_probability(current_cost, neighbor_cost, temperature) > rng.random():
            current = neighbor
            if (
                neighbor_cost < best.total_cameras
                and instance.is_valid(neighbor.selected_cameras)
            ):
                best = neighbor.copy()

        temperature *= cooling_rate
        step += 1

        if callback is not None:
            callback(step, current, best)

    return best
