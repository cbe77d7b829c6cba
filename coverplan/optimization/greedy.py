"""
Greedy set-cover heuristics.

This module provides the deterministic greedy heuristic, its randomized
top-K variant, and a multi-start wrapper around the randomized variant.
"""

import math
from typing import List, Optional, Set, Union

import numpy as np

from coverplan.matrix.coverage import CoverageMatrix
from coverplan.optimization.objectives import SetCoverInstance, Solution

Problem = Union[CoverageMatrix, SetCoverInstance]
Seed = Optional[Union[int, np.random.Generator]]


def greedy(problem: Problem) -> Solution:
    """
    Deterministic greedy set cover.

    Repeatedly selects the unselected camera covering the most currently
    uncovered cells; ties go to the lowest camera id. Stops when every cell
    is covered or when no remaining camera covers any uncovered cell, in
    which case the returned solution is incomplete.

    Args:
        problem: Coverage matrix or SetCoverInstance.

    Returns:
        Solution (check with ``is_valid`` if completeness matters).
    """
    instance = SetCoverInstance.of(problem)
    selected: List[int] = []
    chosen: Set[int] = set()
    uncovered: Set[int] = set(instance.universe)
    covered: Set[int] = set()

    while uncovered:
        best_camera = None
        best_efficiency = 0

        for camera in instance.cameras:
            if camera in chosen:
                continue
            efficiency = instance.efficiency(camera, uncovered)
            if efficiency > best_efficiency:
                best_efficiency = efficiency
                best_camera = camera

        if best_camera is None:
            break

        selected.append(best_camera)
        chosen.add(best_camera)
        newly_covered = instance.coverage(best_camera)
        uncovered -= newly_covered
        covered |= newly_covered

    return Solution(selected, covered)


def top_k_candidates(
    instance: SetCoverInstance,
    cameras: List[int],
    uncovered: Set[int],
    k: int,
) -> List[int]:
    """
    The k cameras with the highest positive marginal coverage.

    Cameras with equal efficiency keep their input order.
    """
    candidates = []
    for camera in cameras:
        efficiency = instance.efficiency(camera, uncovered)
        if efficiency > 0:
            candidates.append((camera, efficiency))

    candidates.sort(key=lambda candidate: -candidate[1])
    return [camera for camera, _ in candidates[:k]]


def randomized_greedy(
    problem: Problem,
    randomness_factor: float = 0.3,
    seed: Seed = None,
) -> Solution:
    """
    Randomized greedy set cover.

    At every step the top ``K = max(1, floor(cameras * randomness_factor))``
    unselected cameras by marginal coverage are collected and one of them is
    picked uniformly at random.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        randomness_factor: Fraction of cameras considered at each step.
        seed: Random seed or numpy Generator.

    Returns:
        Solution (incomplete if no candidate improves coverage).
    """
    rng = np.random.default_rng(seed)
    instance = SetCoverInstance.of(problem)
    selected: List[int] = []
    uncovered: Set[int] = set(instance.universe)
    covered: Set[int] = set()

    k = max(1, math.floor(len(instance.cameras) * randomness_factor))

    while uncovered:
        chosen = set(selected)
        unselected = [camera for camera in instance.cameras if camera not in chosen]
        if not unselected:
            break

        candidates = top_k_candidates(instance, unselected, uncovered, k)
        if not candidates:
            break

        camera = candidates[int(rng.integers(len(candidates)))]
        selected.append(camera)

        newly_covered = instance.coverage(camera)
        uncovered -= newly_covered
        covered |= newly_covered

    return Solution(selected, covered)


def multi_start_randomized_greedy(
    problem: Problem,
    iterations: int = 10,
    randomness_factor: float = 0.1,
    seed: Seed = None,
) -> Solution:
    """
    Run randomized greedy several times and keep the smallest solution.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        iterations: Number of restarts.
        randomness_factor: Passed to :func:`randomized_greedy`.
        seed: Random seed or numpy Generator shared by all restarts.

    Returns:
        The solution with the fewest cameras (first one on ties).
    """
    rng = np.random.default_rng(seed)
    instance = SetCoverInstance.of(problem)

    best = None
    for _ in range(iterations):
        solution = randomized_greedy(instance, randomness_factor, seed=rng)
        if best is None or solution.total_cameras < best.total_cameras:
            best = solution

    return best if best is not None else Solution()
