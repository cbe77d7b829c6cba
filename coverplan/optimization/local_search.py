"""
Local search improvement of set-cover solutions.

Two neighborhood moves are tried, first-improvement style:
    - drop one selected camera if the rest still covers every cell
    - replace two selected cameras by one unselected camera
"""

from typing import List, Optional, Union

from coverplan.matrix.coverage import CoverageMatrix
from coverplan.optimization.greedy import greedy
from coverplan.optimization.objectives import SetCoverInstance, Solution

Problem = Union[CoverageMatrix, SetCoverInstance]


def _try_removal(instance: SetCoverInstance, selection: List[int]) -> Optional[List[int]]:
    """First selection with one camera removed that stays valid, if any."""
    for i in range(len(selection)):
        candidate = selection[:i] + selection[i + 1:]
        if instance.is_valid(candidate):
            return candidate
    return None


def _try_swap(instance: SetCoverInstance, selection: List[int]) -> Optional[List[int]]:
    """First valid 2-for-1 swap, if any."""
    selected = set(selection)
    for i in range(len(selection)):
        for j in range(i + 1, len(selection)):
            remainder = [c for k, c in enumerate(selection) if k != i and k != j]
            for camera in instance.cameras:
                if camera in selected:
                    continue
                candidate = remainder + [camera]
                if instance.is_valid(candidate):
                    return candidate
    return None


def local_search(
    problem: Problem,
    initial: Solution,
    max_iterations: int = 100,
) -> Solution:
    """
    Improve a solution by camera removals and 2-for-1 swaps.

    Each pass first tries removing every selected camera in order; the
    first valid removal is applied and a new pass starts. If no removal
    works, every pair of selected cameras is tried against every unselected
    camera and the first valid swap is applied. The search stops when a pass
    finds neither move or after ``max_iterations`` passes.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        initial: Starting solution (not modified).
        max_iterations: Maximum number of passes.

    Returns:
        Improved solution with recomputed covered cells.
    """
    instance = SetCoverInstance.of(problem)
    selection = list(initial.selected_cameras)

    for _ in range(max_iterations):
        candidate = _try_removal(instance, selection)
        if candidate is None:
            candidate = _try_swap(instance, selection)
        if candidate is None:
            break
        selection = candidate

    return instance.make_solution(selection)


def greedy_with_local_search(problem: Problem, max_iterations: int = 100) -> Solution:
    """Deterministic greedy followed by :func:`local_search`."""
    instance = SetCoverInstance.of(problem)
    return local_search(instance, greedy(instance), max_iterations)


def multi_start_greedy_with_local_search(problem: Problem, iterations: int = 5) -> Solution:
    """
    Repeat greedy + local search with growing pass budgets.

    Run i uses ``25 + 5 * i`` local search passes; the smallest solution is
    kept.
    """
    instance = SetCoverInstance.of(problem)

    best = None
    for i in range(iterations):
        solution = greedy_with_local_search(instance, 25 + i * 5)
        if best is None or solution.total_cameras < best.total_cameras:
            best = solution

    return best if best is not None else Solution()
