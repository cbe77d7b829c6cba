"""
Set-cover primitives shared by every heuristic.

This module provides the :class:`Solution` result type, the
:class:`SetCoverInstance` view of a coverage matrix (``coverage(camera)``
and ``is_valid(selection)``), and solution quality metrics.
"""

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Set, Union

import numpy as np

from coverplan.matrix.coverage import CoverageMatrix


@dataclass
class Solution:
    """
    A set of selected cameras and the cells they cover.

    Attributes:
        selected_cameras: Selected camera ids, in selection order
        covered_cells: Ids of the cells covered by the selection
    """
    selected_cameras: List[int] = field(default_factory=list)
    covered_cells: Set[int] = field(default_factory=set)

    @property
    def total_cameras(self) -> int:
        """Number of selected cameras."""
        return len(self.selected_cameras)

    def copy(self) -> "Solution":
        return Solution(list(self.selected_cameras), set(self.covered_cells))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "selectedCameras": [int(c) for c in self.selected_cameras],
            "coveredCells": sorted(int(c) for c in self.covered_cells),
            "totalCameras": self.total_cameras,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Solution":
        """Create from dictionary."""
        return cls(
            selected_cameras=[int(c) for c in data["selectedCameras"]],
            covered_cells={int(c) for c in data["coveredCells"]},
        )


class SetCoverInstance:
    """
    Read-only set-cover view of a coverage matrix.

    Camera coverage sets are computed once on construction. The universe to
    cover is every cell id present in the matrix.

    Attributes:
        cameras: Camera ids, ascending
        cells: Cell ids, ascending
        universe: Frozen set of all cell ids
    """

    def __init__(self, matrix: CoverageMatrix):
        self.cameras: List[int] = matrix.camera_ids
        self.cells: List[int] = matrix.cell_ids
        self.universe: FrozenSet[int] = frozenset(self.cells)
        self._coverage: Dict[int, FrozenSet[int]] = {
            camera: matrix.coverage(camera) for camera in self.cameras
        }

    @classmethod
    def of(cls, problem: Union[CoverageMatrix, "SetCoverInstance"]) -> "SetCoverInstance":
        """Accept either a matrix or an existing instance."""
        if isinstance(problem, SetCoverInstance):
            return problem
        return cls(problem)

    def coverage(self, camera: int) -> FrozenSet[int]:
        """Cells covered by a camera (empty for unknown cameras)."""
        return self._coverage.get(camera, frozenset())

    def covered_cells(self, selection: Iterable[int]) -> Set[int]:
        """Union of the coverage of the selected cameras."""
        covered = set()
        for camera in selection:
            covered |= self.coverage(camera)
        return covered

    def is_valid(self, selection: Iterable[int]) -> bool:
        """True if the selection covers every cell of the instance."""
        return self.covered_cells(selection) >= self.universe

    def efficiency(self, camera: int, uncovered: Set[int]) -> int:
        """Number of currently uncovered cells the camera would cover."""
        return len(self.coverage(camera) & uncovered)

    def make_solution(self, selection: Iterable[int]) -> Solution:
        selection = list(selection)
        return Solution(selection, self.covered_cells(selection))

    def __len__(self) -> int:
        return len(self.cameras)


def is_valid(
    problem: Union[CoverageMatrix, SetCoverInstance],
    selection: Union[Iterable[int], Solution],
) -> bool:
    """
    Check that a selection covers every cell of a matrix.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        selection: Camera ids or a Solution.

    Returns:
        True if the union of the selection's coverage contains every cell.
    """
    if isinstance(selection, Solution):
        selection = selection.selected_cameras
    return SetCoverInstance.of(problem).is_valid(selection)


def evaluate_solution(
    problem: Union[CoverageMatrix, SetCoverInstance],
    solution: Solution,
) -> dict:
    """
    Compute quality metrics for a solution.

    Args:
        problem: Coverage matrix or SetCoverInstance.
        solution: Solution to evaluate.

    Returns:
        Dict with metrics:
        - cameras: Number of selected cameras
        - coverage: Fraction of cells covered
        - uncovered_cells: Sorted ids of cells left uncovered
        - avg_cameras_per_cell: Mean number of selected cameras per covered cell
        - max_cameras_per_cell: Maximum number of selected cameras on one cell
        - is_valid: Whether every cell is covered
    """
    instance = SetCoverInstance.of(problem)
    counts: Dict[int, int] = {}
    for camera in solution.selected_cameras:
        for cell in instance.coverage(camera):
            counts[cell] = counts.get(cell, 0) + 1

    uncovered = sorted(instance.universe - set(counts))
    num_cells = len(instance.universe)

    return {
        "cameras": solution.total_cameras,
        "coverage": float(len(counts) / num_cells) if num_cells else 1.0,
        "uncovered_cells": uncovered,
        "avg_cameras_per_cell": float(np.mean(list(counts.values()))) if counts else 0.0,
        "max_cameras_per_cell": max(counts.values()) if counts else 0,
        "is_valid": not uncovered,
    }
