"""
Dominance-based reduction of coverage matrices.

Each entity along the chosen axis (cells or cameras) is encoded as a
bitstring over the entities of the other axis, sorted by id. Entities with
an all-zero code and entities dominated by another entity are removed:

    - axis "cell": if every camera covering cell A also covers cell B,
      covering A covers B for free, so B is removed.
    - axis "camera": if camera B covers everything camera A covers,
      A is never needed, so A is removed.

Alternating both axes until neither removes anything reaches a joint fixed
point. Cells covered by no camera are removed like any other zero code;
use :func:`find_infeasible_cells` beforehand to report them.
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from coverplan.matrix.coverage import CoverageMatrix

AXES = ("cell", "camera")

# Tri-state dominance decisions
REMOVE_FIRST = "first"
REMOVE_SECOND = "second"


@dataclass
class ReductionStats:
    """
    Summary of a fixed-point reduction.

    Attributes:
        passes: Number of single-axis passes run
        removed_cameras: Ids of removed cameras, in removal order
        removed_cells: Ids of removed cells, in removal order
    """
    passes: int = 0
    removed_cameras: List[int] = field(default_factory=list)
    removed_cells: List[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "passes": self.passes,
            "removed_cameras": len(self.removed_cameras),
            "removed_cells": len(self.removed_cells),
        }


def _check_axis(axis: str) -> None:
    if axis not in AXES:
        raise ValueError(f"Unknown reduction axis: {axis}. Choose from: {AXES}")


def encode(matrix: CoverageMatrix, axis: str):
    """
    Encode every entity of an axis as an integer bitstring.

    Args:
        matrix: Coverage matrix.
        axis: "cell" or "camera".

    Returns:
        ids: Entity ids in ascending order.
        codes: One int per entity; bit k is set iff the entity is covered
            by (axis "cell") or covers (axis "camera") the k-th entity of
            the other axis.
    """
    _check_axis(axis)
    array = matrix.to_array()
    if axis == "cell":
        ids = matrix.cell_ids
        array = array.T
    else:
        ids = matrix.camera_ids

    codes = [int.from_bytes(np.packbits(row).tobytes(), "big") for row in array]
    return ids, codes


def dominance(code_a: int, code_b: int, axis: str) -> Optional[str]:
    """
    Decide which of two entities, if any, is redundant.

    ``code_a`` belongs to the entity scanned first. Equal codes resolve as
    "A is a subset of B".

    Returns:
        REMOVE_FIRST, REMOVE_SECOND or None.
    """
    common = code_a & code_b
    if common == code_a:
        return REMOVE_SECOND if axis == "cell" else REMOVE_FIRST
    if common == code_b:
        return REMOVE_FIRST if axis == "cell" else REMOVE_SECOND
    return None


def reduce_matrix(matrix: CoverageMatrix, axis: str, verbose: bool = False) -> List[int]:
    """
    Run one dominance pass along an axis, modifying the matrix in place.

    Args:
        matrix: Coverage matrix (modified in place).
        axis: "cell" or "camera".
        verbose: Print progress information.

    Returns:
        Ids removed in this pass, in removal order.
    """
    _check_axis(axis)
    if len(matrix) == 0:
        return []

    ids, codes = encode(matrix, axis)
    if verbose:
        print(f"  Reducing {len(ids)} {axis}s")

    removed = []
    is_removed = [False] * len(ids)

    def _remove(index: int) -> None:
        is_removed[index] = True
        removed.append(ids[index])

    for i in range(len(ids)):
        if verbose and i % 1000 == 0 and i > 0:
            print(f"    {axis} {i}/{len(ids)}")
        if is_removed[i]:
            continue
        if codes[i] == 0:
            _remove(i)
            continue

        for j in range(i + 1, len(ids)):
            if is_removed[j]:
                continue
            if codes[j] == 0:
                _remove(j)
                continue

            decision = dominance(codes[i], codes[j], axis)
            if decision == REMOVE_SECOND:
                _remove(j)
            elif decision == REMOVE_FIRST:
                _remove(i)
                break

    for entity_id in removed:
        if axis == "cell":
            matrix.remove_cell(entity_id)
        else:
            matrix.remove_camera(entity_id)

    if verbose:
        print(f"  Removed {len(removed)} {axis}s")

    return removed


def reduce_to_fixed_point(matrix: CoverageMatrix, verbose: bool = False) -> ReductionStats:
    """
    Alternate cell and camera passes until two consecutive passes remove nothing.

    Args:
        matrix: Coverage matrix (modified in place).
        verbose: Print progress information.

    Returns:
        ReductionStats for the run.
    """
    stats = ReductionStats()
    axis = "cell"
    passes_without_changes = 0

    while passes_without_changes < 2:
        removed = reduce_matrix(matrix, axis, verbose=verbose)
        stats.passes += 1
        if axis == "cell":
            stats.removed_cells.extend(removed)
        else:
            stats.removed_cameras.extend(removed)

        passes_without_changes = 0 if removed else passes_without_changes + 1
        axis = "camera" if axis == "cell" else "cell"

    if verbose:
        cameras, cells = matrix.shape
        print(f"Reduction finished after {stats.passes} passes: {cameras} cameras x {cells} cells")

    return stats


def find_infeasible_cells(matrix: CoverageMatrix) -> List[int]:
    """Ids of cells that no camera covers, ascending."""
    if len(matrix) == 0:
        return matrix.cell_ids
    covered = matrix.to_array().any(axis=0)
    return [cell_id for cell_id, ok in zip(matrix.cell_ids, covered) if not ok]


def remove_redundant_false(matrix: CoverageMatrix) -> CoverageMatrix:
    """
    Return a sparse copy of the matrix that stores only True entries.

    The copy reads identically through :meth:`CoverageMatrix.get`; cells
    with no True entry drop out of its cell ids.
    """
    return CoverageMatrix(matrix.to_dict(sparse=True))
