"""
Parallel construction of the camera x cell coverage matrix.

Cells are split into fixed-size chunks. Each chunk is evaluated by an
independent worker process that receives its own copy of the chunk plus the
complete camera and obstacle lists and returns a partial matrix. Partial
results are merged by a single writer as they complete; every
(camera, cell) key is produced by exactly one chunk, so the merge order does
not matter. The merged matrix is returned only after every chunk reported.
"""

from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from coverplan.core.sensors import Camera
from coverplan.core.visibility import compute_visibility
from coverplan.matrix.coverage import CoverageMatrix
from coverplan.matrix.reducer import find_infeasible_cells, reduce_matrix

CELLS_PER_CHUNK = 500


class MatrixBuildError(RuntimeError):
    """Raised when a visibility worker fails; the whole build is aborted."""


def chunk_cells(cells: Sequence, cells_per_chunk: int = CELLS_PER_CHUNK) -> List[Sequence]:
    """
    Split cells into consecutive chunks of at most ``cells_per_chunk``.
    """
    if cells_per_chunk <= 0:
        raise ValueError(f"cells_per_chunk must be positive, got {cells_per_chunk}")
    return [cells[i:i + cells_per_chunk] for i in range(0, len(cells), cells_per_chunk)]


def compute_chunk(
    chunk_index: int,
    cells: Sequence,
    cameras: Sequence[Camera],
    obstacles: Sequence,
    local_reduction: bool = True,
) -> Tuple[int, Dict[int, Dict[int, bool]], List[int]]:
    """
    Worker entry point: coverage of one chunk of cells.

    Args:
        chunk_index: Position of the chunk, echoed back for reporting.
        cells: Cells of this chunk.
        cameras: All candidate cameras.
        obstacles: All obstacles.
        local_reduction: Run a cell-axis dominance pass on the partial
            result. It only sees cells of this chunk; the coordinator must
            still reduce the merged matrix.

    Returns:
        (chunk_index, partial camera -> cell -> bool rows, ids of cells of
        this chunk that no camera covers)
    """
    partial = CoverageMatrix(compute_visibility(cells, cameras, obstacles))
    # Register every chunk cell so an empty camera list still reports them
    for cell in cells:
        partial.add_cell(cell.id)
    infeasible = find_infeasible_cells(partial)
    if local_reduction:
        reduce_matrix(partial, "cell")
    return chunk_index, partial.to_dict(), infeasible


def build_coverage_matrix(
    cells: Sequence,
    cameras: Sequence[Camera],
    obstacles: Sequence,
    cells_per_chunk: int = CELLS_PER_CHUNK,
    max_workers: Optional[int] = None,
    local_reduction: bool = True,
    parallel: bool = True,
    verbose: bool = False,
    infeasible_cells: Optional[List[int]] = None,
) -> CoverageMatrix:
    """
    Build the coverage matrix for all (camera, cell) pairs.

    Args:
        cells: All cells (fully materialized).
        cameras: All candidate cameras.
        obstacles: All obstacles.
        cells_per_chunk: Cells per unit of work.
        max_workers: Worker process count (default: CPU count).
        local_reduction: Let workers prune dominated cells of their chunk.
        parallel: If False, evaluate chunks sequentially in this process.
        verbose: Print progress information.
        infeasible_cells: Optional list that receives the ids of cells no
            camera covers. Local reduction drops such cells from the
            result, so this is the only place they are reported.

    Returns:
        CoverageMatrix with one row per camera.

    Raises:
        MatrixBuildError: If any chunk fails.

    Example:
        >>> matrix = build_coverage_matrix(cells, cameras, obstacles)
        >>> matrix.shape
        (12, 240)
    """
    chunks = chunk_cells(list(cells), cells_per_chunk)
    cameras = list(cameras)
    obstacles = list(obstacles)

    matrix = CoverageMatrix()
    for camera in cameras:
        matrix.add_camera(camera.id)

    if verbose:
        print(
            f"Building coverage matrix: {len(obstacles)} obstacles, "
            f"{len(cells)} cells, {len(cameras)} cameras in {len(chunks)} chunks"
        )

    if not parallel or len(chunks) <= 1:
        for index, chunk in enumerate(chunks):
            try:
                _, partial, uncovered = compute_chunk(index, chunk, cameras, obstacles, local_reduction)
            except Exception as e:
                raise MatrixBuildError(f"Chunk {index} failed: {e}") from e
            matrix.merge(partial)
            if infeasible_cells is not None:
                infeasible_cells.extend(uncovered)
            if verbose:
                print(f"  Chunk {index + 1}/{len(chunks)} done")
        return matrix

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(compute_chunk, index, chunk, cameras, obstacles, local_reduction): index
            for index, chunk in enumerate(chunks)
        }

        completed = 0
        for future in as_completed(futures):
            index = futures[future]
            try:
                _, partial, uncovered = future.result()
            except Exception as e:
                for pending in futures:
                    pending.cancel()
                raise MatrixBuildError(f"Chunk {index} failed: {e}") from e

            matrix.merge(partial)
            if infeasible_cells is not None:
                infeasible_cells.extend(uncovered)
            completed += 1
            if verbose:
                print(f"  Chunk {index + 1} done ({completed}/{len(chunks)})")

    return matrix
