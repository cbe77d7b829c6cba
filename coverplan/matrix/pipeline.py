"""
End-to-end coverage pipeline.

Target areas are discretized into cells, the camera x cell coverage matrix
is built in parallel, and the matrix is reduced to a dominance fixed point.
The result is a :class:`CoverageReport` whose ``to_dict()`` is the
interchange document consumed by the set-cover solvers.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union
import time

from coverplan.config.settings import CoverplanConfig, GridResolution, MatrixConfig
from coverplan.core.geometry import polygon_to_grid
from coverplan.core.sensors import Camera
from coverplan.matrix.builder import build_coverage_matrix
from coverplan.matrix.coverage import CoverageMatrix
from coverplan.matrix.reducer import (
    ReductionStats,
    reduce_to_fixed_point,
    remove_redundant_false,
)
from coverplan.scene.models import Cell, Obstacle, TargetArea


def generate_cells(
    grid: Union[CoverplanConfig, GridResolution],
    target_areas: Sequence[TargetArea],
    verbose: bool = False,
) -> List[Cell]:
    """
    Discretize every target area into grid cells.

    Cell ids start at 1 and increase across target areas in input order.
    Each cell inherits the viewing-angle band of its target area.

    Args:
        grid: Configuration or grid resolution.
        target_areas: Target areas to discretize.
        verbose: Print progress information.

    Returns:
        List of cells.

    Raises:
        GeometryError: If a target area is not planar.
    """
    resolution = grid.grid_resolution if isinstance(grid, CoverplanConfig) else grid

    cells = []
    next_id = 1
    for index, area in enumerate(target_areas):
        _, grid_cells = polygon_to_grid(resolution, area.points)
        for points in grid_cells:
            cells.append(Cell(next_id, points, area.min_aov, area.max_aov))
            next_id += 1
        if verbose:
            print(f"  Target area {index + 1}/{len(target_areas)}: {len(grid_cells)} cells")

    return cells


@dataclass
class CoverageReport:
    """
    Result of a coverage planning run.

    Attributes:
        config: Configuration used for the run
        obstacles: Input obstacles
        target_areas: Input target areas
        cells: Generated cells
        cameras: Input cameras
        matrix: Reduced coverage matrix (only True entries stored)
        original_size: (cameras, cells) before reduction
        optimized_size: (cameras, cells) after reduction
        infeasible_cells: Cells no camera covers, dropped by the reduction
        stats: Reduction pass statistics
        runtime_seconds: Wall-clock time of the run
    """
    config: CoverplanConfig
    obstacles: List[Obstacle]
    target_areas: List[TargetArea]
    cells: List[Cell]
    cameras: List[Camera]
    matrix: CoverageMatrix
    original_size: Tuple[int, int]
    optimized_size: Tuple[int, int]
    infeasible_cells: List[int] = field(default_factory=list)
    stats: ReductionStats = field(default_factory=ReductionStats)
    runtime_seconds: float = 0.0

    def to_dict(self) -> dict:
        """
        Interchange document.

        JSON object keys must be strings, so matrix ids are stringified and
        only True entries are written.
        """
        resolution = self.config.grid_resolution
        return {
            "config": {"gridResolution": {"x": resolution.x, "y": resolution.y}},
            "obstacles": [o.to_dict() for o in self.obstacles],
            "targetAreas": [t.to_dict() for t in self.target_areas],
            "cells": [c.to_dict() for c in self.cells],
            "cameras": [c.to_dict() for c in self.cameras],
            "originalSize": list(self.original_size),
            "optimizedSize": list(self.optimized_size),
            "optimizedMatrix": {
                str(camera_id): {str(cell_id): True for cell_id in cells}
                for camera_id, cells in self.matrix.to_dict(sparse=True).items()
            },
        }


def plan_coverage(
    config: Optional[CoverplanConfig],
    obstacles: Sequence[Obstacle],
    target_areas: Sequence[TargetArea],
    cameras: Sequence[Camera],
    verbose: bool = False,
) -> CoverageReport:
    """
    Run grid generation, matrix construction and reduction.

    Args:
        config: Configuration (default: CoverplanConfig()).
        obstacles: Occluding polygons.
        target_areas: Polygons to observe.
        cameras: Candidate cameras.
        verbose: Print progress information.

    Returns:
        CoverageReport with the reduced matrix.

    Raises:
        GeometryError: If a target area is not planar.
        MatrixBuildError: If a matrix worker fails.

    Example:
        >>> from coverplan.scene.synthetic import reference_scenario
        >>> scenario = reference_scenario()
        >>> report = plan_coverage(None, scenario.obstacles,
        ...                        scenario.target_areas, scenario.cameras)
        >>> report.optimized_size
    """
    if config is None:
        config = CoverplanConfig()
    matrix_config: MatrixConfig = config.matrix

    t0 = time.time()

    if verbose:
        print("Coverage planning")
        print(f"  Grid resolution: ({config.grid_resolution.x}, {config.grid_resolution.y})")
        print(f"  Obstacles: {len(obstacles)}")
        print(f"  Target areas: {len(target_areas)}")
        print(f"  Cameras: {len(cameras)}")

    cells = generate_cells(config, target_areas, verbose=verbose)

    infeasible: List[int] = []
    matrix = build_coverage_matrix(
        cells,
        cameras,
        obstacles,
        cells_per_chunk=matrix_config.cells_per_chunk,
        max_workers=matrix_config.max_workers,
        local_reduction=matrix_config.local_reduction,
        parallel=matrix_config.parallel,
        verbose=verbose,
        infeasible_cells=infeasible,
    )
    infeasible.sort()
    if verbose and infeasible:
        print(f"  Warning: {len(infeasible)} cells are not covered by any camera")

    stats = reduce_to_fixed_point(matrix, verbose=verbose)
    reduced = remove_redundant_false(matrix)

    runtime = time.time() - t0
    if verbose:
        print(f"  Matrix: {len(cameras)} x {len(cells)} -> {matrix.shape[0]} x {matrix.shape[1]}")
        print(f"  Runtime: {runtime:.2f}s")

    return CoverageReport(
        config=config,
        obstacles=list(obstacles),
        target_areas=list(target_areas),
        cells=cells,
        cameras=list(cameras),
        matrix=reduced,
        original_size=(len(cameras), len(cells)),
        optimized_size=matrix.shape,
        infeasible_cells=infeasible,
        stats=stats,
        runtime_seconds=runtime,
    )
