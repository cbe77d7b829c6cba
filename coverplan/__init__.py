"""
Coverplan - camera placement planning for 3D surveillance coverage.

This package discretizes target surfaces into grid cells, computes which
candidate cameras see which cells given occlusion, field-of-view and
viewing-angle constraints, and selects a small subset of cameras that
covers every cell.

Main modules:
    - coverplan.core: Geometry kernel, camera model and visibility predicates
    - coverplan.scene: Obstacles, target areas, cells and synthetic scenes
    - coverplan.matrix: Parallel coverage matrix construction and reduction
    - coverplan.optimization: Set-cover heuristics and runners
    - coverplan.config: Configuration management
    - coverplan.api: Interchange document schemas

Quick start:
    >>> from coverplan import plan_coverage, solve, reference_scenario
    >>>
    >>> scenario = reference_scenario()
    >>> report = plan_coverage(None, scenario.obstacles,
    ...                        scenario.target_areas, scenario.cameras)
    >>> result = solve(report.matrix, method="greedy")
    >>> print(result.solution.selected_cameras)
"""

__version__ = "0.1.0"
__author__ = "Coverplan Team"

# Core exports
from coverplan.core.geometry import GeometryError, polygon_to_grid
from coverplan.core.sensors import Camera, create_camera_lattice, create_preset_cameras
from coverplan.core.visibility import compute_visibility

# Scene exports
from coverplan.scene.models import Cell, Obstacle, TargetArea
from coverplan.scene.synthetic import Scenario, generate_room_scenario, reference_scenario

# Matrix exports
from coverplan.matrix.coverage import CoverageMatrix
from coverplan.matrix.builder import MatrixBuildError, build_coverage_matrix
from coverplan.matrix.reducer import reduce_to_fixed_point, remove_redundant_false
from coverplan.matrix.pipeline import CoverageReport, generate_cells, plan_coverage

# Optimization exports
from coverplan.optimization.objectives import Solution, evaluate_solution, is_valid
from coverplan.optimization.runner import SolverResult, run_comparison, solve

# Config exports
from coverplan.config.settings import CoverplanConfig, GridResolution

__all__ = [
    # Version
    "__version__",
    # Core
    "GeometryError",
    "polygon_to_grid",
    "Camera",
    "create_camera_lattice",
    "create_preset_cameras",
    "compute_visibility",
    # Scene
    "Cell",
    "Obstacle",
    "TargetArea",
    "Scenario",
    "generate_room_scenario",
    "reference_scenario",
    # Matrix
    "CoverageMatrix",
    "MatrixBuildError",
    "build_coverage_matrix",
    "reduce_to_fixed_point",
    "remove_redundant_false",
    "CoverageReport",
    "generate_cells",
    "plan_coverage",
    # Optimization
    "Solution",
    "evaluate_solution",
    "is_valid",
    "SolverResult",
    "run_comparison",
    "solve",
    # Config
    "CoverplanConfig",
    "GridResolution",
]
