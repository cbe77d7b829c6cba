"""
Coverage matrix module.

This module provides:
    - CoverageMatrix: Sparse camera x cell coverage table
    - Parallel chunked matrix construction
    - Dominance-based reduction
    - The grid -> matrix -> reduction pipeline
"""

from coverplan.matrix.coverage import CoverageMatrix
from coverplan.matrix.builder import MatrixBuildError, build_coverage_matrix
from coverplan.matrix.reducer import (
    ReductionStats,
    find_infeasible_cells,
    reduce_matrix,
    reduce_to_fixed_point,
    remove_redundant_false,
)
from coverplan.matrix.pipeline import CoverageReport, generate_cells, plan_coverage

__all__ = [
    "CoverageMatrix",
    "MatrixBuildError",
    "build_coverage_matrix",
    "ReductionStats",
    "find_infeasible_cells",
    "reduce_matrix",
    "reduce_to_fixed_point",
    "remove_redundant_false",
    "CoverageReport",
    "generate_cells",
    "plan_coverage",
]
