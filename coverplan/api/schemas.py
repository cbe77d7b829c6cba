"""
Schemas for the coverplan interchange documents.

These schemas define the JSON contracts between the coverage pipeline, the
solvers and their callers. Field names in the documents are camelCase;
matrix ids are written as strings, as JSON object keys must be.
"""

from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field


@dataclass
class GridResolutionSchema:
    """Grid step sizes."""
    x: float = 0.2
    y: float = 0.2


@dataclass
class PlanRequest:
    """Input of the coverage pipeline."""
    grid_resolution: GridResolutionSchema = field(default_factory=GridResolutionSchema)
    obstacles: List[Dict[str, Any]] = field(default_factory=list)
    target_areas: List[Dict[str, Any]] = field(default_factory=list)
    cameras: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "PlanRequest":
        grid = data.get("config", {}).get("gridResolution", {})
        return cls(
            grid_resolution=GridResolutionSchema(**grid),
            obstacles=list(data.get("obstacles", [])),
            target_areas=list(data.get("targetAreas", [])),
            cameras=list(data.get("cameras", [])),
        )

    def to_dict(self) -> dict:
        return {
            "config": {"gridResolution": {"x": self.grid_resolution.x, "y": self.grid_resolution.y}},
            "obstacles": self.obstacles,
            "targetAreas": self.target_areas,
            "cameras": self.cameras,
        }


@dataclass
class CoverageDocument:
    """Output of the coverage pipeline, input of the solvers."""
    grid_resolution: GridResolutionSchema = field(default_factory=GridResolutionSchema)
    obstacles: List[Dict[str, Any]] = field(default_factory=list)
    target_areas: List[Dict[str, Any]] = field(default_factory=list)
    cells: List[Dict[str, Any]] = field(default_factory=list)
    cameras: List[Dict[str, Any]] = field(default_factory=list)
    original_size: List[int] = field(default_factory=lambda: [0, 0])
    optimized_size: List[int] = field(default_factory=lambda: [0, 0])
    optimized_matrix: Dict[str, Dict[str, bool]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "CoverageDocument":
        grid = data.get("config", {}).get("gridResolution", {})
        return cls(
            grid_resolution=GridResolutionSchema(**grid),
            obstacles=list(data.get("obstacles", [])),
            target_areas=list(data.get("targetAreas", [])),
            cells=list(data.get("cells", [])),
            cameras=list(data.get("cameras", [])),
            original_size=list(data.get("originalSize", [0, 0])),
            optimized_size=list(data.get("optimizedSize", [0, 0])),
            optimized_matrix=dict(data.get("optimizedMatrix", {})),
        )

    def to_dict(self) -> dict:
        return {
            "config": {"gridResolution": {"x": self.grid_resolution.x, "y": self.grid_resolution.y}},
            "obstacles": self.obstacles,
            "targetAreas": self.target_areas,
            "cells": self.cells,
            "cameras": self.cameras,
            "originalSize": self.original_size,
            "optimizedSize": self.optimized_size,
            "optimizedMatrix": self.optimized_matrix,
        }


@dataclass
class SolveRequest:
    """Request to select cameras from a reduced matrix."""
    optimized_matrix: Dict[str, Dict[str, bool]] = field(default_factory=dict)
    method: str = "greedy"
    seed: Optional[int] = None
    parameters: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SolveResponse:
    """Solver result."""
    selected_cameras: List[int] = field(default_factory=list)
    covered_cells: List[int] = field(default_factory=list)
    total_cameras: int = 0

    # Run metadata
    method: str = ""
    runtime_seconds: float = 0.0
    is_valid: bool = False
    success: bool = True
    message: str = ""

    def to_dict(self) -> dict:
        return {
            "selectedCameras": self.selected_cameras,
            "coveredCells": self.covered_cells,
            "totalCameras": self.total_cameras,
            "method": self.method,
            "runtimeSeconds": self.runtime_seconds,
            "isValid": self.is_valid,
            "success": self.success,
            "message": self.message,
        }


@dataclass
class APIError:
    """Error response."""
    error: str = ""
    code: str = "unknown_error"
    details: Optional[Dict[str, Any]] = None


# Helper functions for conversion

def request_to_inputs(request: PlanRequest):
    """
    Convert a plan request to pipeline inputs.

    Returns:
        (config, obstacles, target_areas, cameras)
    """
    from coverplan.config.settings import CoverplanConfig, GridResolution
    from coverplan.core.sensors import Camera
    from coverplan.scene.models import Obstacle, TargetArea

    config = CoverplanConfig(
        grid_resolution=GridResolution(request.grid_resolution.x, request.grid_resolution.y),
    )
    obstacles = [Obstacle.from_dict(o) for o in request.obstacles]
    target_areas = [TargetArea.from_dict(t) for t in request.target_areas]
    cameras = [Camera.from_dict(c) for c in request.cameras]
    return config, obstacles, target_areas, cameras


def report_to_document(report) -> CoverageDocument:
    """Convert a CoverageReport to its interchange document."""
    return CoverageDocument.from_dict(report.to_dict())


def document_to_matrix(document: CoverageDocument):
    """Rebuild the reduced coverage matrix of a document."""
    from coverplan.matrix.coverage import CoverageMatrix
    return CoverageMatrix.from_dict(document.optimized_matrix)


def result_to_response(result) -> SolveResponse:
    """Convert a SolverResult to a response schema."""
    solution = result.solution
    return SolveResponse(
        selected_cameras=[int(c) for c in solution.selected_cameras],
        covered_cells=sorted(int(c) for c in solution.covered_cells),
        total_cameras=solution.total_cameras,
        method=result.method,
        runtime_seconds=float(result.runtime_seconds),
        is_valid=bool(result.is_valid),
        success=bool(result.success),
        message=result.message,
    )


def handle_solve_request(request: SolveRequest) -> SolveResponse:
    """Run a solver on the matrix of a request."""
    from coverplan.matrix.coverage import CoverageMatrix
    from coverplan.optimization.runner import solve

    matrix = CoverageMatrix.from_dict(request.optimized_matrix)
    try:
        result = solve(matrix, method=request.method, seed=request.seed, **request.parameters)
    except ValueError as e:
        return SolveResponse(method=request.method, success=False, message=str(e))
    return result_to_response(result)
