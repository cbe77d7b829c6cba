"""
Interchange document schemas for coverplan.
"""

from coverplan.api.schemas import (
    CoverageDocument,
    PlanRequest,
    SolveRequest,
    SolveResponse,
    handle_solve_request,
)

__all__ = [
    "CoverageDocument",
    "PlanRequest",
    "SolveRequest",
    "SolveResponse",
    "handle_solve_request",
]
