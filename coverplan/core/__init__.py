"""
Core geometry and visibility module.

This module provides:
    - Geometry kernel: vector helpers, plane bases, grid generation and
      point-in-polygon tests
    - Camera: Candidate camera model and generators
    - Visibility: Occlusion, field-of-view and angle-of-view predicates
"""

from coverplan.core.geometry import (
    GeometryError,
    orthonormal_basis,
    polygon_to_grid,
    point_in_polygon_2d,
    point_in_polygon_3d,
)
from coverplan.core.sensors import Camera, create_camera_lattice, create_preset_cameras
from coverplan.core.visibility import (
    angle_of_view_test,
    compute_visibility,
    fov_test,
    is_covered,
    occlusion_test,
)

__all__ = [
    "GeometryError",
    "orthonormal_basis",
    "polygon_to_grid",
    "point_in_polygon_2d",
    "point_in_polygon_3d",
    "Camera",
    "create_camera_lattice",
    "create_preset_cameras",
    "angle_of_view_test",
    "compute_visibility",
    "fov_test",
    "is_covered",
    "occlusion_test",
]
