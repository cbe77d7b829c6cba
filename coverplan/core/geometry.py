"""
Geometry kernel for coverage planning.

This module provides the pure geometric building blocks used by the
visibility predicates and the grid generator:
    - 3-vector algebra on plain tuples
    - Plane normal and in-plane orthonormal basis construction
    - Discretization of planar polygons into quadrilateral grid cells
    - 3D and 2D point-in-polygon tests

All functions are stateless. Points are ``(x, y, z)`` tuples of floats.
"""

import math
from typing import List, Sequence, Tuple

import numpy as np

Point = Tuple[float, float, float]

# Pivot / residual threshold for the plane-coordinate solve. Changing it
# changes the generated grids.
ZERO_THRESHOLD = 1e-10


class GeometryError(ValueError):
    """Raised when a polygon cannot be expressed in its own plane basis."""


# =============================================================================
# Vector Algebra
# =============================================================================

def add(p1: Sequence[float], p2: Sequence[float]) -> Point:
    return (p1[0] + p2[0], p1[1] + p2[1], p1[2] + p2[2])


def subtract(p1: Sequence[float], p2: Sequence[float]) -> Point:
    return (p1[0] - p2[0], p1[1] - p2[1], p1[2] - p2[2])


def scale(p: Sequence[float], c: float) -> Point:
    return (p[0] * c, p[1] * c, p[2] * c)


def divide(p: Sequence[float], c: float) -> Point:
    return (p[0] / c, p[1] / c, p[2] / c)


def dot(p1: Sequence[float], p2: Sequence[float]) -> float:
    return p1[0] * p2[0] + p1[1] * p2[1] + p1[2] * p2[2]


def cross(p1: Sequence[float], p2: Sequence[float]) -> Point:
    return (
        p1[1] * p2[2] - p1[2] * p2[1],
        p1[2] * p2[0] - p1[0] * p2[2],
        p1[0] * p2[1] - p1[1] * p2[0],
    )


def norm(p: Sequence[float]) -> float:
    return math.sqrt(dot(p, p))


def centroid(points: Sequence[Sequence[float]]) -> Point:
    """Arithmetic mean of a sequence of points."""
    total = (0.0, 0.0, 0.0)
    for point in points:
        total = add(total, point)
    return divide(total, len(points))


# =============================================================================
# Planes and Bases
# =============================================================================

def normal_vector(p0: Sequence[float], p1: Sequence[float], p2: Sequence[float]) -> Point:
    """
    Unnormalized normal of the plane through three points.

    Computed as the cross product of the edges p0->p1 and p0->p2.
    """
    return cross(subtract(p1, p0), subtract(p2, p0))


def orthonormal_basis(
    p0: Sequence[float],
    p1: Sequence[float],
    p2: Sequence[float],
) -> Tuple[Point, Point, Point]:
    """
    Build the supporting plane basis of a polygon from its first three points.

    Args:
        p0, p1, p2: First three polygon vertices.

    Returns:
        normal: Unnormalized plane normal (p0->p1 x p0->p2).
        v1: Unit vector along p0->p1.
        v2: Unit in-plane vector orthogonal to v1, equal to the normalized
            cross product of p0->p1 and the normal. Depending on the winding
            of the polygon it may point away from p2.

    Example:
        >>> normal, v1, v2 = orthonormal_basis((0, 0, 0), (1, 0, 0), (0, 1, 0))
        >>> v1
        (1.0, 0.0, 0.0)
    """
    normal = normal_vector(p0, p1, p2)
    edge = subtract(p1, p0)
    orthogonal = cross(edge, normal)
    return normal, divide(edge, norm(edge)), divide(orthogonal, norm(orthogonal))


def _solve_plane_coordinates(
    v1: Point,
    v2: Point,
    offset: Point,
) -> Tuple[float, float]:
    """
    Solve ``offset = c1 * v1 + c2 * v2`` for (c1, c2).

    Three equations in two unknowns, reduced by Gaussian elimination on the
    augmented 3x3 matrix. The system is consistent only if ``offset`` lies in
    the plane spanned by v1 and v2.

    Raises:
        GeometryError: If the system has no solution.
    """
    a = np.array(
        [[v1[k], v2[k], offset[k]] for k in range(3)],
        dtype=np.float64,
    )

    for i in range(2):
        if abs(a[i, i]) <= ZERO_THRESHOLD:
            candidates = [r for r in range(i + 1, 3) if abs(a[r, i]) > ZERO_THRESHOLD]
            if not candidates:
                raise GeometryError("cannot solve matrix: degenerate plane basis")
            a[[i, candidates[0]]] = a[[candidates[0], i]]
        for j in range(i + 1, 3):
            if abs(a[j, i]) > ZERO_THRESHOLD:
                a[j] -= (a[j, i] / a[i, i]) * a[i]

    if abs(a[0, 1]) > ZERO_THRESHOLD:
        a[0] -= (a[0, 1] / a[1, 1]) * a[1]

    solved = (
        abs(a[2, 0]) <= ZERO_THRESHOLD
        and abs(a[2, 1]) <= ZERO_THRESHOLD
        and abs(a[2, 2]) <= ZERO_THRESHOLD
        and abs(a[0, 1]) <= ZERO_THRESHOLD
        and abs(a[1, 0]) <= ZERO_THRESHOLD
        and abs(a[0, 0]) > ZERO_THRESHOLD
        and abs(a[1, 1]) > ZERO_THRESHOLD
    )
    if not solved:
        raise GeometryError("cannot solve matrix: polygon is not planar")

    return float(a[0, 2] / a[0, 0]), float(a[1, 2] / a[1, 1])


# =============================================================================
# Grid Generation
# =============================================================================

def polygon_to_grid(
    grid_resolution,
    polygon: Sequence[Sequence[float]],
) -> Tuple[List[Point], List[List[Point]]]:
    """
    Discretize a planar polygon into quadrilateral grid cells.

    Every vertex is expressed as ``p0 + c1 * v1 + c2 * v2`` in the basis of
    :func:`orthonormal_basis`. The c1 extent is walked from its minimum in
    steps of ``grid_resolution.x`` while below its maximum; for each step
    the c2 direction is walked from 0 towards the signed secondary extent
    in steps of ``grid_resolution.y``. A cell is kept only if its centroid
    lies inside the polygon.

    Args:
        grid_resolution: Object with ``x`` and ``y`` step sizes
            (e.g. :class:`coverplan.config.GridResolution`).
        polygon: Planar polygon vertices (at least 3).

    Returns:
        rectangle: The 4 corners of the bounding parallelogram.
        cells: Retained cells, each a list of 4 corner points.

    Raises:
        GeometryError: If any vertex is not in the plane of the first three.
    """
    start = tuple(float(v) for v in polygon[0])
    _, v1, v2 = orthonormal_basis(polygon[0], polygon[1], polygon[2])

    all_c1 = []
    all_c2 = []
    for point in polygon:
        c1, c2 = _solve_plane_coordinates(v1, v2, subtract(point, start))
        all_c1.append(c1)
        all_c2.append(c2)

    min_c1 = min(all_c1)
    max_c1 = max(all_c1)
    c_v2 = min(all_c2) if min(all_c2) != 0 else max(all_c2)

    min_c1_point = add(start, scale(v1, min_c1))
    max_c1_point = add(start, scale(v1, max_c1))
    rectangle = [
        min_c1_point,
        max_c1_point,
        add(max_c1_point, scale(v2, c_v2)),
        add(min_c1_point, scale(v2, c_v2)),
    ]

    step_x = grid_resolution.x
    step_y = grid_resolution.y
    sign = 1 if c_v2 > 0 else -1
    rows = abs(c_v2) / step_y
    v2_step = scale(v2, sign * step_y)

    cells = []
    c1 = min_c1
    while c1 < max_c1:
        j = 0
        while j < rows:
            v2_offset = scale(v2, j * sign * step_y)
            first = add(add(start, scale(v1, c1)), v2_offset)
            second = add(add(start, scale(v1, c1 + step_x)), v2_offset)
            cell = [first, second, add(second, v2_step), add(first, v2_step)]
            if point_in_polygon_3d(polygon, centroid(cell)):
                cells.append(cell)
            j += 1
        c1 += step_x

    return rectangle, cells


# =============================================================================
# Point in Polygon
# =============================================================================

def point_in_polygon_3d(
    polygon: Sequence[Sequence[float]],
    point: Sequence[float],
) -> bool:
    """
    Test whether a point on the polygon's plane lies inside the polygon.

    Both the polygon and the point are projected to 2D by dropping the first
    coordinate axis on which the polygon normal is nonzero.
    """
    normal = normal_vector(polygon[0], polygon[1], polygon[2])
    dropped = next((i for i, v in enumerate(normal) if v != 0), 2)
    keep = [i for i in range(3) if i != dropped]

    projected_polygon = [(p[keep[0]], p[keep[1]]) for p in polygon]
    projected_point = (point[keep[0]], point[keep[1]])
    return point_in_polygon_2d(projected_polygon, projected_point)


def point_in_polygon_2d(
    polygon: Sequence[Sequence[float]],
    point: Sequence[float],
) -> bool:
    """
    Ray-casting point-in-polygon test with boundary handling.

    A point equal to a vertex, or lying on a horizontal edge strictly
    within its x-range, counts as inside. Otherwise a horizontal-ray
    crossing parity decides.

    Example:
        >>> square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        >>> point_in_polygon_2d(square, (0.5, 0.5))
        True
        >>> point_in_polygon_2d(square, (1.5, 0.5))
        False
    """
    x, y = point[0], point[1]
    inside = False

    j = len(polygon) - 1
    for i in range(len(polygon)):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]

        if (x == xi and y == yi) or (x == xj and y == yj):
            return True

        if yi == yj == y and min(xi, xj) < x < max(xi, xj):
            return True

        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside

        j = i

    return inside
