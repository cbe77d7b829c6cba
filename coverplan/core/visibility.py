"""
Visibility predicates for camera/cell pairs.

A camera covers a cell iff none of the three blocking tests fires:
    - occlusion: an obstacle intersects a sightline to a cell sample point
    - field of view: a cell corner is outside the camera's angular extents
    - angle of view: the viewing angle onto the cell's plane is outside the
      cell's accepted band

Each test returns True when it *blocks* visibility. The tests are sampled
approximations: occlusion checks 9 points per cell and the field of view
treats the horizontal and vertical axes independently.
"""

import math
from typing import Dict, Iterable, List, Sequence

from coverplan.core.geometry import (
    Point,
    add,
    divide,
    dot,
    norm,
    normal_vector,
    point_in_polygon_3d,
    scale,
    subtract,
)
from coverplan.core.sensors import Camera

TWO_PI = 2 * math.pi


def cell_sample_points(cell: Sequence[Sequence[float]]) -> List[Point]:
    """
    The 9 sample points of a quadrilateral cell.

    Corners and edge midpoints in boundary order, followed by the centroid.
    """
    p1, p2, p3, p4 = cell[0], cell[1], cell[2], cell[3]
    return [
        tuple(p1),
        divide(add(p1, p2), 2),
        tuple(p2),
        divide(add(p2, p3), 2),
        tuple(p3),
        divide(add(p3, p4), 2),
        tuple(p4),
        divide(add(p4, p1), 2),
        divide(add(add(add(p1, p2), p3), p4), 4),
    ]


def occlusion_test(
    camera_position: Sequence[float],
    obstacle: Sequence[Sequence[float]],
    cell: Sequence[Sequence[float]],
) -> bool:
    """
    Check whether an obstacle blocks any sightline from a camera to a cell.

    For every sample point of the cell, the segment camera -> sample is
    intersected with the obstacle's supporting plane. The sample is occluded
    if the intersection parameter t is strictly inside (0, 1) and the
    intersection point lies inside the obstacle polygon.

    Args:
        camera_position: Camera (x, y, z).
        obstacle: Obstacle polygon vertices.
        cell: The 4 cell corners.

    Returns:
        True if at least one sample point is occluded.
    """
    point_on_plane = obstacle[0]
    normal = normal_vector(obstacle[0], obstacle[1], obstacle[2])
    top = dot(normal, subtract(camera_position, point_on_plane))

    for sample in cell_sample_points(cell):
        bottom = dot(normal, subtract(camera_position, sample))
        if bottom == 0:
            # Sightline parallel to the obstacle plane
            continue
        t = top / bottom
        if 0 < t < 1:
            hit = add(camera_position, scale(subtract(sample, camera_position), t))
            if point_in_polygon_3d(obstacle, hit):
                return True

    return False


def angle_from_horizon(x: float, y_or_z: float) -> float:
    """
    Angle of the offset (x, y_or_z) measured from +x, in [0, 2*pi).

    The full circle is resolved: an offset along -x maps to pi, not 0. A
    zero offset (point straight above, below or beside the camera on that
    plane) maps to 0 rather than an undefined angle, so it is checked
    against the heading like any other direction.
    """
    return math.atan2(y_or_z, x) % TWO_PI


def angular_distance(a: float, b: float) -> float:
    """Shorter angular distance between two angles, in [0, pi]."""
    difference = abs(a - b) % TWO_PI
    if difference > math.pi:
        difference = TWO_PI - difference
    return difference


def fov_test(camera: Camera, cell: Sequence[Sequence[float]]) -> bool:
    """
    Check whether any cell corner falls outside the camera's field of view.

    The horizontal angle is taken from the xy offset and the vertical angle
    from the xz offset of each corner relative to the camera. A corner is
    out of view if either angle is farther from the matching heading than
    the matching half-FOV.

    Returns:
        True if the field of view blocks the cell.
    """
    cx, cy, cz = camera.position
    for point in cell:
        xy = angle_from_horizon(point[0] - cx, point[1] - cy)
        xz = angle_from_horizon(point[0] - cx, point[2] - cz)
        if (
            angular_distance(camera.xy_angle, xy) > camera.width_fov
            or angular_distance(camera.xz_angle, xz) > camera.height_fov
        ):
            return True
    return False


def _segment_distances(p: Point, a: Sequence[float], b: Sequence[float]):
    """
    Distances from p to segment ab: closest point, endpoint a, endpoint b.
    """
    ab = subtract(b, a)
    ap = subtract(p, a)
    bp = subtract(p, b)

    ab_length_sq = dot(ab, ab)
    t = dot(ap, ab) / ab_length_sq if ab_length_sq > 0 else 0.0
    t = max(0.0, min(1.0, t))

    closest = add(a, scale(ab, t))
    return norm(subtract(p, closest)), norm(ap), norm(bp)


def angle_of_view_test(camera_position: Sequence[float], area) -> bool:
    """
    Check whether the viewing angle onto an area is outside its AOV band.

    The camera is projected orthogonally onto the area's plane. For every
    polygon edge, the minimum and maximum distance from the projected point
    to the edge are converted into subtended angles via
    ``atan(distance / height)`` where height is the camera-to-plane
    distance.

    Args:
        camera_position: Camera (x, y, z).
        area: Object with ``points``, ``min_aov`` and ``max_aov``
            (a TargetArea or a Cell).

    Returns:
        True unless both the minimum and the maximum angle lie strictly
        inside (min_aov, max_aov).
    """
    points = area.points
    normal = normal_vector(points[0], points[1], points[2])
    unit_normal = divide(normal, norm(normal))

    offset = dot(unit_normal, camera_position) - dot(unit_normal, points[0])
    projected = subtract(camera_position, scale(unit_normal, offset))

    min_distance = math.inf
    max_distance = -math.inf
    for i in range(len(points)):
        distances = _segment_distances(projected, points[i], points[(i + 1) % len(points)])
        min_distance = min(min_distance, *distances)
        max_distance = max(max_distance, *distances)

    height = norm(subtract(projected, camera_position))
    min_angle = math.atan2(min_distance, height)
    max_angle = math.atan2(max_distance, height)

    return not (
        area.min_aov < min_angle < area.max_aov
        and area.min_aov < max_angle < area.max_aov
    )


def is_covered(camera: Camera, cell, obstacles: Iterable) -> bool:
    """
    Decide whether a camera sees a cell.

    Args:
        camera: Candidate camera.
        cell: Cell with ``points``, ``min_aov`` and ``max_aov``.
        obstacles: Obstacles with ``points``.

    Returns:
        True if no blocking test fires.
    """
    if fov_test(camera, cell.points):
        return False
    if angle_of_view_test(camera.position, cell):
        return False
    return not any(
        occlusion_test(camera.position, obstacle.points, cell.points)
        for obstacle in obstacles
    )


def compute_visibility(
    cells: Sequence,
    cameras: Sequence[Camera],
    obstacles: Sequence,
) -> Dict[int, Dict[int, bool]]:
    """
    Compute camera -> cell -> covered for every (camera, cell) pair.

    Args:
        cells: Cells to evaluate.
        cameras: Candidate cameras.
        obstacles: Occluding obstacles.

    Returns:
        Nested dict with one entry per (camera, cell) pair.

    Example:
        >>> rows = compute_visibility(cells, cameras, obstacles)
        >>> rows[camera_id][cell_id]
        True
    """
    rows = {camera.id: {} for camera in cameras}
    for cell in cells:
        for camera in cameras:
            rows[camera.id][cell.id] = is_covered(camera, cell, obstacles)
    return rows
