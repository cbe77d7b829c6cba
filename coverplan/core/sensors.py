"""
Camera data structures and utilities.

This module defines the candidate camera model used by the coverage
planner, together with helpers for generating candidate camera sets.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union
import numpy as np

from coverplan.core.geometry import Point


# Default candidate headings: 8 horizontal directions x 3 vertical tilts,
# plus straight ahead and straight back along +x.
DEFAULT_HEADINGS: Tuple[Tuple[float, float], ...] = tuple(
    [
        (k / 4 * np.pi, tilt * np.pi)
        for k in range(8)
        for tilt in (7 / 4, 0.0, 1 / 4)
    ]
    + [(0.0, 0.0), (0.0, np.pi)]
)

DEFAULT_OFFSETS: Tuple[Tuple[float, float], ...] = (
    (-0.1, -0.1),
    (-0.1, 0.1),
    (0.1, -0.1),
    (0.1, 0.1),
)

DEFAULT_HEIGHTS: Tuple[float, ...] = (0.9, 1.9, 2.9)


@dataclass(frozen=True)
class Camera:
    """
    Candidate camera for coverage planning.

    Headings are measured from the +x axis: ``xy_angle`` in the xy plane
    (counter-clockwise towards +y) and ``xz_angle`` in the xz plane
    (towards +z). Field-of-view values are half-angle extents: a point is
    within view on an axis if its angular distance to the heading does not
    exceed the corresponding half-FOV.

    Attributes:
        id: Unique camera id
        position: (x, y, z) position in world coordinates
        width_fov: Horizontal half field of view in radians
        height_fov: Vertical half field of view in radians
        xy_angle: Horizontal heading in radians
        xz_angle: Vertical heading in radians

    Example:
        >>> cam = Camera(
        ...     id=1, position=(0.1, 0.1, 2.5),
        ...     width_fov=np.pi / 3, height_fov=np.pi / 3,
        ...     xy_angle=np.pi * 1.84, xz_angle=np.pi * 1.9,
        ... )
    """
    id: int
    position: Point
    width_fov: float
    height_fov: float
    xy_angle: float
    xz_angle: float

    def __post_init__(self):
        position = tuple(float(v) for v in self.position)
        if len(position) != 3:
            raise ValueError(f"Camera position must have 3 coordinates, got {len(position)}")
        object.__setattr__(self, "position", position)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array [x, y, z, width_fov, height_fov, xy_angle, xz_angle]."""
        return np.array([
            *self.position,
            self.width_fov, self.height_fov,
            self.xy_angle, self.xz_angle,
        ], dtype=np.float64)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": int(self.id),
            "position": [float(v) for v in self.position],
            "widthFov": float(self.width_fov),
            "heightFov": float(self.height_fov),
            "xyAngle": float(self.xy_angle),
            "xzAngle": float(self.xz_angle),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Camera":
        """Create from dictionary."""
        return cls(
            id=int(data["id"]),
            position=data["position"],
            width_fov=data["widthFov"],
            height_fov=data["heightFov"],
            xy_angle=data["xyAngle"],
            xz_angle=data["xzAngle"],
        )

    @property
    def width_fov_degrees(self) -> float:
        """Horizontal half-FOV in degrees."""
        return float(np.rad2deg(self.width_fov))

    @property
    def height_fov_degrees(self) -> float:
        """Vertical half-FOV in degrees."""
        return float(np.rad2deg(self.height_fov))

    @property
    def xy_angle_degrees(self) -> float:
        """Horizontal heading in degrees."""
        return float(np.rad2deg(self.xy_angle))

    @property
    def xz_angle_degrees(self) -> float:
        """Vertical heading in degrees."""
        return float(np.rad2deg(self.xz_angle))


def heading_towards(position: Sequence[float], target: Sequence[float]) -> Tuple[float, float]:
    """
    Compute (xy_angle, xz_angle) headings pointing from position to target.

    Both angles are returned in [0, 2*pi).
    """
    dx = target[0] - position[0]
    dy = target[1] - position[1]
    dz = target[2] - position[2]
    xy_angle = float(np.arctan2(dy, dx) % (2 * np.pi))
    xz_angle = float(np.arctan2(dz, dx) % (2 * np.pi))
    return xy_angle, xz_angle


def create_preset_cameras(
    positions: Iterable[Sequence[float]],
    look_at: Optional[Sequence[float]] = None,
    width_fov: float = np.pi / 3,
    height_fov: float = np.pi / 3,
    start_id: int = 1,
) -> List[Camera]:
    """
    Create cameras at preset positions, optionally aimed at a common point.

    Args:
        positions: Camera (x, y, z) positions.
        look_at: Optional point every camera is aimed at. If None, cameras
            look along +x.
        width_fov, height_fov: Half field-of-view angles.
        start_id: Id of the first camera; ids increase by one.

    Returns:
        List of Camera objects.
    """
    cameras = []
    for offset, position in enumerate(positions):
        if look_at is not None:
            xy_angle, xz_angle = heading_towards(position, look_at)
        else:
            xy_angle, xz_angle = 0.0, 0.0

        cameras.append(Camera(
            id=start_id + offset,
            position=tuple(position),
            width_fov=width_fov,
            height_fov=height_fov,
            xy_angle=xy_angle,
            xz_angle=xz_angle,
        ))

    return cameras


def create_camera_lattice(
    width: int,
    height: int,
    probability: float = 1.0,
    offsets: Sequence[Tuple[float, float]] = DEFAULT_OFFSETS,
    heights: Sequence[float] = DEFAULT_HEIGHTS,
    headings: Sequence[Tuple[float, float]] = DEFAULT_HEADINGS,
    width_fov: float = np.pi * 0.42,
    height_fov: float = np.pi * 0.42,
    seed: Optional[Union[int, np.random.Generator]] = None,
    start_id: int = 1,
) -> List[Camera]:
    """
    Create a lattice of candidate cameras around interior grid corners.

    For every interior integer corner (i, j) with 0 < i < width and
    0 < j < height, a camera is generated for every combination of corner
    offset, mounting height and heading, and kept with the given
    probability.

    Args:
        width: Room extent along x.
        height: Room extent along y.
        probability: Probability of keeping each candidate (1.0 keeps all).
        offsets: (dx, dy) offsets from the corner.
        heights: Mounting heights.
        headings: (xy_angle, xz_angle) pairs.
        width_fov, height_fov: Half field-of-view angles.
        seed: Random seed or generator for the keep/drop draws.
        start_id: Id of the first camera.

    Returns:
        List of Camera objects with consecutive ids.
    """
    rng = np.random.default_rng(seed)

    cameras = []
    next_id = start_id
    for i in range(1, width):
        for j in range(1, height):
            for dx, dy in offsets:
                for z in heights:
                    for xy_angle, xz_angle in headings:
                        if rng.random() > probability:
                            continue
                        cameras.append(Camera(
                            id=next_id,
                            position=(i + dx, j + dy, z),
                            width_fov=width_fov,
                            height_fov=height_fov,
                            xy_angle=xy_angle,
                            xz_angle=xz_angle,
                        ))
                        next_id += 1

    return cameras
