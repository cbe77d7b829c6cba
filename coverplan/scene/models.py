"""
Scene data structures: obstacles, target areas and grid cells.

All polygons are ordered sequences of at least three ``(x, y, z)`` points,
assumed planar and non-self-intersecting. The first three points determine
the supporting plane used by every geometric predicate.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from coverplan.core.geometry import Point


def _as_polygon(points: Sequence[Sequence[float]]) -> Tuple[Point, ...]:
    """Normalize a point sequence to a tuple of float 3-tuples."""
    polygon = tuple(
        (float(p[0]), float(p[1]), float(p[2])) for p in points
    )
    if len(polygon) < 3:
        raise ValueError(f"A polygon needs at least 3 points, got {len(polygon)}")
    return polygon


def _points_to_list(points: Tuple[Point, ...]) -> list:
    return [list(p) for p in points]


@dataclass(frozen=True)
class Obstacle:
    """
    An opaque planar polygon that can occlude visibility.

    Attributes:
        points: Polygon vertices.
    """
    points: Tuple[Point, ...]

    def __post_init__(self):
        object.__setattr__(self, "points", _as_polygon(self.points))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {"points": _points_to_list(self.points)}

    @classmethod
    def from_dict(cls, data: dict) -> "Obstacle":
        """Create from dictionary."""
        return cls(points=data["points"])


@dataclass(frozen=True)
class TargetArea:
    """
    A planar polygon that must be observed.

    Attributes:
        points: Polygon vertices.
        min_aov: Lower bound of the acceptable viewing angle (radians).
        max_aov: Upper bound of the acceptable viewing angle (radians).
    """
    points: Tuple[Point, ...]
    min_aov: float = 0.0
    max_aov: float = 1.0471975511965976  # pi / 3

    def __post_init__(self):
        object.__setattr__(self, "points", _as_polygon(self.points))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "points": _points_to_list(self.points),
            "minAOV": float(self.min_aov),
            "maxAOV": float(self.max_aov),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TargetArea":
        """Create from dictionary."""
        return cls(
            points=data["points"],
            min_aov=data["minAOV"],
            max_aov=data["maxAOV"],
        )


@dataclass(frozen=True)
class Cell:
    """
    A quadrilateral grid cell produced by discretizing a target area.

    Cells inherit the viewing-angle band of their target area and carry an
    id that is unique within a planning run.

    Attributes:
        id: Unique cell id.
        points: The 4 cell corners.
        min_aov: Inherited lower viewing-angle bound (radians).
        max_aov: Inherited upper viewing-angle bound (radians).
    """
    id: int
    points: Tuple[Point, ...]
    min_aov: float
    max_aov: float

    def __post_init__(self):
        object.__setattr__(self, "points", _as_polygon(self.points))

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": int(self.id),
            "points": _points_to_list(self.points),
            "minAOV": float(self.min_aov),
            "maxAOV": float(self.max_aov),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Cell":
        """Create from dictionary."""
        return cls(
            id=int(data["id"]),
            points=data["points"],
            min_aov=data["minAOV"],
            max_aov=data["maxAOV"],
        )
