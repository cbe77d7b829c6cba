"""
Synthetic scenes for testing and development.

This module provides a small fixed reference room and a generator for
random box rooms with partitions, wall-mounted target areas and a lattice of
candidate cameras.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
import numpy as np

from coverplan.core.sensors import Camera, create_camera_lattice
from coverplan.scene.models import Obstacle, TargetArea

ROOM_HEIGHT = 3.0


@dataclass
class Scenario:
    """
    Scene input of the coverage pipeline.

    Attributes:
        obstacles: Occluding polygons
        target_areas: Polygons that must be observed
        cameras: Candidate cameras
    """
    obstacles: List[Obstacle] = field(default_factory=list)
    target_areas: List[TargetArea] = field(default_factory=list)
    cameras: List[Camera] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "obstacles": [o.to_dict() for o in self.obstacles],
            "targetAreas": [t.to_dict() for t in self.target_areas],
            "cameras": [c.to_dict() for c in self.cameras],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Scenario":
        """Create from dictionary."""
        return cls(
            obstacles=[Obstacle.from_dict(o) for o in data.get("obstacles", [])],
            target_areas=[TargetArea.from_dict(t) for t in data.get("targetAreas", [])],
            cameras=[Camera.from_dict(c) for c in data.get("cameras", [])],
        )


def box_walls(width: float, depth: float, height: float = ROOM_HEIGHT) -> List[Obstacle]:
    """
    The six faces of an axis-aligned box room [0, width] x [0, depth] x [0, height].

    Order: ceiling, floor, y=0 wall, x=0 wall, y=depth wall, x=width wall.
    """
    w, d, z = width, depth, height
    return [
        Obstacle([(0, 0, z), (w, 0, z), (w, d, z), (0, d, z)]),
        Obstacle([(0, 0, 0), (w, 0, 0), (w, d, 0), (0, d, 0)]),
        Obstacle([(0, 0, 0), (w, 0, 0), (w, 0, z), (0, 0, z)]),
        Obstacle([(0, 0, 0), (0, d, 0), (0, d, z), (0, 0, z)]),
        Obstacle([(0, d, 0), (w, d, 0), (w, d, z), (0, d, z)]),
        Obstacle([(w, 0, 0), (w, d, 0), (w, d, z), (w, 0, z)]),
    ]


def reference_scenario() -> Scenario:
    """
    Fixed 6 x 3 x 3 room used for examples and regression tests.

    Three partitions split the room; three target areas hang on the x = 1
    plane, one per corridor, and twelve hand-placed cameras watch them.

    Example:
        >>> scenario = reference_scenario()
        >>> len(scenario.cameras)
        12
    """
    obstacles = box_walls(6, 3)
    obstacles += [
        Obstacle([(0, 1, 0), (0, 1, 3), (2, 1, 3), (2, 1, 0)]),
        Obstacle([(0, 2, 0), (0, 2, 3), (2, 2, 3), (2, 2, 0)]),
        Obstacle([(4, 1, 0), (4, 1, 3), (4, 3, 3), (4, 3, 0)]),
    ]

    max_aov = np.pi / 3
    target_areas = [
        TargetArea([(1, 0.2, 0.7), (1, 0.2, 2.3), (1, 0.8, 2.3), (1, 0.8, 0.7)], 0.0, max_aov),
        TargetArea([(1, 1.2, 0.7), (1, 1.2, 2.3), (1, 1.8, 2.3), (1, 1.8, 0.7)], 0.0, max_aov),
        TargetArea([(1, 2.2, 1.7), (1, 2.2, 2.3), (1, 2.8, 1.9), (1, 2.8, 0.7)], 0.0, max_aov),
    ]

    fov = np.pi / 3
    wall_cameras = [
        ((0.1, 0.1, 2.5), np.pi * 1.84),
        ((0.1, 0.9, 2.9), np.pi * 0.15),
        ((0.1, 1.1, 2.9), np.pi * 0.15),
        ((0.1, 1.9, 2.9), np.pi * 0.15),
        ((0.1, 2.1, 2.9), np.pi * 0.15),
        ((0.1, 2.9, 2.9), np.pi * 0.15),
    ]
    cameras = [
        Camera(i + 1, position, fov, fov, xy_angle, np.pi * 1.9)
        for i, (position, xy_angle) in enumerate(wall_cameras)
    ]

    # Far side of the room, mostly facing away from the targets
    cameras += [
        Camera(7, (3.9, 2.9, 2.9), fov, fov, np.pi / 2, np.pi / 2),
        Camera(8, (3.9, 2.0, 2.9), fov, fov, np.pi * 5.4 / 4, np.pi),
        Camera(9, (4.1, 1.1, 2.9), fov, fov, np.pi / 2, np.pi / 2),
        Camera(10, (4.1, 2.9, 2.9), fov, fov, np.pi / 2, np.pi / 2),
        Camera(11, (5.9, 2.9, 2.9), fov, fov, np.pi / 2, np.pi / 2),
        Camera(12, (5.9, 0.1, 2.9), fov, fov, np.pi / 2, np.pi / 2),
    ]

    return Scenario(obstacles, target_areas, cameras)


def _jitter(rng: np.random.Generator, maximum: float) -> float:
    """Uniform draw in [0, maximum) truncated to two decimals."""
    return float(np.trunc(rng.random() * maximum * 100) / 100)


def _wall_panel(rng: np.random.Generator, start, end, z: float):
    """
    Random panel between two grid points on a unit grid line.

    The panel is shrunk by up to 0.4 at each end and by up to 1 at the
    bottom and top.
    """
    (x0, y0), (x1, y1) = start, end
    dx, dy = x1 - x0, y1 - y0
    a = _jitter(rng, 0.4)
    b = _jitter(rng, 0.4)
    c = _jitter(rng, 0.4)
    d = _jitter(rng, 0.4)
    return [
        (x0 + dx * a, y0 + dy * a, _jitter(rng, 1)),
        (x0 + dx * b, y0 + dy * b, z - _jitter(rng, 1)),
        (x1 - dx * c, y1 - dy * c, z - _jitter(rng, 1)),
        (x1 - dx * d, y1 - dy * d, _jitter(rng, 1)),
    ]


def _random_max_aov(rng: np.random.Generator) -> float:
    return np.pi * (_jitter(rng, 0.16667) + 0.25)


def generate_room_scenario(
    width: int = 10,
    height: int = 10,
    obstacle_probability: float = 0.2,
    target_probability: float = 0.03,
    camera_probability: float = 0.01,
    seed: Optional[Union[int, np.random.Generator]] = None,
) -> Scenario:
    """
    Generate a random box room.

    Every unit segment of the interior grid lines may hold a partition
    (with ``obstacle_probability``) or, failing that, a target area (with
    ``target_probability``). Partitions and targets are vertical panels
    between z = 0 and z = 3 with jittered edges; targets get a random
    maximum viewing angle in [pi/4, pi*5/12). Candidate cameras come from
    :func:`create_camera_lattice`, each kept with ``camera_probability``.

    Args:
        width: Room extent along x (integer).
        height: Room extent along y (integer).
        obstacle_probability: Probability of a partition per grid segment.
        target_probability: Probability of a target per remaining segment.
        camera_probability: Probability of keeping each lattice camera.
        seed: Random seed for reproducibility.

    Returns:
        Scenario with walls, partitions, targets and cameras.

    Example:
        >>> scenario = generate_room_scenario(10, 10, seed=42)
        >>> print(f"{len(scenario.target_areas)} targets, {len(scenario.cameras)} cameras")
    """
    if width < 1 or height < 1:
        raise ValueError(f"Room size must be at least 1 x 1, got {width} x {height}")

    rng = np.random.default_rng(seed)
    z = ROOM_HEIGHT

    obstacles = box_walls(width, height, z)
    target_areas = []

    def place(start, end):
        if rng.random() < obstacle_probability:
            obstacles.append(Obstacle(_wall_panel(rng, start, end, z)))
        elif rng.random() < target_probability:
            target_areas.append(TargetArea(
                _wall_panel(rng, start, end, z),
                min_aov=0.0,
                max_aov=_random_max_aov(rng),
            ))

    # Panels on horizontal grid lines y = j
    for i in range(width):
        for j in range(1, height):
            place((i, j), (i + 1, j))

    # Panels on vertical grid lines x = i
    for j in range(height):
        for i in range(1, width):
            place((i, j), (i, j + 1))

    cameras = create_camera_lattice(width, height, probability=camera_probability, seed=rng)

    return Scenario(obstacles, target_areas, cameras)
