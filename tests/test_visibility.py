"""
Tests for coverplan.core.visibility and coverplan.core.sensors modules.

These tests verify the blocking predicates on a wall-mounted cell watched
by a camera two meters in front of it.
"""

import math

import pytest
import numpy as np


def _wall_cell(min_aov=0.0, max_aov=math.pi / 3):
    """1 x 1 cell in the x = 0 plane, spanning y in [0, 1] and z in [1, 2]."""
    from coverplan.scene.models import Cell

    return Cell(1, [(0, 0, 1), (0, 1, 1), (0, 1, 2), (0, 0, 2)], min_aov, max_aov)


def _facing_camera(position=(2, 0.5, 1.5), xy_angle=math.pi, xz_angle=math.pi, camera_id=1):
    """Camera looking along -x towards the wall cell."""
    from coverplan.core.sensors import Camera

    return Camera(camera_id, position, math.pi / 3, math.pi / 3, xy_angle, xz_angle)


def _wall(x):
    """Large opaque wall in the plane x = const."""
    from coverplan.scene.models import Obstacle

    return Obstacle([(x, -1, 0), (x, 2, 0), (x, 2, 3), (x, -1, 3)])


class TestCamera:
    """Tests for Camera class."""

    def test_camera_creation(self):
        """Test basic camera creation."""
        from coverplan.core.sensors import Camera

        cam = Camera(3, [1, 2, 3], 0.5, 0.6, 0.1, 0.2)

        assert cam.id == 3
        assert cam.position == (1.0, 2.0, 3.0)

    def test_invalid_position(self):
        """Test that a 2D position is rejected."""
        from coverplan.core.sensors import Camera

        with pytest.raises(ValueError):
            Camera(1, (0, 0), 0.5, 0.5, 0, 0)

    def test_to_array(self):
        """Test conversion to numpy array."""
        cam = _facing_camera()
        arr = cam.to_array()

        assert arr.shape == (7,)
        assert arr.dtype == np.float64
        assert arr[0] == 2.0
        assert arr[5] == pytest.approx(math.pi)

    def test_serialization(self):
        """Test to_dict and from_dict."""
        from coverplan.core.sensors import Camera

        cam = _facing_camera()
        data = cam.to_dict()

        assert set(data) == {"id", "position", "widthFov", "heightFov", "xyAngle", "xzAngle"}
        assert Camera.from_dict(data) == cam

    def test_degree_properties(self):
        """Test degree conversion properties."""
        cam = _facing_camera()

        assert cam.width_fov_degrees == pytest.approx(60.0)
        assert cam.xy_angle_degrees == pytest.approx(180.0)


class TestCameraGenerators:
    """Tests for create_preset_cameras and create_camera_lattice."""

    def test_default_headings(self):
        """Test the candidate heading set size."""
        from coverplan.core.sensors import DEFAULT_HEADINGS

        assert len(DEFAULT_HEADINGS) == 26

    def test_full_lattice(self):
        """Test that probability 1 keeps every candidate."""
        from coverplan.core.sensors import create_camera_lattice

        cameras = create_camera_lattice(2, 2)

        # 1 interior corner x 4 offsets x 3 heights x 26 headings
        assert len(cameras) == 312
        assert [c.id for c in cameras] == list(range(1, 313))

    def test_lattice_reproducible(self):
        """Test seeded sampling."""
        from coverplan.core.sensors import create_camera_lattice

        a = create_camera_lattice(4, 3, probability=0.1, seed=5)
        b = create_camera_lattice(4, 3, probability=0.1, seed=5)

        assert a == b
        assert len(a) < 6 * 312

    def test_preset_look_at(self):
        """Test cameras are aimed at the look-at point."""
        from coverplan.core.sensors import create_preset_cameras

        cameras = create_preset_cameras([(2, 0.5, 1.5), (0, 0, 0)], look_at=(0, 0.5, 1.5), start_id=5)

        assert [c.id for c in cameras] == [5, 6]
        assert cameras[0].xy_angle == pytest.approx(math.pi)
        assert cameras[0].xz_angle == pytest.approx(math.pi)


class TestAngles:
    """Tests for angle helpers."""

    def test_angle_from_horizon(self):
        """Test angles are measured from +x in [0, 2*pi)."""
        from coverplan.core.visibility import angle_from_horizon

        assert angle_from_horizon(1, 0) == pytest.approx(0)
        assert angle_from_horizon(0, 1) == pytest.approx(math.pi / 2)
        assert angle_from_horizon(-1, 0) == pytest.approx(math.pi)
        assert angle_from_horizon(0, -1) == pytest.approx(3 * math.pi / 2)

    def test_angle_on_negative_x_axis(self):
        """Test an offset along -x resolves to pi, not 0."""
        from coverplan.core.visibility import angle_from_horizon

        assert angle_from_horizon(-1, 0) == pytest.approx(math.pi)
        assert angle_from_horizon(-2.5, 0.0) == pytest.approx(math.pi)

    def test_zero_offset(self):
        """Test a zero offset maps to 0 and is checked against the heading."""
        from coverplan.core.visibility import angle_from_horizon, fov_test

        assert angle_from_horizon(0, 0) == 0.0

        # Corner (0, 0, 1) lies straight below the camera in the xy plane
        camera = _facing_camera(position=(0, 0, 3))
        assert fov_test(camera, _wall_cell().points)

    def test_angular_distance_wraps(self):
        """Test distance across the 0 / 2*pi seam."""
        from coverplan.core.visibility import angular_distance

        assert angular_distance(0.1, 2 * math.pi - 0.1) == pytest.approx(0.2)
        assert angular_distance(0, math.pi) == pytest.approx(math.pi)


class TestOcclusion:
    """Tests for occlusion_test."""

    def test_wall_between_blocks(self):
        """Test an obstacle between camera and cell occludes it."""
        from coverplan.core.visibility import occlusion_test

        assert occlusion_test((2, 0.5, 1.5), _wall(1).points, _wall_cell().points)

    def test_wall_behind_camera(self):
        """Test an obstacle behind the camera does not occlude."""
        from coverplan.core.visibility import occlusion_test

        assert not occlusion_test((2, 0.5, 1.5), _wall(3).points, _wall_cell().points)

    def test_small_obstacle_off_sightlines(self):
        """Test an obstacle beside the sightlines does not occlude."""
        from coverplan.core.visibility import occlusion_test

        obstacle = [(1, 5, 0), (1, 6, 0), (1, 6, 1), (1, 5, 1)]
        assert not occlusion_test((2, 0.5, 1.5), obstacle, _wall_cell().points)


class TestFieldOfView:
    """Tests for fov_test."""

    def test_facing_camera_sees_cell(self):
        """Test a camera aimed at the cell."""
        from coverplan.core.visibility import fov_test

        assert not fov_test(_facing_camera(), _wall_cell().points)

    def test_turned_away_camera(self):
        """Test a camera aimed along +x, away from the cell."""
        from coverplan.core.visibility import fov_test

        assert fov_test(_facing_camera(xy_angle=0.0), _wall_cell().points)

    def test_tilted_camera(self):
        """Test the vertical heading is checked independently."""
        from coverplan.core.visibility import fov_test

        assert fov_test(_facing_camera(xz_angle=math.pi / 2), _wall_cell().points)


class TestAngleOfView:
    """Tests for angle_of_view_test."""

    def test_within_band(self):
        """Test a moderate viewing angle passes."""
        from coverplan.core.visibility import angle_of_view_test

        assert not angle_of_view_test((2, 0.5, 1.5), _wall_cell())

    def test_too_steep(self):
        """Test a camera almost on the plane is blocked."""
        from coverplan.core.visibility import angle_of_view_test

        assert angle_of_view_test((0.1, 0.5, 1.5), _wall_cell())

    def test_below_min_aov(self):
        """Test the lower bound of the band."""
        from coverplan.core.visibility import angle_of_view_test

        # Nearest edge subtends atan(0.5 / 2) ~ 0.245 rad
        assert angle_of_view_test((2, 0.5, 1.5), _wall_cell(min_aov=0.3))


class TestCoverage:
    """Tests for is_covered and compute_visibility."""

    def test_unobstructed_pair_is_covered(self):
        """Test an otherwise unconstrained pair without obstacles."""
        from coverplan.core.visibility import is_covered

        assert is_covered(_facing_camera(), _wall_cell(), [])

    def test_obstacle_removes_coverage(self):
        """Test adding an opaque wall in between."""
        from coverplan.core.visibility import is_covered

        assert not is_covered(_facing_camera(), _wall_cell(), [_wall(1)])
        assert is_covered(_facing_camera(), _wall_cell(), [_wall(3)])

    def test_compute_visibility(self):
        """Test the nested camera -> cell map."""
        from coverplan.core.visibility import compute_visibility

        cameras = [_facing_camera(), _facing_camera(xy_angle=0.0, camera_id=2)]
        rows = compute_visibility([_wall_cell()], cameras, [])

        assert rows == {1: {1: True}, 2: {1: False}}
