"""
Tests for coverplan.core.geometry module.

These tests verify plane bases, grid generation and point-in-polygon tests.
"""

import pytest
import numpy as np


UNIT_SQUARE = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)]


class TestVectorAlgebra:
    """Tests for the vector helpers."""

    def test_cross_and_dot(self):
        """Test cross product orthogonality."""
        from coverplan.core.geometry import cross, dot

        a = (1.0, 2.0, 3.0)
        b = (-2.0, 0.5, 4.0)
        c = cross(a, b)

        assert abs(dot(a, c)) < 1e-12
        assert abs(dot(b, c)) < 1e-12

    def test_centroid(self):
        """Test centroid of a square."""
        from coverplan.core.geometry import centroid

        np.testing.assert_allclose(centroid(UNIT_SQUARE), (0.5, 0.5, 0.0))


class TestOrthonormalBasis:
    """Tests for orthonormal_basis."""

    def test_basis_is_orthonormal(self):
        """Test v1, v2 are unit length, orthogonal and in the plane."""
        from coverplan.core.geometry import dot, norm, orthonormal_basis

        normal, v1, v2 = orthonormal_basis((0, 0, 0), (2, 0, 0), (0, 3, 0))

        assert abs(norm(v1) - 1) < 1e-12
        assert abs(norm(v2) - 1) < 1e-12
        assert abs(dot(v1, v2)) < 1e-12
        assert abs(dot(v1, normal)) < 1e-12
        assert abs(dot(v2, normal)) < 1e-12

    def test_v1_follows_first_edge(self):
        """Test v1 is the normalized first edge."""
        from coverplan.core.geometry import orthonormal_basis

        _, v1, _ = orthonormal_basis((1, 1, 1), (1, 1, 4), (1, 2, 1))
        np.testing.assert_allclose(v1, (0, 0, 1))


class TestPolygonToGrid:
    """Tests for polygon_to_grid."""

    def test_unit_square_half_step(self):
        """Test a unit square split into 4 cells."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import polygon_to_grid

        rectangle, cells = polygon_to_grid(GridResolution(0.5, 0.5), UNIT_SQUARE)

        assert len(cells) == 4
        np.testing.assert_allclose(rectangle, UNIT_SQUARE, atol=1e-12)
        for cell in cells:
            assert len(cell) == 4

    def test_unit_square_quarter_step(self):
        """Test a unit square split into 16 cells."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import polygon_to_grid

        _, cells = polygon_to_grid(GridResolution(0.25, 0.25), UNIT_SQUARE)
        assert len(cells) == 16

    def test_centroids_inside_polygon(self):
        """Test every generated cell has its centroid inside the polygon."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import centroid, point_in_polygon_3d, polygon_to_grid

        polygon = [(1, 2.2, 1.7), (1, 2.2, 2.3), (1, 2.8, 1.9), (1, 2.8, 0.7)]
        _, cells = polygon_to_grid(GridResolution(0.1, 0.1), polygon)

        assert len(cells) > 0
        for cell in cells:
            assert point_in_polygon_3d(polygon, centroid(cell))

    def test_cells_do_not_overlap(self):
        """Test cell centroids are distinct and at least one step apart."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import centroid, polygon_to_grid

        _, cells = polygon_to_grid(GridResolution(0.25, 0.25), UNIT_SQUARE)
        centers = np.array([centroid(cell) for cell in cells])

        for i in range(len(centers)):
            for j in range(i + 1, len(centers)):
                assert np.abs(centers[i] - centers[j]).max() >= 0.25 - 1e-9

    def test_vertical_polygon(self):
        """Test a wall-mounted target in the x = 1 plane."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import polygon_to_grid

        polygon = [(1, 0, 0), (1, 0, 1), (1, 1, 1), (1, 1, 0)]
        _, cells = polygon_to_grid(GridResolution(0.5, 0.5), polygon)

        assert len(cells) == 4
        for cell in cells:
            for point in cell:
                assert abs(point[0] - 1) < 1e-12

    def test_non_planar_polygon_raises(self):
        """Test that a non-planar polygon is rejected."""
        from coverplan.config.settings import GridResolution
        from coverplan.core.geometry import GeometryError, polygon_to_grid

        polygon = [(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 1)]
        with pytest.raises(GeometryError):
            polygon_to_grid(GridResolution(0.5, 0.5), polygon)

    def test_geometry_error_is_value_error(self):
        """Test GeometryError can be caught as ValueError."""
        from coverplan.core.geometry import GeometryError

        assert issubclass(GeometryError, ValueError)


class TestPointInPolygon:
    """Tests for point_in_polygon_3d and point_in_polygon_2d."""

    def test_inside(self):
        """Test a point in the middle of the square."""
        from coverplan.core.geometry import point_in_polygon_3d

        assert point_in_polygon_3d(UNIT_SQUARE, (0.5, 0.5, 0))

    def test_outside(self):
        """Test a point to the right of the square."""
        from coverplan.core.geometry import point_in_polygon_3d

        assert not point_in_polygon_3d(UNIT_SQUARE, (1.5, 0.5, 0))

    def test_on_edge(self):
        """Test a point on the left edge counts as inside."""
        from coverplan.core.geometry import point_in_polygon_3d

        assert point_in_polygon_3d(UNIT_SQUARE, (0, 0.5, 0))

    def test_on_vertex(self):
        """Test a vertex counts as inside."""
        from coverplan.core.geometry import point_in_polygon_2d

        square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        assert point_in_polygon_2d(square, (1, 1))

    def test_on_horizontal_edge(self):
        """Test a point on a horizontal edge counts as inside."""
        from coverplan.core.geometry import point_in_polygon_2d

        square = [(0, 0), (1, 0), (1, 1), (0, 1)]
        assert point_in_polygon_2d(square, (0.5, 1))

    def test_vertical_plane(self):
        """Test projection for a polygon in the x = 1 plane."""
        from coverplan.core.geometry import point_in_polygon_3d

        wall = [(1, 0, 0), (1, 0, 1), (1, 1, 1), (1, 1, 0)]
        assert point_in_polygon_3d(wall, (1, 0.5, 0.5))
        assert not point_in_polygon_3d(wall, (1, 0.5, 1.5))

    def test_concave_polygon(self):
        """Test an L-shaped polygon."""
        from coverplan.core.geometry import point_in_polygon_2d

        l_shape = [(0, 0), (2, 0), (2, 1), (1, 1), (1, 2), (0, 2)]
        assert point_in_polygon_2d(l_shape, (0.5, 1.5))
        assert not point_in_polygon_2d(l_shape, (1.5, 1.5))
