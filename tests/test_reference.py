"""Tests for reference-point ordering."""
import numpy as np
import pytest

from colorboard.errors import DetectionError, OrderingError
from colorboard.geometry.reference import (
    interior_angles,
    is_convex,
    order_reference_points,
)


class TestInteriorAngles:

    def test_square(self):
        angles = interior_angles([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert angles == pytest.approx([90.0] * 4)

    def test_reflex_vertex(self):
        # Dart: vertex 2 points inwards
        angles = interior_angles([(0, 0), (10, 0), (4, 4), (0, 10)])
        assert angles[2] > 180.0
        assert sum(angles) == pytest.approx(360.0)

    def test_convexity(self):
        assert is_convex([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert not is_convex([(0, 0), (10, 10), (10, 0), (0, 10)])
        assert not is_convex([(0, 0), (10, 0), (4, 4), (0, 10)])


class TestOrderReferencePoints:
    """Test suite for choosing a convex cyclic order."""

    def test_identity_when_already_convex(self):
        quad = order_reference_points((0, 0), [(10, 0), (10, 10), (0, 10)])
        assert quad.order == (0, 1, 2, 3)

    def test_swaps_middle_points(self):
        quad = order_reference_points((0, 0), [(10, 10), (10, 0), (0, 10)])
        assert quad.order == (0, 2, 1, 3)
        assert quad.points == ((0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0))
        assert all(a < 180.0 for a in interior_angles(quad.points))

    def test_swaps_last_points(self):
        quad = order_reference_points((0, 0), [(10, 0), (0, 10), (10, 10)])
        assert quad.order == (0, 1, 3, 2)

    def test_surplus_markers_are_discarded(self):
        quad = order_reference_points(
            (0, 0), [(10, 0), (10, 10), (0, 10), (500, 500)],
        )
        assert (500.0, 500.0) not in quad.points

    def test_insufficient_markers(self):
        with pytest.raises(DetectionError):
            order_reference_points((0, 0), [(10, 0), (10, 10)])

    def test_point_inside_triangle(self):
        with pytest.raises(OrderingError):
            order_reference_points((5, 3), [(0, 0), (10, 0), (5, 10)])

    def test_collinear_points(self):
        with pytest.raises(OrderingError):
            order_reference_points((0, 0), [(1, 1), (2, 2), (3, 3)])

    def test_as_array(self):
        quad = order_reference_points((0, 0), [(10, 0), (10, 10), (0, 10)])
        arr = quad.as_array()
        assert arr.shape == (4, 2)
        assert arr.dtype == np.float32
