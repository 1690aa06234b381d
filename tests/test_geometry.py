"""Unit tests for geometry module."""

import pytest

from boxpleat.errors import OrthogonalityViolation
from boxpleat.geometry import (
    BoundingBox,
    LineSegment,
    OrthogonalLine,
    Ring,
    cross,
    is_left_turn,
    point_in_polygon,
    point_on_polyline,
    point_on_segment,
    polyline_length,
    shift_axis,
    signed_area,
    to_grid_point,
    unit_shift,
)


class TestBasicGeometry:
    """Test basic geometry functions."""

    def test_signed_area_ccw(self):
        """CCW polygon should have positive area."""
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        assert signed_area(square) == pytest.approx(100.0)

    def test_signed_area_cw(self):
        """CW polygon should have negative area."""
        square = [(0, 0), (0, 10), (10, 10), (10, 0)]
        assert signed_area(square) == pytest.approx(-100.0)

    def test_left_turn(self):
        """Counter-clockwise corner is a left turn."""
        assert is_left_turn((0, 0), (10, 0), (10, 10)) is True
        assert is_left_turn((0, 0), (10, 0), (10, -10)) is False

    def test_cross_collinear(self):
        """Collinear points have zero cross product."""
        assert cross((0, 0), (10, 0), (20, 0)) == 0

    def test_point_in_polygon_inside(self):
        """Point inside polygon should return True."""
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        assert point_in_polygon((5, 5), square) is True

    def test_point_in_polygon_outside(self):
        """Point outside polygon should return False."""
        square = [(0, 0), (10, 0), (10, 10), (0, 10)]
        assert point_in_polygon((15, 5), square) is False

    def test_point_in_polygon_notch(self, arch):
        """Point in a notch is outside."""
        assert point_in_polygon((30, 10), arch) is False
        assert point_in_polygon((30, 30), arch) is True

    def test_polyline_length(self):
        """Length sums axis-aligned edges."""
        assert polyline_length([(0, 0), (20, 0), (20, 40)]) == 60
        assert polyline_length([(5, 5)]) == 0


class TestShifts:
    """Tests for growth shifts."""

    def test_unit_shift_directions(self):
        """Shift points along the edge with pitch magnitude."""
        assert unit_shift((40, 20), (20, 20), 20) == (-20, 0)
        assert unit_shift((20, 0), (20, 60), 20) == (0, 20)
        assert unit_shift((0, 0), (0, -5), 10) == (0, -10)

    def test_unit_shift_diagonal(self):
        """Diagonal edge has no shift."""
        with pytest.raises(OrthogonalityViolation):
            unit_shift((0, 0), (20, 20), 20)

    def test_unit_shift_zero_length(self):
        """Zero-length edge has no shift."""
        with pytest.raises(OrthogonalityViolation):
            unit_shift((0, 0), (0, 0), 20)

    def test_shift_axis(self):
        """Axis is the non-zero component."""
        assert shift_axis((20, 0)) == 'x'
        assert shift_axis((0, -20)) == 'y'


class TestSegments:
    """Tests for point/segment predicates."""

    def test_point_on_segment(self):
        """Endpoints and interior points are on the segment."""
        assert point_on_segment((0, 0), (0, 0), (0, 20))
        assert point_on_segment((0, 10), (0, 0), (0, 20))
        assert point_on_segment((0, 20), (0, 20), (0, 0))
        assert not point_on_segment((1, 10), (0, 0), (0, 20))
        assert not point_on_segment((0, 30), (0, 0), (0, 20))

    def test_point_on_segment_diagonal(self):
        """Diagonal segments are rejected."""
        with pytest.raises(OrthogonalityViolation):
            point_on_segment((5, 5), (0, 0), (10, 10))

    def test_point_on_polyline(self):
        """Any edge counts."""
        polyline = [(40, 20), (20, 20), (20, 40)]
        assert point_on_polyline((30, 20), polyline)
        assert point_on_polyline((20, 35), polyline)
        assert not point_on_polyline((30, 30), polyline)


class TestToGridPoint:
    """Tests for input coordinate conversion."""

    def test_integral_float(self):
        """Integral floats become ints."""
        point = to_grid_point([20.0, 40])
        assert point == (20, 40)
        assert all(isinstance(v, int) for v in point)

    def test_fractional_float(self):
        """Fractional coordinates are rejected."""
        with pytest.raises(ValueError):
            to_grid_point((20.5, 0))

    def test_bool_rejected(self):
        """Booleans are not coordinates."""
        with pytest.raises(ValueError):
            to_grid_point((True, 0))

    def test_wrong_arity(self):
        """Points need exactly two values."""
        with pytest.raises(ValueError):
            to_grid_point((1, 2, 3))


class TestRing:
    """Tests for circular indexing."""

    def test_wraparound(self):
        """Indexing wraps in both directions."""
        ring = Ring([(0, 0), (1, 0), (1, 1)])
        assert ring[3] == (0, 0)
        assert ring[-1] == (1, 1)
        assert ring.prev_index(0) == 2
        assert ring.next_index(2) == 0

    def test_neighbors(self):
        """Neighbors of the first vertex wrap around."""
        ring = Ring([(0, 0), (1, 0), (1, 1)])
        assert ring.neighbors(0) == ((1, 1), (1, 0))

    def test_edges_include_closing(self):
        """Edges close the ring."""
        ring = Ring([(0, 0), (1, 0), (1, 1)])
        assert ring.edges()[-1] == ((1, 1), (0, 0))

    def test_rotated(self):
        """Rotation walks forward."""
        ring = Ring(['a', 'b', 'c', 'd'])
        assert ring.rotated(2) == ('c', 'd', 'a', 'b')


class TestOrthogonalLine:
    """Tests for OrthogonalLine."""

    def test_vertical_line(self):
        """Axis 'x' holds x constant."""
        line = OrthogonalLine('x', 20)
        assert line.is_vertical
        assert line.project((60, 40)) == (20, 40)
        assert str(line) == "x=20"

    def test_horizontal_line(self):
        """Axis 'y' holds y constant."""
        line = OrthogonalLine('y', 60)
        assert not line.is_vertical
        assert line.project((20, 40)) == (20, 60)

    def test_hashable(self):
        """Lines group dictionary entries."""
        assert OrthogonalLine('x', 20) == OrthogonalLine('x', 20)
        assert len({OrthogonalLine('x', 20), OrthogonalLine('x', 20), OrthogonalLine('y', 20)}) == 2


class TestLineSegment:
    """Tests for LineSegment."""

    def test_rejects_diagonal(self):
        """Diagonal segments cannot be built."""
        with pytest.raises(OrthogonalityViolation):
            LineSegment((0, 0), (20, 20))

    def test_properties(self):
        """Length, orientation and line."""
        seg = LineSegment((40, 20), (20, 20))
        assert seg.length == 20
        assert not seg.is_vertical
        assert seg.line == OrthogonalLine('y', 20)
        assert seg.midpoint == (30.0, 20.0)

    def test_normalized(self):
        """Normalization orders endpoints."""
        seg = LineSegment((40, 20), (20, 20))
        assert seg.normalized() == LineSegment((20, 20), (40, 20))
        assert seg.normalized().normalized() == seg.normalized()


class TestBoundingBox:
    """Tests for BoundingBox."""

    def test_from_points(self):
        """Box spans all points."""
        bbox = BoundingBox.from_points([(0, 10), (40, 0), (20, 60)])
        assert (bbox.min_x, bbox.min_y, bbox.max_x, bbox.max_y) == (0, 0, 40, 60)
        assert bbox.width == 40
        assert bbox.height == 60

    def test_spanning(self):
        """Opposite corners in any order."""
        assert BoundingBox.spanning((40, 60), (20, 20)) == BoundingBox(20, 20, 40, 60)

    def test_corners_ccw(self):
        """Corners start bottom-left and run counter-clockwise."""
        corners = BoundingBox(0, 0, 40, 20).corners()
        assert corners == [(0, 0), (40, 0), (40, 20), (0, 20)]
        assert signed_area(corners) > 0

    def test_touches(self):
        """Points on a side touch the box."""
        bbox = BoundingBox(0, 0, 60, 60)
        assert bbox.touches((60, 40))
        assert bbox.touches((20, 0))
        assert not bbox.touches((20, 20))

    def test_overlaps_interior(self):
        """Boxes sharing only a side do not overlap."""
        a = BoundingBox(0, 0, 20, 20)
        assert BoundingBox(10, 10, 30, 30).overlaps_interior(a)
        assert not BoundingBox(20, 0, 40, 20).overlaps_interior(a)

    def test_interior_hits_segment(self):
        """Only segments through the open interior hit."""
        bbox = BoundingBox(20, 20, 60, 60)
        assert bbox.interior_hits_segment((40, 0), (40, 40))
        assert not bbox.interior_hits_segment((20, 0), (20, 60))
        assert not bbox.interior_hits_segment((0, 40), (20, 40))

    def test_on_boundary(self):
        """Segments along a side with positive overlap are on the boundary."""
        bbox = BoundingBox(20, 20, 60, 60)
        assert bbox.on_boundary((60, 20), (40, 20))
        assert bbox.on_boundary((20, 0), (20, 40))
        assert not bbox.on_boundary((20, 60), (20, 80))
        assert not bbox.on_boundary((40, 20), (40, 60))

    def test_expand(self):
        """Expansion pushes right and top sides."""
        assert BoundingBox(0, 0, 60, 40).expand(80, 0) == BoundingBox(0, 0, 140, 40)
