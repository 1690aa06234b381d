"""
Unit tests for decompose module.

Tests the three-part split of concave polylines and the breadth-first
recursion over sub-polylines.
"""

import pytest

from boxpleat.concave import extract_concave_parts
from boxpleat.config import PleatConfig
from boxpleat.decompose import ThreePart, decompose_all, decompose_part, split_on_boundary
from boxpleat.errors import IterationLimitExceeded, SplitPointNotOnBoundary
from boxpleat.geometry import BoundingBox, polyline_length
from boxpleat.preprocess import normalize_polygon


def _decompose(points, config=None):
    config = config or PleatConfig()
    polygon = normalize_polygon(points, config)
    return decompose_all(extract_concave_parts(polygon), polygon, config)


def _check_partition(node: ThreePart):
    pieces = list(node.left_part) + list(node.center_part) + list(node.right_part)
    for vertex in node.source:
        assert vertex in pieces
        if vertex not in (node.near, node.far):
            assert pieces.count(vertex) == 1


class TestSingleSplit:
    """Tests for one decomposition step."""

    def test_l_hexagon(self, l_hexagon):
        """Non-parallel entrance squares the rectangle and leaves no centre."""
        nodes = _decompose(l_hexagon)
        assert len(nodes) == 1
        node = nodes[0]
        assert node.shift == (-20, 0)
        assert node.rectangle == BoundingBox(20, 20, 40, 40)
        assert node.near == (20, 20)
        assert node.far == (20, 40)
        assert node.left_part == ((40, 20), (20, 20))
        assert node.center_part == ()
        assert node.right_part == ((20, 40),)
        assert node.index == 0
        assert node.parent is None
        assert node.root == 0

    def test_u_shape_parallel_entrance(self, u_shape):
        """Parallel entrance grows the full slot depth."""
        nodes = _decompose(u_shape)
        assert len(nodes) == 1
        node = nodes[0]
        assert node.shift == (0, -20)
        assert node.rectangle == BoundingBox(20, 20, 40, 60)
        assert node.near == (40, 20)
        assert node.far == (20, 20)
        assert node.left_part == ((40, 60), (40, 20))
        assert node.right_part == ((20, 20), (20, 60))
        assert node.center_part == ()

    def test_arch(self, arch):
        """Notch in the bottom edge grows upward."""
        nodes = _decompose(arch)
        assert len(nodes) == 1
        assert nodes[0].shift == (0, 20)
        assert nodes[0].rectangle == BoundingBox(20, 0, 40, 20)

    def test_plus_four_roots(self, plus_shape):
        """Each plus notch is its own root."""
        nodes = _decompose(plus_shape)
        assert len(nodes) == 4
        assert [n.root for n in nodes] == [0, 1, 2, 3]
        assert all(n.parent is None for n in nodes)
        assert all(n.center_part == () for n in nodes)
        assert [n.shift for n in nodes] == [(-20, 0), (0, -20), (20, 0), (0, 20)]

    def test_partition(self, plus_shape, u_shape, staircase):
        """Sub-polylines partition their source."""
        for points in (plus_shape, u_shape, staircase):
            for node in _decompose(points):
                _check_partition(node)


class TestRecursion:
    """Tests for the work queue."""

    def test_staircase_recurses_right(self, staircase):
        """Second step is decomposed from the first node's right part."""
        nodes = _decompose(staircase)
        assert len(nodes) == 2
        root, child = nodes
        assert root.right_part == ((40, 40), (20, 40), (20, 60))
        assert child.index == 1
        assert child.parent == 0
        assert child.root == 0
        assert child.source == root.right_part
        assert child.shift == root.shift
        assert child.rectangle == BoundingBox(20, 40, 40, 60)
        assert child.near == (20, 40)
        assert child.far == (20, 60)

    def test_children_shrink(self, staircase):
        """Every child is strictly shorter than its parent."""
        nodes = _decompose(staircase)
        for node in nodes:
            if node.parent is not None:
                parent = nodes[node.parent]
                assert polyline_length(node.source) < polyline_length(parent.source)

    def test_rectangles_do_not_overlap(self, staircase):
        """Descendants never grow into their ancestors' rectangles."""
        nodes = _decompose(staircase)
        assert not nodes[1].rectangle.overlaps_interior(nodes[0].rectangle)

    def test_rectangle_has_no_nodes(self, rectangle):
        """No concave part, no node."""
        assert _decompose(rectangle) == []


class TestDegenerate:
    """Tests for the single inset corner case."""

    def test_closed_polyline(self, u_shape):
        """Start equal to end grows a ray and splits at its end."""
        polygon = normalize_polygon(u_shape)
        polyline = ((40, 60), (40, 20), (20, 20), (20, 60), (40, 60))
        node = decompose_part(polyline, polygon, PleatConfig())
        assert node.is_degenerate
        assert node.near == node.far == (40, 20)
        assert node.left_part == ((40, 60), (40, 20))
        assert node.center_part == ()
        assert node.right_part == ((40, 20), (20, 20), (20, 60), (40, 60))
        assert node.rectangle == BoundingBox(40, 20, 40, 60)

    def test_ray_end_off_polyline(self, u_shape):
        """Ray ending away from the polyline is rejected."""
        polygon = normalize_polygon(u_shape)
        polyline = ((40, 60), (40, 50), (30, 50), (30, 60), (40, 60))
        with pytest.raises(SplitPointNotOnBoundary):
            decompose_part(polyline, polygon, PleatConfig())


class TestLimits:
    """Tests for search ceilings."""

    def test_growth_limit(self, u_shape):
        """Growth past max_iterations fails."""
        with pytest.raises(IterationLimitExceeded) as exc_info:
            _decompose(u_shape, PleatConfig(max_iterations=1))
        assert exc_info.value.component == "decompose"

    def test_node_limit(self, staircase):
        """More nodes than max_nodes fails."""
        with pytest.raises(IterationLimitExceeded):
            _decompose(staircase, PleatConfig(max_nodes=1))

    def test_short_polyline(self, u_shape):
        """Two points cannot be decomposed."""
        polygon = normalize_polygon(u_shape)
        with pytest.raises(ValueError):
            decompose_part(((40, 60), (40, 20)), polygon, PleatConfig())


class TestSplitOnBoundary:
    """Tests for split_on_boundary."""

    def test_trims_both_ends(self):
        """Edges along the rectangle are removed from either end."""
        rect = BoundingBox(20, 20, 40, 60)
        polyline = ((40, 60), (40, 20), (20, 20), (20, 0), (0, 0))
        assert split_on_boundary(polyline, rect) == [((20, 20), (20, 0), (0, 0))]

    def test_keeps_outside_edges(self):
        """Edges leaving the rectangle stay."""
        rect = BoundingBox(20, 40, 40, 60)
        assert split_on_boundary(((40, 40), (20, 40), (20, 60)), rect) == []
        polyline = ((0, 0), (0, 20), (10, 20))
        assert split_on_boundary(polyline, rect) == [polyline]

    def test_cuts_mid_run(self):
        """An edge on the rectangle inside the run separates two pockets."""
        rect = BoundingBox(40, 0, 60, 100)
        polyline = ((40, 0), (40, 20), (20, 20), (20, 40), (40, 40),
                    (40, 80), (20, 80), (20, 100), (40, 100))
        assert split_on_boundary(polyline, rect) == [
            ((40, 20), (20, 20), (20, 40), (40, 40)),
            ((40, 80), (20, 80), (20, 100), (40, 100)),
        ]


class TestMultiplePockets:
    """Tests for parts that touch the carved rectangle mid-run."""

    def test_comb(self, comb):
        """Each notch of the comb becomes its own node."""
        nodes = _decompose(comb)
        assert len(nodes) == 3
        assert nodes[0].rectangle == BoundingBox(40, 0, 60, 100)
        assert nodes[0].children() == [
            ((40, 20), (20, 20), (20, 40), (40, 40)),
            ((40, 80), (20, 80), (20, 100), (40, 100)),
        ]
        assert nodes[1].rectangle == BoundingBox(20, 20, 40, 40)
        assert nodes[2].rectangle == BoundingBox(20, 80, 40, 100)
        assert [n.parent for n in nodes] == [None, 0, 0]

    def test_comb_root_folds_nothing(self, comb):
        """A side part that recurses leaves its demand to the children."""
        root = _decompose(comb)[0]
        assert root.recurses(root.left_part)
        assert not root.recurses(root.right_part)

    def test_uneven_e(self, uneven_e):
        """The re-closed center of an E is split at its short middle arm."""
        nodes = _decompose(uneven_e)
        assert len(nodes) == 3
        assert nodes[0].rectangle == BoundingBox(40, 20, 60, 80)
        assert nodes[0].center_part == ((20, 20), (20, 40), (40, 40), (40, 60), (20, 60), (20, 80))
        assert [n.source for n in nodes[1:]] == [
            ((40, 20), (20, 20), (20, 40), (40, 40)),
            ((40, 60), (20, 60), (20, 80), (40, 80)),
        ]
        for node in nodes:
            _check_partition(node)
