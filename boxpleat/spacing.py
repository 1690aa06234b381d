"""
Local spacing demands and segment consolidation.

Every sub-polyline that is folded as is (not decomposed further) asks for a
strip of extra paper next to its terminal segment: enough to cover its own
length, one pitch per reflex corner, and one more pitch when it leaves the
pocket parallel to the growth direction.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import PleatConfig
from .decompose import ThreePart
from .errors import SplitPointNotOnBoundary
from .geometry import (
    LineSegment,
    OrthogonalLine,
    Point,
    Polyline,
    Shift,
    cross,
    is_left_turn,
    point_on_segment,
    polyline_length,
)
from .preprocess import CanonicalPolygon


# Sides of a grid line a strip can be inserted on
SIDES = ('left', 'right', 'bottom', 'top')
VERTICAL_SIDES = ('left', 'right')
HORIZONTAL_SIDES = ('bottom', 'top')


@dataclass(frozen=True)
class DividingDemand:
    """
    Extra paper requested next to one boundary segment.

    Attributes:
        segment: Normalized terminal segment the strip is attached to
        left, right, top, bottom: Budget on each side of the segment's line
        polyline: Sub-polyline the demand comes from
        anchors: Far endpoints (split points) of the contributing polylines
        node: Index of the ThreePart the demand was derived from
    """
    segment: LineSegment
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0
    polyline: Polyline = ()
    anchors: tuple[Point, ...] = ()
    node: Optional[int] = None

    @property
    def horizontal(self) -> int:
        """Envelope across vertical lines (left + right)."""
        return self.left + self.right

    @property
    def vertical(self) -> int:
        """Envelope across horizontal lines (bottom + top)."""
        return self.top + self.bottom

    @property
    def line(self) -> OrthogonalLine:
        return self.segment.line

    @property
    def total(self) -> int:
        return self.horizontal + self.vertical

    def budget(self, side: str) -> int:
        if side not in SIDES:
            raise ValueError(f"unknown side {side!r}")
        return getattr(self, side)


# =============================================================================
# Sides
# =============================================================================

def travel_side(a: Point, b: Point) -> str:
    """
    Exterior side of a counter-clockwise boundary edge traversed a -> b.

    The polygon interior is on the left of the travel direction.
    """
    if a[0] == b[0]:
        probe = (a[0] + 1, a[1])
        return 'left' if is_left_turn(a, b, probe) else 'right'
    probe = (a[0], a[1] + 1)
    return 'bottom' if is_left_turn(a, b, probe) else 'top'


def exterior_side(segment: LineSegment, polygon: CanonicalPolygon) -> str:
    """Side of a boundary segment facing away from the polygon."""
    mid = segment.midpoint
    for a, b in polygon.edges():
        if point_on_segment(mid, a, b):
            return travel_side(a, b)
    raise SplitPointNotOnBoundary(
        f"segment {segment.start} - {segment.end} is not on the polygon boundary",
        component="spacing",
        fragment=(segment.start, segment.end),
    )


# =============================================================================
# Local demands
# =============================================================================

def count_reflex(points: Sequence[Point]) -> int:
    """Interior vertices where the counter-clockwise boundary turns right."""
    count = 0
    for i in range(1, len(points) - 1):
        prev, here, nxt = points[i - 1], points[i], points[i + 1]
        if cross(prev, here, nxt) != 0 and not is_left_turn(prev, here, nxt):
            count += 1
    return count


def part_demand(points: Sequence[Point], terminal: tuple[Point, Point],
                shift: Shift, pitch: int) -> int:
    """
    Paper a sub-polyline needs to fold flat.

    Length, plus one pitch per reflex corner, plus one pitch when the terminal
    edge runs parallel to the growth shift.
    """
    if len(points) < 2:
        return 0
    amount = polyline_length(points) + pitch * count_reflex(points)
    a, b = terminal
    parallel = (a[0] == b[0]) == (shift[0] == 0)
    if parallel:
        amount += pitch
    return amount


def _terminals(node: ThreePart) -> list[tuple[Polyline, tuple[Point, Point], Point]]:
    """(polyline, terminal segment, far endpoint) for each folded side part."""
    result = []
    left, right = node.left_part, node.right_part
    if len(left) >= 2 and not node.recurses(left):
        result.append((left, (left[-2], left[-1]), left[-1]))
    if len(right) >= 2 and not node.recurses(right):
        result.append((right, (right[0], right[1]), right[0]))
    return result


def local_demands(nodes: Sequence[ThreePart], polygon: CanonicalPolygon,
                  config: Optional[PleatConfig] = None) -> list[DividingDemand]:
    """
    Derive one demand per folded side part of every node.

    Returns:
        DividingDemand records in node order, left part before right part
    """
    config = config or PleatConfig()
    demands = []

    for node in nodes:
        for points, (a, b), anchor in _terminals(node):
            amount = part_demand(points, (a, b), node.shift, config.pitch)
            if amount == 0:
                continue
            segment = LineSegment(a, b)
            side = exterior_side(segment, polygon)
            demands.append(DividingDemand(
                segment=segment.normalized(),
                polyline=points,
                anchors=(anchor,),
                node=node.index,
                **{side: amount},
            ))

    return demands


# =============================================================================
# Consolidation
# =============================================================================

def _join(a: Polyline, b: Polyline) -> Optional[Polyline]:
    """Concatenate two polylines at a shared endpoint, or None."""
    if a[-1] == b[0]:
        return a + b[1:]
    if b[-1] == a[0]:
        return b + a[1:]
    if a[0] == b[0]:
        return tuple(reversed(a)) + b[1:]
    if a[-1] == b[-1]:
        return a + tuple(reversed(b))[1:]
    return None


def _merge(a: DividingDemand, b: DividingDemand, joined: Polyline) -> DividingDemand:
    return DividingDemand(
        segment=a.segment,
        left=a.left + b.left,
        right=a.right + b.right,
        top=a.top + b.top,
        bottom=a.bottom + b.bottom,
        polyline=joined,
        anchors=a.anchors + tuple(p for p in b.anchors if p not in a.anchors),
        node=a.node,
    )


def consolidate(demands: Sequence[DividingDemand]) -> list[DividingDemand]:
    """
    Merge demands on the same segment whose polylines share an endpoint.

    Merging is transitive: a chain of connected polylines collapses into one
    record whose budgets are the sums of the chain's budgets.
    """
    merged: list[DividingDemand] = []

    for demand in demands:
        current = demand
        changed = True
        while changed:
            changed = False
            for i, other in enumerate(merged):
                if other.segment != current.segment:
                    continue
                joined = _join(other.polyline, current.polyline)
                if joined is None:
                    continue
                current = _merge(other, current, joined)
                merged.pop(i)
                changed = True
                break
        merged.append(current)

    return merged
