"""
Three-part recursive decomposition.

Each concave part bounds a pocket of the bounding rectangle that the polygon
does not cover. A rectangle is inscribed into the pocket, anchored on the line
through the polyline's first vertex and grown along the first edge until it
touches the polygon. The polyline is then split at the first and last points
where it meets the rectangle's far edge:

    left   = start .. near split point
    center = vertices strictly between the split points
    right  = far split point .. end

Sub-polylines are cut wherever they run along the rectangle, so each piece
bounds a single remaining pocket. Pieces with 3 or more points are decomposed
again. Recursion runs
through an explicit work queue; every node lands in one flat list and refers
to its parent by index.
"""

from collections import deque
from dataclasses import dataclass, replace
import logging
from typing import Optional, Sequence

from .concave import ConcavePart
from .config import PleatConfig
from .errors import IterationLimitExceeded, SplitPointNotOnBoundary
from .geometry import (
    BoundingBox,
    OrthogonalLine,
    Point,
    Polyline,
    Shift,
    point_in_polygon,
    point_on_polyline,
    point_on_segment,
    polyline_length,
    shift_axis,
    unit_shift,
)
from .preprocess import CanonicalPolygon

logger = logging.getLogger(__name__)

# Position along a polyline: (edge index, distance from the edge's start vertex)
Param = tuple[int, int]


@dataclass(frozen=True)
class ThreePart:
    """
    One inscribed-rectangle split of a polyline.

    left_part, center_part and right_part partition source: every vertex of
    source appears in exactly one of them; split points that fall inside an
    edge are added to left_part / right_part.
    """
    shift: Shift
    left_part: Polyline
    center_part: Polyline
    right_part: Polyline
    source: Polyline
    near: Point
    far: Point
    rectangle: BoundingBox
    index: int = 0
    parent: Optional[int] = None
    root: int = 0

    @property
    def is_degenerate(self) -> bool:
        """Both inset corners coincide."""
        return self.near == self.far

    @property
    def axis(self) -> str:
        return shift_axis(self.shift)

    def pockets(self, polyline: Polyline) -> list[Polyline]:
        """Pieces of a sub-polyline that are decomposed again."""
        return [piece for piece in split_on_boundary(polyline, self.rectangle)
                if len(piece) >= 3]

    def recurses(self, polyline: Polyline) -> bool:
        """True if the sub-polyline is decomposed again rather than folded as is."""
        return bool(self.pockets(polyline))

    def children(self) -> list[Polyline]:
        """
        Sub-polylines to decompose next, in left, center, right order.

        The center part is re-closed with the two split points, which lie on
        the rectangle's far edge. Every part is cut at the edges running along
        the rectangle boundary; a part touching the rectangle mid-run yields
        one child per pocket.
        """
        candidates = [self.left_part]
        if self.center_part:
            candidates.append((self.near,) + self.center_part + (self.far,))
        candidates.append(self.right_part)

        result = []
        for polyline in candidates:
            result.extend(self.pockets(polyline))
        return result


@dataclass(frozen=True)
class _Context:
    """Everything a single decomposition step needs, fixed for the whole run."""
    polygon: CanonicalPolygon
    config: PleatConfig
    edges: tuple[tuple[Point, Point], ...]
    bbox: BoundingBox

    @classmethod
    def build(cls, polygon: CanonicalPolygon, config: PleatConfig) -> "_Context":
        return cls(
            polygon=polygon,
            config=config,
            edges=tuple(polygon.edges()),
            bbox=polygon.bounding_box,
        )


@dataclass(frozen=True)
class _WorkItem:
    polyline: Polyline
    parent: Optional[int]
    root: int
    carved: tuple[BoundingBox, ...]


# =============================================================================
# Polyline parameters
# =============================================================================

def _normalize_param(points: Polyline, param: Param) -> Param:
    i, t = param
    if i < len(points) - 1 and t == polyline_length(points[i:i + 2]):
        return (i + 1, 0)
    return param


def _point_at(points: Polyline, param: Param) -> Point:
    i, t = param
    if t == 0:
        return points[i]
    p, q = points[i], points[i + 1]
    dx = (q[0] > p[0]) - (q[0] < p[0])
    dy = (q[1] > p[1]) - (q[1] < p[1])
    return (p[0] + dx * t, p[1] + dy * t)


def _locate(points: Polyline, point: Point, after: Param = (0, 0)) -> Optional[Param]:
    """First parameter of point on the polyline strictly after `after`."""
    for i in range(len(points) - 1):
        p, q = points[i], points[i + 1]
        if point_on_segment(point, p, q):
            param = _normalize_param(points, (i, abs(point[0] - p[0]) + abs(point[1] - p[1])))
            if param > after:
                return param
    return None


def _segment_contacts(points: Polyline, a: Point, b: Point) -> list[Param]:
    """
    Parameters where the polyline meets the closed segment ab.

    A collinear overlap contributes both of its ends.
    """
    line_vertical = a[0] == b[0]
    contacts = []
    for i in range(len(points) - 1):
        p, q = points[i], points[i + 1]
        edge_vertical = p[0] == q[0]

        if edge_vertical == line_vertical:
            # Parallel: only a shared line can touch
            if line_vertical and p[0] != a[0]:
                continue
            if not line_vertical and p[1] != a[1]:
                continue
            k = 1 if line_vertical else 0
            lo = max(min(p[k], q[k]), min(a[k], b[k]))
            hi = min(max(p[k], q[k]), max(a[k], b[k]))
            if lo > hi:
                continue
            for value in (lo, hi):
                contacts.append((i, abs(value - p[k])))
        else:
            if line_vertical:
                hit = (a[0], p[1])
            else:
                hit = (p[0], a[1])
            if point_on_segment(hit, p, q) and point_on_segment(hit, a, b):
                contacts.append((i, abs(hit[0] - p[0]) + abs(hit[1] - p[1])))

    return [_normalize_param(points, c) for c in contacts]


def _split(points: Polyline, near: Param, far: Param) -> tuple[Polyline, Polyline, Polyline]:
    i1, t1 = near
    i2, _ = far
    near_point = _point_at(points, near)
    far_point = _point_at(points, far)

    left = points[:i1 + 1] + ((near_point,) if t1 > 0 else ())
    right = (far_point,) + points[i2 + 1:]
    center = tuple(points[j] for j in range(i1 + 1, i2 + 1) if near < (j, 0) < far)
    return left, center, right


def split_on_boundary(points: Polyline, rect: BoundingBox) -> list[Polyline]:
    """
    Cut a polyline at every edge that runs along the rectangle's sides.

    Returns:
        Maximal runs of the remaining edges, in polyline order. Runs of a
        single point are dropped.
    """
    pieces: list[Polyline] = []
    current = list(points[:1])
    for a, b in zip(points, points[1:]):
        if rect.on_boundary(a, b):
            if len(current) >= 2:
                pieces.append(tuple(current))
            current = [b]
        else:
            current.append(b)
    if len(current) >= 2:
        pieces.append(tuple(current))
    return pieces


# =============================================================================
# Growth searches
# =============================================================================

def _offset(point: Point, shift: Shift, steps: int) -> Point:
    return (point[0] + shift[0] * steps, point[1] + shift[1] * steps)


def _rect_is_clear(rect: BoundingBox, context: _Context,
                   carved: Sequence[BoundingBox]) -> bool:
    """Rectangle lies in the pocket: inside the box, outside the polygon and the carved area."""
    if not context.bbox.contains_box(rect):
        return False
    for a, b in context.edges:
        if rect.interior_hits_segment(a, b):
            return False
    # No edge crosses the interior, so the centre classifies the whole rectangle
    if point_in_polygon(rect.center, context.polygon.points):
        return False
    return not any(rect.overlaps_interior(c) for c in carved)


def _step_is_clear(a: Point, b: Point, context: _Context,
                   carved: Sequence[BoundingBox]) -> bool:
    """One grid step of a ray stays inside-or-on the pocket."""
    if not context.bbox.contains(*b):
        return False
    mid = ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)
    for c in carved:
        if c.min_x < mid[0] < c.max_x and c.min_y < mid[1] < c.max_y:
            return False
    if any(point_on_segment(mid, p, q) for p, q in context.edges):
        return True
    return not point_in_polygon(mid, context.polygon.points)


def _grow_rectangle(start: Point, end: Point, shift: Shift, context: _Context,
                    carved: Sequence[BoundingBox], source: Polyline) -> int:
    """
    Grow the rectangle with base start..end along shift, one pitch per step.

    Returns:
        Number of steps taken (the rectangle depth in pitches)
    """
    limit = context.config.max_iterations
    steps = 0
    while True:
        candidate = BoundingBox.spanning(start, _offset(end, shift, steps + 1))
        if not _rect_is_clear(candidate, context, carved):
            break
        steps += 1
        if steps > limit:
            raise IterationLimitExceeded(
                f"rectangle growth from {start} exceeded {limit} steps",
                component="decompose",
                fragment=source,
            )
    return steps


def _grow_corner(start: Point, shift: Shift, context: _Context,
                 carved: Sequence[BoundingBox], source: Polyline) -> int:
    """Grow a single inset corner along shift while it stays inside-or-on the pocket."""
    limit = context.config.max_iterations
    steps = 0
    while True:
        a = _offset(start, shift, steps)
        b = _offset(start, shift, steps + 1)
        if not _step_is_clear(a, b, context, carved):
            break
        steps += 1
        if steps > limit:
            raise IterationLimitExceeded(
                f"corner growth from {start} exceeded {limit} steps",
                component="decompose",
                fragment=source,
            )
    return steps


# =============================================================================
# Decomposition
# =============================================================================

def decompose_part(polyline: Sequence[Point], polygon: CanonicalPolygon,
                   config: PleatConfig,
                   carved: Sequence[BoundingBox] = ()) -> ThreePart:
    """
    Inscribe one rectangle into a polyline's pocket and split it in three.

    Args:
        polyline: At least 3 points; first edge points into the pocket
        polygon: Canonical polygon the polyline was cut from
        config: Pipeline configuration
        carved: Rectangles already inscribed by ancestor nodes

    Returns:
        ThreePart (index / parent / root left at their defaults)

    Raises:
        IterationLimitExceeded: a growth search ran past its ceiling or stalled
        SplitPointNotOnBoundary: a split point is not on the polyline
    """
    return _decompose(tuple(polyline), _Context.build(polygon, config), tuple(carved))


def _decompose(points: Polyline, context: _Context,
               carved: tuple[BoundingBox, ...]) -> ThreePart:
    if len(points) < 3:
        raise ValueError(f"need at least 3 points to decompose, got {len(points)}")

    start, end = points[0], points[-1]
    shift = unit_shift(points[0], points[1], context.config.pitch)
    if shift_axis(shift) == 'x':
        base = OrthogonalLine('x', start[0])
    else:
        base = OrthogonalLine('y', start[1])

    # Parallel entrance keeps end as is; otherwise square the rectangle
    projected = base.project(end)

    if projected == start:
        steps = _grow_corner(start, shift, context, carved, points)
        if steps == 0:
            raise IterationLimitExceeded(
                f"inset corner cannot grow from {start}",
                component="decompose",
                fragment=points,
            )
        corner = _offset(start, shift, steps)
        param = _locate(points, corner)
        if param is None:
            raise SplitPointNotOnBoundary(
                f"inset corner {corner} is not on the polyline",
                component="decompose",
                fragment=points,
            )
        left, center, right = _split(points, param, param)
        return ThreePart(
            shift=shift,
            left_part=left,
            center_part=center,
            right_part=right,
            source=points,
            near=corner,
            far=corner,
            rectangle=BoundingBox.spanning(start, corner),
        )

    steps = _grow_rectangle(start, projected, shift, context, carved, points)
    if steps == 0:
        raise IterationLimitExceeded(
            f"rectangle cannot grow from base {start} - {projected}",
            component="decompose",
            fragment=points,
        )

    near_corner = _offset(start, shift, steps)
    far_corner = _offset(projected, shift, steps)
    contacts = _segment_contacts(points, near_corner, far_corner)
    if not contacts:
        raise SplitPointNotOnBoundary(
            f"far edge {near_corner} - {far_corner} does not touch the polyline",
            component="decompose",
            fragment=points,
        )

    near, far = min(contacts), max(contacts)
    left, center, right = _split(points, near, far)
    near_point = _point_at(points, near)
    far_point = _point_at(points, far)
    for split_point in (near_point, far_point):
        if not point_on_polyline(split_point, points):
            raise SplitPointNotOnBoundary(
                f"split point {split_point} is not on the polyline",
                component="decompose",
                fragment=points,
            )

    return ThreePart(
        shift=shift,
        left_part=left,
        center_part=center,
        right_part=right,
        source=points,
        near=near_point,
        far=far_point,
        rectangle=BoundingBox.spanning(start, far_corner),
    )


def decompose_all(parts: Sequence[ConcavePart], polygon: CanonicalPolygon,
                  config: Optional[PleatConfig] = None) -> list[ThreePart]:
    """
    Decompose every concave part and all of its descendants.

    Returns:
        Flat list of ThreePart nodes in breadth-first order; node.index is its
        position in the list and node.parent the index of the node it came from.
    """
    config = config or PleatConfig()
    context = _Context.build(polygon, config)

    queue = deque(
        _WorkItem(polyline=part.points, parent=None, root=i, carved=())
        for i, part in enumerate(parts)
        if len(part.points) >= 3
    )
    nodes: list[ThreePart] = []

    while queue:
        item = queue.popleft()
        if len(nodes) >= config.max_nodes:
            raise IterationLimitExceeded(
                f"decomposition of concave part {item.root} exceeded {config.max_nodes} nodes",
                component="decompose",
                fragment=item.polyline,
            )

        node = _decompose(item.polyline, context, item.carved)
        node = replace(node, index=len(nodes), parent=item.parent, root=item.root)
        nodes.append(node)
        logger.debug("node %d (part %d): shift=%s near=%s far=%s",
                     node.index, node.root, node.shift, node.near, node.far)

        parent_length = polyline_length(item.polyline)
        for child in node.children():
            if polyline_length(child) >= parent_length:
                raise IterationLimitExceeded(
                    f"decomposition of concave part {item.root} made no progress",
                    component="decompose",
                    fragment=child,
                )
            queue.append(_WorkItem(
                polyline=child,
                parent=node.index,
                root=item.root,
                carved=item.carved + (node.rectangle,),
            ))

    logger.info("decomposed %d concave part(s) into %d node(s)", len(parts), len(nodes))
    return nodes
