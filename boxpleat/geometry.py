"""
Grid geometry primitives.

Points are integer grid coordinates. Every edge handled by the pipeline is
axis-aligned; helpers reject anything else instead of approximating it.
"""

from dataclasses import dataclass
from typing import Iterator, Sequence

from .errors import OrthogonalityViolation


# Type aliases
Point = tuple[int, int]
Shift = tuple[int, int]  # one component zero, the other +/- pitch
Polyline = tuple[Point, ...]


# =============================================================================
# Basic Geometry Functions
# =============================================================================

def cross(o: Sequence[float], a: Sequence[float], b: Sequence[float]) -> float:
    """2D cross product of vectors OA and OB."""
    return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])


def is_left_turn(o: Sequence[float], a: Sequence[float], b: Sequence[float]) -> bool:
    """True if o -> a -> b turns counter-clockwise."""
    return cross(o, a, b) > 0


def signed_area(polygon: Sequence[Point]) -> float:
    """
    Calculate signed area of polygon using shoelace formula.

    Returns:
        Positive for CCW winding, negative for CW winding.
    """
    n = len(polygon)
    if n < 3:
        return 0.0
    area = 0.0
    for i in range(n):
        j = (i + 1) % n
        area += polygon[i][0] * polygon[j][1]
        area -= polygon[j][0] * polygon[i][1]
    return area / 2.0


def is_axis_aligned(p: Point, q: Point) -> bool:
    return p[0] == q[0] or p[1] == q[1]


def unit_shift(p: Point, q: Point, pitch: int) -> Shift:
    """
    Growth step of one pitch pointing from p toward q.

    Raises:
        OrthogonalityViolation: if p -> q is diagonal or has zero length
    """
    dx = q[0] - p[0]
    dy = q[1] - p[1]
    if dx != 0 and dy == 0:
        return (pitch if dx > 0 else -pitch, 0)
    if dy != 0 and dx == 0:
        return (0, pitch if dy > 0 else -pitch)
    raise OrthogonalityViolation(
        f"edge {p} -> {q} is not an axis-aligned edge",
        component="geometry",
        fragment=(p, q),
    )


def shift_axis(shift: Shift) -> str:
    """Axis along which a shift moves ('x' or 'y')."""
    return 'x' if shift[0] != 0 else 'y'


def manhattan(p: Point, q: Point) -> int:
    return abs(q[0] - p[0]) + abs(q[1] - p[1])


def polyline_length(points: Sequence[Point]) -> int:
    """Total length of an axis-aligned polyline."""
    return sum(manhattan(points[i], points[i + 1]) for i in range(len(points) - 1))


def point_on_segment(point: Sequence[float], a: Point, b: Point) -> bool:
    """Check if point lies on the closed axis-aligned segment ab."""
    x, y = point
    if a[0] == b[0]:
        return x == a[0] and min(a[1], b[1]) <= y <= max(a[1], b[1])
    if a[1] == b[1]:
        return y == a[1] and min(a[0], b[0]) <= x <= max(a[0], b[0])
    raise OrthogonalityViolation(
        f"segment {a} -> {b} is not axis-aligned",
        component="geometry",
        fragment=(a, b),
    )


def point_on_polyline(point: Sequence[float], points: Sequence[Point]) -> bool:
    """Check if point lies on any edge of an open polyline."""
    if len(points) == 1:
        return tuple(point) == tuple(points[0])
    return any(point_on_segment(point, points[i], points[i + 1])
               for i in range(len(points) - 1))


def point_in_polygon(point: Sequence[float], polygon: Sequence[Point]) -> bool:
    """
    Check if point is strictly inside polygon using ray casting algorithm.

    Points on the boundary may report either way; callers only probe points
    that are known not to lie on an edge.
    """
    x, y = point
    n = len(polygon)
    inside = False

    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]

        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i

    return inside


def to_grid_point(point: Sequence[float]) -> Point:
    """
    Convert a 2-number sequence to an integer grid point.

    Integral floats are accepted; fractional coordinates are rejected.
    """
    if len(point) != 2:
        raise ValueError(f"expected an (x, y) pair, got {point!r}")
    coords = []
    for value in point:
        if isinstance(value, bool):
            raise ValueError(f"invalid coordinate {value!r}")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"coordinate {value} is not on the integer grid")
            value = int(value)
        coords.append(int(value))
    return (coords[0], coords[1])


# =============================================================================
# Circular indexing
# =============================================================================

class Ring:
    """
    Read-only circular view over a vertex sequence.

    Indexing wraps around, so ring[-1] and ring[len(ring)] are both valid.
    """

    def __init__(self, items: Sequence[Point]):
        self._items = tuple(items)

    def __len__(self):
        return len(self._items)

    def __getitem__(self, index: int) -> Point:
        return self._items[index % len(self._items)]

    def __iter__(self) -> Iterator[Point]:
        return iter(self._items)

    def prev_index(self, index: int) -> int:
        return (index - 1) % len(self._items)

    def next_index(self, index: int) -> int:
        return (index + 1) % len(self._items)

    def neighbors(self, index: int) -> tuple[Point, Point]:
        """Previous and next vertex of the vertex at index."""
        return self[index - 1], self[index + 1]

    def edges(self) -> list[tuple[Point, Point]]:
        """Return list of edges as (start, end) point tuples, closing edge included."""
        if len(self._items) < 2:
            return []
        return [(self[i], self[i + 1]) for i in range(len(self._items))]

    def rotated(self, start: int) -> tuple[Point, ...]:
        """Vertices starting from index start."""
        return tuple(self[start + k] for k in range(len(self._items)))


# =============================================================================
# Lines, segments, boxes
# =============================================================================

@dataclass(frozen=True)
class OrthogonalLine:
    """
    An infinite grid line.

    axis is the coordinate held constant: 'x' is the vertical line
    x = coordinate, 'y' the horizontal line y = coordinate.
    """
    axis: str
    coordinate: int

    @property
    def is_vertical(self) -> bool:
        return self.axis == 'x'

    def project(self, point: Point) -> Point:
        """Orthogonal projection of a point onto the line."""
        if self.axis == 'x':
            return (self.coordinate, point[1])
        return (point[0], self.coordinate)

    def __str__(self):
        return f"{self.axis}={self.coordinate}"


@dataclass(frozen=True)
class LineSegment:
    """An axis-aligned segment between two grid points."""
    start: Point
    end: Point

    def __post_init__(self):
        if not is_axis_aligned(self.start, self.end):
            raise OrthogonalityViolation(
                f"segment {self.start} -> {self.end} is not axis-aligned",
                component="geometry",
                fragment=(self.start, self.end),
            )

    @property
    def length(self) -> int:
        return manhattan(self.start, self.end)

    @property
    def is_vertical(self) -> bool:
        return self.start[0] == self.end[0] and self.start[1] != self.end[1]

    @property
    def line(self) -> OrthogonalLine:
        """The infinite grid line carrying this segment."""
        if self.is_vertical:
            return OrthogonalLine('x', self.start[0])
        return OrthogonalLine('y', self.start[1])

    @property
    def midpoint(self) -> tuple[float, float]:
        return (
            (self.start[0] + self.end[0]) / 2,
            (self.start[1] + self.end[1]) / 2
        )

    def normalized(self) -> "LineSegment":
        """Same segment with endpoints in ascending order."""
        if self.end < self.start:
            return LineSegment(self.end, self.start)
        return self


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_points(cls, points: Sequence[Point]) -> "BoundingBox":
        if not points:
            return cls(0, 0, 0, 0)
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), min(ys), max(xs), max(ys))

    @classmethod
    def spanning(cls, a: Point, b: Point) -> "BoundingBox":
        """Box with a and b as opposite corners."""
        return cls(min(a[0], b[0]), min(a[1], b[1]), max(a[0], b[0]), max(a[1], b[1]))

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (
            (self.min_x + self.max_x) / 2,
            (self.min_y + self.max_y) / 2
        )

    def corners(self) -> list[Point]:
        """Corners in counter-clockwise order from the bottom-left."""
        return [
            (self.min_x, self.min_y),
            (self.max_x, self.min_y),
            (self.max_x, self.max_y),
            (self.min_x, self.max_y),
        ]

    def contains(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def contains_box(self, other: "BoundingBox") -> bool:
        return (self.min_x <= other.min_x and other.max_x <= self.max_x and
                self.min_y <= other.min_y and other.max_y <= self.max_y)

    def touches(self, point: Point) -> bool:
        """True if point lies on one of the box's sides."""
        return (point[0] in (self.min_x, self.max_x) or
                point[1] in (self.min_y, self.max_y))

    def overlaps_interior(self, other: "BoundingBox") -> bool:
        """True if the open interiors of the two boxes intersect."""
        return (max(self.min_x, other.min_x) < min(self.max_x, other.max_x) and
                max(self.min_y, other.min_y) < min(self.max_y, other.max_y))

    def interior_hits_segment(self, a: Point, b: Point) -> bool:
        """True if the axis-aligned segment ab passes through the open interior."""
        if a[0] == b[0]:
            return (self.min_x < a[0] < self.max_x and
                    max(min(a[1], b[1]), self.min_y) < min(max(a[1], b[1]), self.max_y))
        if a[1] == b[1]:
            return (self.min_y < a[1] < self.max_y and
                    max(min(a[0], b[0]), self.min_x) < min(max(a[0], b[0]), self.max_x))
        raise OrthogonalityViolation(
            f"segment {a} -> {b} is not axis-aligned",
            component="geometry",
            fragment=(a, b),
        )

    def on_boundary(self, a: Point, b: Point) -> bool:
        """True if segment ab runs along one of the box's sides for a positive length."""
        if a[0] == b[0] and a[0] in (self.min_x, self.max_x):
            return max(min(a[1], b[1]), self.min_y) < min(max(a[1], b[1]), self.max_y)
        if a[1] == b[1] and a[1] in (self.min_y, self.max_y):
            return max(min(a[0], b[0]), self.min_x) < min(max(a[0], b[0]), self.max_x)
        return False

    def expand(self, right: int, top: int) -> "BoundingBox":
        """Push the right and top sides outward, bottom-left corner fixed."""
        return BoundingBox(self.min_x, self.min_y, self.max_x + right, self.max_y + top)
