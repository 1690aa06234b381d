"""
Polygon preprocessing.

Turns a user-drawn vertex list into the canonical form every later stage
relies on: counter-clockwise, translated to the origin, one vertex per
corner, starting at the right-most (then top-most) vertex.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import PleatConfig
from .errors import DegenerateInput, OrthogonalityViolation
from .geometry import (
    BoundingBox,
    Point,
    Ring,
    is_axis_aligned,
    signed_area,
    to_grid_point,
)


@dataclass(frozen=True)
class CanonicalPolygon:
    """
    A normalized rectilinear polygon.

    Attributes:
        points: Counter-clockwise vertices, min x and min y at 0
        origin: Translation that maps canonical coordinates back to input ones
    """
    points: tuple[Point, ...]
    origin: Point = (0, 0)

    def __len__(self):
        return len(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __iter__(self):
        return iter(self.points)

    @property
    def ring(self) -> Ring:
        return Ring(self.points)

    @property
    def bounding_box(self) -> BoundingBox:
        return BoundingBox.from_points(self.points)

    def edges(self) -> list[tuple[Point, Point]]:
        return self.ring.edges()

    def to_input_frame(self, point: Sequence[float]) -> tuple:
        """Translate a canonical point back into the caller's coordinates."""
        return (point[0] + self.origin[0], point[1] + self.origin[1])


def _dedupe(points: list[Point]) -> list[Point]:
    """Drop consecutive duplicates and a repeated closing vertex."""
    result: list[Point] = []
    for p in points:
        if not result or result[-1] != p:
            result.append(p)
    while len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result


def _check_orthogonal(points: list[Point]) -> None:
    for a, b in Ring(points).edges():
        if not is_axis_aligned(a, b):
            raise OrthogonalityViolation(
                f"edge {a} -> {b} is not axis-aligned",
                component="preprocess",
                fragment=(a, b),
            )


def _check_grid(points: list[Point], pitch: int) -> None:
    for p in points:
        if p[0] % pitch or p[1] % pitch:
            raise DegenerateInput(
                f"vertex {p} is not on the pitch {pitch} grid",
                component="preprocess",
                fragment=p,
            )


def _merge_collinear(points: list[Point]) -> list[Point]:
    """
    Remove vertices whose two edges lie on the same axis.

    Repeats until stable, so spikes that fold back on themselves collapse too.
    """
    current = list(points)
    changed = True
    while changed and len(current) >= 3:
        changed = False
        ring = Ring(current)
        for i in range(len(current)):
            prev, nxt = ring.neighbors(i)
            here = ring[i]
            if (prev[0] == here[0] == nxt[0]) or (prev[1] == here[1] == nxt[1]):
                current = current[:i] + current[i + 1:]
                current = _dedupe(current)
                changed = True
                break
    return current


def _start_index(points: Sequence[Point]) -> int:
    """Index of the max-x vertex, ties broken by max y."""
    best = 0
    for i, p in enumerate(points):
        if (p[0], p[1]) > (points[best][0], points[best][1]):
            best = i
    return best


def normalize_polygon(points: Sequence[Sequence[float]],
                      config: Optional[PleatConfig] = None) -> CanonicalPolygon:
    """
    Normalize a rectilinear polygon.

    Args:
        points: Ordered vertices; a repeated closing vertex is allowed
        config: Pipeline configuration; when given, vertices must lie on
            multiples of its pitch

    Returns:
        CanonicalPolygon with CCW vertices starting at the right-most,
        top-most vertex and translated so min x = min y = 0.

    Raises:
        OrthogonalityViolation: an edge is not axis-aligned
        DegenerateInput: fewer than 3 distinct vertices, no area, or off grid
    """
    if isinstance(points, CanonicalPolygon):
        points = points.points

    try:
        grid_points = [to_grid_point(p) for p in points]
    except (TypeError, ValueError) as e:
        raise DegenerateInput(str(e), component="preprocess", fragment=list(points)) from e

    vertices = _dedupe(grid_points)
    if len(set(vertices)) < 3:
        raise DegenerateInput(
            f"polygon needs at least 3 distinct vertices, got {len(set(vertices))}",
            component="preprocess",
            fragment=tuple(vertices),
        )

    _check_orthogonal(vertices)
    if config is not None:
        _check_grid(vertices, config.pitch)

    vertices = _merge_collinear(vertices)
    area = signed_area(vertices)
    if len(vertices) < 4 or area == 0:
        raise DegenerateInput(
            "polygon encloses no area",
            component="preprocess",
            fragment=tuple(vertices),
        )

    if area < 0:
        vertices.reverse()

    min_x = min(p[0] for p in vertices)
    min_y = min(p[1] for p in vertices)
    vertices = [(x - min_x, y - min_y) for x, y in vertices]

    start = _start_index(vertices)
    canonical = Ring(vertices).rotated(start)

    return CanonicalPolygon(points=canonical, origin=(min_x, min_y))
