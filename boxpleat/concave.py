"""
Concave region extraction.

A concave part is a maximal run of polygon vertices lying strictly inside the
bounding rectangle, extended by one boundary-touching vertex on each side so
both of its endpoints sit on the rectangle.
"""

from dataclasses import dataclass

from .geometry import BoundingBox, Point, Ring
from .preprocess import CanonicalPolygon


@dataclass(frozen=True)
class ConcavePart:
    """
    An ordered polyline cut out of the polygon boundary.

    Attributes:
        points: Vertices in polygon order; first and last touch the bounding box
        indices: Index of each vertex in the canonical polygon
    """
    points: tuple[Point, ...]
    indices: tuple[int, ...]

    def __len__(self):
        return len(self.points)

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]


def _interior_runs(flags: list[bool]) -> list[list[int]]:
    """
    Group indices whose flag is set into maximal circular runs.

    The first and last run are merged when they meet across the wraparound.
    """
    runs: list[list[int]] = []
    current: list[int] = []
    for i, flag in enumerate(flags):
        if flag:
            current.append(i)
        elif current:
            runs.append(current)
            current = []
    if current:
        runs.append(current)

    if len(runs) > 1 and runs[0][0] == 0 and runs[-1][-1] == len(flags) - 1:
        runs[0] = runs.pop() + runs[0]
    return runs


def extract_concave_parts(polygon: CanonicalPolygon) -> list[ConcavePart]:
    """
    Find the concave parts of a canonical polygon.

    Returns:
        One ConcavePart per maximal interior run, in polygon order. A polygon
        equal to its bounding rectangle has none.
    """
    bbox = BoundingBox.from_points(polygon.points)
    ring = Ring(polygon.points)
    n = len(ring)

    interior = [not bbox.touches(p) for p in ring]
    if all(interior):
        # Unreachable for a closed rectilinear polygon, every side of the box is touched
        return []

    parts = []
    for run in _interior_runs(interior):
        first = ring.prev_index(run[0])
        last = ring.next_index(run[-1])
        count = (last - first) % n + 1
        indices = tuple((first + k) % n for k in range(count))
        parts.append(ConcavePart(
            points=tuple(ring[i] for i in indices),
            indices=indices,
        ))
    return parts
