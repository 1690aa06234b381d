"""
Crease pattern and paper outline generation.

Resolved budgets become strips of extra paper inserted along grid lines. Every
coordinate moves by the total width of the strips inserted before it, each
allocated segment is carried along and cut into half-pitch fold runs
alternating valley / mountain, and the paper grows by the total width inserted
along each axis.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import PleatConfig
from .geometry import BoundingBox, OrthogonalLine
from .preprocess import CanonicalPolygon
from .resolve import ResolvedAllocation, line_allocations

# Output coordinates are ints where possible; half-pitch runs of an odd pitch
# produce floats
Coord = tuple[float, float]
Fold = tuple[Coord, Coord]


def _clean(value: float):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class CreasePattern:
    """
    Folds and paper outline, in the input coordinate frame.

    Attributes:
        paper: Paper corners, counter-clockwise from the bottom-left
        mountainfold: Mountain fold runs
        valleyfold: Valley fold runs
    """
    paper: tuple[Coord, ...]
    mountainfold: tuple[Fold, ...] = ()
    valleyfold: tuple[Fold, ...] = ()

    @property
    def fold_count(self) -> int:
        return len(self.mountainfold) + len(self.valleyfold)

    @property
    def paper_size(self) -> tuple[float, float]:
        xs = [p[0] for p in self.paper]
        ys = [p[1] for p in self.paper]
        return (max(xs) - min(xs), max(ys) - min(ys))

    def to_dict(self) -> dict:
        """Convert to the JSON exchange layout."""
        return {
            "paper": [list(p) for p in self.paper],
            "mountainfold": [[list(a), list(b)] for a, b in self.mountainfold],
            "valleyfold": [[list(a), list(b)] for a, b in self.valleyfold],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CreasePattern":
        def folds(key):
            return tuple((tuple(a), tuple(b)) for a, b in data.get(key, []))

        return cls(
            paper=tuple(tuple(p) for p in data["paper"]),
            mountainfold=folds("mountainfold"),
            valleyfold=folds("valleyfold"),
        )


class GridStretch:
    """
    Coordinate map that opens strips of paper along grid lines.

    A coordinate moves by the sum of allocations on parallel lines strictly
    before it, so the line carrying a strip keeps the strip on its far side.
    """

    def __init__(self, allocations: dict[OrthogonalLine, int]):
        self.x_lines = sorted((l.coordinate, v) for l, v in allocations.items()
                              if l.axis == 'x' and v > 0)
        self.y_lines = sorted((l.coordinate, v) for l, v in allocations.items()
                              if l.axis == 'y' and v > 0)

    @property
    def total_x(self) -> int:
        return sum(v for _, v in self.x_lines)

    @property
    def total_y(self) -> int:
        return sum(v for _, v in self.y_lines)

    @staticmethod
    def _offset(lines: list[tuple[int, int]], coordinate: float) -> int:
        return sum(v for c, v in lines if c < coordinate)

    def offset_x(self, x: float) -> int:
        return self._offset(self.x_lines, x)

    def offset_y(self, y: float) -> int:
        return self._offset(self.y_lines, y)

    def apply(self, point: Sequence[float]) -> Coord:
        return (point[0] + self.offset_x(point[0]), point[1] + self.offset_y(point[1]))


def subdivide(start: Coord, end: Coord, step: float) -> list[Fold]:
    """
    Cut an axis-aligned segment into runs of length step.

    The last run is shorter when the length is not a multiple of step.
    """
    length = abs(end[0] - start[0]) + abs(end[1] - start[1])
    if length == 0:
        return []
    ux = (end[0] - start[0]) / length
    uy = (end[1] - start[1]) / length

    runs = []
    t = 0.0
    while t < length:
        t_next = min(t + step, length)
        a = (_clean(start[0] + ux * t), _clean(start[1] + uy * t))
        b = (_clean(start[0] + ux * t_next), _clean(start[1] + uy * t_next))
        runs.append((a, b))
        t = t_next
    return runs


def generate_crease_pattern(allocations: Sequence[ResolvedAllocation],
                            polygon: CanonicalPolygon,
                            config: Optional[PleatConfig] = None) -> CreasePattern:
    """
    Build folds and the enlarged paper from resolved budgets.

    Args:
        allocations: Output of resolve_spacing
        polygon: Canonical polygon, for the bounding box and origin
        config: Pipeline configuration (pitch, first fold type)

    Returns:
        CreasePattern translated back into the polygon's input frame
    """
    config = config or PleatConfig()
    stretch = GridStretch(line_allocations(allocations))

    ordered = sorted(
        (a for a in allocations if a.total > 0),
        key=lambda a: (a.line.axis, a.line.coordinate, a.segment.start, a.segment.end),
    )

    mountain = []
    valley = []
    for allocation in ordered:
        start = stretch.apply(allocation.segment.start)
        end = stretch.apply(allocation.segment.end)
        for k, (a, b) in enumerate(subdivide(start, end, config.half_pitch)):
            fold = (polygon.to_input_frame(a), polygon.to_input_frame(b))
            if (k % 2 == 0) == config.start_with_valley:
                valley.append(fold)
            else:
                mountain.append(fold)

    paper_box = polygon.bounding_box.expand(stretch.total_x, stretch.total_y)
    paper = tuple(polygon.to_input_frame(c) for c in paper_box.corners())

    return CreasePattern(
        paper=paper,
        mountainfold=tuple(mountain),
        valleyfold=tuple(valley),
    )
