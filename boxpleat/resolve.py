"""
Global spacing resolution.

Demands are local: two pockets can ask for strips on opposite sides of the
same grid line. Each line gets one allocation, and every segment on it is
normalized so the two opposing budgets add up to that allocation.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from .config import PleatConfig
from .geometry import LineSegment, OrthogonalLine
from .preprocess import CanonicalPolygon
from .spacing import (
    HORIZONTAL_SIDES,
    VERTICAL_SIDES,
    DividingDemand,
    exterior_side,
)


@dataclass(frozen=True)
class ResolvedAllocation:
    """
    Final budgets for one segment.

    Attributes:
        segment: Normalized segment
        left, right, top, bottom: Non-negative budgets
        collision: Opposing demands on the line did not fit its envelope
    """
    segment: LineSegment
    left: int = 0
    right: int = 0
    top: int = 0
    bottom: int = 0
    collision: bool = False

    @property
    def line(self) -> OrthogonalLine:
        return self.segment.line

    @property
    def horizontal(self) -> int:
        return self.left + self.right

    @property
    def vertical(self) -> int:
        return self.top + self.bottom

    @property
    def total(self) -> int:
        """Extra paper inserted across the segment's line."""
        return self.horizontal + self.vertical


@dataclass(frozen=True)
class LineEnvelope:
    """Largest horizontal and vertical demand seen on one line."""
    line: OrthogonalLine
    horizontal: int
    vertical: int

    @property
    def total(self) -> int:
        return self.horizontal + self.vertical

    def on_side(self, side: str) -> int:
        return self.horizontal if side in VERTICAL_SIDES else self.vertical


def _group(items, key) -> dict:
    groups: dict = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups


def line_envelope(line: OrthogonalLine, records: Sequence[DividingDemand]) -> LineEnvelope:
    return LineEnvelope(
        line=line,
        horizontal=max((r.horizontal for r in records), default=0),
        vertical=max((r.vertical for r in records), default=0),
    )


def _segment_sides(segment: LineSegment, records: Sequence[DividingDemand],
                   envelope: LineEnvelope, sides: tuple[str, str],
                   polygon: CanonicalPolygon) -> dict[str, int]:
    """Largest budget on each side of one segment."""
    values: dict[str, list[int]] = {side: [] for side in sides}
    tagged = set()
    for record in records:
        tagged.update(record.anchors)
        for side in sides:
            if record.budget(side):
                values[side].append(record.budget(side))

    for endpoint in (segment.start, segment.end):
        if endpoint in tagged:
            continue
        side = exterior_side(segment, polygon)
        values[side].append(envelope.on_side(side))

    return {side: max(values[side], default=0) for side in sides}


def resolve_line(line: OrthogonalLine, records: Sequence[DividingDemand],
                 polygon: CanonicalPolygon) -> list[ResolvedAllocation]:
    """
    Resolve every segment on one grid line.

    With no collision all segments take the line-wide maximum on each side.
    On collision the larger side keeps its budget and the other side is cut
    to what is left of the envelope.
    """
    envelope = line_envelope(line, records)
    first, second = VERTICAL_SIDES if line.is_vertical else HORIZONTAL_SIDES

    by_segment = _group(records, lambda r: r.segment)
    per_segment = {
        segment: _segment_sides(segment, group, envelope, (first, second), polygon)
        for segment, group in by_segment.items()
    }

    line_max = {
        side: max(sides[side] for sides in per_segment.values())
        for side in (first, second)
    }
    collision = line_max[first] + line_max[second] > envelope.total

    if collision:
        kept = first if line_max[first] >= line_max[second] else second
        other = second if kept == first else first
        budgets = {kept: line_max[kept], other: max(0, envelope.total - line_max[kept])}
    else:
        budgets = dict(line_max)

    return [
        ResolvedAllocation(segment=segment, collision=collision, **budgets)
        for segment in sorted(per_segment, key=lambda s: (s.start, s.end))
    ]


def resolve_spacing(demands: Sequence[DividingDemand], polygon: CanonicalPolygon,
                    config: Optional[PleatConfig] = None) -> list[ResolvedAllocation]:
    """
    Turn consolidated demands into final per-segment budgets.

    Returns:
        ResolvedAllocation records, vertical lines first, each group sorted by
        coordinate
    """
    by_line = _group(demands, lambda d: d.line)
    allocations = []
    for line in sorted(by_line, key=lambda l: (l.axis, l.coordinate)):
        allocations.extend(resolve_line(line, by_line[line], polygon))
    return allocations


def line_allocations(allocations: Sequence[ResolvedAllocation]) -> dict[OrthogonalLine, int]:
    """Extra paper inserted across each line (largest segment total on it)."""
    result: dict[OrthogonalLine, int] = {}
    for allocation in allocations:
        line = allocation.line
        result[line] = max(result.get(line, 0), allocation.total)
    return result
