"""
Validation of a drawn polygon before crease pattern synthesis.

Checks for:
- Points that are not [x, y] pairs of numbers
- An open point list (the closing edge is implied)
- Too few distinct vertices
- Vertices off the pitch grid
- Edges that are not axis-aligned
- Self-intersecting outlines
- Redundant vertices in the middle of a straight edge
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from .config import PleatConfig
from .geometry import cross, is_axis_aligned


@dataclass
class ValidationWarning:
    """A single validation warning."""
    category: str  # "format", "closure", "too_few_points", "grid", "orthogonality",
                   # "self_intersection", "redundant_vertex"
    severity: str  # "error", "warning", "info"
    message: str
    details: dict = field(default_factory=dict)


@dataclass
class ValidationResult:
    """Results of all validation checks."""
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(w.severity == "error" for w in self.warnings)

    @property
    def has_warnings(self) -> bool:
        return any(w.severity == "warning" for w in self.warnings)

    @property
    def error_count(self) -> int:
        return sum(1 for w in self.warnings if w.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for w in self.warnings if w.severity == "warning")

    def get_by_category(self, category: str) -> list[ValidationWarning]:
        return [w for w in self.warnings if w.category == category]


def _on_segment(p, a, b) -> bool:
    return (min(a[0], b[0]) <= p[0] <= max(a[0], b[0]) and
            min(a[1], b[1]) <= p[1] <= max(a[1], b[1]))


def _segments_touch(p1, p2, p3, p4) -> bool:
    """Check if two closed segments share at least one point."""
    d1 = cross(p3, p4, p1)
    d2 = cross(p3, p4, p2)
    d3 = cross(p1, p2, p3)
    d4 = cross(p1, p2, p4)

    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and \
       ((d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)):
        return True

    # Collinear or touching cases
    if d1 == 0 and _on_segment(p1, p3, p4):
        return True
    if d2 == 0 and _on_segment(p2, p3, p4):
        return True
    if d3 == 0 and _on_segment(p3, p1, p2):
        return True
    if d4 == 0 and _on_segment(p4, p1, p2):
        return True

    return False


def _vertices(points: Sequence[Sequence[float]]) -> list[tuple]:
    """Vertex list without consecutive duplicates or a closing repeat."""
    result = []
    for p in points:
        p = tuple(p)
        if not result or result[-1] != p:
            result.append(p)
    while len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result


def _is_point(p) -> bool:
    if isinstance(p, (str, bytes)) or not isinstance(p, Sequence) or len(p) != 2:
        return False
    return all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in p)


def check_point_format(points: Sequence) -> list[ValidationWarning]:
    """Every point must be an [x, y] pair of numbers."""
    warnings = []
    for i, p in enumerate(points):
        if not _is_point(p):
            warnings.append(ValidationWarning(
                category="format",
                severity="error",
                message=f"Point {i + 1} {p!r} is not an [x, y] pair of numbers",
                details={"index": i, "point": p},
            ))
    return warnings


def check_closure(points: Sequence[Sequence[float]]) -> list[ValidationWarning]:
    """An open list is accepted; the closing edge is added implicitly."""
    if len(points) >= 2 and tuple(points[0]) != tuple(points[-1]):
        return [ValidationWarning(
            category="closure",
            severity="info",
            message="Outline is not closed; closing edge implied",
            details={"first": tuple(points[0]), "last": tuple(points[-1])},
        )]
    return []


def check_point_count(vertices: list[tuple]) -> list[ValidationWarning]:
    distinct = len(set(vertices))
    if distinct < 3:
        return [ValidationWarning(
            category="too_few_points",
            severity="error",
            message=f"Outline has {distinct} distinct point(s), need at least 3",
            details={"distinct_points": distinct},
        )]
    return []


def check_grid(vertices: list[tuple], config: PleatConfig) -> list[ValidationWarning]:
    """Every vertex must sit on a multiple of the pitch."""
    warnings = []
    for i, (x, y) in enumerate(vertices):
        if x % config.pitch or y % config.pitch:
            warnings.append(ValidationWarning(
                category="grid",
                severity="error",
                message=f"Point {i + 1} {(x, y)} is off the {config.pitch} grid",
                details={"index": i, "point": (x, y), "pitch": config.pitch},
            ))
    return warnings


def check_orthogonality(vertices: list[tuple]) -> list[ValidationWarning]:
    warnings = []
    n = len(vertices)
    for i in range(n):
        a, b = vertices[i], vertices[(i + 1) % n]
        if not is_axis_aligned(a, b):
            warnings.append(ValidationWarning(
                category="orthogonality",
                severity="error",
                message=f"Edge {i + 1} {a} -> {b} is not horizontal or vertical",
                details={"index": i, "start": a, "end": b},
            ))
    return warnings


def check_self_intersection(vertices: list[tuple]) -> list[ValidationWarning]:
    """Non-adjacent edges must not touch."""
    warnings = []
    n = len(vertices)
    if n < 4:
        return warnings

    for i in range(n):
        for j in range(i + 2, n):
            # First and last edge share the closing vertex
            if i == 0 and j == n - 1:
                continue
            p1, p2 = vertices[i], vertices[(i + 1) % n]
            p3, p4 = vertices[j], vertices[(j + 1) % n]
            if _segments_touch(p1, p2, p3, p4):
                warnings.append(ValidationWarning(
                    category="self_intersection",
                    severity="error",
                    message=f"Edge {i + 1} intersects edge {j + 1}",
                    details={"edges": (i, j)},
                ))
    return warnings


def check_redundant_vertices(vertices: list[tuple]) -> list[ValidationWarning]:
    """Vertices between two edges on the same axis are merged away before synthesis."""
    warnings = []
    n = len(vertices)
    for i in range(n):
        prev, here, nxt = vertices[i - 1], vertices[i], vertices[(i + 1) % n]
        if prev[0] == here[0] == nxt[0] or prev[1] == here[1] == nxt[1]:
            warnings.append(ValidationWarning(
                category="redundant_vertex",
                severity="warning",
                message=f"Point {i + 1} {here} lies on a straight edge and will be merged",
                details={"index": i, "point": here},
            ))
    return warnings


def validate_polygon(
    points: Sequence[Sequence[float]],
    config: Optional[PleatConfig] = None
) -> ValidationResult:
    """
    Run all validation checks on a drawn outline.

    Args:
        points: Outline vertices as drawn, closed or open
        config: Pleat configuration (for the pitch)

    Returns:
        ValidationResult with all warnings
    """
    config = config or PleatConfig()
    result = ValidationResult()

    result.warnings.extend(check_point_format(points))
    if result.has_errors:
        return result

    result.warnings.extend(check_closure(points))

    vertices = _vertices(points)
    result.warnings.extend(check_point_count(vertices))
    if result.has_errors:
        return result

    result.warnings.extend(check_grid(vertices, config))
    result.warnings.extend(check_orthogonality(vertices))
    result.warnings.extend(check_self_intersection(vertices))
    result.warnings.extend(check_redundant_vertices(vertices))

    return result
