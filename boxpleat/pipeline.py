"""
End-to-end crease pattern synthesis.

Runs the stages strictly forward:

    normalize -> extract concave parts -> decompose -> local demands
              -> consolidate -> resolve -> generate
"""

from dataclasses import dataclass, field
import logging
from typing import Optional, Sequence

from .concave import ConcavePart, extract_concave_parts
from .config import PleatConfig
from .crease import CreasePattern, generate_crease_pattern
from .decompose import ThreePart, decompose_all
from .errors import CreasePatternError
from .preprocess import CanonicalPolygon, normalize_polygon
from .resolve import ResolvedAllocation, resolve_spacing
from .spacing import DividingDemand, consolidate, local_demands

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Every intermediate stage of one run."""
    config: PleatConfig
    polygon: CanonicalPolygon
    parts: list[ConcavePart] = field(default_factory=list)
    nodes: list[ThreePart] = field(default_factory=list)
    demands: list[DividingDemand] = field(default_factory=list)
    allocations: list[ResolvedAllocation] = field(default_factory=list)
    pattern: Optional[CreasePattern] = None

    @property
    def collisions(self) -> list[ResolvedAllocation]:
        return [a for a in self.allocations if a.collision]

    def summary(self) -> dict:
        """Counts per stage, for progress output."""
        return {
            "vertices": len(self.polygon),
            "concave_parts": len(self.parts),
            "nodes": len(self.nodes),
            "demands": len(self.demands),
            "allocations": len(self.allocations),
            "collisions": len(self.collisions),
            "mountain_folds": len(self.pattern.mountainfold) if self.pattern else 0,
            "valley_folds": len(self.pattern.valleyfold) if self.pattern else 0,
        }


def _checked(config: Optional[PleatConfig]) -> PleatConfig:
    config = config or PleatConfig()
    errors = config.validate()
    if errors:
        raise CreasePatternError("; ".join(errors), component="config")
    return config


def run_pipeline(points: Sequence[Sequence[float]],
                 config: Optional[PleatConfig] = None) -> PipelineResult:
    """
    Compute a crease pattern and keep every intermediate result.

    Raises:
        CreasePatternError: any stage failed; the run is aborted
    """
    config = _checked(config)

    polygon = normalize_polygon(points, config)
    logger.debug("canonical polygon: %d vertices, origin %s", len(polygon), polygon.origin)

    parts = extract_concave_parts(polygon)
    logger.debug("found %d concave part(s)", len(parts))

    nodes = decompose_all(parts, polygon, config)
    demands = consolidate(local_demands(nodes, polygon, config))
    logger.debug("%d demand(s) after consolidation", len(demands))

    allocations = resolve_spacing(demands, polygon, config)
    collisions = [a for a in allocations if a.collision]
    if collisions:
        logger.info("%d segment(s) resolved with a collision", len(collisions))

    pattern = generate_crease_pattern(allocations, polygon, config)
    logger.info("crease pattern: %d mountain, %d valley fold(s)",
                len(pattern.mountainfold), len(pattern.valleyfold))

    return PipelineResult(
        config=config,
        polygon=polygon,
        parts=parts,
        nodes=nodes,
        demands=demands,
        allocations=allocations,
        pattern=pattern,
    )


def compute_crease_pattern(points: Sequence[Sequence[float]],
                           pitch: Optional[int] = None,
                           config: Optional[PleatConfig] = None) -> CreasePattern:
    """
    Compute the crease pattern for a rectilinear grid polygon.

    Args:
        points: Ordered polygon vertices on the pitch grid
        pitch: Grid pitch; overrides config.pitch when given
        config: Pipeline configuration (defaults used when omitted)

    Returns:
        CreasePattern in the input coordinate frame
    """
    config = config or PleatConfig()
    if pitch is not None:
        config = config.with_pitch(pitch)
    return run_pipeline(points, config).pattern
