"""
boxpleat - Box-pleating crease patterns for rectilinear footprints

Takes a rectilinear polygon drawn on a square grid and computes the
mountain/valley folds and the enlarged paper that fold into an open box
with that footprint.
"""

__version__ = "1.0.0"

from .config import PleatConfig, PITCH_PRESETS
from .crease import CreasePattern
from .errors import (
    CreasePatternError,
    DegenerateInput,
    IterationLimitExceeded,
    OrthogonalityViolation,
    SplitPointNotOnBoundary,
)
from .pipeline import PipelineResult, compute_crease_pattern, run_pipeline
from .validation import ValidationResult, ValidationWarning, validate_polygon

__all__ = [
    "PleatConfig",
    "PITCH_PRESETS",
    "CreasePattern",
    "CreasePatternError",
    "DegenerateInput",
    "IterationLimitExceeded",
    "OrthogonalityViolation",
    "SplitPointNotOnBoundary",
    "PipelineResult",
    "compute_crease_pattern",
    "run_pipeline",
    "ValidationResult",
    "ValidationWarning",
    "validate_polygon",
]
