"""
Error taxonomy for crease pattern synthesis.

Every failure is fatal for the whole computation. Each error records the
pipeline stage that raised it and the input fragment (an edge, a polyline,
a decomposition node) that could not be processed.
"""

from typing import Any, Optional


class CreasePatternError(ValueError):
    """
    Base class for all crease pattern failures.

    Attributes:
        component: Pipeline stage that failed (e.g. "preprocess", "decompose")
        fragment: The offending input fragment, if any
    """

    def __init__(self, message: str, component: str = "", fragment: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.fragment = fragment

    def __str__(self):
        if self.component:
            return f"[{self.component}] {self.message}"
        return self.message


class DegenerateInput(CreasePatternError):
    """Fewer than 3 distinct vertices (or no enclosed area) after preprocessing."""


class OrthogonalityViolation(CreasePatternError):
    """An edge is not axis-aligned."""


class SplitPointNotOnBoundary(CreasePatternError):
    """A computed split point does not lie on the polyline being split."""


class IterationLimitExceeded(CreasePatternError):
    """A bounded growth or search loop ran past its ceiling."""
