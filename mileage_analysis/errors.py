"""Error kinds raised by the analysis helpers."""
from __future__ import annotations


class AnalysisError(Exception):
    """Base class for failures of an analysis step."""


class SingularDesignError(AnalysisError, ValueError):
    """The design matrix (intercept + predictors) is rank-deficient."""


class InsufficientSampleError(AnalysisError, ValueError):
    """A group has too few observations for the requested test."""


class NoFeasibleModelError(AnalysisError):
    """Stepwise search could not fit its starting model."""
