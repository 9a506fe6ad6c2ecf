"""Transmission type vs. mileage: helpers behind the mtcars analysis notebook."""
from __future__ import annotations

from .correlation import correlation_matrix, mask_weak, response_correlations, strong_pairs
from .data import load_mtcars
from .errors import (
    AnalysisError,
    InsufficientSampleError,
    NoFeasibleModelError,
    SingularDesignError,
)
from .hypothesis import WelchResult, compare_groups, welch_t_test
from .regression import FittedModel, ModelSpec, fit_ols
from .stepwise import StepRecord, StepwiseResult, stepwise_select

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "FittedModel",
    "InsufficientSampleError",
    "ModelSpec",
    "NoFeasibleModelError",
    "SingularDesignError",
    "StepRecord",
    "StepwiseResult",
    "WelchResult",
    "compare_groups",
    "correlation_matrix",
    "fit_ols",
    "load_mtcars",
    "mask_weak",
    "response_correlations",
    "stepwise_select",
    "strong_pairs",
    "welch_t_test",
]
