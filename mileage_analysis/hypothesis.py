"""Two-sample comparison of means (Welch's unequal-variance t-test)."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy import stats

from .errors import InsufficientSampleError
from .settings import ALPHA

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WelchResult:
    labels: tuple[str, str]
    n: tuple[int, int]
    means: tuple[float, float]
    mean_difference: float  # means[0] - means[1]
    statistic: float
    df: float
    p_value: float
    conf_int: tuple[float, float]
    alpha: float

    @property
    def reject_null(self) -> bool:
        return self.p_value < self.alpha

    @property
    def confidence_level(self) -> float:
        return 1.0 - self.alpha


def _clean_sample(x, label: str) -> np.ndarray:
    arr = np.asarray(x, dtype=float)
    arr = arr[~np.isnan(arr)]
    if arr.size < 2:
        raise InsufficientSampleError(
            f"Need at least 2 observations in group {label!r} (got {arr.size})."
        )
    return arr


def welch_t_test(
    sample_a,
    sample_b,
    labels: tuple[str, str] = ("a", "b"),
    alpha: float = ALPHA,
) -> WelchResult:
    """
    Welch's t-test for a difference in means, not assuming equal variances.

    The difference, statistic and confidence interval are all oriented as
    a - b; swapping the samples flips their sign and leaves p unchanged.
    """
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must be in (0, 1) (got {alpha!r})")

    a = _clean_sample(sample_a, labels[0])
    b = _clean_sample(sample_b, labels[1])

    res = stats.ttest_ind(a, b, equal_var=False)

    # Welch-Satterthwaite degrees of freedom
    va = a.var(ddof=1) / a.size
    vb = b.var(ddof=1) / b.size
    se = np.sqrt(va + vb)
    df = (va + vb) ** 2 / (va**2 / (a.size - 1) + vb**2 / (b.size - 1))

    diff = float(a.mean() - b.mean())
    t_crit = stats.t.ppf(1 - alpha / 2, df)

    result = WelchResult(
        labels=(str(labels[0]), str(labels[1])),
        n=(int(a.size), int(b.size)),
        means=(float(a.mean()), float(b.mean())),
        mean_difference=diff,
        statistic=float(res.statistic),
        df=float(df),
        p_value=float(res.pvalue),
        conf_int=(float(diff - t_crit * se), float(diff + t_crit * se)),
        alpha=alpha,
    )
    logger.debug("Welch t-test %s vs %s: t=%.4f df=%.3f p=%.4g",
                 result.labels[0], result.labels[1], result.statistic, result.df, result.p_value)
    return result


def compare_groups(
    df: pd.DataFrame,
    outcome: str,
    group: str,
    order: Optional[Sequence[str]] = None,
    alpha: float = ALPHA,
) -> WelchResult:
    """
    Split `outcome` by a two-level `group` column and run Welch's t-test.

    Group order follows `order`, else the categorical order, else sorted
    unique values.
    """
    for col in (outcome, group):
        if col not in df.columns:
            raise ValueError(f"Missing required column: {col}")

    if order is None:
        s = df[group]
        if isinstance(s.dtype, pd.CategoricalDtype):
            levels = [c for c in s.cat.categories if (s == c).any()]
        else:
            levels = sorted(pd.unique(s.dropna()))
    else:
        levels = list(order)

    if len(levels) != 2:
        raise ValueError(f"{group!r} must have exactly 2 levels to compare (found {levels})")

    x = df.loc[df[group] == levels[0], outcome]
    y = df.loc[df[group] == levels[1], outcome]

    return welch_t_test(x, y, labels=(str(levels[0]), str(levels[1])), alpha=alpha)
