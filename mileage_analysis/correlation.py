"""Correlation screen used to pick candidate confounders by eye."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .settings import CORRELATION_METHOD, CORRELATION_THRESHOLD

logger = logging.getLogger(__name__)


def _check_threshold(threshold: float) -> None:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"threshold must be in [0, 1] (got {threshold!r})")


def correlation_matrix(
    df: pd.DataFrame,
    columns: Optional[Sequence[str]] = None,
    method: str = CORRELATION_METHOD,
) -> pd.DataFrame:
    """
    Pairwise correlation over the numeric columns of `df`.

    The result is symmetric with an exact 1.0 diagonal, even for columns
    whose correlations are undefined (constant columns give NaN off-diagonal).
    """
    num = df[list(columns)] if columns is not None else df
    num = num.select_dtypes(include=[np.number])
    if num.shape[1] < 1:
        raise ValueError("Need at least 1 numeric column for correlation.")

    corr = num.corr(method=method)

    # pandas can leave 0.9999999999999998 on the diagonal and tiny asymmetries
    values = corr.to_numpy(copy=True)
    values = (values + values.T) / 2.0
    np.fill_diagonal(values, 1.0)
    values = np.clip(values, -1.0, 1.0)

    return pd.DataFrame(values, index=corr.index, columns=corr.columns)


def mask_weak(corr: pd.DataFrame, threshold: float = CORRELATION_THRESHOLD) -> pd.DataFrame:
    """Keep entries with |r| >= threshold, NaN elsewhere."""
    _check_threshold(threshold)
    return corr.where(corr.abs() >= threshold)


def strong_pairs(corr: pd.DataFrame, threshold: float = CORRELATION_THRESHOLD) -> pd.DataFrame:
    """
    Off-diagonal pairs with |r| >= threshold, each pair listed once.

    Returns columns var_1, var_2, r, abs_r sorted by abs_r (descending).
    """
    _check_threshold(threshold)

    cols = list(corr.columns)
    records = []
    for i, a in enumerate(cols):
        for b in cols[i + 1:]:
            r = corr.loc[a, b]
            if pd.notna(r) and abs(r) >= threshold:
                records.append({"var_1": a, "var_2": b, "r": float(r), "abs_r": float(abs(r))})

    out = pd.DataFrame(records, columns=["var_1", "var_2", "r", "abs_r"])
    logger.debug("%d pairs at |r| >= %.2f", len(out), threshold)
    return out.sort_values("abs_r", ascending=False, kind="mergesort").reset_index(drop=True)


def response_correlations(corr: pd.DataFrame, response: str) -> pd.Series:
    """Correlations of every other column with `response`, strongest first."""
    if response not in corr.columns:
        raise ValueError(f"response={response!r} not found in correlation matrix columns")

    s = corr[response].drop(index=response)
    order = s.abs().sort_values(ascending=False, kind="mergesort").index
    return s.loc[order]
