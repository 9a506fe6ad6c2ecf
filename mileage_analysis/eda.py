"""
First-look tables for the car data: what each column is, how the two-level
factors split, and how the response differs across groups.
"""
from __future__ import annotations

import numpy as np
import pandas as pd

from .data import COLUMN_LABELS


def factor_levels(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per level of every categorical column, in category order.

    The first level is the treatment-coding reference, i.e. the level the
    regression coefficients (`am[T.manual]`, ...) are measured against.
    """
    rows = []
    for c in df.select_dtypes(include="category").columns:
        counts = df[c].value_counts(sort=False)
        for i, (level, n) in enumerate(counts.items()):
            rows.append(
                {
                    "col": c,
                    "level": level,
                    "n": int(n),
                    "share": n / len(df),
                    "reference": i == 0,
                }
            )
    return pd.DataFrame(rows, columns=["col", "level", "n", "share", "reference"])


def df_overview(df: pd.DataFrame, n: int = 5) -> None:
    print(f"{df.shape[0]} cars x {df.shape[1]} columns")
    print(df.head(n))

    n_missing = df.isna().sum()
    n_missing = n_missing[n_missing > 0]
    print("\nMissing values:", "none" if n_missing.empty else {c: int(v) for c, v in n_missing.items()})

    levels = factor_levels(df)
    if not levels.empty:
        print("\nFactor levels (reference first):")
        for col, grp in levels.groupby("col", sort=False):
            parts = ", ".join(f"{lvl}={n}" for lvl, n in zip(grp["level"], grp["n"]))
            print(f"  {col}: {parts}")


def col_profile(df: pd.DataFrame, max_discrete: int = 6) -> pd.DataFrame:
    """
    Column dictionary: description, dtype and whether a column is a labelled
    factor, a small-integer count (cyl, gear, carb) or continuous.
    """
    out = []
    for c in df.columns:
        s = df[c]
        n_unique = int(s.nunique(dropna=True))
        if isinstance(s.dtype, pd.CategoricalDtype):
            kind, values = "factor", list(s.cat.categories)
        elif n_unique <= max_discrete:
            kind, values = "discrete", sorted(s.dropna().unique().tolist())
        else:
            kind, values = "continuous", []
        out.append(
            {
                "col": c,
                "description": COLUMN_LABELS.get(c, ""),
                "dtype": str(s.dtype),
                "kind": kind,
                "n_missing": int(s.isna().sum()),
                "n_unique": n_unique,
                "values": values,
            }
        )
    return pd.DataFrame(out)


def numeric_summary(df: pd.DataFrame) -> pd.DataFrame:
    num = df.select_dtypes(include=[np.number])
    if num.empty:
        return pd.DataFrame()
    out = num.describe(percentiles=[0.25, 0.5, 0.75]).T
    out["skew"] = num.skew()
    return out


def group_summary(df: pd.DataFrame, group_col: str, target_col: str) -> pd.DataFrame:
    """Response by group, with each group's mean difference from the first (reference) group."""
    out = (
        df.groupby(group_col, observed=True)[target_col]
        .agg(["count", "mean", "median", "std"])
        .reset_index()
    )
    out["diff_vs_reference"] = out["mean"] - out["mean"].iloc[0]
    return out
