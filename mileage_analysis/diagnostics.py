"""Model comparison and assumption checks for fitted OLS models."""
from __future__ import annotations

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.anova import anova_lm
from statsmodels.stats.outliers_influence import variance_inflation_factor

from .regression import FittedModel


def compare_nested(reduced: FittedModel, full: FittedModel) -> dict:
    """
    F test of a reduced model against a full model that nests it.

    Returns a dict with the ANOVA table plus the F statistic, p-value and the
    number of extra parameters.
    """
    if reduced.spec.response != full.spec.response:
        raise ValueError(
            f"Models have different responses: {reduced.spec.response!r} vs {full.spec.response!r}"
        )
    extra = set(reduced.predictors) - set(full.predictors)
    if extra:
        raise ValueError(f"Reduced model is not nested in full model; extra predictors: {sorted(extra)}")
    if reduced.nobs != full.nobs:
        raise ValueError(f"Models were fitted on different rows ({reduced.nobs} vs {full.nobs})")

    table = anova_lm(reduced.results, full.results)

    return {
        "table": table,
        "f_stat": float(table["F"].iloc[1]),
        "p_value": float(table["Pr(>F)"].iloc[1]),
        "df_diff": float(table["df_diff"].iloc[1]),
        "ss_diff": float(table["ss_diff"].iloc[1]),
    }


def variance_inflation(model: FittedModel) -> pd.DataFrame:
    """VIF for every non-intercept design column of `model`."""
    exog = model.results.model.exog
    names = model.results.model.exog_names

    rows = []
    for i, col in enumerate(names):
        if col == "Intercept":
            continue
        rows.append({"term": col, "vif": float(variance_inflation_factor(exog, i))})
    return pd.DataFrame(rows, columns=["term", "vif"])


def residual_summary(model: FittedModel) -> dict:
    """Shapiro-Wilk normality check + residual quantiles."""
    resid = model.residuals.to_numpy()
    sw = stats.shapiro(resid)
    q = np.quantile(resid, [0.0, 0.25, 0.5, 0.75, 1.0])

    return {
        "n": int(resid.size),
        "mean": float(resid.mean()),
        "std": float(resid.std(ddof=1)),
        "quantiles": dict(zip(["min", "q1", "median", "q3", "max"], map(float, q))),
        "shapiro_stat": float(sw.statistic),
        "shapiro_p": float(sw.pvalue),
    }
