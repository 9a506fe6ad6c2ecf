"""
Ordinary least squares fits through the statsmodels formula interface.

Every fit returns an immutable `FittedModel`. Categorical predictors are
treatment-coded against their first category, so a two-level factor such as
`am` contributes a single design column (`am[T.manual]`).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np
import pandas as pd
import statsmodels.formula.api as smf

from .errors import SingularDesignError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelSpec:
    response: str
    predictors: tuple[str, ...] = ()

    @property
    def formula(self) -> str:
        rhs = " + ".join(self.predictors) if self.predictors else "1"
        return f"{self.response} ~ {rhs}"

    def __str__(self) -> str:
        return self.formula


@dataclass(frozen=True, eq=False)
class FittedModel:
    spec: ModelSpec
    params: pd.Series
    bse: pd.Series
    tvalues: pd.Series
    pvalues: pd.Series
    residuals: pd.Series
    fitted_values: pd.Series
    nobs: int
    df_resid: float
    ss_res: float
    r_squared: float
    adj_r_squared: float
    aic: float
    bic: float
    results: Any = field(repr=False, compare=False)

    @property
    def predictors(self) -> tuple[str, ...]:
        return self.spec.predictors

    @property
    def n_params(self) -> int:
        return int(len(self.params))

    def score(self, criterion: str = "aic") -> float:
        if criterion == "aic":
            return self.aic
        if criterion == "bic":
            return self.bic
        raise ValueError(f"criterion must be one of 'aic', 'bic' (got {criterion!r})")

    def coef(self, term: str) -> float:
        if term not in self.params.index:
            raise KeyError(f"{term!r} not in model terms: {list(self.params.index)}")
        return float(self.params[term])


def information_criteria(nobs: int, ss_res: float, n_params: int) -> tuple[float, float]:
    """
    AIC and BIC on the residual-sum-of-squares scale:

        AIC = n * ln(SS_res / n) + 2k
        BIC = n * ln(SS_res / n) + ln(n) * k

    These differ from the likelihood-based values statsmodels reports by a
    constant for fixed n, so model rankings are identical.
    """
    with np.errstate(divide="ignore"):
        base = nobs * np.log(ss_res / nobs)
    return float(base + 2 * n_params), float(base + np.log(nobs) * n_params)


def check_columns(df: pd.DataFrame, response: str, predictors: Sequence[str]) -> None:
    """
    Validate a response/predictor selection against `df`.

    Missing values are rejected rather than dropped: every model compared on
    the same frame must be fitted on the same rows.
    """
    missing = [c for c in [response, *predictors] if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    if response in predictors:
        raise ValueError(f"response={response!r} cannot also be a predictor")
    if len(set(predictors)) != len(predictors):
        raise ValueError(f"Duplicate predictors: {list(predictors)}")

    n_na = df[[response, *predictors]].isna().sum()
    n_na = n_na[n_na > 0]
    if not n_na.empty:
        counts = {c: int(v) for c, v in n_na.items()}
        raise ValueError(f"Missing values in model columns: {counts}")


def fit_ols(df: pd.DataFrame, response: str, predictors: Sequence[str] = ()) -> FittedModel:
    """
    Fit `response ~ predictors` by OLS.

    An empty `predictors` fits the intercept-only model.

    Raises ValueError if a model column holds missing values, and
    SingularDesignError if the design matrix (intercept + predictors)
    is rank-deficient or leaves no residual degrees of freedom.
    """
    predictors = tuple(predictors)
    check_columns(df, response, predictors)

    spec = ModelSpec(response=response, predictors=predictors)
    model = smf.ols(spec.formula, data=df, missing="raise")

    exog = model.exog
    n, k = exog.shape
    rank = int(np.linalg.matrix_rank(exog))
    if rank < k:
        raise SingularDesignError(
            f"Design matrix for '{spec.formula}' is rank-deficient (rank {rank} < {k} columns)."
        )
    if n <= k:
        raise SingularDesignError(
            f"'{spec.formula}' has {k} parameters for {n} rows; no residual degrees of freedom."
        )

    res = model.fit()

    ss_res = float(res.ssr)
    aic, bic = information_criteria(int(res.nobs), ss_res, len(res.params))

    fitted = FittedModel(
        spec=spec,
        params=res.params,
        bse=res.bse,
        tvalues=res.tvalues,
        pvalues=res.pvalues,
        residuals=res.resid,
        fitted_values=res.fittedvalues,
        nobs=int(res.nobs),
        df_resid=float(res.df_resid),
        ss_res=ss_res,
        r_squared=float(res.rsquared),
        adj_r_squared=float(res.rsquared_adj),
        aic=aic,
        bic=bic,
        results=res,
    )
    logger.debug("Fitted %s: R2=%.4f AIC=%.3f", spec.formula, fitted.r_squared, fitted.aic)
    return fitted
