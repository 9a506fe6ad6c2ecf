"""Printable summaries used by the notebook's narrative cells."""
from __future__ import annotations

import pandas as pd

from .hypothesis import WelchResult
from .regression import FittedModel
from .stepwise import StepwiseResult


def coefficient_table(model: FittedModel) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "estimate": model.params,
            "std_err": model.bse,
            "t": model.tvalues,
            "p_value": model.pvalues,
        }
    )


def describe_effect(model: FittedModel, term: str, unit: str = "mpg", alpha: float = 0.05) -> str:
    """
    One-sentence reading of a coefficient, e.g.
    "am[T.manual]: +2.94 mpg (SE 1.41, p=0.0467), significant at alpha=0.05."
    """
    est = model.coef(term)
    se = float(model.bse[term])
    p = float(model.pvalues[term])
    verdict = "significant" if p < alpha else "not significant"
    return f"{term}: {est:+.2f} {unit} (SE {se:.2f}, p={p:.3g}), {verdict} at alpha={alpha:g}."


def print_welch_summary(result: WelchResult, outcome_label: str | None = None) -> None:
    a, b = result.labels
    outcome_text = outcome_label or "the outcome"
    lo, hi = result.conf_int

    print(f"\nWelch two-sample t-test: {outcome_text} by group ({a} vs {b})")
    print(f"  Mean({a}) = {result.means[0]:.3f}  (n={result.n[0]})")
    print(f"  Mean({b}) = {result.means[1]:.3f}  (n={result.n[1]})")
    print(f"\nDifference ({a} - {b}) = {result.mean_difference:+.3f}")
    print(f"{result.confidence_level:.0%} CI: [{lo:.3f}, {hi:.3f}]")
    print(f"t = {result.statistic:.4f}, df = {result.df:.3f}, p = {result.p_value:.4g}")

    if result.reject_null:
        print(f"Reject equal means at alpha={result.alpha:g}.")
    else:
        print(f"No evidence against equal means at alpha={result.alpha:g}.")


def print_model_summary(model: FittedModel, focus_term: str | None = None, label: str | None = None) -> None:
    print(f"\nOLS: {label or model.spec.formula}")
    print("-" * 36)
    print(f"N used: {model.nobs}  (residual df {model.df_resid:.0f})")
    print(f"R2 = {model.r_squared:.4f}, adj. R2 = {model.adj_r_squared:.4f}")
    print(f"AIC = {model.aic:.2f}, BIC = {model.bic:.2f}")
    print()
    print(coefficient_table(model).round(4).to_string())

    if focus_term is not None:
        if focus_term in model.params.index:
            print("\n" + describe_effect(model, focus_term))
        else:
            print(f"\n{focus_term}: (term not in model)")


def print_stepwise_trace(result: StepwiseResult) -> None:
    crit = result.criterion.upper()
    print(f"\nStepwise selection ({result.direction}, {crit}); {result.n_fits} fits")
    for rec in result.history:
        rhs = " + ".join(rec.predictors) if rec.predictors else "1"
        print(f"  {rec.step:<10} {crit}={rec.score:8.3f}   ~ {rhs}")

    delta = result.model.score(result.criterion) - result.start_model.score(result.criterion)
    print(f"\nFinal: {result.model.spec.formula}  ({crit} change vs start = {delta:+.3f})")
