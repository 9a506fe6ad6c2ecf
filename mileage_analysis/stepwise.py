"""
Greedy stepwise model selection scored by AIC (or BIC).

Each pass fits the current model, every single-predictor removal and every
single-predictor addition from the scope, and moves to the lowest score.
The search stops when no move beats the current model.

Ordering is deterministic: the current model is evaluated first, then
removals in current-set order, then additions in scope order. A candidate
only replaces the running best on a strictly lower score, so ties keep the
current model (or the earliest candidate evaluated).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from .errors import NoFeasibleModelError, SingularDesignError
from .regression import FittedModel, check_columns, fit_ols
from .settings import STEPWISE_CRITERION, STEPWISE_DIRECTION, STEPWISE_MAX_STEPS

logger = logging.getLogger(__name__)

DIRECTIONS = ("both", "backward", "forward")
CRITERIA = ("aic", "bic")


@dataclass(frozen=True)
class StepRecord:
    step: str  # "<start>", "- cyl", "+ hp"
    predictors: tuple[str, ...]
    score: float


@dataclass(frozen=True, eq=False)
class StepwiseResult:
    model: FittedModel
    start_model: FittedModel
    history: tuple[StepRecord, ...]
    criterion: str
    direction: str
    n_fits: int

    @property
    def predictors(self) -> tuple[str, ...]:
        return self.model.predictors

    @property
    def n_steps(self) -> int:
        return len(self.history) - 1

    def history_frame(self) -> pd.DataFrame:
        """Accepted moves as a table (one row per step, start included)."""
        rows = [
            {
                "step": r.step,
                "n_predictors": len(r.predictors),
                self.criterion: r.score,
                "formula": f"{self.model.spec.response} ~ "
                + (" + ".join(r.predictors) if r.predictors else "1"),
            }
            for r in self.history
        ]
        return pd.DataFrame(rows)


def _candidates(
    current: tuple[str, ...],
    scope: tuple[str, ...],
    direction: str,
) -> list[tuple[str, tuple[str, ...]]]:
    out = []
    if direction in ("both", "backward"):
        for p in current:
            out.append((f"- {p}", tuple(c for c in current if c != p)))
    if direction in ("both", "forward"):
        for p in scope:
            if p not in current:
                out.append((f"+ {p}", current + (p,)))
    return out


def stepwise_select(
    df: pd.DataFrame,
    response: str,
    start: Optional[Sequence[str]] = None,
    scope: Optional[Sequence[str]] = None,
    direction: str = STEPWISE_DIRECTION,
    criterion: str = STEPWISE_CRITERION,
    max_steps: int = STEPWISE_MAX_STEPS,
) -> StepwiseResult:
    """
    Search for a locally score-minimising predictor set.

    Parameters
    ----------
    df : DataFrame
    response : str
    start : sequence of str, optional
        Starting predictor set. Defaults to the whole scope (full model).
    scope : sequence of str, optional
        Predictors the search may use. Defaults to every column of `df`
        except the response, in column order.
    direction : {"both", "backward", "forward"}
    criterion : {"aic", "bic"}
    max_steps : int
        Upper bound on accepted moves.

    Raises
    ------
    ValueError
        If the scope names unknown columns or the response, or if the
        response or any scope column holds missing values.
    NoFeasibleModelError
        If the starting model cannot be fitted.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"direction must be one of {DIRECTIONS} (got {direction!r})")
    if criterion not in CRITERIA:
        raise ValueError(f"criterion must be one of {CRITERIA} (got {criterion!r})")
    if response not in df.columns:
        raise ValueError(f"Missing required column: {response}")

    if scope is None:
        scope = [c for c in df.columns if c != response]
    scope = tuple(scope)
    check_columns(df, response, scope)
    start = scope if start is None else tuple(start)

    outside = [p for p in start if p not in scope]
    if outside:
        raise ValueError(f"start predictors {outside} are not in scope {list(scope)}")

    try:
        current = fit_ols(df, response, start)
    except SingularDesignError as exc:
        raise NoFeasibleModelError(f"Cannot fit starting model: {exc}") from exc

    start_model = current
    history = [StepRecord("<start>", current.predictors, current.score(criterion))]
    n_fits = 1
    logger.info("Start: %s=%.3f  %s", criterion.upper(), history[0].score, current.spec.formula)

    for _ in range(max_steps):
        best, best_label = current, None
        best_score = current.score(criterion)

        for label, predictors in _candidates(current.predictors, scope, direction):
            try:
                cand = fit_ols(df, response, predictors)
            except SingularDesignError as exc:
                logger.debug("Skipping %s: %s", label, exc)
                continue
            n_fits += 1

            score = cand.score(criterion)
            if score < best_score:
                best, best_label, best_score = cand, label, score

        if best_label is None:
            break

        current = best
        history.append(StepRecord(best_label, current.predictors, best_score))
        logger.info("Step %s: %s=%.3f  %s", best_label, criterion.upper(), best_score, current.spec.formula)
    else:
        logger.warning("Stepwise search stopped after max_steps=%d moves", max_steps)

    return StepwiseResult(
        model=current,
        start_model=start_model,
        history=tuple(history),
        criterion=criterion,
        direction=direction,
        n_fits=n_fits,
    )
