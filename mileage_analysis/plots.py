"""
Plotting helpers for the notebook.

Each helper draws a new figure and returns it; the notebook decides whether to
save (`save_fig`) and/or show it.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
import statsmodels.api as sm

from .regression import FittedModel
from .settings import FIG_DPI


def save_fig(fig: plt.Figure, name: str, output_dir: Path) -> Path:
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / f"{name}.png"
    fig.savefig(path, dpi=FIG_DPI, bbox_inches="tight")
    print("Saved:", path)
    return path


def plot_numeric_hist(df: pd.DataFrame, col: str, bins: int = 10, kde: bool = True) -> plt.Figure:
    """
    Histogram with optional KDE overlay.
    """
    fig = plt.figure(figsize=(10, 5))
    sns.histplot(data=df, x=col, bins=bins, kde=kde, stat="count")
    plt.title(f"Distribution: {col}")
    plt.xlabel(col)
    plt.ylabel("Count")
    plt.tight_layout()
    return fig


def boxplot_by_group(
    df: pd.DataFrame,
    group_col: str,
    value_col: str,
    showfliers: bool = True,
    show_points: bool = True,
) -> plt.Figure:
    """
    Grouped boxplot, with the raw observations jittered on top (n is small).
    """
    plot_df = df[[group_col, value_col]].dropna()

    fig = plt.figure(figsize=(8, 6))
    sns.boxplot(
        data=plot_df, x=group_col, y=value_col, hue=group_col,
        palette="Set2", showfliers=showfliers, legend=False,
    )
    if show_points:
        sns.stripplot(data=plot_df, x=group_col, y=value_col, color="black", alpha=0.6, jitter=0.15)
    plt.title(f"{value_col} by {group_col}")
    plt.xlabel(group_col)
    plt.ylabel(value_col)
    plt.tight_layout()
    return fig


def plot_pairs(df: pd.DataFrame, cols: list[str], hue: Optional[str] = None) -> plt.Figure:
    """Scatterplot matrix of `cols`, optionally coloured by `hue`."""
    vars_ = [c for c in cols if c != hue]
    g = sns.pairplot(df[vars_ + ([hue] if hue else [])], vars=vars_, hue=hue, corner=True,
                     plot_kws={"alpha": 0.7, "s": 30})
    g.figure.suptitle("Pairwise relationships", y=1.02)
    return g.figure


def plot_correlation_heatmap(
    corr: pd.DataFrame,
    annot: bool = True,
    cmap: str = "coolwarm",
    threshold: Optional[float] = None,
) -> plt.Figure:
    """
    Correlation heatmap. With `threshold`, cells with |r| below it are blanked.
    """
    mask = None
    if threshold is not None:
        mask = (corr.abs() < threshold).to_numpy(copy=True)
        np.fill_diagonal(mask, False)

    fig = plt.figure(figsize=(max(8, len(corr.columns) * 0.7), max(6, len(corr.columns) * 0.6)))
    sns.heatmap(corr, mask=mask, annot=annot, fmt=".2f", cmap=cmap, center=0, vmin=-1, vmax=1,
                square=True, linewidths=0.5, cbar_kws={"shrink": 0.8})
    title = "Correlation Matrix (Pearson)"
    if threshold is not None:
        title += f", |r| >= {threshold:.2f}"
    plt.title(title)
    plt.tight_layout()
    return fig


def plot_scatter_with_regression(df: pd.DataFrame, x_col: str, y_col: str, hue: Optional[str] = None) -> plt.Figure:
    """
    Scatter plot with a fitted line (one per `hue` level when given).
    """
    if hue:
        g = sns.lmplot(data=df, x=x_col, y=y_col, hue=hue, height=6, aspect=1.3, scatter_kws={"alpha": 0.6})
        g.set_axis_labels(x_col, y_col)
        g.figure.suptitle(f"{y_col} vs {x_col} by {hue}", y=1.02)
        return g.figure

    fig = plt.figure(figsize=(10, 6))
    sns.regplot(data=df, x=x_col, y=y_col, scatter_kws={"alpha": 0.6})
    plt.title(f"{y_col} vs {x_col}")
    plt.xlabel(x_col)
    plt.ylabel(y_col)
    plt.tight_layout()
    return fig


def plot_residual_diagnostics(model: FittedModel) -> plt.Figure:
    """
    The usual four regression diagnostics:
    residuals vs fitted, normal Q-Q, scale-location, residuals vs leverage.
    """
    fitted = model.fitted_values.to_numpy()
    resid = model.residuals.to_numpy()
    influence = model.results.get_influence()
    std_resid = influence.resid_studentized_internal
    leverage = influence.hat_matrix_diag

    fig, axes = plt.subplots(2, 2, figsize=(12, 10))

    ax = axes[0, 0]
    sns.regplot(x=fitted, y=resid, lowess=True, ax=ax, scatter_kws={"alpha": 0.6},
                line_kws={"color": "red", "lw": 1})
    ax.axhline(0, color="black", linestyle="--", lw=1)
    ax.set_title("Residuals vs Fitted")
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("Residuals")

    ax = axes[0, 1]
    sm.qqplot(std_resid, line="45", ax=ax)
    ax.set_title("Normal Q-Q")

    ax = axes[1, 0]
    sns.regplot(x=fitted, y=np.sqrt(np.abs(std_resid)), lowess=True, ax=ax, scatter_kws={"alpha": 0.6},
                line_kws={"color": "red", "lw": 1})
    ax.set_title("Scale-Location")
    ax.set_xlabel("Fitted values")
    ax.set_ylabel("sqrt(|Standardized residuals|)")

    ax = axes[1, 1]
    ax.scatter(leverage, std_resid, alpha=0.6)
    ax.axhline(0, color="black", linestyle="--", lw=1)
    ax.set_title("Residuals vs Leverage")
    ax.set_xlabel("Leverage")
    ax.set_ylabel("Standardized residuals")

    # label the three most extreme points by name
    for i in np.argsort(np.abs(std_resid))[-3:]:
        axes[0, 0].annotate(str(model.residuals.index[i]), (fitted[i], resid[i]), fontsize=8)
        ax.annotate(str(model.residuals.index[i]), (leverage[i], std_resid[i]), fontsize=8)

    fig.suptitle(f"Diagnostics: {model.spec.formula}")
    fig.tight_layout()
    return fig
