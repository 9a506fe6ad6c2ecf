# %% [markdown]
# # Manual vs Automatic Transmission: Effect on Fuel Economy
#
# This notebook analyzes the 1974 *Motor Trend* road tests of 32 cars to answer two questions:
#
# 1. Is an automatic or a manual transmission better for MPG?
# 2. How large is the MPG difference between the two, once other car characteristics are accounted for?
#
# Approach:
# - Explore the data and how MPG relates to transmission and the other variables
# - Compare mean MPG between groups with a Welch two-sample t-test
# - Fit a simple regression `mpg ~ am`
# - Screen correlations, then run AIC-driven stepwise selection from the full model to adjust for confounders
# - Check the selected model's diagnostics and summarize

# %% [markdown]
# ## 0) Imports, settings, paths

# %%
from __future__ import annotations

import logging
import sys
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from mileage_analysis import settings
from mileage_analysis.correlation import correlation_matrix, mask_weak, response_correlations, strong_pairs
from mileage_analysis.data import load_mtcars
from mileage_analysis.diagnostics import compare_nested, residual_summary, variance_inflation
from mileage_analysis.eda import col_profile, df_overview, factor_levels, group_summary, numeric_summary
from mileage_analysis.hypothesis import compare_groups
from mileage_analysis.plots import (
    boxplot_by_group,
    plot_correlation_heatmap,
    plot_numeric_hist,
    plot_pairs,
    plot_residual_diagnostics,
    plot_scatter_with_regression,
    save_fig,
)
from mileage_analysis.regression import fit_ols
from mileage_analysis.reporting import print_model_summary, print_stepwise_trace, print_welch_summary
from mileage_analysis.stepwise import stepwise_select

settings.apply_display_settings()
logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

print("Python:", sys.version)

# %%
# Paths
# If running as a notebook (no __file__), fallback to cwd.
try:
    ANALYSIS_DIR = Path(__file__).resolve().parent
except NameError:
    ANALYSIS_DIR = Path.cwd()

PROJECT_ROOT = ANALYSIS_DIR.parent
CLEAN_DIR = PROJECT_ROOT / "clean_data"
OUTPUT_DIR = PROJECT_ROOT / "output"

for d in [CLEAN_DIR, OUTPUT_DIR]:
    d.mkdir(parents=True, exist_ok=True)

print("PROJECT_ROOT:", PROJECT_ROOT)
print("CLEAN_DIR:", CLEAN_DIR)
print("OUTPUT_DIR:", OUTPUT_DIR)

# %% [markdown]
# ## 1) Load data
#
# The data ships with the package (no raw file). `am` and `vs` come in as 0/1 codes and are
# relabelled to `automatic`/`manual` and `V-shaped`/`straight`. A second, unlabelled copy keeps
# the raw codes for the correlation screen.

# %%
df = load_mtcars()
df_codes = load_mtcars(labelled=False)
df.head()

# %% [markdown]
# ## 2) Dataset overview / quick EDA

# %%
df_overview(df)

# %%
col_profile(df)

# %%
# Coefficients on am/vs are read against the reference (first) level.
factor_levels(df)

# %%
numeric_summary(df)

# %%
# Transmission split is a little unbalanced (19 automatic, 13 manual) but fine for a t-test.
group_summary(df, settings.GROUP, settings.RESPONSE)

# %%
# MPG is right-skewed with a handful of very economical 4-cylinder cars.
fig = plot_numeric_hist(df, settings.RESPONSE)
save_fig(fig, "mpg_distribution", OUTPUT_DIR)
plt.show()

# %%
# Manual cars sit clearly higher, but the spread among manuals is also larger.
fig = boxplot_by_group(df, settings.GROUP, settings.RESPONSE)
save_fig(fig, "mpg_by_transmission", OUTPUT_DIR)
plt.show()

# %%
# Weight looks like the obvious confounder: manual cars in this sample are mostly light.
fig = plot_pairs(df, ["mpg", "wt", "hp", "disp", "qsec", "am"], hue="am")
save_fig(fig, "pairs_by_transmission", OUTPUT_DIR)
plt.show()

# %%
fig = plot_scatter_with_regression(df, "wt", settings.RESPONSE, hue=settings.GROUP)
save_fig(fig, "mpg_vs_weight_by_transmission", OUTPUT_DIR)
plt.show()

# %% [markdown]
# ## 3) Difference in means (Welch two-sample t-test)
#
# H0: mean MPG is equal for automatic and manual cars.
# Variances look different between groups, so we do not pool them.

# %%
welch = compare_groups(df, outcome=settings.RESPONSE, group=settings.GROUP, alpha=settings.ALPHA)
print_welch_summary(welch, outcome_label="MPG")

# %% [markdown]
# Manual cars average roughly 7 MPG more than automatics and the difference is significant.
# This says nothing yet about *why*: transmission type is tangled up with weight, engine size
# and power, so the raw gap likely overstates the transmission effect.

# %% [markdown]
# ## 4) Simple regression: mpg ~ am

# %%
simple_model = fit_ols(df, settings.RESPONSE, [settings.GROUP])
print_model_summary(simple_model, focus_term=settings.FOCUS_TERM, label="mpg ~ am")

# %% [markdown]
# The coefficient equals the difference in group means. R² is only about 0.36, so
# transmission alone leaves most of the variation in MPG unexplained.

# %% [markdown]
# ## 5) Correlation screen
#
# Which variables move with MPG, and which of them move together? Pairs at |r| >= 0.70
# are candidates for confounding or redundancy.

# %%
corr = correlation_matrix(df_codes)
response_correlations(corr, settings.RESPONSE).round(3)

# %%
strong_pairs(corr, threshold=settings.CORRELATION_THRESHOLD).round(3)

# %%
mask_weak(corr, threshold=settings.CORRELATION_THRESHOLD).round(2)

# %%
# cyl, disp, hp and wt form a tight block; all are strongly (negatively) related to MPG.
fig = plot_correlation_heatmap(corr, threshold=settings.CORRELATION_THRESHOLD)
save_fig(fig, "correlation_heatmap", OUTPUT_DIR)
plt.show()

# %% [markdown]
# ## 6) Model selection (stepwise, AIC)
#
# Start from the full model (all ten predictors) and let bidirectional stepwise search
# add/drop one predictor at a time while AIC keeps falling. Since the correlated block above
# makes the full model heavily redundant, we expect most of it to be dropped.

# %%
full_model = fit_ols(df, settings.RESPONSE, [c for c in df.columns if c != settings.RESPONSE])
print_model_summary(full_model, focus_term=settings.FOCUS_TERM, label="mpg ~ . (full model)")

# %%
# The full model is badly over-specified.
variance_inflation(full_model).sort_values("vif", ascending=False).round(2)

# %%
step = stepwise_select(
    df,
    settings.RESPONSE,
    direction=settings.STEPWISE_DIRECTION,
    criterion=settings.STEPWISE_CRITERION,
)
print_stepwise_trace(step)
step.history_frame()

# %%
best_model = step.model
print_model_summary(best_model, focus_term=settings.FOCUS_TERM, label="selected model")

# %%
# Sensitivity check: the search also lands on the same set going backward only,
# and re-running from the selected model changes nothing.
backward = stepwise_select(df, settings.RESPONSE, direction="backward")
rerun = stepwise_select(df, settings.RESPONSE, start=step.predictors)
print("Backward-only:", backward.predictors)
print("Re-run from selected:", rerun.predictors, f"({rerun.n_steps} moves)")

# %%
variance_inflation(best_model).round(2)

# %%
# Is the adjustment worth it? Nested F test of mpg ~ am against the selected model.
nested = compare_nested(simple_model, best_model)
print(nested["table"])
print(f"\nF = {nested['f_stat']:.2f} on {nested['df_diff']:.0f} extra df, p = {nested['p_value']:.3g}")

# %% [markdown]
# ## 7) Diagnostics for the selected model

# %%
fig = plot_residual_diagnostics(best_model)
save_fig(fig, "selected_model_diagnostics", OUTPUT_DIR)
plt.show()

# %%
resid_check = residual_summary(best_model)
print(f"Shapiro-Wilk on residuals: W={resid_check['shapiro_stat']:.3f}, p={resid_check['shapiro_p']:.3f}")
print("Residual quantiles:", {k: round(v, 2) for k, v in resid_check["quantiles"].items()})

# %% [markdown]
# Residuals show no strong pattern against fitted values and are roughly normal. Chrysler
# Imperial, Fiat 128 and Toyota Corolla have the largest residuals but do not dominate the fit.

# %% [markdown]
# ## 8) Save artefacts

# %%
df.to_csv(CLEAN_DIR / "mtcars_labelled.csv")
step.history_frame().to_csv(OUTPUT_DIR / "stepwise_history.csv", index=False)
print("Saved:", CLEAN_DIR / "mtcars_labelled.csv")
print("Saved:", OUTPUT_DIR / "stepwise_history.csv")

# %% [markdown]
# ## 9) Writeup / conclusions

# %%
manual_raw = simple_model.coef(settings.FOCUS_TERM)
manual_adj = best_model.coef(settings.FOCUS_TERM)
lo, hi = best_model.results.conf_int(alpha=settings.ALPHA).loc[settings.FOCUS_TERM]

print(
    f"Unadjusted: manual cars get {manual_raw:+.2f} MPG vs automatic "
    f"(Welch p={welch.p_value:.4f}; R2={simple_model.r_squared:.2f}).\n"
    f"Adjusted for {', '.join(p for p in best_model.predictors if p != settings.GROUP)}: "
    f"{manual_adj:+.2f} MPG "
    f"({1 - settings.ALPHA:.0%} CI {lo:+.2f} to {hi:+.2f}, p={best_model.pvalues[settings.FOCUS_TERM]:.3f}; "
    f"R2={best_model.r_squared:.4f})."
)

# %% [markdown]
# **What did we find?**
# - Manual cars average about 7.2 MPG more than automatics, and the difference is significant.
# - Most of that gap is explained by weight and acceleration (quarter-mile time). Holding those
#   fixed, a manual transmission is worth roughly +2.9 MPG, significant at the 5% level.
# - The selected model `mpg ~ wt + qsec + am` explains about 85% of the variance in MPG.
#
# **Limitations**
# - 32 cars from a single year; the design is observational, so this is association not causation.
# - Manual and automatic cars barely overlap in weight, so the adjusted estimate leans on
#   extrapolation across that gap.
# - Stepwise search finds a local optimum that depends on the starting model.
