"""Global settings shared by the notebook and the helper modules."""
from __future__ import annotations

import numpy as np
import pandas as pd
import seaborn as sns

RANDOM_SEED = 42

# Outcome and the effect we care about
RESPONSE = "mpg"
GROUP = "am"
FOCUS_TERM = "am[T.manual]"

ALPHA = 0.05
CORRELATION_THRESHOLD = 0.70
CORRELATION_METHOD = "pearson"

# Stepwise search
STEPWISE_DIRECTION = "both"
STEPWISE_CRITERION = "aic"
STEPWISE_MAX_STEPS = 1000

FIG_DPI = 150


def apply_display_settings() -> None:
    """Pandas display options + seaborn theme used throughout the notebook."""
    pd.set_option("display.max_columns", 200)
    pd.set_option("display.width", 140)
    pd.set_option("display.max_rows", 200)

    sns.set_theme(style="whitegrid", palette="muted")
    sns.set_context("notebook")

    np.random.seed(RANDOM_SEED)
