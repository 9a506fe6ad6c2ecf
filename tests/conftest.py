import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from mileage_analysis.data import load_mtcars


@pytest.fixture
def mtcars():
    return load_mtcars()


@pytest.fixture
def mtcars_codes():
    return load_mtcars(labelled=False)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
