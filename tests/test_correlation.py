import numpy as np
import pandas as pd
import pytest

from mileage_analysis.correlation import (
    correlation_matrix,
    mask_weak,
    response_correlations,
    strong_pairs,
)


class TestCorrelationMatrix:
    def test_symmetric_with_unit_diagonal(self, mtcars_codes):
        corr = correlation_matrix(mtcars_codes)

        assert corr.shape == (11, 11)
        assert np.array_equal(corr.to_numpy(), corr.to_numpy().T)
        assert (np.diag(corr.to_numpy()) == 1.0).all()
        assert (corr.abs().to_numpy() <= 1.0).all()

    def test_random_data(self):
        rng = np.random.default_rng(0)
        df = pd.DataFrame(rng.normal(size=(50, 6)), columns=list("abcdef"))
        corr = correlation_matrix(df)

        assert np.array_equal(corr.to_numpy(), corr.to_numpy().T)
        assert (np.diag(corr.to_numpy()) == 1.0).all()

    def test_constant_column_keeps_unit_diagonal(self):
        df = pd.DataFrame({"x": [1.0, 2.0, 3.0], "c": [5.0, 5.0, 5.0]})
        corr = correlation_matrix(df)

        assert corr.loc["c", "c"] == 1.0
        assert np.isnan(corr.loc["x", "c"])

    def test_categoricals_are_skipped(self, mtcars):
        corr = correlation_matrix(mtcars)
        assert "am" not in corr.columns
        assert "vs" not in corr.columns
        assert "wt" in corr.columns

    def test_known_values(self, mtcars_codes):
        corr = correlation_matrix(mtcars_codes)
        assert corr.loc["mpg", "wt"] == pytest.approx(-0.8677, abs=1e-4)
        assert corr.loc["cyl", "disp"] == pytest.approx(0.9020, abs=1e-4)
        assert corr.loc["mpg", "am"] == pytest.approx(0.5998, abs=1e-4)

    def test_no_numeric_columns(self):
        with pytest.raises(ValueError):
            correlation_matrix(pd.DataFrame({"s": ["a", "b"]}))


class TestScreening:
    @pytest.fixture
    def corr(self, mtcars_codes):
        return correlation_matrix(mtcars_codes)

    def test_mask_weak(self, corr):
        masked = mask_weak(corr, 0.70)

        vals = masked.abs().to_numpy()
        assert (vals[~np.isnan(vals)] >= 0.70).all()
        assert masked.loc["mpg", "wt"] == corr.loc["mpg", "wt"]
        assert np.isnan(masked.loc["mpg", "qsec"])
        assert (np.diag(masked.to_numpy()) == 1.0).all()

    def test_strong_pairs(self, corr):
        pairs = strong_pairs(corr, 0.70)

        assert list(pairs.columns) == ["var_1", "var_2", "r", "abs_r"]
        assert (pairs["abs_r"] >= 0.70).all()
        assert pairs["abs_r"].is_monotonic_decreasing
        assert (pairs["var_1"] != pairs["var_2"]).all()
        assert pairs.iloc[0][["var_1", "var_2"]].tolist() == ["cyl", "disp"]

    def test_strong_pairs_each_pair_once(self, corr):
        pairs = strong_pairs(corr, 0.0)
        n = len(corr.columns)
        assert len(pairs) == n * (n - 1) // 2

    def test_response_correlations(self, corr):
        s = response_correlations(corr, "mpg")

        assert "mpg" not in s.index
        assert s.index[0] == "wt"
        assert s.abs().is_monotonic_decreasing

    @pytest.mark.parametrize("threshold", [-0.1, 1.5])
    def test_bad_threshold(self, corr, threshold):
        with pytest.raises(ValueError, match="threshold"):
            mask_weak(corr, threshold)
        with pytest.raises(ValueError, match="threshold"):
            strong_pairs(corr, threshold)

    def test_unknown_response(self, corr):
        with pytest.raises(ValueError, match="not found"):
            response_correlations(corr, "price")
