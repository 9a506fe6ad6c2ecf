import numpy as np
import pandas as pd
import pytest

from mileage_analysis.errors import SingularDesignError
from mileage_analysis.regression import ModelSpec, fit_ols, information_criteria


class TestModelSpec:
    def test_formula(self):
        assert ModelSpec("mpg", ("wt", "am")).formula == "mpg ~ wt + am"
        assert ModelSpec("mpg").formula == "mpg ~ 1"
        assert str(ModelSpec("mpg", ("wt",))) == "mpg ~ wt"


class TestFitOlsMtcars:
    def test_transmission_only(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["am"])

        assert list(m.params.index) == ["Intercept", "am[T.manual]"]
        assert m.coef("Intercept") == pytest.approx(17.147, abs=1e-3)
        assert m.coef("am[T.manual]") == pytest.approx(7.245, abs=1e-3)
        assert m.r_squared == pytest.approx(0.3598, abs=1e-4)
        assert m.adj_r_squared == pytest.approx(0.3385, abs=1e-4)
        assert m.pvalues["am[T.manual]"] < 0.001

    def test_selected_model(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt", "qsec", "am"])

        assert m.coef("wt") == pytest.approx(-3.9165, abs=1e-4)
        assert m.coef("qsec") == pytest.approx(1.2259, abs=1e-4)
        assert m.coef("am[T.manual]") == pytest.approx(2.9358, abs=1e-4)
        assert m.bse["am[T.manual]"] == pytest.approx(1.4109, abs=1e-4)
        assert m.pvalues["am[T.manual]"] == pytest.approx(0.0467, abs=1e-4)
        assert m.r_squared == pytest.approx(0.8497, abs=1e-4)
        assert m.df_resid == 28

    def test_raw_code_matches_labelled(self, mtcars, mtcars_codes):
        labelled = fit_ols(mtcars, "mpg", ["wt", "am"])
        codes = fit_ols(mtcars_codes, "mpg", ["wt", "am"])

        assert codes.coef("am") == pytest.approx(labelled.coef("am[T.manual]"))
        assert codes.aic == pytest.approx(labelled.aic)

    def test_residuals_one_per_row(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt", "hp"])

        assert len(m.residuals) == len(mtcars) == m.nobs
        assert list(m.residuals.index) == list(mtcars.index)
        assert np.allclose(m.fitted_values + m.residuals, mtcars["mpg"])

    def test_intercept_only(self, mtcars):
        m = fit_ols(mtcars, "mpg", [])

        assert m.predictors == ()
        assert list(m.params.index) == ["Intercept"]
        assert m.coef("Intercept") == pytest.approx(mtcars["mpg"].mean())
        assert m.r_squared == pytest.approx(0.0, abs=1e-12)

    def test_information_criteria(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt", "qsec", "am"])
        n, k = m.nobs, m.n_params

        assert k == 4
        assert m.aic == pytest.approx(n * np.log(m.ss_res / n) + 2 * k)
        assert m.bic == pytest.approx(n * np.log(m.ss_res / n) + np.log(n) * k)
        assert m.aic == pytest.approx(61.31, abs=0.01)
        # statsmodels' likelihood AIC differs by a constant for fixed n
        assert m.results.aic - m.aic == pytest.approx(n * (np.log(2 * np.pi) + 1))

    def test_score_selects_criterion(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt"])
        assert m.score("aic") == m.aic
        assert m.score("bic") == m.bic
        with pytest.raises(ValueError):
            m.score("cp")

    def test_fitted_model_is_frozen(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt"])
        with pytest.raises(AttributeError):
            m.aic = 0.0

    def test_unknown_term(self, mtcars):
        m = fit_ols(mtcars, "mpg", ["wt"])
        with pytest.raises(KeyError):
            m.coef("am[T.manual]")


class TestFitOlsProperties:
    @pytest.mark.parametrize(
        "predictors",
        [["am"], ["wt"], ["cyl", "disp"], ["hp", "drat", "vs"], ["wt", "qsec", "am", "gear", "carb"]],
    )
    def test_r_squared_in_unit_interval(self, mtcars, predictors):
        m = fit_ols(mtcars, "mpg", predictors)
        assert 0.0 <= m.r_squared <= 1.0

    def test_r_squared_one_for_exact_fit(self):
        x = np.arange(10, dtype=float)
        df = pd.DataFrame({"x": x, "y": 3.0 + 2.0 * x})
        m = fit_ols(df, "y", ["x"])

        assert np.allclose(m.residuals, 0.0)
        assert m.r_squared == pytest.approx(1.0)

    def test_adding_predictor_never_lowers_r_squared(self, mtcars):
        order = ["wt", "qsec", "am", "hp", "drat", "disp", "cyl", "gear", "carb", "vs"]
        previous = fit_ols(mtcars, "mpg", []).r_squared
        for i in range(1, len(order) + 1):
            current = fit_ols(mtcars, "mpg", order[:i]).r_squared
            assert current >= previous - 1e-12
            previous = current

    def test_adding_noise_can_raise_aic(self, mtcars):
        base = fit_ols(mtcars, "mpg", ["wt", "qsec", "am"])
        bigger = fit_ols(mtcars, "mpg", ["wt", "qsec", "am", "vs"])

        assert bigger.r_squared >= base.r_squared
        assert bigger.aic > base.aic


class TestFitOlsErrors:
    def test_collinear_predictors(self, mtcars):
        df = mtcars.assign(wt2=mtcars["wt"] * 2.0)
        with pytest.raises(SingularDesignError, match="rank-deficient"):
            fit_ols(df, "mpg", ["wt", "wt2"])

    def test_too_many_predictors(self):
        rng = np.random.default_rng(3)
        df = pd.DataFrame(rng.normal(size=(4, 5)), columns=["y", "a", "b", "c", "d"])
        with pytest.raises(SingularDesignError):
            fit_ols(df, "y", ["a", "b", "c", "d"])

    def test_no_residual_df(self):
        rng = np.random.default_rng(4)
        df = pd.DataFrame(rng.normal(size=(4, 4)), columns=["y", "a", "b", "c"])
        with pytest.raises(SingularDesignError, match="no residual degrees of freedom"):
            fit_ols(df, "y", ["a", "b", "c"])

    def test_singular_is_value_error(self, mtcars):
        df = mtcars.assign(wt2=mtcars["wt"])
        with pytest.raises(ValueError):
            fit_ols(df, "mpg", ["wt", "wt2"])

    def test_unknown_column(self, mtcars):
        with pytest.raises(ValueError, match="Missing required columns"):
            fit_ols(mtcars, "mpg", ["price"])

    def test_response_as_predictor(self, mtcars):
        with pytest.raises(ValueError, match="cannot also be a predictor"):
            fit_ols(mtcars, "mpg", ["mpg", "wt"])

    def test_missing_values_rejected(self, mtcars):
        df = mtcars.astype({"carb": float, "mpg": float})
        df.loc[df.index[:5], "carb"] = np.nan
        with pytest.raises(ValueError, match="Missing values"):
            fit_ols(df, "mpg", ["wt", "carb"])

    def test_missing_response_values_rejected(self, mtcars):
        df = mtcars.astype({"carb": float, "mpg": float})
        df.loc[df.index[0], "mpg"] = np.nan
        with pytest.raises(ValueError, match="Missing values"):
            fit_ols(df, "mpg", ["wt"])

    def test_missing_values_in_unused_column(self, mtcars):
        df = mtcars.astype({"carb": float, "mpg": float})
        df.loc[df.index[:5], "carb"] = np.nan
        m = fit_ols(df, "mpg", ["wt", "qsec", "am"])

        assert m.nobs == 32
        assert len(m.residuals) == len(df)


class TestInformationCriteria:
    def test_zero_residuals(self):
        aic, bic = information_criteria(10, 0.0, 2)
        assert aic == -np.inf
        assert bic == -np.inf
