# tests/test_estimation.py

"""
Tests for conditional sum-of-squares estimation.

The test suite includes:
- Residual recursion on worked examples and reference residuals
- The CSS objective, its numerical gradient and best-value tracking
- CSS fitting on reference data, simulated processes and differenced series
- Soft and strict handling of optimizer failure
- Automatic order selection against statsmodels' confidence bounds
"""

import warnings

import numpy as np
import pandas as pd
import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from numpy.testing import assert_allclose
from statsmodels.tsa.stattools import acf as sm_acf
from statsmodels.tsa.stattools import pacf as sm_pacf

from arimakit.core.config import set_config
from arimakit.core.exceptions import (
    ConvergenceWarning, DimensionMismatchError, InputTooShortError,
    OptimizationError, SingularSystemError
)
from arimakit.core.results import ARIMAResult
from arimakit.models.time_series.estimation import (
    CSSObjective, autofit, estimate_arima, fit, residuals, select_order
)
from arimakit.utils.data_transformations import center, diff
from tests.conftest import series_strategy, simulate_arma


def ols_ar(x: np.ndarray, p: int) -> np.ndarray:
    """Least-squares AR(p) fit with intercept on the lagged design."""
    n = x.shape[0]
    design = np.column_stack([np.ones(n - p)] + [x[p - j - 1:n - j - 1] for j in range(p)])
    coef, *_ = np.linalg.lstsq(design, x[p:], rcond=None)
    return coef


def count_leading(mask: np.ndarray) -> int:
    count = 0
    for flag in mask:
        if not flag:
            break
        count += 1
    return count


class TestResiduals:
    """Tests for the residual recursion."""

    def test_worked_example(self, short_series):
        result = residuals(short_series, 0.0, [0.6, 0.4], [0.3])
        assert_allclose(result, [0.0, 0.0, 0.28, 0.196], atol=1e-7)

    def test_ar3_reference(self, ar3_series):
        """Residuals of the centered AR(3) series match the reference values."""
        y, _ = center(ar3_series)
        expected = [0.0, 0.0, 0.0, 46.2603808, -7.7972931, 28.510325, -57.7569706,
                    14.2417414, 31.2183008, 48.5090956, -2.716499, 38.8984537,
                    -5.402662, -8.4669355, -62.7063041, 4.5063279, -14.4924325,
                    31.271378, -29.2554603, -54.8047308]
        result = residuals(y, -5.954353, [0.67715294, -0.44171525, 0.08249936])
        assert_allclose(result, expected, atol=1e-3)

    def test_arma12_reference(self, ar3_series):
        """Residuals of an ARMA(1,2) on the centered series, MA terms phased in."""
        y, _ = center(ar3_series)
        expected = [0.0, 12.5024401, -14.7741471, 51.0605505, -10.2274033,
                    -30.6143332, 8.4998564, 51.8766267, -0.0576161, 4.2438554,
                    9.7222585, 15.2661396, -19.7658293, -0.442378, -16.3084314,
                    34.3532355, 16.6032739, -10.0661619, -16.6988839, -20.1747913]
        result = residuals(y, -23.64706, [0.48359302], [1.05643909, 1.51029256])
        assert_allclose(result, expected, atol=1e-3)

    def test_intercept_only(self, short_series):
        assert_allclose(residuals(short_series, 1.3), short_series - 1.3)

    def test_pure_ma_starts_at_zero(self):
        """With no AR part the first residual uses no MA terms."""
        result = residuals([2.0, 1.0, 0.5], 1.0, None, [0.5])
        assert_allclose(result, [1.0, -0.5, -0.25])

    def test_coefficients_longer_than_series(self, short_series):
        with pytest.raises(DimensionMismatchError):
            residuals(short_series, 0.0, np.ones(5))
        with pytest.raises(DimensionMismatchError):
            residuals(short_series, 0.0, None, np.ones(5))

    def test_coefficients_as_long_as_series(self, short_series):
        assert_allclose(residuals(short_series, 0.0, np.ones(4)), np.zeros(4))

    @given(
        x=series_strategy(min_size=6, max_size=40),
        phi=st.lists(st.floats(min_value=-1, max_value=1), min_size=0, max_size=5),
        theta=st.lists(st.floats(min_value=-1, max_value=1), min_size=0, max_size=3),
    )
    @settings(max_examples=40, deadline=None,
              suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_burn_in_is_zero(self, x, phi, theta):
        result = residuals(x, 0.5, phi, theta)
        assert result.shape == x.shape
        assert np.all(result[:len(phi)] == 0.0)


class TestCSSObjective:
    """Tests for the CSS objective and its gradient."""

    def test_value_is_sum_of_squares(self, ar3_series):
        objective = CSSObjective(ar3_series, 1, 1)
        coef = np.array([10.0, 0.4, 0.2])
        expected = np.sum(residuals(ar3_series, 10.0, [0.4], [0.2]) ** 2)
        assert_allclose(objective(coef), expected)
        assert objective.n_evaluations == 1

    def test_tracks_best_value(self, ar3_series):
        objective = CSSObjective(ar3_series, 1, 0)
        good = np.array([20.0, 0.5])
        bad = np.array([0.0, -2.0])
        objective(bad)
        objective(good)
        objective(bad)
        assert objective.n_evaluations == 3
        assert_allclose(objective.best_params, good)
        assert objective.best_value == objective(good)

    def test_gradient_matches_analytic_for_ar(self, ar3_series):
        """For a pure AR model the CSS gradient is -2 X'e."""
        objective = CSSObjective(ar3_series, 2, 0)
        coef = np.array([25.0, 0.5, -0.2])
        p = 2
        x = ar3_series
        e = residuals(x, coef[0], coef[1:])[p:]
        design = np.column_stack([np.ones(len(x) - p), x[1:-1], x[:-2]])
        analytic = -2.0 * design.T @ e
        assert_allclose(objective.gradient(coef), analytic, rtol=1e-5)

    def test_evaluate_returns_value_and_gradient(self, ar3_series):
        objective = CSSObjective(ar3_series, 1, 1)
        coef = np.array([10.0, 0.4, 0.2])
        value, grad = objective.evaluate(coef)
        assert value == objective(coef)
        assert grad.shape == (3,)

    def test_wrong_length(self, ar3_series):
        objective = CSSObjective(ar3_series, 1, 1)
        with pytest.raises(DimensionMismatchError):
            objective(np.zeros(2))


class TestFit:
    """Tests for fit and estimate_arima."""

    def test_ma1_worked_example(self, tent_series):
        coef = fit(tent_series, 0, 0, 1)
        assert coef.shape == (2,)
        assert_allclose(coef, [1.2051, 0.5637], atol=1e-3)

    def test_ar2_reference(self, ar3_series):
        """A pure AR CSS fit is the least-squares fit on the lagged design."""
        coef = fit(ar3_series, 2, 0, 0)
        assert_allclose(coef, ols_ar(ar3_series, 2), rtol=1e-4, atol=1e-4)
        assert_allclose(coef, [29.3546, 0.6465575, -0.3452993], atol=1e-3)

    def test_arma11_reference(self, ar3_series):
        coef = fit(ar3_series, 1, 0, 1)
        assert_allclose(coef[1:], [0.3596548, 0.2880067], atol=5e-3)
        assert_allclose(coef[0], 24.18111, atol=0.05)

    def test_recovers_ar2(self, ar2_process):
        coef = fit(ar2_process, 2)
        assert_allclose(coef[1:], [0.6, -0.3], atol=0.07)
        # Intercept is mean * (1 - sum(phi))
        assert_allclose(coef[0], 5.0 * 0.7, atol=0.4)

    def test_recovers_arma11(self, arma11_process, arma_params):
        coef = fit(arma11_process, 1, 0, 1)
        assert_allclose(coef[1], arma_params["ar"][0], atol=0.1)
        assert_allclose(coef[2], arma_params["ma"][0], atol=0.1)

    @pytest.mark.parametrize("ar", [(0.7,), (0.6, -0.3)])
    def test_long_series_converge_cleanly(self, ar):
        """Well-posed fits on long series converge without a warning."""
        for seed in range(10):
            x = simulate_arma(np.random.default_rng(seed), 2000, ar=ar, mean=5.0)
            with warnings.catch_warnings():
                warnings.simplefilter("error", ConvergenceWarning)
                result = estimate_arima(x, len(ar))
            assert result.converged, result.message
            assert_allclose(result.ar_params, ar, atol=0.1)

    def test_start_params_converge(self, ar2_process):
        with warnings.catch_warnings():
            warnings.simplefilter("error", ConvergenceWarning)
            result = estimate_arima(ar2_process, 2, start_params=[3.0, 0.5, -0.2])
        assert result.converged

    def test_differencing(self, ar2_process):
        """Fitting with d > 0 fits the differenced series."""
        walk = np.cumsum(ar2_process)
        assert_allclose(fit(walk, 1, 1, 0), fit(diff(walk, 1), 1, 0, 0))

    def test_result_container(self, ar2_process):
        result = estimate_arima(ar2_process, 2, 0, 1)
        assert isinstance(result, ARIMAResult)
        assert result.param_names == ["const", "ar.L1", "ar.L2", "ma.L1"]
        assert result.nobs == len(ar2_process)
        assert result.n_evaluations > 0
        assert_allclose(result.css, np.sum(result.resid ** 2))
        assert_allclose(result.sigma2, result.css / (len(ar2_process) - 2))
        assert_allclose(result.resid, residuals(ar2_process, result.intercept,
                                                result.ar_params, result.ma_params))
        series = result.to_series()
        assert isinstance(series, pd.Series)
        assert list(series.index) == result.param_names
        assert str(result.spec) == "ARIMA(2, 0, 1)"
        assert result.to_dict()["spec"]["ma_order"] == 1

    def test_start_params(self, ar2_process):
        start = np.array([3.0, 0.5, -0.2])
        result = estimate_arima(ar2_process, 2, start_params=start)
        assert_allclose(result.start_params, start)
        with pytest.raises(DimensionMismatchError):
            estimate_arima(ar2_process, 2, start_params=[1.0, 0.5])

    def test_default_start_params(self, ar2_process):
        from arimakit.models.time_series.correlation import pacf
        result = estimate_arima(ar2_process, 2, 0, 1)
        assert_allclose(result.start_params[0], np.mean(ar2_process))
        assert_allclose(result.start_params[1:3], pacf(ar2_process, 2))
        assert result.start_params[3] == 1.0

    def test_too_short(self):
        with pytest.raises(InputTooShortError):
            fit([1.0, 2.0, 3.0], 3)
        with pytest.raises(InputTooShortError):
            fit([1.0, 2.0, 3.0], 0, 2, 0)
        with pytest.raises(InputTooShortError):
            fit([1.0], 0)

    def test_singular_start(self):
        """The PACF seed of a constant series is undefined."""
        with pytest.raises(SingularSystemError):
            fit(np.ones(10), 1)


class TestOptimizerFailure:
    """Tests for soft and strict handling of optimizer failure."""

    def test_iteration_cap_warns_and_returns_best(self, ar2_process):
        set_config("numerical", "max_iterations", 1)
        objective_start = CSSObjective(ar2_process, 2, 0)
        with pytest.warns(ConvergenceWarning):
            result = estimate_arima(ar2_process, 2)
        assert not result.converged
        assert np.all(np.isfinite(result.params))
        assert result.css <= objective_start(result.start_params)

    def test_failure_is_logged(self, ar2_process, caplog):
        set_config("numerical", "max_iterations", 1)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            estimate_arima(ar2_process, 2)
        assert any(record.levelname == "WARNING" and "did not converge" in record.getMessage()
                   for record in caplog.records)

    def test_strict_raises(self, ar2_process):
        set_config("numerical", "max_iterations", 1)
        with pytest.raises(OptimizationError):
            estimate_arima(ar2_process, 2, strict=True)

    def test_strict_from_config(self, ar2_process):
        set_config("numerical", "max_iterations", 1)
        set_config("models", "strict_optimization", True)
        with pytest.raises(OptimizationError):
            fit(ar2_process, 2)

    def test_optimizer_error_returns_start(self, ar2_process, monkeypatch):
        def broken_minimize(*args, **kwargs):
            raise ValueError("line search failed")

        monkeypatch.setattr("arimakit.models.time_series.estimation.optimize.minimize",
                            broken_minimize)
        with pytest.warns(ConvergenceWarning):
            result = estimate_arima(ar2_process, 1)
        assert not result.converged
        assert "line search failed" in result.message
        assert_allclose(result.params, result.start_params)


class TestOrderSelection:
    """Tests for select_order and autofit."""

    @pytest.mark.parametrize("fixture_name", ["ar1_process", "ar2_process", "ma1_process"])
    def test_matches_statsmodels_bounds(self, fixture_name, request):
        x = request.getfixturevalue(fixture_name)
        rho, confint = sm_acf(x, nlags=12, alpha=0.05, fft=False)
        outside = np.abs(rho) > (confint[:, 1] - rho)
        expected_ma = count_leading(outside) - 1

        partial, pconfint = sm_pacf(x, nlags=12, alpha=0.05, method="ldb")
        poutside = np.abs(partial[1:]) > (pconfint[1:, 1] - partial[1:])
        expected_ar = count_leading(poutside)

        assert select_order(x) == (expected_ar, expected_ma)

    def test_ar1_orders(self, ar1_process):
        ar_order, ma_order = select_order(ar1_process)
        assert ar_order >= 1
        # Autocorrelations of an AR(1) decay slowly
        assert ma_order >= 5

    def test_ma1_orders(self, ma1_process):
        _, ma_order = select_order(ma1_process)
        assert ma_order >= 1

    def test_horizon_from_config(self, ar1_process):
        set_config("models", "autofit_lags", 2)
        _, ma_order = select_order(ar1_process)
        assert ma_order <= 2

    def test_autofit_delegates_to_fit(self, ma1_process):
        ar_order, ma_order = select_order(ma1_process)
        assert_allclose(autofit(ma1_process), fit(ma1_process, ar_order, 0, ma_order))

    def test_autofit_selects_on_undifferenced_series(self, ar2_process):
        walk = np.cumsum(ar2_process)
        ar_order, ma_order = select_order(walk)
        coef = autofit(walk, 1)
        assert coef.shape == (1 + ar_order + ma_order,)

    def test_autofit_propagates_errors(self):
        with pytest.raises(SingularSystemError):
            autofit(np.full(30, 2.0))
