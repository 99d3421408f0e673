# tests/test_correlation.py

"""
Tests for the sample autocorrelation and partial autocorrelation functions.

The tests cover the worked examples, the reference autocovariances of a short
AR(2) sample, lag clamping, error reporting for degenerate input, the
confidence bounds used by order selection, and agreement with statsmodels.
"""

import numpy as np
import pandas as pd
import pytest
from hypothesis import HealthCheck, given, settings
from numpy.testing import assert_allclose
from statsmodels.tsa.stattools import acf as sm_acf
from statsmodels.tsa.stattools import pacf as sm_pacf

from arimakit.core.exceptions import (
    DataError, InputTooShortError, ParameterError, SingularSystemError
)
from arimakit.models.time_series.correlation import (
    acf, acf_confidence_bounds, acf_cov, critical_value, pacf,
    pacf_confidence_bound, pacf_rho
)
from tests.conftest import series_strategy


class TestACF:
    """Tests for acf and acf_cov."""

    def test_ramp_autocorrelations(self, short_series):
        """Autocorrelations of the four-point ramp."""
        result = acf(short_series, 2)
        assert_allclose(result, [1.0, 0.25, -0.3], atol=1e-7)

    def test_reference_autocovariances(self, ar2_sample):
        """Autocovariances of the AR(2) sample match the reference values."""
        expected = [4.58489144, 0.38749482, -1.91179140, 0.28256939, 1.35258379,
                    -0.06345611, -1.22621493, 0.21676391, 0.63269957]
        result = acf_cov(ar2_sample, 8)
        assert result.shape == (9,)
        assert_allclose(result, expected, atol=1e-7)

    def test_default_lag_is_n_minus_one(self, ar2_sample):
        assert acf(ar2_sample).shape == (len(ar2_sample),)

    def test_max_lag_is_clamped(self, short_series):
        result = acf(short_series, 10)
        assert result.shape == (4,)
        assert_allclose(result, acf(short_series, 3))

    def test_max_lag_zero(self, ar2_sample):
        assert_allclose(acf(ar2_sample, 0), [1.0])
        assert_allclose(acf_cov(ar2_sample, 0), [np.var(ar2_sample)])

    def test_covariance_matches_correlation(self, ar1_process):
        """Autocorrelations are autocovariances scaled by the lag-0 value."""
        cov = acf_cov(ar1_process, 15)
        rho = acf(ar1_process, 15)
        assert_allclose(rho[1:], cov[1:] / cov[0])

    def test_pandas_input(self, ar1_process):
        series = pd.Series(ar1_process, index=pd.date_range("2020-01-01", periods=len(ar1_process)))
        assert_allclose(acf(series, 5), acf(ar1_process, 5))

    def test_input_not_modified(self, ar2_sample):
        original = ar2_sample.copy()
        acf(ar2_sample, 4)
        assert_allclose(ar2_sample, original)

    def test_matches_statsmodels(self, ar1_process):
        expected = sm_acf(ar1_process, nlags=20, fft=False)
        assert_allclose(acf(ar1_process, 20), expected, rtol=1e-10, atol=1e-12)

    def test_too_short(self):
        with pytest.raises(InputTooShortError):
            acf([1.0])
        with pytest.raises(InputTooShortError):
            acf([])

    def test_negative_lag(self, short_series):
        with pytest.raises(ParameterError):
            acf(short_series, -1)

    def test_constant_series(self):
        """A constant series has no autocorrelations."""
        with pytest.raises(SingularSystemError):
            acf(np.full(10, 3.7), 3)
        # Autocovariances are still defined
        assert_allclose(acf_cov(np.full(10, 3.7), 3), np.zeros(4), atol=1e-20)

    def test_large_level_small_variation(self, rng):
        """A series far from zero with small variation still has autocorrelations."""
        x = 1e8 + 1e-3 * rng.standard_normal(50)
        result = acf(x, 3)
        assert result[0] == 1.0
        assert np.all(np.isfinite(result))
        # Subtracting the level is exact, so only the mean's rounding differs
        assert_allclose(result, acf(x - 1e8, 3), atol=1e-3)

    def test_single_column_dataframe(self, ar1_process):
        frame = pd.DataFrame({"y": ar1_process})
        assert_allclose(acf(frame, 5), acf(ar1_process, 5))

    def test_nan_rejected(self):
        with pytest.raises(DataError):
            acf([1.0, np.nan, 2.0, 3.0])

    @given(x=series_strategy())
    @settings(max_examples=30, deadline=None,
              suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_lag_zero_is_one(self, x):
        """Correlation-mode lag 0 is exactly one."""
        assert acf(x)[0] == 1.0

    @given(x=series_strategy())
    @settings(max_examples=30, deadline=None,
              suppress_health_check=[HealthCheck.function_scoped_fixture])
    def test_lag_zero_covariance_is_biased_variance(self, x):
        assert_allclose(acf_cov(x, 0)[0], np.var(x), rtol=1e-10)


class TestPACF:
    """Tests for pacf and pacf_rho."""

    def test_ramp_partial_autocorrelations(self, short_series):
        result = pacf(short_series, 2)
        assert_allclose(result, [0.25, -0.3866667], atol=1e-7)

    def test_first_lag_equals_acf(self, ar1_process):
        assert_allclose(pacf(ar1_process, 1)[0], acf(ar1_process, 1)[1])

    def test_lags_are_inclusive_and_clamped(self):
        rho = np.array([1.0, 0.5, 0.2, 0.1])
        assert pacf_rho(rho, 2).shape == (2,)
        assert pacf_rho(rho, 10).shape == (3,)
        assert pacf_rho(rho).shape == (3,)
        assert pacf_rho(rho, 0).shape == (0,)

    def test_ar1_cuts_off(self, ar1_process):
        """The PACF of an AR(1) process is small beyond lag 1."""
        result = pacf(ar1_process, 10)
        assert abs(result[0] - 0.7) < 0.05
        assert np.all(np.abs(result[1:]) < 0.1)

    def test_matches_statsmodels(self, ar2_process):
        expected = sm_pacf(ar2_process, nlags=15, method="ldb")
        assert_allclose(pacf(ar2_process, 15), expected[1:], rtol=1e-8, atol=1e-10)

    def test_singular_recursion(self):
        """A perfectly correlated autocorrelation vector is singular at lag 2."""
        with pytest.raises(SingularSystemError) as exc_info:
            pacf_rho(np.array([1.0, 1.0, 1.0]), 2)
        assert exc_info.value.step == 2


class TestConfidenceBounds:
    """Tests for the Bartlett and PACF confidence bounds."""

    def test_critical_value(self):
        assert_allclose(critical_value(0.05), 1.959963984540054, rtol=1e-12)

    def test_bartlett_variances(self):
        rho = np.array([1.0, 0.5, 0.2, 0.1])
        n = 100
        z = critical_value(0.05)
        expected = z * np.sqrt(np.array([
            0.0,
            1.0 / n,
            (1.0 + 2.0 * 0.25) / n,
            (1.0 + 2.0 * (0.25 + 0.04)) / n,
        ]))
        assert_allclose(acf_confidence_bounds(rho, n), expected)

    def test_bartlett_matches_statsmodels(self, ma1_process):
        rho, confint = sm_acf(ma1_process, nlags=12, alpha=0.05, fft=False)
        expected = confint[:, 1] - rho
        bounds = acf_confidence_bounds(acf(ma1_process, 12), len(ma1_process))
        assert_allclose(bounds, expected, rtol=1e-8, atol=1e-12)

    def test_pacf_bound(self):
        assert_allclose(pacf_confidence_bound(400), 1.959963984540054 / 20.0)
