# arimakit/models/time_series/correlation.py
"""
Correlation Analysis Module for Time Series

This module implements the sample autocorrelation and partial autocorrelation
functions used to seed and select ARIMA models, together with the confidence
bounds used by the automatic order selection.

The module includes:
- Autocorrelation function (ACF) and autocovariance function with the biased
  (divide by n) estimator
- Partial autocorrelation function (PACF) from a single Durbin-Levinson pass
- Bartlett confidence bounds for the ACF and the 1/n bound for the PACF

Lag arguments are inclusive and clamped: a request for more lags than the
series supports is reduced to the largest valid lag rather than rejected.
"""

import logging
from typing import Optional

import numpy as np
from scipy import stats

from arimakit.core.config import get_numerical_config
from arimakit.core.exceptions import raise_singular_system
from arimakit.core.types import AutocorrelationVector, TimeSeriesData, Vector
from arimakit.core.validation import validate_input_time_series, validate_order, validate_vector
from arimakit.models.time_series._numba_core import (
    DL_OK, autocovariance_kernel, durbin_levinson_kernel
)

# Set up module-level logger
logger = logging.getLogger("arimakit.models.time_series.correlation")


def _clamp_lag(max_lag: Optional[int], limit: int, name: str = "max_lag") -> int:
    """Return max_lag clamped to limit, or limit when max_lag is None."""
    max_lag = validate_order(max_lag, name, allow_none=True)
    if max_lag is None:
        return limit
    if max_lag > limit:
        logger.debug(f"{name}={max_lag} clamped to {limit}")
        return limit
    return max_lag


@validate_input_time_series(0, min_length=2)
def acf(x: TimeSeriesData,
        max_lag: Optional[int] = None,
        covariance: bool = False) -> AutocorrelationVector:
    """
    Compute the sample autocorrelation (or autocovariance) function.

    For each lag t the sum of (x_i - mean)(x_{i+t} - mean) over i = 0..n-t-1
    is divided by n. In correlation mode every entry is then divided by the
    lag-0 value and lag 0 is set to exactly 1.0.

    Args:
        x: Input time series with at least 2 observations
        max_lag: Largest lag to compute; defaults to n-1 and is clamped to it
        covariance: Return autocovariances instead of autocorrelations

    Returns:
        Vector of length max_lag + 1

    Raises:
        InputTooShortError: If x has fewer than 2 observations
        ParameterError: If max_lag is negative
        SingularSystemError: If x is constant in correlation mode

    Examples:
        >>> from arimakit.models.time_series.correlation import acf
        >>> acf([1.0, 1.2, 1.4, 1.6], 2)
        array([ 1.  ,  0.25, -0.3 ])
    """
    n = x.shape[0]
    lags = _clamp_lag(max_lag, n - 1)

    gamma = autocovariance_kernel(x, lags)
    if covariance:
        return gamma

    # Bound on the variance left by rounding in the mean of a constant series
    floor = (n * np.finfo(np.float64).eps * np.max(np.abs(x))) ** 2
    if gamma[0] <= floor:
        raise_singular_system(
            "Autocorrelations are undefined for a series without variation",
            operation="acf",
            step=0,
            values=gamma[0]
        )

    rho = gamma / gamma[0]
    rho[0] = 1.0
    return rho


def acf_cov(x: TimeSeriesData, max_lag: Optional[int] = None) -> AutocorrelationVector:
    """Sample autocovariances for lags 0..max_lag; see :func:`acf`."""
    return acf(x, max_lag, covariance=True)


def pacf_rho(rho: Vector, max_lag: Optional[int] = None) -> Vector:
    """
    Compute partial autocorrelations from an autocorrelation vector.

    The partial autocorrelation at lag k is the last coefficient of the
    AR(k) Yule-Walker solution. All lags are obtained from a single
    Durbin-Levinson pass.

    Args:
        rho: Autocorrelations with rho[0] == 1
        max_lag: Largest lag to compute (inclusive); defaults to len(rho) - 1
            and is clamped to it

    Returns:
        Partial autocorrelations for lags 1..max_lag

    Raises:
        SingularSystemError: If a recursion step is singular
    """
    rho = validate_vector(rho, "rho", allow_empty=False)
    lags = _clamp_lag(max_lag, rho.shape[0] - 1)
    if lags == 0:
        return np.zeros(0, dtype=np.float64)

    tol = get_numerical_config().singular_tol
    _, _, pacf_values, status, step, value = durbin_levinson_kernel(rho, 1.0, lags, tol)
    if status != DL_OK:
        raise_singular_system(
            f"Partial autocorrelation recursion is singular at lag {step}",
            operation="pacf",
            step=int(step),
            values=float(value)
        )
    return pacf_values


def pacf(x: TimeSeriesData, max_lag: Optional[int] = None) -> Vector:
    """
    Compute the sample partial autocorrelation function.

    Args:
        x: Input time series with at least 2 observations
        max_lag: Largest lag to compute (inclusive); defaults to n-1 and is
            clamped to it

    Returns:
        Partial autocorrelations for lags 1..max_lag

    Raises:
        InputTooShortError: If x has fewer than 2 observations
        SingularSystemError: If x has zero variance or the recursion is singular

    Examples:
        >>> import numpy as np
        >>> from arimakit.models.time_series.correlation import pacf
        >>> np.round(pacf([1.0, 1.2, 1.4, 1.6], 2), 7)
        array([ 0.25     , -0.3866667])
    """
    rho = acf(x, max_lag)
    return pacf_rho(rho, max_lag)


def critical_value(alpha: float) -> float:
    """Two-sided standard normal critical value z with P(|Z| > z) = alpha."""
    return float(stats.norm.ppf(1.0 - alpha / 2.0))


def acf_confidence_bounds(rho: Vector, nobs: int, alpha: float = 0.05) -> Vector:
    """
    Bartlett confidence bounds for sample autocorrelations.

    The variance of the lag-k autocorrelation under the null that the series
    is MA(k-1) is (1/n)(1 + 2 sum_{j=1}^{k-1} rho_j^2). Lag 0 has variance 0.

    Args:
        rho: Sample autocorrelations for lags 0..m
        nobs: Number of observations the autocorrelations were computed from
        alpha: Significance level

    Returns:
        Bounds z * sqrt(var_k) for lags 0..m
    """
    rho = validate_vector(rho, "rho", allow_empty=False)
    variances = np.zeros_like(rho)
    if rho.shape[0] > 1:
        # var_k uses rho_1..rho_{k-1}; rho_0 is excluded
        cum = np.concatenate(([0.0], np.cumsum(rho[1:-1] ** 2)))
        variances[1:] = (1.0 + 2.0 * cum) / nobs
    return critical_value(alpha) * np.sqrt(variances)


def pacf_confidence_bound(nobs: int, alpha: float = 0.05) -> float:
    """Confidence bound z / sqrt(n) for sample partial autocorrelations."""
    return critical_value(alpha) * np.sqrt(1.0 / nobs)
