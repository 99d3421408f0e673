"""
Numba-accelerated core functions for ARIMA estimation.

This module provides the sequential inner loops of the estimators, compiled
with Numba's just-in-time (JIT) compiler. Each kernel is an explicit forward
pass over arrays sized up front, operating on contiguous float64 input that
has already been validated by the calling Python function.

The module includes:
- Sample autocovariances with the biased (divide by n) estimator
- The Durbin-Levinson recursion with tracked prediction variances
- The conditional-sum-of-squares residual recursion for ARMA models

Kernels never raise. Failure conditions are reported through return codes so
the Python layer can raise the appropriate typed exception.
"""

import logging
from typing import Tuple

import numpy as np
from numba import jit

# Set up module-level logger
logger = logging.getLogger("arimakit.models.time_series._numba_core")

# Durbin-Levinson status codes
DL_OK = 0
DL_ZERO_DENOMINATOR = 1
DL_INVALID_VARIANCE = 2


# ============================================================================
# Autocovariance
# ============================================================================

@jit(nopython=True, cache=True)
def autocovariance_kernel(x: np.ndarray, max_lag: int) -> np.ndarray:
    """
    Compute sample autocovariances for lags 0..max_lag.

    gamma_t = (1/n) * sum_{i=0}^{n-t-1} (x_i - mean)(x_{i+t} - mean)

    Args:
        x: Input time series (1D float64 array)
        max_lag: Largest lag to compute, at most len(x) - 1

    Returns:
        np.ndarray: Autocovariances of length max_lag + 1
    """
    n = x.shape[0]
    m = max_lag + 1

    x_mean = 0.0
    for i in range(n):
        x_mean += x[i]
    x_mean /= n

    gamma = np.zeros(m)
    for t in range(m):
        acc = 0.0
        for i in range(n - t):
            acc += (x[i] - x_mean) * (x[i + t] - x_mean)
        gamma[t] = acc / n

    return gamma


# ============================================================================
# Durbin-Levinson recursion
# ============================================================================

@jit(nopython=True, cache=True)
def durbin_levinson_kernel(rho: np.ndarray,
                           cov0: float,
                           order: int,
                           tol: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray, int, int, float]:
    """
    Solve the Yule-Walker equations order by order.

    At step i = 1..order:
        phi_ii = (rho_i - sum_k phi_{i-1,k} rho_{i-k}) / (1 - sum_k phi_{i-1,k} rho_k)
        var_i  = var_{i-1} * (1 - phi_ii^2)
        phi_ik = phi_{i-1,k} - phi_ii * phi_{i-1,i-k}

    Args:
        rho: Autocorrelations, rho[0] == 1, at least order + 1 entries
        cov0: Autocovariance at lag 0 (var_0)
        order: Final AR order
        tol: Denominators with absolute value at or below tol count as zero

    Returns:
        Tuple of (phi, variances, pacf, status, fail_step, fail_value):
        phi holds the final-order coefficients, variances var_0..var_order,
        pacf phi_11..phi_pp. status is DL_OK on success; otherwise fail_step
        is the failing step and fail_value the offending denominator or
        variance.
    """
    phi = np.zeros(order)
    prev = np.zeros(order)
    variances = np.zeros(order + 1)
    pacf = np.zeros(order)
    variances[0] = cov0

    for i in range(1, order + 1):
        num = rho[i]
        den = 1.0
        for k in range(1, i):
            num -= prev[k - 1] * rho[i - k]
            den -= prev[k - 1] * rho[k]

        if not np.isfinite(den) or abs(den) <= tol:
            return phi, variances, pacf, DL_ZERO_DENOMINATOR, i, den

        phi_ii = num / den
        for k in range(1, i):
            phi[k - 1] = prev[k - 1] - phi_ii * prev[i - k - 1]
        phi[i - 1] = phi_ii
        pacf[i - 1] = phi_ii

        var_i = variances[i - 1] * (1.0 - phi_ii * phi_ii)
        if not np.isfinite(var_i) or var_i < 0.0:
            return phi, variances, pacf, DL_INVALID_VARIANCE, i, var_i
        variances[i] = var_i

        for k in range(i):
            prev[k] = phi[k]

    return phi, variances, pacf, DL_OK, 0, 0.0


# ============================================================================
# CSS residuals
# ============================================================================

@jit(nopython=True, cache=True)
def css_residuals_kernel(x: np.ndarray,
                         intercept: float,
                         phi: np.ndarray,
                         theta: np.ndarray) -> np.ndarray:
    """
    Compute conditional ARMA residuals in a single forward pass.

    The first len(phi) residuals are zero. For t >= len(phi):
        e_t = x_t - intercept - sum_j phi_j x_{t-j-1} - sum_{j<min(q,t)} theta_j e_{t-j-1}

    Args:
        x: Input time series (1D float64 array)
        intercept: Constant term
        phi: AR coefficients, len(phi) <= len(x)
        theta: MA coefficients, len(theta) <= len(x)

    Returns:
        np.ndarray: Residuals of the same length as x
    """
    n = x.shape[0]
    p = phi.shape[0]
    q = theta.shape[0]
    resid = np.zeros(n)

    for t in range(p, n):
        pred = intercept
        for j in range(p):
            pred += phi[j] * x[t - j - 1]
        for j in range(min(q, t)):
            pred += theta[j] * resid[t - j - 1]
        resid[t] = x[t] - pred

    return resid


@jit(nopython=True, cache=True)
def css_kernel(x: np.ndarray,
               intercept: float,
               phi: np.ndarray,
               theta: np.ndarray) -> float:
    """
    Conditional sum of squared residuals.

    Args:
        x: Input time series (1D float64 array)
        intercept: Constant term
        phi: AR coefficients
        theta: MA coefficients

    Returns:
        float: Sum of squared residuals
    """
    resid = css_residuals_kernel(x, intercept, phi, theta)
    total = 0.0
    for t in range(resid.shape[0]):
        total += resid[t] * resid[t]
    return total
