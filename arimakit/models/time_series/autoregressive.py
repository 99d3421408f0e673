# arimakit/models/time_series/autoregressive.py
"""
Autoregressive Coefficient Solvers

This module solves the Yule-Walker equations for the coefficients of an
autoregressive model, given the autocorrelations of a series. Two solvers are
provided:

- :func:`ar_dl` uses the Durbin-Levinson recursion. It builds the solution
  order by order and tracks the one-step prediction variance of every step,
  so it also yields the partial autocorrelations.
- :func:`ar_direct` builds the Toeplitz system M[i, j] = rho[|i - j|] and
  solves it with a Cholesky factorization. It is used as an independent
  cross-check of the recursion.

Both solvers refuse degenerate input: a vanishing denominator, a negative
prediction variance or a matrix that is not positive definite raises
:class:`~arimakit.core.exceptions.SingularSystemError`.
"""

import logging
from typing import Optional

import numpy as np

from arimakit.core.config import get_numerical_config
from arimakit.core.exceptions import (
    raise_dimension_mismatch, raise_parameter_error, raise_singular_system
)
from arimakit.core.results import ARResult
from arimakit.core.types import ARCoefficients, ARMethod, TimeSeriesData, Vector
from arimakit.core.validation import validate_order, validate_vector
from arimakit.models.time_series._numba_core import (
    DL_OK, DL_ZERO_DENOMINATOR, durbin_levinson_kernel
)
from arimakit.models.time_series.correlation import acf
from arimakit.utils.matrix_ops import solve_spd, toeplitz_from_acf

# Set up module-level logger
logger = logging.getLogger("arimakit.models.time_series.autoregressive")


def _resolve_order(order: Optional[int], rho: np.ndarray) -> int:
    order = validate_order(order, "order", allow_none=True)
    limit = rho.shape[0] - 1
    if order is None:
        return limit
    if order > limit:
        logger.debug(f"AR order {order} clamped to {limit}")
        return limit
    return order


def ar_dl(rho: Vector, cov0: float = 1.0, order: Optional[int] = None) -> ARResult:
    """
    Solve the Yule-Walker equations by Durbin-Levinson recursion.

    Starting from var_0 = cov0 and an empty coefficient vector, step i
    computes

        phi_ii = (rho_i - sum_k phi_{i-1,k} rho_{i-k}) / (1 - sum_k phi_{i-1,k} rho_k)
        var_i  = var_{i-1} (1 - phi_ii^2)
        phi_ik = phi_{i-1,k} - phi_ii phi_{i-1,i-k},   k = 1..i-1

    Args:
        rho: Autocorrelations with rho[0] == 1
        cov0: Autocovariance at lag 0; the returned variance is on its scale
        order: AR order; defaults to len(rho) - 1 and is clamped to it

    Returns:
        ARResult holding the final-order coefficients and prediction variance,
        plus the variances and partial autocorrelations of every step. The
        result unpacks as ``phi, sigma2``.

    Raises:
        SingularSystemError: If a denominator is zero or a prediction variance
            is negative or not finite

    Examples:
        >>> from arimakit.models.time_series.autoregressive import ar_dl
        >>> phi, sigma2 = ar_dl([1.0, 0.25, -0.3], 1.0, 2)
        >>> phi.round(7)
        array([ 0.3466667, -0.3866667])
    """
    rho = validate_vector(rho, "rho", allow_empty=False)
    order = _resolve_order(order, rho)
    tol = get_numerical_config().singular_tol

    phi, variances, pacf_values, status, step, value = durbin_levinson_kernel(
        rho, float(cov0), order, tol
    )

    if status != DL_OK:
        if status == DL_ZERO_DENOMINATOR:
            message = f"Durbin-Levinson denominator vanished at step {step}"
            context = {"Denominator": float(value)}
        else:
            message = f"Durbin-Levinson prediction variance is invalid at step {step}"
            context = {"Variance": float(value)}
        raise_singular_system(
            message,
            operation="ar_dl",
            step=int(step),
            context=context
        )

    return ARResult(
        params=phi,
        sigma2=float(variances[order]),
        variances=variances,
        pacf=pacf_values
    )


def ar_direct(rho: Vector, order: Optional[int] = None) -> ARCoefficients:
    """
    Solve the Yule-Walker equations directly.

    Builds M[i, j] = rho[|i - j|] and b = rho[1..order] and solves M phi = b
    by Cholesky factorization.

    Args:
        rho: Autocorrelations with rho[0] == 1
        order: AR order; defaults to len(rho) - 1 and is clamped to it

    Returns:
        AR coefficients phi_1..phi_order (empty for order 0)

    Raises:
        SingularSystemError: If M is not positive definite
    """
    rho = validate_vector(rho, "rho", allow_empty=False)
    order = _resolve_order(order, rho)
    if order == 0:
        return np.zeros(0, dtype=np.float64)

    matrix = toeplitz_from_acf(rho, order)
    return solve_spd(matrix, rho[1:order + 1])


def ar(x: TimeSeriesData,
       order: Optional[int] = None,
       method: ARMethod = "dl") -> ARCoefficients:
    """
    Estimate AR coefficients of a series from its sample autocorrelations.

    Args:
        x: Input time series
        order: AR order; defaults to n-1 and is clamped to it
        method: ``"dl"`` for Durbin-Levinson or ``"direct"`` for the Cholesky solve

    Returns:
        AR coefficients phi_1..phi_order

    Raises:
        ParameterError: If method is not recognized
    """
    if method not in ("dl", "direct"):
        raise_parameter_error(
            f"Unknown AR method: {method}",
            param_name="method",
            param_value=method,
            constraint="'dl' or 'direct'"
        )
    rho = acf(x, order)
    if method == "direct":
        return ar_direct(rho, order)
    return ar_dl(rho, 1.0, order).params


def ar_variance(phi: ARCoefficients, rho: Vector, cov0: float) -> float:
    """
    Innovation variance of an AR model, cov0 (1 - sum_i phi_i rho_{i+1}).

    Args:
        phi: AR coefficients phi_1..phi_p
        rho: Autocorrelations with at least p + 1 entries
        cov0: Autocovariance at lag 0

    Returns:
        The innovation variance

    Raises:
        DimensionMismatchError: If rho is not longer than phi
    """
    phi = validate_vector(phi, "phi")
    rho = validate_vector(rho, "rho")
    if rho.shape[0] <= phi.shape[0]:
        raise_dimension_mismatch(
            "rho must be longer than phi",
            array_name="rho",
            expected_shape=(phi.shape[0] + 1,),
            actual_shape=rho.shape
        )
    p = phi.shape[0]
    return float(cov0 * (1.0 - np.dot(phi, rho[1:p + 1])))


def var(x: TimeSeriesData, order: Optional[int] = None) -> float:
    """
    Innovation variance of an AR(order) fit of a series.

    Args:
        x: Input time series
        order: AR order; defaults to n-1 and is clamped to it

    Returns:
        The innovation variance on the scale of x
    """
    rho = acf(x, order)
    phi = ar_dl(rho, 1.0, order).params
    cov0 = acf(x, 0, covariance=True)[0]
    return ar_variance(phi, rho, cov0)
