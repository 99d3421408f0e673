# arimakit/models/time_series/estimation.py
"""
Conditional Sum-of-Squares Estimation for ARIMA Models

This module fits ARIMA(p, d, q) models by minimizing the conditional sum of
squared one-step prediction residuals (CSS). The series is differenced d times,
the coefficient vector ``[intercept, phi_1..phi_p, theta_1..theta_q]`` is
seeded from the sample mean and partial autocorrelations, and the objective is
minimized with SciPy's L-BFGS-B using a central-difference gradient.

Optimizer trouble (line search failure, iteration cap, non-finite values) is
recoverable by default: a warning is logged, a
:class:`~arimakit.core.exceptions.ConvergenceWarning` is issued and the best
coefficients seen so far are returned. Pass ``strict=True`` or set
``models.strict_optimization`` to raise
:class:`~arimakit.core.exceptions.OptimizationError` instead.

The module also provides an automatic order selection heuristic that picks
the AR and MA orders from confidence-bound crossings of the sample PACF and
ACF.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from scipy import optimize

from arimakit.core.config import get_models_config, get_numerical_config
from arimakit.core.exceptions import (
    OptimizationError, raise_dimension_mismatch, raise_input_too_short, warn_convergence
)
from arimakit.core.results import ARIMAResult, ModelSpec
from arimakit.core.types import (
    ARMAOrder, ParameterVector, ResidualVector, TimeSeriesData, Vector
)
from arimakit.core.validation import validate_order, validate_time_series, validate_vector
from arimakit.models.time_series._numba_core import css_kernel, css_residuals_kernel
from arimakit.models.time_series.correlation import (
    acf, acf_confidence_bounds, pacf, pacf_confidence_bound, pacf_rho
)
from arimakit.utils.data_transformations import diff
from arimakit.utils.differentiation import gradient_2sided

# Set up module-level logger
logger = logging.getLogger("arimakit.models.time_series.estimation")


def residuals(x: TimeSeriesData,
              intercept: float = 0.0,
              phi: Optional[Vector] = None,
              theta: Optional[Vector] = None) -> ResidualVector:
    """
    Compute conditional ARMA residuals.

    The first len(phi) residuals are zero since there is not enough history
    to predict them. For t >= len(phi):

        e_t = x_t - intercept - sum_j phi_j x_{t-j-1} - sum_{j<min(q,t)} theta_j e_{t-j-1}

    Args:
        x: Input time series
        intercept: Constant term
        phi: AR coefficients phi_1..phi_p (None for no AR part)
        theta: MA coefficients theta_1..theta_q (None for no MA part)

    Returns:
        Residuals of the same length as x

    Raises:
        DimensionMismatchError: If phi or theta is longer than x

    Examples:
        >>> from arimakit.models.time_series.estimation import residuals
        >>> residuals([1.0, 1.2, 1.4, 1.6], 0.0, [0.6, 0.4], [0.3]).round(7)
        array([0.   , 0.   , 0.28 , 0.196])
    """
    values = validate_vector(x, "x")
    phi = validate_vector(phi, "phi")
    theta = validate_vector(theta, "theta")

    n = values.shape[0]
    for name, coef in (("phi", phi), ("theta", theta)):
        if coef.shape[0] > n:
            raise_dimension_mismatch(
                f"{name} has more coefficients than x has observations",
                array_name=name,
                expected_shape=f"(k,) with k <= {n}",
                actual_shape=coef.shape
            )

    return css_residuals_kernel(values, float(intercept), phi, theta)


class CSSObjective:
    """
    Conditional sum-of-squares objective for a fixed series and model order.

    Instances are callable with a coefficient vector
    ``[intercept, phi_1..phi_p, theta_1..theta_q]`` and return the CSS.
    :meth:`evaluate` returns the value together with a central-difference
    gradient, the form expected by ``scipy.optimize.minimize(jac=True)``.

    The objective keeps the lowest finite value it has been called with and
    the coefficients that produced it, so a best-effort result is available
    when the optimizer stops early.

    Attributes:
        x: The (differenced) series
        ar_order: Number of AR coefficients
        ma_order: Number of MA coefficients
        epsilon: Finite-difference step (None for automatic)
        n_evaluations: Number of objective evaluations so far
        best_value: Lowest finite objective value seen
        best_params: Coefficients at ``best_value``
    """

    def __init__(self,
                 x: np.ndarray,
                 ar_order: int,
                 ma_order: int,
                 epsilon: Optional[float] = None) -> None:
        self.x = validate_vector(x, "x")
        self.ar_order = validate_order(ar_order, "ar_order")
        self.ma_order = validate_order(ma_order, "ma_order")
        self.epsilon = epsilon
        self.n_evaluations = 0
        self.best_value = np.inf
        self.best_params: Optional[np.ndarray] = None

    @property
    def n_params(self) -> int:
        return 1 + self.ar_order + self.ma_order

    def _css(self, coef: np.ndarray) -> float:
        coef = np.asarray(coef, dtype=np.float64)
        p = self.ar_order
        phi = np.ascontiguousarray(coef[1:1 + p])
        theta = np.ascontiguousarray(coef[1 + p:])
        return float(css_kernel(self.x, float(coef[0]), phi, theta))

    def __call__(self, coef: ParameterVector) -> float:
        coef = np.asarray(coef, dtype=np.float64)
        if coef.shape != (self.n_params,):
            raise_dimension_mismatch(
                "Coefficient vector does not match the model order",
                array_name="coef",
                expected_shape=(self.n_params,),
                actual_shape=coef.shape
            )

        value = self._css(coef)
        self.n_evaluations += 1
        if np.isfinite(value) and value < self.best_value:
            self.best_value = value
            self.best_params = coef.copy()
        return value

    def gradient(self, coef: ParameterVector) -> np.ndarray:
        """Central-difference gradient of the CSS."""
        return gradient_2sided(self._css, np.asarray(coef, dtype=np.float64), self.epsilon)

    def evaluate(self, coef: ParameterVector) -> Tuple[float, np.ndarray]:
        """Return ``(css, gradient)`` at coef."""
        return self(coef), self.gradient(coef)


def _start_params(x: np.ndarray, spec: ModelSpec) -> np.ndarray:
    """Initial guess: mean of x, PACF for the AR part, ``ma_start`` for the MA part."""
    start = np.empty(spec.n_params, dtype=np.float64)
    start[0] = np.mean(x)
    if spec.ar_order > 0:
        start[1:1 + spec.ar_order] = pacf(x, spec.ar_order)
    start[1 + spec.ar_order:] = get_models_config().ma_start
    return start


def estimate_arima(x: TimeSeriesData,
                   ar_order: int,
                   diff_order: int = 0,
                   ma_order: int = 0,
                   start_params: Optional[ParameterVector] = None,
                   strict: Optional[bool] = None) -> ARIMAResult:
    """
    Fit an ARIMA(p, d, q) model by conditional sum of squares.

    Args:
        x: Input time series
        ar_order: Number of AR coefficients (p)
        diff_order: Number of differences applied before fitting (d)
        ma_order: Number of MA coefficients (q)
        start_params: Initial coefficient vector of length 1 + p + q; by
            default the mean of the differenced series, its partial
            autocorrelations and ``models.ma_start``
        strict: Raise OptimizationError when the optimizer does not converge;
            defaults to ``models.strict_optimization``

    Returns:
        ARIMAResult with coefficients ``[intercept, phi..., theta...]`` and
        optimizer diagnostics

    Raises:
        InputTooShortError: If fewer than max(2, max(p, q) + 1) observations
            remain after differencing
        DimensionMismatchError: If start_params has the wrong length
        SingularSystemError: If the PACF used for the initial guess is singular
        OptimizationError: If strict and the optimizer does not converge

    Examples:
        >>> from arimakit.models.time_series.estimation import estimate_arima
        >>> result = estimate_arima([1.0, 1.2, 1.4, 1.6, 1.4, 1.2, 1.0], 0, 0, 1)
        >>> result.params.round(3)
        array([1.205, 0.564])
    """
    spec = ModelSpec(ar_order, diff_order, ma_order)
    values = validate_time_series(x, min_length=2, data_name="x")
    if spec.diff_order > 0:
        values = diff(values, spec.diff_order)

    required = max(2, max(spec.ar_order, spec.ma_order) + 1)
    if values.shape[0] < required:
        raise_input_too_short(
            f"{spec} needs at least {required} observations after differencing, "
            f"got {values.shape[0]}",
            data_name="x",
            length=int(values.shape[0]),
            required=required
        )

    if start_params is None:
        start = _start_params(values, spec)
    else:
        start = validate_vector(start_params, "start_params")
        if start.shape[0] != spec.n_params:
            raise_dimension_mismatch(
                f"start_params must have {spec.n_params} entries for {spec}",
                array_name="start_params",
                expected_shape=(spec.n_params,),
                actual_shape=start.shape
            )

    numerical = get_numerical_config()
    if strict is None:
        strict = get_models_config().strict_optimization

    objective = CSSObjective(values, spec.ar_order, spec.ma_order,
                             epsilon=numerical.finite_difference_step)
    options = {
        "maxiter": numerical.max_iterations,
        # The CSS grows with the sample, so its gradient tolerance does too
        "gtol": numerical.gradient_tol * values.shape[0],
        "ftol": numerical.function_tol,
    }

    logger.debug(f"Fitting {spec} on {values.shape[0]} observations, start={start}")

    converged = False
    iterations = 0
    try:
        opt = optimize.minimize(
            objective.evaluate,
            start,
            method=numerical.optimization_method,
            jac=True,
            options=options
        )
    except (ValueError, ArithmeticError) as e:
        message = f"optimizer error: {e}"
        params = objective.best_params if objective.best_params is not None else start
    else:
        converged = bool(opt.success and np.all(np.isfinite(opt.x)) and np.isfinite(opt.fun))
        iterations = int(getattr(opt, "nit", 0))
        message = str(opt.message)
        if converged:
            params = np.asarray(opt.x, dtype=np.float64)
        elif objective.best_params is not None:
            params = objective.best_params
        else:
            params = start

    params = params.copy()
    intercept, phi, theta = spec.split(params)
    resid = css_residuals_kernel(values, float(intercept),
                                 np.ascontiguousarray(phi), np.ascontiguousarray(theta))
    css = float(np.sum(resid ** 2))

    if not converged:
        if strict:
            raise OptimizationError(
                f"CSS optimization of {spec} did not converge",
                algorithm=numerical.optimization_method,
                iterations=iterations,
                final_value=css,
                issue=message
            )
        logger.warning(f"CSS optimization of {spec} did not converge ({message}); "
                       f"returning best coefficients found")
        warn_convergence(
            f"CSS optimization of {spec} did not converge: {message}",
            iterations=iterations,
            final_value=css
        )
    else:
        logger.debug(f"{spec} converged after {iterations} iterations, css={css:.6g}")

    return ARIMAResult(
        params=params,
        spec=spec,
        css=css,
        sigma2=css / (values.shape[0] - spec.ar_order),
        nobs=int(values.shape[0]),
        converged=converged,
        iterations=iterations,
        n_evaluations=objective.n_evaluations,
        message=message,
        start_params=start,
        resid=resid
    )


def fit(x: TimeSeriesData,
        ar_order: int,
        diff_order: int = 0,
        ma_order: int = 0) -> ParameterVector:
    """
    Fit an ARIMA(p, d, q) model by conditional sum of squares.

    See :func:`estimate_arima` for details and the full result.

    Args:
        x: Input time series
        ar_order: Number of AR coefficients (p)
        diff_order: Number of differences applied before fitting (d)
        ma_order: Number of MA coefficients (q)

    Returns:
        Coefficients ``[intercept, phi_1..phi_p, theta_1..theta_q]``
    """
    return estimate_arima(x, ar_order, diff_order, ma_order).params


def _leading_count(mask: np.ndarray) -> int:
    """Number of leading True entries of a boolean vector."""
    misses = np.flatnonzero(~mask)
    return int(misses[0]) if misses.size else int(mask.shape[0])


def select_order(x: TimeSeriesData,
                 n_lags: Optional[int] = None,
                 alpha: Optional[float] = None) -> ARMAOrder:
    """
    Pick AR and MA orders from the sample PACF and ACF.

    The MA order is the number of leading lags 1, 2, ... whose autocorrelation
    lies outside its Bartlett confidence bound. The AR order is the number of
    leading lags whose partial autocorrelation lies outside z / sqrt(n).

    Args:
        x: Input time series
        n_lags: Lag horizon; defaults to ``models.autofit_lags``
        alpha: Significance level; defaults to ``models.autofit_alpha``

    Returns:
        Tuple of (ar_order, ma_order)
    """
    values = validate_time_series(x, min_length=2, data_name="x")
    models = get_models_config()
    n_lags = models.autofit_lags if n_lags is None else validate_order(n_lags, "n_lags")
    alpha = models.autofit_alpha if alpha is None else float(alpha)
    n = values.shape[0]

    rho = acf(values, n_lags)
    bounds = acf_confidence_bounds(rho, n, alpha)
    # Lag 0 always lies outside its zero-width bound
    ma_order = _leading_count(np.abs(rho) > bounds) - 1

    partial = pacf_rho(rho, n_lags)
    ar_order = _leading_count(np.abs(partial) > pacf_confidence_bound(n, alpha))

    logger.debug(f"Selected AR order {ar_order} and MA order {ma_order} from {rho.shape[0] - 1} lags")
    return ar_order, ma_order


def autofit(x: TimeSeriesData, diff_order: int = 0) -> ParameterVector:
    """
    Fit an ARIMA model with AR and MA orders chosen by :func:`select_order`.

    The orders are selected on the series as given, before differencing.

    Args:
        x: Input time series
        diff_order: Number of differences applied before fitting

    Returns:
        Coefficients ``[intercept, phi_1..phi_p, theta_1..theta_q]``
    """
    ar_order, ma_order = select_order(x)
    return fit(x, ar_order, diff_order, ma_order)
