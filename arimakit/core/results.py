'''
Standardized result containers for ARIMA Kit.

This module provides the dataclasses that describe a model specification and
carry estimation outputs: the Durbin-Levinson solution of an autoregression
and the conditional-sum-of-squares fit of an ARIMA model.
'''

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List

import numpy as np
import pandas as pd

from arimakit.core.validation import validate_order


@dataclass(frozen=True)
class ModelSpec:
    """Orders of an ARIMA(p, d, q) model.

    Attributes:
        ar_order: Number of autoregressive coefficients (p)
        diff_order: Number of differences applied before fitting (d)
        ma_order: Number of moving-average coefficients (q)
    """

    ar_order: int = 0
    diff_order: int = 0
    ma_order: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "ar_order", validate_order(self.ar_order, "ar_order"))
        object.__setattr__(self, "diff_order", validate_order(self.diff_order, "diff_order"))
        object.__setattr__(self, "ma_order", validate_order(self.ma_order, "ma_order"))

    @property
    def n_params(self) -> int:
        """Length of the coefficient vector: intercept + phi + theta."""
        return 1 + self.ar_order + self.ma_order

    @property
    def param_names(self) -> List[str]:
        """Coefficient labels in vector order."""
        names = ["const"]
        names.extend(f"ar.L{i + 1}" for i in range(self.ar_order))
        names.extend(f"ma.L{i + 1}" for i in range(self.ma_order))
        return names

    def split(self, params: np.ndarray) -> tuple:
        """Split a coefficient vector into (intercept, phi, theta)."""
        p = self.ar_order
        return params[0], params[1:1 + p], params[1 + p:]

    def __str__(self) -> str:
        return f"ARIMA({self.ar_order}, {self.diff_order}, {self.ma_order})"


@dataclass
class ARResult:
    """Solution of the Yule-Walker equations by Durbin-Levinson recursion.

    Unpacks as ``phi, sigma2 = ar_dl(rho, cov0)``.

    Attributes:
        params: AR coefficients phi_1..phi_p of the final order
        sigma2: One-step prediction variance of the final order
        variances: Prediction variances var_0..var_p of every step
        pacf: Partial autocorrelations phi_11..phi_pp of every step
    """

    params: np.ndarray
    sigma2: float
    variances: np.ndarray
    pacf: np.ndarray

    @property
    def order(self) -> int:
        return int(self.params.shape[0])

    def __iter__(self) -> Iterator[Any]:
        yield self.params
        yield self.sigma2


@dataclass
class ARIMAResult:
    """Conditional-sum-of-squares fit of an ARIMA model.

    Attributes:
        params: Coefficients [intercept, phi_1..phi_p, theta_1..theta_q]
        spec: Model orders
        css: Conditional sum of squares at ``params``
        sigma2: Innovation variance estimate css / (nobs - ar_order)
        nobs: Number of observations after differencing
        converged: Whether the optimizer reported convergence
        iterations: Number of optimizer iterations
        n_evaluations: Number of objective evaluations (gradient evaluations excluded)
        message: Optimizer termination message
        start_params: Initial coefficient vector handed to the optimizer
        resid: Residuals of the differenced series at ``params``
    """

    params: np.ndarray
    spec: ModelSpec
    css: float
    sigma2: float
    nobs: int
    converged: bool
    iterations: int
    n_evaluations: int
    message: str
    start_params: np.ndarray
    resid: np.ndarray = field(repr=False)

    @property
    def intercept(self) -> float:
        return float(self.params[0])

    @property
    def ar_params(self) -> np.ndarray:
        return self.params[1:1 + self.spec.ar_order].copy()

    @property
    def ma_params(self) -> np.ndarray:
        return self.params[1 + self.spec.ar_order:].copy()

    @property
    def param_names(self) -> List[str]:
        return self.spec.param_names

    def to_series(self) -> pd.Series:
        """Return the coefficients as a labelled Pandas Series."""
        return pd.Series(self.params, index=self.param_names, name=str(self.spec))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a JSON-friendly dictionary."""
        return {
            "spec": {
                "ar_order": self.spec.ar_order,
                "diff_order": self.spec.diff_order,
                "ma_order": self.spec.ma_order,
            },
            "params": dict(zip(self.param_names, self.params.tolist())),
            "css": self.css,
            "sigma2": self.sigma2,
            "nobs": self.nobs,
            "converged": self.converged,
            "iterations": self.iterations,
            "n_evaluations": self.n_evaluations,
            "message": self.message,
        }

    def __str__(self) -> str:
        lines = [f"{self.spec} fitted by CSS ({self.nobs} observations)"]
        for name, value in zip(self.param_names, self.params):
            lines.append(f"  {name:<8} {value: .6f}")
        lines.append(f"  css      {self.css: .6f}")
        lines.append(f"  sigma2   {self.sigma2: .6f}")
        status = "converged" if self.converged else f"not converged ({self.message})"
        lines.append(f"  {status} after {self.iterations} iterations")
        return "\n".join(lines)
