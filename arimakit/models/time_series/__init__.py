# arimakit/models/time_series/__init__.py
"""
ARIMA Kit Time Series Module

This module provides the estimation core for univariate ARIMA models:

- Sample autocorrelation and partial autocorrelation functions
- Yule-Walker solvers (Durbin-Levinson recursion and direct Cholesky solve)
- Conditional sum-of-squares residuals, objective and L-BFGS-B fitting
- Automatic AR/MA order selection from ACF/PACF confidence bounds
"""

import logging

# Set up module-level logger
logger = logging.getLogger("arimakit.models.time_series")

from .correlation import acf, acf_cov, pacf, pacf_rho
from .autoregressive import ar, ar_direct, ar_dl, ar_variance, var
from .estimation import (
    CSSObjective,
    autofit,
    estimate_arima,
    fit,
    residuals,
    select_order,
)

__all__ = [
    # Correlation
    'acf',
    'acf_cov',
    'pacf',
    'pacf_rho',

    # Autoregressive solvers
    'ar',
    'ar_direct',
    'ar_dl',
    'ar_variance',
    'var',

    # CSS estimation
    'CSSObjective',
    'autofit',
    'estimate_arima',
    'fit',
    'residuals',
    'select_order',
]
