# arimakit/__init__.py
"""
ARIMA Kit - ARIMA Parameter Estimation for Python

A Python package for estimating autoregressive (AR) and autoregressive
integrated moving-average (ARIMA) models from a univariate time series by
conditional sum of squares (CSS).

The package provides tools for:
- Sample autocorrelation and partial autocorrelation functions
- Yule-Walker AR coefficients by Durbin-Levinson recursion or direct solve
- Conditional ARMA residuals and CSS fitting with L-BFGS-B
- Automatic AR/MA order selection from ACF/PACF confidence bounds
- Elementary series transformations (differencing and its inverse, lagging)

This module serves as the main entry point for the ARIMA Kit package.
"""

import logging
from typing import Union

from .version import __version__, __license__, __title__, __description__

# Set up package-wide logger
logger = logging.getLogger("arimakit")

# Import subpackages to make them available in the arimakit namespace
from . import core
from . import utils
from . import models

from .core.config import get_config, initialize_config, reset_config, set_config
from .core.exceptions import (
    ArimaError,
    ConvergenceWarning,
    DimensionMismatchError,
    InputTooShortError,
    OptimizationError,
    SingularSystemError,
)
from .core.results import ARIMAResult, ARResult, ModelSpec
from .models.time_series import (
    CSSObjective,
    acf,
    acf_cov,
    ar,
    ar_direct,
    ar_dl,
    ar_variance,
    autofit,
    estimate_arima,
    fit,
    pacf,
    pacf_rho,
    residuals,
    select_order,
    var,
)


def get_version() -> str:
    """
    Return the version of ARIMA Kit.

    Returns:
        str: Version string in format MAJOR.MINOR.PATCH
    """
    return __version__


def set_log_level(level: Union[str, int]) -> None:
    """
    Set the logging level for ARIMA Kit.

    The level is stored in the ``logging`` configuration section so that a
    later reconfiguration keeps it.

    Args:
        level: Logging level, either as string ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
              or as an integer constant from the logging module
    """
    if not isinstance(level, str):
        level = logging.getLevelName(level)
    set_config("logging", "log_level", level)
    logger.info(f"Log level set to {logging.getLevelName(logger.level)}")


# Initialize the package
initialize_config()

# Define what's available when using "from arimakit import *"
__all__ = [
    # Subpackages
    'core',
    'models',
    'utils',

    # Estimation
    'acf',
    'acf_cov',
    'pacf',
    'pacf_rho',
    'ar',
    'ar_direct',
    'ar_dl',
    'ar_variance',
    'var',
    'residuals',
    'CSSObjective',
    'estimate_arima',
    'fit',
    'select_order',
    'autofit',

    # Results
    'ARIMAResult',
    'ARResult',
    'ModelSpec',

    # Errors
    'ArimaError',
    'ConvergenceWarning',
    'DimensionMismatchError',
    'InputTooShortError',
    'OptimizationError',
    'SingularSystemError',

    # Configuration
    'get_config',
    'set_config',
    'reset_config',
    'set_log_level',
    'get_version',

    # Version info
    '__version__',
    '__license__'
]

logger.debug(f"ARIMA Kit v{__version__} initialized successfully")
