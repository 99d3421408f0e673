"""
ARIMA Kit Core Module

This module provides the foundation shared by the estimators: type aliases,
the exception and warning hierarchy, input validation, result containers and
configuration management.

Key components:
- Exception hierarchy for typed failure reporting
- Validation utilities for input checking
- Result objects for storing estimation outputs
- Configuration management
"""

import logging

# Set up module-level logger
logger = logging.getLogger("arimakit.core")

from .exceptions import (
    ArimaError,
    ArimaWarning,
    ConfigurationError,
    ConvergenceWarning,
    DataError,
    DimensionError,
    DimensionMismatchError,
    InputTooShortError,
    NumericError,
    NumericWarning,
    OptimizationError,
    ParameterError,
    SingularSystemError,
)
from .validation import (
    validate_input_time_series,
    validate_order,
    validate_time_series,
    validate_vector,
)
from .results import ARIMAResult, ARResult, ModelSpec
from .config import (
    get_config,
    get_config_manager,
    get_logging_config,
    get_models_config,
    get_numerical_config,
    initialize_config,
    reset_config,
    set_config,
)

__all__ = [
    # Exceptions
    'ArimaError',
    'ArimaWarning',
    'ConfigurationError',
    'ConvergenceWarning',
    'DataError',
    'DimensionError',
    'DimensionMismatchError',
    'InputTooShortError',
    'NumericError',
    'NumericWarning',
    'OptimizationError',
    'ParameterError',
    'SingularSystemError',

    # Validation
    'validate_input_time_series',
    'validate_order',
    'validate_time_series',
    'validate_vector',

    # Results
    'ARIMAResult',
    'ARResult',
    'ModelSpec',

    # Configuration
    'get_config',
    'get_config_manager',
    'get_logging_config',
    'get_models_config',
    'get_numerical_config',
    'initialize_config',
    'reset_config',
    'set_config',
]
