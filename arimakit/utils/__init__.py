"""
ARIMA Kit Utilities Module

This module provides the helper functions used around the estimators:
elementary series transformations, numerical differentiation and the dense
linear algebra needed by the direct Yule-Walker solver.

Key components:
- Data transformations (mean, centering, lagging, differencing and its inverse)
- Numerical differentiation (forward and central gradients)
- Matrix operations (Toeplitz construction, positive definite solve)
"""

import logging

# Set up module-level logger
logger = logging.getLogger("arimakit.utils")

from .data_transformations import (
    center,
    cumsum,
    diff,
    diff_log,
    diffinv,
    lag,
    mean,
)
from .differentiation import gradient_2sided, gradient_forward
from .matrix_ops import is_positive_definite, solve_spd, toeplitz_from_acf

__all__ = [
    # Data transformations
    'center',
    'cumsum',
    'diff',
    'diff_log',
    'diffinv',
    'lag',
    'mean',

    # Numerical differentiation
    'gradient_2sided',
    'gradient_forward',

    # Matrix operations
    'is_positive_definite',
    'solve_spd',
    'toeplitz_from_acf',
]
