# arimakit/core/types.py

"""
Core type annotations for ARIMA Kit.

This module defines the type aliases shared across the package so that the
estimation routines document their array contracts consistently.
"""

from typing import Callable, Literal, Sequence, Tuple, Union

import numpy as np
import pandas as pd

# NumPy array type aliases
Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array

# Specialized array types for specific use cases
TimeSeriesData = Union[np.ndarray, pd.Series, Sequence[float]]  # Single time series
ParameterVector = np.ndarray  # [intercept, phi_1..phi_p, theta_1..theta_q]
AutocorrelationVector = np.ndarray  # rho_0..rho_m (or autocovariances)
ARCoefficients = np.ndarray  # phi_1..phi_p
ResidualVector = np.ndarray  # e_0..e_{n-1}

# Model specification types
ARMAOrder = Tuple[int, int]  # (p, q) for AR and MA orders

# Objective functions for numerical differentiation
ObjectiveFunction = Callable[[np.ndarray], float]

ARMethod = Literal["dl", "direct"]
LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
