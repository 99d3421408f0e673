# arimakit/core/validation.py

"""
Validation utilities and decorators for ARIMA Kit.

This module provides the input checks shared by the estimation routines:
conversion of array-like input to a fresh float64 vector, rejection of
non-finite values, minimum length requirements and order validation. Failures
are reported through the typed exceptions in :mod:`arimakit.core.exceptions`.
"""

import functools
import inspect
import numbers
from typing import Any, Callable, Optional, TypeVar, cast

import numpy as np
import pandas as pd

from arimakit.core.exceptions import (
    raise_data_error, raise_dimension_error, raise_input_too_short,
    raise_parameter_error
)
from arimakit.core.types import TimeSeriesData, Vector

F = TypeVar('F', bound=Callable[..., Any])  # Function type


def validate_vector(
    data: Any,
    data_name: str = "vector",
    allow_empty: bool = True
) -> Vector:
    """Validate that data is a finite 1D vector and return a float64 copy.

    Args:
        data: Array-like input (NumPy array, Pandas Series, list, tuple or None)
        data_name: Name of the data for error messages
        allow_empty: Whether a zero-length vector is acceptable

    Returns:
        np.ndarray: A freshly allocated contiguous float64 vector

    Raises:
        DimensionError: If data is not one-dimensional
        DataError: If data contains NaN or infinite values, or is empty when
            empty input is not allowed
    """
    if data is None:
        return np.zeros(0, dtype=np.float64)

    if isinstance(data, pd.Series):
        values = data.to_numpy(dtype=np.float64, copy=True)
    else:
        try:
            values = np.array(data, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise_data_error(
                f"{data_name} cannot be converted to a float array: {e}",
                data_name=data_name,
                issue="not numeric"
            )

    if values.ndim == 0:
        values = values.reshape(1)

    if values.ndim != 1:
        raise_dimension_error(
            f"{data_name} must be a 1D vector",
            array_name=data_name,
            expected_shape="(n,)",
            actual_shape=values.shape
        )

    if not allow_empty and values.size == 0:
        raise_data_error(
            f"{data_name} must not be empty",
            data_name=data_name,
            issue="empty"
        )

    if np.isnan(values).any():
        raise_data_error(
            f"{data_name} contains NaN values",
            data_name=data_name,
            issue="contains NaN values",
            index=int(np.flatnonzero(np.isnan(values))[0])
        )
    if np.isinf(values).any():
        raise_data_error(
            f"{data_name} contains infinite values",
            data_name=data_name,
            issue="contains infinite values",
            index=int(np.flatnonzero(np.isinf(values))[0])
        )

    return np.ascontiguousarray(values)


def validate_time_series(
    data: TimeSeriesData,
    min_length: int = 2,
    data_name: str = "x"
) -> Vector:
    """Validate that data is a usable univariate time series.

    Args:
        data: Time series data to validate
        min_length: Minimum required length
        data_name: Name of the data for error messages

    Returns:
        np.ndarray: The series as a fresh float64 vector

    Raises:
        TypeError: If data is None
        DimensionError: If data is not one-dimensional
        DataError: If data contains NaN or infinite values
        InputTooShortError: If data is shorter than ``min_length``
    """
    if data is None:
        raise TypeError(f"{data_name} cannot be None")

    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise_dimension_error(
                f"{data_name} must be univariate",
                array_name=data_name,
                expected_shape="(n,) or (n, 1)",
                actual_shape=data.shape
            )
        data = data.iloc[:, 0]

    values = validate_vector(data, data_name)

    if values.shape[0] < min_length:
        raise_input_too_short(
            f"{data_name} is too short (length {values.shape[0]}), "
            f"minimum required length is {min_length}",
            data_name=data_name,
            length=int(values.shape[0]),
            required=min_length
        )

    return values


def validate_order(
    value: Any,
    param_name: str = "order",
    allow_none: bool = False
) -> Optional[int]:
    """Validate a model order, lag or differencing count.

    Args:
        value: Value to validate
        param_name: Name of the parameter for error messages
        allow_none: Whether None is an acceptable value

    Returns:
        The value as a Python int (or None when allowed)

    Raises:
        ParameterError: If the value is not a non-negative integer
    """
    if value is None:
        if allow_none:
            return None
        raise_parameter_error(
            f"{param_name} must not be None",
            param_name=param_name,
            constraint="non-negative integer"
        )

    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise_parameter_error(
            f"{param_name} must be an integer, got {type(value).__name__}",
            param_name=param_name,
            param_value=value,
            constraint="non-negative integer"
        )

    if value < 0:
        raise_parameter_error(
            f"{param_name} must be non-negative, got {value}",
            param_name=param_name,
            param_value=value,
            constraint="non-negative integer"
        )

    return int(value)


def validate_input_time_series(
    param_index: int,
    min_length: int = 2,
    param_name: Optional[str] = None
) -> Callable[[F], F]:
    """Decorator factory for validating a time series input parameter.

    The validated float64 copy replaces the original argument, so the
    decorated function always receives a contiguous 1D array.

    Args:
        param_index: Index of the parameter to validate
        min_length: Minimum required length
        param_name: Name of the parameter for error messages (defaults to parameter name)

    Returns:
        Callable: Decorator function
    """
    def decorator(func: F) -> F:
        sig = inspect.signature(func)
        param_names = list(sig.parameters.keys())
        name = param_name
        if name is None:
            name = param_names[param_index] if param_index < len(param_names) else f"parameter_{param_index}"
        arg_name = param_names[param_index] if param_index < len(param_names) else None

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if param_index < len(args):
                args = list(args)
                args[param_index] = validate_time_series(args[param_index], min_length, name)
                args = tuple(args)
            elif arg_name is not None and arg_name in kwargs:
                kwargs[arg_name] = validate_time_series(kwargs[arg_name], min_length, name)

            return func(*args, **kwargs)

        return cast(F, wrapper)

    return decorator
