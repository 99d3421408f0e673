'''
Data Transformation Module

This module provides the elementary series transformations used around ARIMA
estimation: the sample mean and centering, lagging, ordinary and logarithmic
differencing, cumulative sums, and inverse differencing.

Every function accepts NumPy arrays, Pandas Series or plain sequences and
returns a freshly allocated float64 NumPy array.

Functions:
    mean: Arithmetic mean of a series
    center: Remove the mean from a series, returning the centered copy and the mean
    lag: Drop the first tau observations of a series
    diff: Difference a series d times
    diff_log: Difference the logarithm of a series
    cumsum: Cumulative sum of a series
    diffinv: Invert differencing of order d
'''

import logging
from typing import Optional, Tuple

import numpy as np

from arimakit.core.exceptions import (
    raise_data_error, raise_dimension_mismatch, raise_parameter_error
)
from arimakit.core.types import TimeSeriesData, Vector
from arimakit.core.validation import validate_input_time_series, validate_order, validate_vector

# Set up module-level logger
logger = logging.getLogger("arimakit.utils.data_transformations")


@validate_input_time_series(0, min_length=1)
def mean(data: TimeSeriesData) -> float:
    """
    Arithmetic mean of a series.

    Args:
        data: Time series data

    Returns:
        The sample mean

    Raises:
        InputTooShortError: If data is empty

    Examples:
        >>> from arimakit.utils.data_transformations import mean
        >>> mean([1.0, 2.0, 3.0, 4.0])
        2.5
    """
    return float(np.mean(data))


@validate_input_time_series(0, min_length=1)
def center(data: TimeSeriesData) -> Tuple[Vector, float]:
    """
    Remove the mean from a series.

    Args:
        data: Time series data to center

    Returns:
        Tuple of (centered_data, mean)

    Examples:
        >>> import numpy as np
        >>> from arimakit.utils.data_transformations import center
        >>> centered, m = center([1.0, 2.0, 3.0, 4.0, 5.0])
        >>> m
        3.0
        >>> np.allclose(centered, [-2, -1, 0, 1, 2])
        True
    """
    mean_val = float(np.mean(data))
    return data - mean_val, mean_val


@validate_input_time_series(0, min_length=0)
def lag(data: TimeSeriesData, tau: int) -> Vector:
    """
    Drop the first ``tau`` observations of a series.

    Args:
        data: Time series data
        tau: Number of leading observations to drop, 0 <= tau < len(data)

    Returns:
        The series from index tau onwards

    Raises:
        ParameterError: If tau is negative or not smaller than the series length
    """
    tau = validate_order(tau, "tau")
    if tau >= data.shape[0]:
        raise_parameter_error(
            f"tau must be smaller than the series length ({data.shape[0]})",
            param_name="tau",
            param_value=tau,
            constraint=f"0 <= tau < {data.shape[0]}"
        )
    return data[tau:].copy()


@validate_input_time_series(0, min_length=0)
def diff(data: TimeSeriesData, d: int = 1) -> Vector:
    """
    Difference a series ``d`` times.

    Each pass replaces the series by x_t - x_{t-1}, so the result has
    ``len(data) - d`` observations (an empty array once d >= len(data)).

    Args:
        data: Time series data
        d: Number of differences (0 returns a copy)

    Returns:
        The differenced series

    Examples:
        >>> from arimakit.utils.data_transformations import diff
        >>> diff([-4, -9, 20, 23, -18, 6], 2)
        array([ 34., -26., -44.,  65.])
    """
    d = validate_order(d, "d")
    if d == 0:
        return data
    return np.diff(data, n=d)


@validate_input_time_series(0, min_length=0)
def diff_log(data: TimeSeriesData) -> Vector:
    """
    Difference the natural logarithm of a strictly positive series.

    Args:
        data: Strictly positive time series data

    Returns:
        log(x_t) - log(x_{t-1}) for t = 1..n-1

    Raises:
        DataError: If the series contains non-positive values
    """
    if (data <= 0).any():
        raise_data_error(
            "diff_log requires strictly positive values",
            data_name="data",
            issue="non-positive values",
            index=int(np.flatnonzero(data <= 0)[0])
        )
    return np.diff(np.log(data))


@validate_input_time_series(0, min_length=0)
def cumsum(data: TimeSeriesData) -> Vector:
    """
    Cumulative sum of a series.

    Args:
        data: Time series data

    Returns:
        y_t = x_0 + ... + x_t
    """
    return np.cumsum(data)


@validate_input_time_series(0, min_length=0)
def diffinv(data: TimeSeriesData, d: int = 1, xi: Optional[TimeSeriesData] = None) -> Vector:
    """
    Invert differencing of order ``d``.

    The result has ``len(data) + d`` observations. Without initial values the
    first d entries are zero and the rest is the d-fold cumulative sum, so
    ``diff(diffinv(x, d), d)`` reproduces x. Passing the first d observations
    of the original series as ``xi`` restores it exactly:
    ``diffinv(diff(x, d), d, xi=x[:d])`` equals x.

    Args:
        data: Differenced time series
        d: Order of differencing to invert
        xi: Initial values (length d); zeros when omitted

    Returns:
        The integrated series

    Raises:
        DimensionMismatchError: If xi does not have exactly d entries

    Examples:
        >>> from arimakit.utils.data_transformations import diffinv
        >>> diffinv([-5, 29, 3, -41, 24], 2)
        array([ 0.,  0., -5., 19., 46., 32., 42.])
    """
    d = validate_order(d, "d")

    if xi is None:
        initial = np.zeros(d, dtype=np.float64)
    else:
        initial = validate_vector(xi, "xi")
        if initial.shape[0] != d:
            raise_dimension_mismatch(
                f"xi must contain exactly d={d} initial values",
                array_name="xi",
                expected_shape=(d,),
                actual_shape=initial.shape
            )

    return _diffinv(data, d, initial)


def _diffinv(values: np.ndarray, d: int, initial: np.ndarray) -> np.ndarray:
    if d == 0:
        return values.copy()
    if d > 1:
        # Integrate the inner differences first, seeded with the differenced initial values
        values = _diffinv(values, d - 1, np.diff(initial))
    out = np.empty(values.shape[0] + 1, dtype=np.float64)
    out[0] = initial[0]
    out[1:] = initial[0] + np.cumsum(values)
    return out
