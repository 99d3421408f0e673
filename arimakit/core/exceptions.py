'''
Custom exception classes for ARIMA Kit.

This module defines the exception hierarchy used throughout ARIMA Kit. Each
exception type covers one category of failure so that callers can handle
estimation problems precisely: a series that is too short for the requested
lags, coefficient vectors that do not fit the data, a singular Yule-Walker
system, or an optimizer that could not finish.

Every exception carries an optional ``details`` string and a ``context``
dictionary that are rendered into the message together with the location
that raised the error.
'''

import inspect
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np


def _format_message(message: str,
                    details: Optional[str],
                    context: Optional[Dict[str, Any]]) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"

    # Report the first frame outside this module as the location
    frame = inspect.currentframe()
    try:
        while frame is not None and frame.f_code.co_filename == __file__:
            frame = frame.f_back
        if frame is not None:
            caller_info = inspect.getframeinfo(frame)
            full_message += f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"
    finally:
        del frame  # Avoid reference cycles

    return full_message


class ArimaError(Exception):
    """Base exception class for all ARIMA Kit errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the ArimaError.

        Args:
            message: The primary error message
            details: Additional details about the error
            context: Dictionary containing contextual information about the error
        """
        self.message = message
        self.details = details
        self.context = context or {}

        super().__init__(_format_message(message, details, context))


class ParameterError(ArimaError):
    """Exception raised for invalid arguments such as negative orders or lags.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = context or {}
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class DataError(ArimaError):
    """Exception raised for errors related to input data.

    This exception is used when input data contains NaN or infinite values,
    has the wrong dimensionality, or is otherwise unsuitable for estimation.

    Attributes:
        data_name: The name of the data that caused the error
        issue: Description of the issue with the data
        index: The index or location where the issue was detected
    """

    def __init__(self,
                 message: str,
                 data_name: Optional[str] = None,
                 issue: Optional[str] = None,
                 index: Optional[Union[int, Tuple[int, ...], str]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.data_name = data_name
        self.issue = issue
        self.index = index

        context_dict = context or {}
        if data_name:
            context_dict["Data"] = data_name
        if issue:
            context_dict["Issue"] = issue
        if index is not None:
            context_dict["Index"] = index

        super().__init__(message, details, context_dict)


class InputTooShortError(DataError):
    """Exception raised when a series is shorter than a lag or order requires.

    Attributes:
        length: The actual length of the series
        required: The minimum length that was required
    """

    def __init__(self,
                 message: str,
                 data_name: Optional[str] = None,
                 length: Optional[int] = None,
                 required: Optional[int] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.length = length
        self.required = required

        context_dict = context or {}
        if length is not None:
            context_dict["Length"] = length
        if required is not None:
            context_dict["Required"] = required

        issue = None
        if length is not None and required is not None:
            issue = f"insufficient length: {length} < {required}"

        super().__init__(message, data_name=data_name, issue=issue,
                         details=details, context=context_dict)


class DimensionError(ArimaError):
    """Exception raised for errors related to array dimensions.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = context or {}
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details, context_dict)


class DimensionMismatchError(DimensionError):
    """Exception raised when coefficient vectors are longer than the series
    they are applied to, or otherwise do not match it."""


class NumericError(ArimaError):
    """Exception raised for numerical computation errors.

    Attributes:
        operation: The operation that caused the error
        values: The values that caused the error
        error_type: The type of numerical error
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 values: Optional[Any] = None,
                 error_type: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.values = values
        self.error_type = error_type

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if values is not None:
            if isinstance(values, np.ndarray) and values.size > 10:
                # Truncate large arrays for readability
                context_dict["Values"] = f"Array with shape {values.shape}"
            else:
                context_dict["Values"] = values
        if error_type:
            context_dict["Error Type"] = error_type

        super().__init__(message, details, context_dict)


class SingularSystemError(NumericError):
    """Exception raised when the Yule-Walker system cannot be solved.

    Raised when a Durbin-Levinson denominator vanishes, when the prediction
    variance turns negative or non-finite, or when the autocorrelation matrix
    is not positive definite.

    Attributes:
        step: The recursion step (order) at which the failure was detected
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 step: Optional[int] = None,
                 values: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.step = step

        context_dict = context or {}
        if step is not None:
            context_dict["Step"] = step

        super().__init__(message, operation=operation, values=values,
                         error_type="singular_system", details=details,
                         context=context_dict)


class OptimizationError(ArimaError):
    """Exception raised when the CSS optimizer fails and strict mode is on.

    Attributes:
        algorithm: The optimization algorithm being used
        iterations: The number of iterations performed before failure
        final_value: The best objective function value reached
        issue: Description of the issue reported by the optimizer
    """

    def __init__(self,
                 message: str,
                 algorithm: Optional[str] = None,
                 iterations: Optional[int] = None,
                 final_value: Optional[float] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.algorithm = algorithm
        self.iterations = iterations
        self.final_value = final_value
        self.issue = issue

        context_dict = context or {}
        if algorithm:
            context_dict["Algorithm"] = algorithm
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if final_value is not None:
            context_dict["Final Value"] = final_value
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class ConfigurationError(ArimaError):
    """Exception raised for invalid configuration sections, options or values.

    Attributes:
        section: The configuration section involved
        option: The configuration option involved
    """

    def __init__(self,
                 message: str,
                 section: Optional[str] = None,
                 option: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.section = section
        self.option = option

        context_dict = context or {}
        if section:
            context_dict["Section"] = section
        if option:
            context_dict["Option"] = option

        super().__init__(message, details, context_dict)


class ArimaWarning(Warning):
    """Base warning class for all ARIMA Kit warnings.

    Attributes:
        message: The warning message
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}

        super().__init__(_format_message(message, details, context))


class ConvergenceWarning(ArimaWarning):
    """Warning issued when the optimizer stops without reporting convergence
    and a best-effort result is returned instead.

    Attributes:
        iterations: The number of iterations performed
        final_value: The objective value of the returned coefficients
    """

    def __init__(self,
                 message: str,
                 iterations: Optional[int] = None,
                 final_value: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.iterations = iterations
        self.final_value = final_value

        context_dict = context or {}
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if final_value is not None:
            context_dict["Final Value"] = final_value

        super().__init__(message, details, context_dict)


class NumericWarning(ArimaWarning):
    """Warning for numerical issues that do not prevent computation.

    Attributes:
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue
        self.value = value

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue
        if value is not None:
            context_dict["Value"] = value

        super().__init__(message, details, context_dict)


def raise_parameter_error(message: str,
                          param_name: Optional[str] = None,
                          param_value: Optional[Any] = None,
                          constraint: Optional[str] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a ParameterError with consistent formatting."""
    raise ParameterError(message, param_name, param_value, constraint, details, context)


def raise_data_error(message: str,
                     data_name: Optional[str] = None,
                     issue: Optional[str] = None,
                     index: Optional[Union[int, Tuple[int, ...], str]] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DataError with consistent formatting."""
    raise DataError(message, data_name, issue, index, details, context)


def raise_input_too_short(message: str,
                          data_name: Optional[str] = None,
                          length: Optional[int] = None,
                          required: Optional[int] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise an InputTooShortError with consistent formatting."""
    raise InputTooShortError(message, data_name, length, required, details, context)


def raise_dimension_error(message: str,
                          array_name: Optional[str] = None,
                          expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                          actual_shape: Optional[Tuple[int, ...]] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionError with consistent formatting."""
    raise DimensionError(message, array_name, expected_shape, actual_shape, details, context)


def raise_dimension_mismatch(message: str,
                             array_name: Optional[str] = None,
                             expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                             actual_shape: Optional[Tuple[int, ...]] = None,
                             details: Optional[str] = None,
                             context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionMismatchError with consistent formatting."""
    raise DimensionMismatchError(message, array_name, expected_shape, actual_shape,
                                 details, context)


def raise_singular_system(message: str,
                          operation: Optional[str] = None,
                          step: Optional[int] = None,
                          values: Optional[Any] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a SingularSystemError with consistent formatting."""
    raise SingularSystemError(message, operation, step, values, details, context)


def warn_convergence(message: str,
                     iterations: Optional[int] = None,
                     final_value: Optional[float] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a ConvergenceWarning with consistent formatting."""
    warnings.warn(
        ConvergenceWarning(message, iterations, final_value, details, context),
        stacklevel=2
    )


def warn_numeric(message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a NumericWarning with consistent formatting."""
    warnings.warn(
        NumericWarning(message, operation, issue, value, details, context),
        stacklevel=2
    )
