# arimakit/utils/matrix_ops.py
"""
Matrix Operations Module

This module provides the small set of dense linear algebra helpers needed by
the direct Yule-Walker solver: building the symmetric Toeplitz matrix of an
autocorrelation vector, checking positive definiteness, and solving a
symmetric positive definite system by Cholesky factorization.

Functions:
    toeplitz_from_acf: Build the Yule-Walker matrix M[i, j] = rho[|i - j|]
    is_positive_definite: Check if a matrix is positive definite
    solve_spd: Solve a symmetric positive definite linear system
"""

import logging

import numpy as np
from scipy import linalg

from arimakit.core.exceptions import (
    raise_dimension_error, raise_dimension_mismatch, raise_singular_system
)
from arimakit.core.types import Matrix, Vector

# Set up module-level logger
logger = logging.getLogger("arimakit.utils.matrix_ops")


def toeplitz_from_acf(rho: Vector, order: int) -> Matrix:
    """
    Build the order x order Yule-Walker matrix of an autocorrelation vector.

    Args:
        rho: Autocorrelation vector with at least ``order`` entries
        order: Size of the matrix

    Returns:
        Symmetric Toeplitz matrix with M[i, j] = rho[|i - j|]

    Raises:
        DimensionMismatchError: If rho has fewer than ``order`` entries

    Examples:
        >>> import numpy as np
        >>> from arimakit.utils.matrix_ops import toeplitz_from_acf
        >>> toeplitz_from_acf(np.array([1.0, 0.5, 0.25]), 2)
        array([[1. , 0.5],
               [0.5, 1. ]])
    """
    rho = np.asarray(rho, dtype=np.float64)
    if rho.shape[0] < order:
        raise_dimension_mismatch(
            f"rho must contain at least {order} values",
            array_name="rho",
            expected_shape=(order,),
            actual_shape=rho.shape
        )
    return linalg.toeplitz(rho[:order])


def is_positive_definite(matrix: Matrix) -> bool:
    """
    Check if a matrix is positive definite.

    The check attempts a Cholesky decomposition, which succeeds exactly when
    the (symmetric) matrix is positive definite.

    Args:
        matrix: Matrix to check

    Returns:
        True if the matrix is positive definite, False otherwise

    Examples:
        >>> import numpy as np
        >>> from arimakit.utils.matrix_ops import is_positive_definite
        >>> is_positive_definite(np.array([[2.0, 1.0], [1.0, 2.0]]))
        True
        >>> is_positive_definite(np.array([[1.0, 2.0], [2.0, 1.0]]))
        False
    """
    matrix = np.asarray(matrix, dtype=np.float64)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    if not np.all(np.isfinite(matrix)):
        return False

    try:
        linalg.cholesky(matrix, lower=True, check_finite=False)
        return True
    except linalg.LinAlgError:
        return False


def solve_spd(matrix: Matrix, b: Vector) -> Vector:
    """
    Solve ``matrix @ x = b`` for a symmetric positive definite matrix.

    Args:
        matrix: Square symmetric positive definite matrix
        b: Right-hand side vector

    Returns:
        Solution vector x

    Raises:
        DimensionError: If the matrix is not square
        DimensionMismatchError: If b does not match the matrix size
        SingularSystemError: If the matrix is not positive definite
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)

    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise_dimension_error(
            "Matrix must be square",
            array_name="matrix",
            expected_shape="(k, k)",
            actual_shape=matrix.shape
        )
    if b.shape != (matrix.shape[0],):
        raise_dimension_mismatch(
            "Right-hand side does not match the matrix size",
            array_name="b",
            expected_shape=(matrix.shape[0],),
            actual_shape=b.shape
        )
    if matrix.shape[0] == 0:
        return np.zeros(0, dtype=np.float64)

    try:
        factor = linalg.cho_factor(matrix, lower=True)
    except (linalg.LinAlgError, ValueError) as e:
        logger.debug(f"Cholesky factorization failed: {e}")
        raise_singular_system(
            "Matrix is not positive definite",
            operation="solve_spd",
            values=matrix,
            details=str(e)
        )

    return linalg.cho_solve(factor, b)
