"""
Triangular solves by forward and back substitution.

Every factorization strategy except SVD ends in one or two calls to
solve_triangular(). Only the flagged triangle of T is read, so a
packed LU or an R with garbage below the diagonal is fine.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import DimensionError, SingularTriangularMatrixError
from pylstsq.core.validation import check_square


def solve_triangular(
    T: NDArray[np.floating[Any]],
    c: NDArray[np.floating[Any]],
    *,
    lower: bool,
    unit_diagonal: bool = False,
    tol: float = 0.0,
    matrix_name: str = 'T',
) -> NDArray[np.floating[Any]]:
    """
    Solve T x = c for triangular T.

    Lower-triangular systems are solved top-down (forward substitution),
    upper-triangular systems bottom-up (back substitution). Row i uses
    only the entries of x already resolved.

    Args:
        T: Square triangular matrix (n x n)
        c: Right-hand side, shape (n,) or (n, k) for k right-hand sides
        lower: True if T is lower triangular, False if upper
        unit_diagonal: Assume ones on the diagonal without reading it
        tol: Diagonal entries with |d| <= tol are treated as zero
        matrix_name: Name used in error messages

    Returns:
        Solution x with the same shape as c

    Raises:
        DimensionError: If T is not square or c has the wrong length
        SingularTriangularMatrixError: If a diagonal entry is (numerically) zero

    Example:
        >>> T = np.array([[1., 0., 0.], [2., 3., 0.], [3., 4., 1.]])
        >>> solve_triangular(T, np.array([1., 11., 15.]), lower=True)
        array([1., 3., 0.])
    """
    T = np.asarray(T, dtype=np.float64)
    c = np.asarray(c, dtype=np.float64)
    check_square(T, matrix_name)
    n = T.shape[0]
    if c.ndim not in (1, 2) or c.shape[0] != n:
        raise DimensionError(
            f"right-hand side: expected {n} rows to match {matrix_name} "
            f"of shape {T.shape}, got shape {c.shape}"
        )

    x = np.zeros_like(c)
    rows = range(n) if lower else range(n - 1, -1, -1)

    for i in rows:
        if lower:
            partial = T[i, :i] @ x[:i]
        else:
            partial = T[i, i + 1:] @ x[i + 1:]

        if unit_diagonal:
            x[i] = c[i] - partial
            continue

        d = T[i, i]
        if d == 0.0 or abs(d) <= tol or not np.isfinite(d):
            raise SingularTriangularMatrixError(
                f"{matrix_name} has a zero diagonal entry at row {i} "
                f"(|{matrix_name}[{i},{i}]| = {abs(d):.3e} <= tol = {tol:.3e})",
                matrix_name=matrix_name,
                index=i,
                diagonal_value=float(d),
            )
        x[i] = (c[i] - partial) / d

    return x
