"""
Explicit matrix inverse by Gauss-Jordan elimination.

Only the textbook normal-equations strategy, x = (A'A)⁻¹ A'b, forms an
inverse. It is kept as the baseline the factorization strategies are
compared against; no other code path should call it.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import SingularMatrixError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import EPSILON_64


def gauss_jordan_inverse(
    S: NDArray[np.floating[Any]],
    *,
    tol: float | None = None,
    matrix_name: str = 'S',
) -> NDArray[np.floating[Any]]:
    """
    Invert a square matrix by Gauss-Jordan elimination on [S | I].

    Uses partial pivoting; each pivot row is scaled to a unit pivot and
    eliminated from every other row, leaving [I | S⁻¹].

    Args:
        S: Square matrix (n x n)
        tol: Pivots with |pivot| <= tol are treated as zero.
             Defaults to n · ε · max|S|.
        matrix_name: Name used in error messages

    Returns:
        The inverse S⁻¹

    Raises:
        DimensionError: If S is not square
        SingularMatrixError: If S is (numerically) singular
    """
    S = np.asarray(S, dtype=np.float64)
    check_square(S, matrix_name)
    n = S.shape[0]
    augmented = np.hstack([S, np.eye(n)])

    if tol is None:
        scale = float(np.max(np.abs(S))) if S.size else 0.0
        tol = n * EPSILON_64 * scale

    for k in range(n):
        p = k + int(np.argmax(np.abs(augmented[k:, k])))
        pivot = augmented[p, k]
        if pivot == 0.0 or abs(pivot) <= tol:
            raise SingularMatrixError(
                f"{matrix_name} is singular: no usable pivot in column {k} "
                f"(|pivot| = {abs(pivot):.3e} <= tol = {tol:.3e})",
                matrix_name=matrix_name,
                rank=k,
                expected_rank=n,
                index=k,
            )
        if p != k:
            augmented[[k, p]] = augmented[[p, k]]

        augmented[k] /= augmented[k, k]
        factors = augmented[:, k].copy()
        factors[k] = 0.0
        augmented -= np.outer(factors, augmented[k])

    return augmented[:, n:]
