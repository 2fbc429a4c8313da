"""
LU decomposition with partial pivoting.

Used by the LU strategy on the normal-equations matrix A'A. At step k the
entry of largest magnitude in column k (rows k..n-1) is swapped into the
pivot position, which bounds every multiplier in L by 1.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import SingularMatrixError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import EPSILON_64
from pylstsq.core.compute.linalg.triangular import solve_triangular


@dataclass(frozen=True)
class LUResult:
    """
    Result of LU decomposition, S = P L U.

    Attributes:
        L: Unit lower triangular factor (n x n)
        U: Upper triangular factor (n x n)
        perm: Row order such that S[perm] = L U
    """
    L: NDArray[np.floating[Any]]
    U: NDArray[np.floating[Any]]
    perm: NDArray[np.intp]

    @property
    def P(self) -> NDArray[np.floating[Any]]:
        """Permutation matrix with S = P L U."""
        n = len(self.perm)
        return np.eye(n)[self.perm].T

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Return P L U."""
        return self.P @ self.L @ self.U


def lu_factor(
    S: NDArray[np.floating[Any]],
    *,
    tol: float | None = None,
    matrix_name: str = 'S',
) -> LUResult:
    """
    Gaussian elimination with partial pivoting.

    Args:
        S: Square matrix (n x n)
        tol: Pivots with |pivot| <= tol are treated as zero.
             Defaults to n · ε · max|S|.
        matrix_name: Name used in error messages

    Returns:
        LUResult with L, U and the row permutation

    Raises:
        DimensionError: If S is not square
        SingularMatrixError: If a pivot column is (numerically) zero
    """
    U = np.array(S, dtype=np.float64)
    check_square(U, matrix_name)
    n = U.shape[0]
    L = np.eye(n)
    perm = np.arange(n)

    if tol is None:
        scale = float(np.max(np.abs(U))) if U.size else 0.0
        tol = n * EPSILON_64 * scale

    for k in range(n):
        p = k + int(np.argmax(np.abs(U[k:, k])))
        pivot = U[p, k]
        if pivot == 0.0 or abs(pivot) <= tol:
            raise SingularMatrixError(
                f"{matrix_name} is singular: pivot column {k} is zero after "
                f"pivoting (|pivot| = {abs(pivot):.3e} <= tol = {tol:.3e})",
                matrix_name=matrix_name,
                rank=k,
                expected_rank=n,
                index=k,
            )

        if p != k:
            U[[k, p], k:] = U[[p, k], k:]
            L[[k, p], :k] = L[[p, k], :k]
            perm[[k, p]] = perm[[p, k]]

        multipliers = U[k + 1:, k] / U[k, k]
        L[k + 1:, k] = multipliers
        U[k + 1:, k:] -= np.outer(multipliers, U[k, k:])
        U[k + 1:, k] = 0.0

    return LUResult(L=L, U=U, perm=perm)


def lu_solve(
    result: LUResult,
    c: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve (P L U) x = c.

    Applies P' to c (a row reorder, since P⁻¹ = P'), then forward-solves
    with the unit lower factor and back-solves with U.
    """
    c = np.asarray(c, dtype=np.float64)
    y = solve_triangular(result.L, c[result.perm], lower=True, unit_diagonal=True, matrix_name='L')
    return solve_triangular(result.U, y, lower=False, matrix_name='U')
