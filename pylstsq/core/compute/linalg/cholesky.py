"""
Cholesky decomposition of a symmetric positive-definite matrix.

Used by the Cholesky strategy on the normal-equations matrix A'A.
Positive-definiteness is verified constructively: the factorization
fails at the first column whose radicand is not strictly positive.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import NotPositiveDefiniteError, ValidationError
from pylstsq.core.validation import check_square
from pylstsq.core.compute.tolerances import EPSILON_64
from pylstsq.core.compute.linalg.triangular import solve_triangular


@dataclass(frozen=True)
class CholeskyResult:
    """
    Result of Cholesky decomposition.

    Attributes:
        L: Lower triangular factor with positive diagonal, L L' = S + λI
        regularization: Ridge term λ added to the diagonal before factoring
    """
    L: NDArray[np.floating[Any]]
    regularization: float = 0.0

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Return L L' (equal to the factored matrix plus λI)."""
        return self.L @ self.L.T


def cholesky(
    S: NDArray[np.floating[Any]],
    *,
    regularization: float = 0.0,
    matrix_name: str = 'S',
) -> CholeskyResult:
    """
    Cholesky factorization S + λI = L L'.

    Column j is computed as
        L[j,j] = sqrt(S[j,j] + λ - Σ_k L[j,k]²)
        L[i,j] = (S[i,j] - Σ_k L[i,k] L[j,k]) / L[j,j]   for i > j

    Args:
        S: Symmetric matrix (n x n)
        regularization: Non-negative ridge term λ added to the diagonal
        matrix_name: Name used in error messages

    Returns:
        CholeskyResult with the lower triangular factor

    Raises:
        DimensionError: If S is not square
        ValidationError: If S is not symmetric
        NotPositiveDefiniteError: If a radicand is <= 0
    """
    S = np.asarray(S, dtype=np.float64)
    check_square(S, matrix_name)
    scale = float(np.max(np.abs(S))) if S.size else 0.0
    if not np.allclose(S, S.T, rtol=0.0, atol=S.shape[0] * EPSILON_64 * scale * 16):
        raise ValidationError(f"{matrix_name}: matrix is not symmetric")

    n = S.shape[0]
    L = np.zeros_like(S)

    for j in range(n):
        row = L[j, :j]
        radicand = S[j, j] + regularization - row @ row
        if not radicand > 0.0:
            raise NotPositiveDefiniteError(
                f"{matrix_name} is not positive definite: radicand "
                f"{radicand:.3e} <= 0 at column {j}",
                matrix_name=matrix_name,
                index=j,
                radicand=float(radicand),
            )
        L[j, j] = np.sqrt(radicand)
        L[j + 1:, j] = (S[j + 1:, j] - L[j + 1:, :j] @ row) / L[j, j]

    return CholeskyResult(L=L, regularization=regularization)


def cholesky_solve(
    result: CholeskyResult,
    c: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Solve (L L') x = c with two triangular solves.

    L y = c (forward), then L' x = y (back).
    """
    y = solve_triangular(result.L, c, lower=True, matrix_name='L')
    return solve_triangular(result.L.T, y, lower=False, matrix_name="L'")
