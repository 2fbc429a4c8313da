"""
QR decomposition by Householder reflections.

Works on the tall matrix A directly, so the conditioning of the problem
is cond(A) rather than cond(A'A). The reflectors are kept alongside the
explicit Q so that Q'b can be applied in O(mn) without touching Q.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import DimensionError, SingularMatrixError
from pylstsq.core.validation import check_2d
from pylstsq.core.compute.tolerances import EPSILON_64
from pylstsq.core.compute.linalg.triangular import solve_triangular


@dataclass(frozen=True)
class QRResult:
    """
    Result of QR decomposition.

    Attributes:
        Q: Orthogonal matrix (m x k where k = min(m, n) for reduced mode,
           m x m for complete mode)
        R: Upper triangular matrix (k x n, or m x n for complete mode)
        rank: Numerical rank determined from the R diagonal
        reflectors: Unit Householder vectors; reflector j acts on rows j..m-1
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int
    reflectors: tuple[NDArray[np.floating[Any]], ...]

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Return Q R."""
        return self.Q @ self.R


def householder_qr(
    A: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """
    QR decomposition A = QR using Householder reflections.

    Column j is reflected onto -sign(a_jj)·‖a_j‖·e_j by H_j = I - 2 v v'.
    Choosing the sign opposite to a_jj avoids cancellation in v.

    Args:
        A: Matrix to decompose (m x n)
        mode: 'reduced' for economy QR (Q is m x k, R is k x n where k = min(m,n))
              'complete' for full QR (Q is m x m, R is m x n)

    Returns:
        QRResult with Q, R, reflectors and numerical rank
    """
    R = np.array(A, dtype=np.float64)
    check_2d(R, 'A')
    if mode not in ('reduced', 'complete'):
        raise ValueError(f"Unknown QR mode: {mode!r}")

    m, n = R.shape
    k = min(m, n)
    reflectors = []

    for j in range(k):
        x = R[j:, j]
        norm_x = np.linalg.norm(x)
        v = x.copy()
        if norm_x == 0.0:
            # Column already zero below the diagonal: identity reflector
            v[:] = 0.0
            reflectors.append(v)
            continue
        v[0] += np.copysign(norm_x, x[0])
        v /= np.linalg.norm(v)
        R[j:, j:] -= 2.0 * np.outer(v, v @ R[j:, j:])
        R[j + 1:, j] = 0.0
        reflectors.append(v)

    n_cols = k if mode == 'reduced' else m
    Q = np.eye(m, n_cols)
    for j in range(k - 1, -1, -1):
        v = reflectors[j]
        Q[j:, :] -= 2.0 * np.outer(v, v @ Q[j:, :])

    if mode == 'reduced':
        R = R[:k, :]
    R = np.triu(R)

    # Determine numerical rank from R diagonal
    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and np.max(diag_R) > 0:
        tol = max(m, n) * EPSILON_64 * np.max(diag_R)
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, rank=rank, reflectors=tuple(reflectors))


def apply_qt(
    result: QRResult,
    b: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Compute Q'b from the stored reflectors.

    Q' = H_{k-1} ... H_1 H_0, so the reflectors are applied in order.
    Returns the full length-m vector; its first k entries equal
    (reduced Q)'b and the remainder is the residual component.
    """
    y = np.array(b, dtype=np.float64)
    m = result.Q.shape[0]
    if y.shape[0] != m:
        raise DimensionError(f"b: expected {m} rows to match Q, got shape {y.shape}")
    for j, v in enumerate(result.reflectors):
        y[j:] -= 2.0 * np.outer(v, v @ y[j:]).reshape(y[j:].shape)
    return y


def qr_solve(
    result: QRResult,
    b: NDArray[np.floating[Any]],
    *,
    check_rank: bool = False,
) -> NDArray[np.floating[Any]]:
    """
    Solve min_x ||b - Ax|| from a QR decomposition of A.

    The solution is computed as:
        c = Q'b
        R x = c[:n]   (back substitution)

    No inverse is formed; orthogonality gives Q⁻¹ = Q'.

    Args:
        result: QR decomposition of A
        b: Right-hand side (m,)
        check_rank: If True, raise SingularMatrixError when the R diagonal
            shows A to be rank-deficient

    Raises:
        SingularMatrixError: If check_rank is set and rank < n
        SingularTriangularMatrixError: If R has a zero diagonal entry
    """
    n = result.R.shape[1]
    if check_rank and result.rank < n:
        raise SingularMatrixError(
            f"A is rank-deficient: rank={result.rank}, expected={n}. "
            f"Use strategy='svd' for the minimum-norm solution.",
            matrix_name='A',
            rank=result.rank,
            expected_rank=n,
        )
    c = apply_qt(result, b)
    return solve_triangular(result.R[:n, :n], c[:n], lower=False, matrix_name='R')
