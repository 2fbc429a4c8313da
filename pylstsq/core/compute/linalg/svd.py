"""
Singular value decomposition by one-sided Jacobi rotations.

The Hestenes method orthogonalizes the columns of a working copy of A by
plane rotations, accumulating the same rotations into V. On convergence
the column norms are the singular values and the normalized columns are
U. It computes small singular values to high relative accuracy, which
is what the rank and conditioning diagnostics depend on.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.exceptions import ConvergenceError, DimensionError
from pylstsq.core.validation import check_2d
from pylstsq.core.compute.tolerances import EPSILON_64, DEFAULT_MAX_SWEEPS
from pylstsq.core.compute.linalg.qr import householder_qr


@dataclass(frozen=True)
class SVDResult:
    """
    Result of singular value decomposition, A = U diag(s) Vt.

    Attributes:
        U: Left singular vectors, orthonormal columns (m x k, k = min(m, n))
        s: Singular values, sorted descending, all >= 0 (k,)
        Vt: Right singular vectors, transposed (k x n)
        sweeps: Number of Jacobi sweeps performed
    """
    U: NDArray[np.floating[Any]]
    s: NDArray[np.floating[Any]]
    Vt: NDArray[np.floating[Any]]
    sweeps: int

    def reconstruct(self) -> NDArray[np.floating[Any]]:
        """Return U diag(s) Vt."""
        return (self.U * self.s) @ self.Vt


def svd(
    A: NDArray[np.floating[Any]],
    *,
    max_sweeps: int = DEFAULT_MAX_SWEEPS,
) -> SVDResult:
    """
    Thin SVD of A via one-sided Jacobi.

    Wide matrices are handled by decomposing A' and swapping the roles
    of U and V.

    Args:
        A: Matrix to decompose (m x n)
        max_sweeps: Maximum number of full passes over all column pairs

    Returns:
        SVDResult with U, s (descending) and Vt

    Raises:
        ConvergenceError: If the columns are not orthogonal after max_sweeps
    """
    A = np.asarray(A, dtype=np.float64)
    check_2d(A, 'A')
    m, n = A.shape
    if m < n:
        wide = svd(A.T, max_sweeps=max_sweeps)
        return SVDResult(U=wide.Vt.T, s=wide.s, Vt=wide.U.T, sweeps=wide.sweeps)

    W = A.copy()
    V = np.eye(n)
    tol = m * EPSILON_64
    # A column at or below ε times the largest column norm carries no
    # resolvable direction. The cutoff never exceeds ε·σ_max, so every
    # singular value a rank tolerance can keep has its own U column.
    largest = float(np.max(np.linalg.norm(A, axis=0))) if n else 0.0
    negligible = (EPSILON_64 * largest) ** 2

    sweeps = 0
    worst = 0.0
    while True:
        rotated = False
        worst = 0.0
        for p in range(n - 1):
            for q in range(p + 1, n):
                alpha = W[:, p] @ W[:, p]
                beta = W[:, q] @ W[:, q]
                gamma = W[:, p] @ W[:, q]
                if alpha <= negligible or beta <= negligible:
                    continue
                ratio = abs(gamma) / np.sqrt(alpha * beta)
                worst = max(worst, ratio)
                if ratio <= tol:
                    continue

                rotated = True
                zeta = (beta - alpha) / (2.0 * gamma)
                t = np.copysign(1.0, zeta) / (abs(zeta) + np.sqrt(1.0 + zeta * zeta))
                c = 1.0 / np.sqrt(1.0 + t * t)
                s = c * t

                wp = W[:, p].copy()
                W[:, p] = c * wp - s * W[:, q]
                W[:, q] = s * wp + c * W[:, q]
                vp = V[:, p].copy()
                V[:, p] = c * vp - s * V[:, q]
                V[:, q] = s * vp + c * V[:, q]

        if not rotated:
            break
        sweeps += 1
        if sweeps >= max_sweeps:
            raise ConvergenceError(
                f"Jacobi SVD did not converge after {sweeps} sweeps "
                f"(largest column cosine {worst:.3e} > {tol:.3e})",
                iterations=sweeps,
                final_change=float(worst),
                reason='max_iterations',
                threshold=tol,
            )

    sigma = np.linalg.norm(W, axis=0)
    order = np.argsort(-sigma, kind='stable')
    sigma = sigma[order]
    W = W[:, order]
    V = V[:, order]

    U = np.zeros_like(W)
    # Negligible columns are exact zeros; their U columns come from basis completion
    nonzero = sigma > np.sqrt(negligible)
    sigma[~nonzero] = 0.0
    U[:, nonzero] = W[:, nonzero] / sigma[nonzero]
    r = int(np.sum(nonzero))
    if r < n:
        U[:, r:] = _complete_basis(U[:, :r], m)[:, r:n]

    return SVDResult(U=U, s=sigma, Vt=V.T, sweeps=sweeps)


def _complete_basis(U_r: NDArray, m: int) -> NDArray:
    """Extend r orthonormal columns to an orthonormal basis of R^m."""
    if U_r.shape[1] == 0:
        return np.eye(m)
    return householder_qr(U_r, mode='complete').Q


def svd_solve(
    result: SVDResult,
    b: NDArray[np.floating[Any]],
    *,
    tol: float,
    regularization: float = 0.0,
) -> tuple[NDArray[np.floating[Any]], int]:
    """
    Minimum-norm least-squares solution from an SVD.

    The solution is computed as:
        c = U'b
        y = c / s      (element-wise; s_i <= tol contributes zero)
        x = V y

    With regularization λ > 0 the ridge filter y = s c / (s² + λ) is
    used and no singular value is dropped.

    Args:
        result: SVD of A
        b: Right-hand side (m,)
        tol: Absolute singular value cutoff
        regularization: Ridge term λ

    Returns:
        Tuple of (x, number of singular values treated as zero)
    """
    b = np.asarray(b, dtype=np.float64)
    if b.shape[0] != result.U.shape[0]:
        raise DimensionError(
            f"b: expected {result.U.shape[0]} rows to match U, got shape {b.shape}"
        )
    c = result.U.T @ b
    s = result.s

    if regularization > 0.0:
        y = s * c / (s * s + regularization)
        n_dropped = 0
    else:
        keep = s > tol
        y = np.zeros_like(c)
        y[keep] = c[keep] / s[keep]
        n_dropped = int(np.sum(~keep))

    return result.Vt.T @ y, n_dropped
