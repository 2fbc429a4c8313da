"""
Orthogonal-factorization backends.

QR and SVD factor A itself, so their accuracy depends on cond(A) rather
than cond(A)². SVD is the only strategy that yields the minimum-norm
solution of a rank-deficient system.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.compute.tolerances import DEFAULT_MAX_SWEEPS
from pylstsq.core.compute.linalg.qr import QRResult, householder_qr, qr_solve
from pylstsq.core.compute.linalg.svd import SVDResult, svd, svd_solve
from pylstsq.core.compute.linalg.conditioning import absolute_tolerance
from pylstsq.lstsq.design import Design


class QRBackend:
    """
    Least squares via Householder QR.

    Implements the Backend protocol for Design -> QRResult.

    With a ridge term λ the augmented system [A; √λ I] x ≈ [b; 0] is
    factored instead, which has the same solution as (A'A + λI) x = A'b
    without ever forming A'A.
    """

    @property
    def name(self) -> str:
        return 'qr'

    def decompose(self, design: Design) -> QRResult:
        A, _ = design.augmented()
        return householder_qr(A, mode='reduced')

    def solve(self, design: Design, factorization: QRResult) -> NDArray[np.floating[Any]]:
        """
        c = Q'b, then back substitution R x = c.

        Raises:
            SingularMatrixError: If the R diagonal shows A to be rank-deficient
            SingularTriangularMatrixError: If R has a zero diagonal entry
        """
        _, b = design.augmented()
        return qr_solve(factorization, b, check_rank=True)


class SVDBackend:
    """
    Minimum-norm least squares via SVD.

    Implements the Backend protocol for Design -> SVDResult.

    Args:
        rank_tolerance: Relative singular value cutoff; None selects ε · max(m, n)
        max_sweeps: Jacobi sweep limit
    """

    def __init__(
        self,
        rank_tolerance: float | None = None,
        max_sweeps: int = DEFAULT_MAX_SWEEPS,
    ):
        self._rank_tolerance = rank_tolerance
        self._max_sweeps = max_sweeps

    @property
    def name(self) -> str:
        return 'svd'

    def decompose(self, design: Design) -> SVDResult:
        """
        Raises:
            ConvergenceError: If the Jacobi iteration does not converge
        """
        return svd(design.A, max_sweeps=self._max_sweeps)

    def solve(self, design: Design, factorization: SVDResult) -> NDArray[np.floating[Any]]:
        tol = absolute_tolerance(factorization.s, design.A.shape, self._rank_tolerance)
        x, _ = svd_solve(
            factorization,
            design.b,
            tol=tol,
            regularization=design.regularization,
        )
        return x
