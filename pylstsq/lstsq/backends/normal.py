"""
Normal-equations backends.

All three strategies reduce min ||b - Ax|| to the square system
(A'A + λI) x = A'b and differ only in how that system is solved:

    NormalEquationsBackend: explicit inverse, x = (A'A)⁻¹ A'b
    CholeskyBackend:        A'A = L L', then L y = A'b, L' x = y
    LUBackend:              A'A = P L U, then L y = P'A'b, U x = y

Forming A'A squares the condition number, so these are cheaper but less
accurate than QR/SVD on ill-conditioned problems, and they cannot
represent the minimum-norm solution of a rank-deficient system.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.compute.linalg.cholesky import CholeskyResult, cholesky, cholesky_solve
from pylstsq.core.compute.linalg.lu import LUResult, lu_factor, lu_solve
from pylstsq.core.compute.linalg.inverse import gauss_jordan_inverse
from pylstsq.lstsq.design import Design


class NormalEquationsBackend:
    """
    Textbook normal equations with an explicit inverse.

    Implements the Backend protocol for Design -> (A'A)⁻¹.
    """

    @property
    def name(self) -> str:
        return 'normal'

    def decompose(self, design: Design) -> NDArray[np.floating[Any]]:
        """
        Invert A'A + λI by Gauss-Jordan elimination.

        Raises:
            SingularMatrixError: If A'A is singular
        """
        return gauss_jordan_inverse(design.AtA(), matrix_name="A'A")

    def solve(self, design: Design, factorization: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        return factorization @ design.Atb()


class CholeskyBackend:
    """
    Normal equations via Cholesky decomposition.

    Implements the Backend protocol for Design -> CholeskyResult.
    """

    @property
    def name(self) -> str:
        return 'cholesky'

    def decompose(self, design: Design) -> CholeskyResult:
        """
        Factor A'A (the ridge term is already on its diagonal).

        Raises:
            NotPositiveDefiniteError: If A'A is not positive definite
        """
        return cholesky(design.AtA(), matrix_name="A'A")

    def solve(self, design: Design, factorization: CholeskyResult) -> NDArray[np.floating[Any]]:
        return cholesky_solve(factorization, design.Atb())


class LUBackend:
    """
    Normal equations via LU decomposition with partial pivoting.

    Implements the Backend protocol for Design -> LUResult.
    """

    @property
    def name(self) -> str:
        return 'lu'

    def decompose(self, design: Design) -> LUResult:
        """
        Factor A'A with row pivoting.

        Raises:
            SingularMatrixError: If a pivot column of A'A is zero
        """
        return lu_factor(design.AtA(), matrix_name="A'A")

    def solve(self, design: Design, factorization: LUResult) -> NDArray[np.floating[Any]]:
        return lu_solve(factorization, design.Atb())
