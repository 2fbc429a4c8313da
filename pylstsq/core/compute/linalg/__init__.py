"""
Linear algebra kernels for pylstsq.

Every factorization is written out explicitly on NumPy arrays; NumPy is
used for storage and BLAS-level vector products only, never for a
pre-built decomposition.

All functions follow these conventions:
    - Inputs are converted to float64 and never modified in place
    - Each decomposition returns a frozen result dataclass with reconstruct()
    - Structural failures raise immediately with diagnostic attributes

Submodules:
    triangular: Forward and back substitution
    cholesky: Cholesky decomposition of symmetric positive-definite matrices
    lu: LU decomposition with partial pivoting
    inverse: Gauss-Jordan inverse (textbook normal equations only)
    qr: Householder QR decomposition
    svd: One-sided Jacobi SVD
    conditioning: Numerical rank and condition number
"""

from pylstsq.core.compute.linalg.triangular import solve_triangular
from pylstsq.core.compute.linalg.cholesky import (
    CholeskyResult,
    cholesky,
    cholesky_solve,
)
from pylstsq.core.compute.linalg.lu import LUResult, lu_factor, lu_solve
from pylstsq.core.compute.linalg.inverse import gauss_jordan_inverse
from pylstsq.core.compute.linalg.qr import (
    QRResult,
    householder_qr,
    apply_qt,
    qr_solve,
)
from pylstsq.core.compute.linalg.svd import SVDResult, svd, svd_solve
from pylstsq.core.compute.linalg.conditioning import (
    RankDiagnostics,
    diagnose,
    matrix_rank,
    condition_number,
    singular_values,
)

__all__ = [
    # Triangular solves
    "solve_triangular",
    # Cholesky
    "CholeskyResult",
    "cholesky",
    "cholesky_solve",
    # LU
    "LUResult",
    "lu_factor",
    "lu_solve",
    # Inverse
    "gauss_jordan_inverse",
    # QR
    "QRResult",
    "householder_qr",
    "apply_qt",
    "qr_solve",
    # SVD
    "SVDResult",
    "svd",
    "svd_solve",
    # Diagnostics
    "RankDiagnostics",
    "diagnose",
    "matrix_rank",
    "condition_number",
    "singular_values",
]
