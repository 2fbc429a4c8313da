"""
Least-squares strategy backends.

Available backends:
    NormalEquationsBackend: (A'A)⁻¹ A'b via Gauss-Jordan inverse
    CholeskyBackend: A'A = L L' and two triangular solves
    LUBackend: A'A = P L U with partial pivoting
    QRBackend: Householder QR of A, back substitution
    SVDBackend: Jacobi SVD of A, minimum-norm solution
"""

from pylstsq.lstsq.backends.normal import (
    NormalEquationsBackend,
    CholeskyBackend,
    LUBackend,
)
from pylstsq.lstsq.backends.orthogonal import QRBackend, SVDBackend

__all__ = [
    "NormalEquationsBackend",
    "CholeskyBackend",
    "LUBackend",
    "QRBackend",
    "SVDBackend",
]
