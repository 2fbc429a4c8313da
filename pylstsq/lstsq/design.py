"""
Least-squares design.

Design holds the validated system (A, b) every strategy backend reads
from. It is built once at the public boundary; backends trust it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import DimensionError
from pylstsq.core.validation import (
    check_array,
    check_finite,
    check_2d,
    check_1d,
    check_consistent_length,
    check_min_samples,
    check_non_negative,
)


@dataclass(frozen=True)
class Design:
    """
    Over-determined least-squares system min_x ||b - A x||² + λ||x||².

    Immutable after construction.

    Construction:
        Design.from_arrays(A, b)                      # plain least squares
        Design.from_arrays(A, b, regularization=1e-8) # ridge term λ
    """
    _A: NDArray[np.floating[Any]]
    _b: NDArray[np.floating[Any]]
    _m: int
    _n: int
    _regularization: float = 0.0

    @classmethod
    def from_arrays(
        cls,
        A: ArrayLike,
        b: ArrayLike,
        *,
        regularization: float = 0.0,
    ) -> Design:
        """
        Build Design directly from arrays.

        Raises:
            ValidationError: If inputs are non-numeric or non-finite
            DimensionError: If shapes are incompatible or m < n
        """
        A = check_array(A, 'A')
        b = check_array(b, 'b')

        # Ensure correct shapes
        if A.ndim == 1:
            A = A.reshape(-1, 1)
        if b.ndim == 2 and b.shape[1] == 1:
            b = b.ravel()

        check_2d(A, 'A')
        check_1d(b, 'b')
        check_finite(A, 'A')
        check_finite(b, 'b')
        check_consistent_length(A, b, names=('A', 'b'))

        m, n = A.shape
        if n == 0:
            raise DimensionError(f"A: expected at least one column, got shape {A.shape}")
        check_min_samples(A, n, 'A')
        regularization = check_non_negative(regularization, 'regularization')

        # Private copies: callers may mutate their arrays after the call
        A = np.array(A, dtype=np.float64)
        b = np.array(b, dtype=np.float64)
        A.setflags(write=False)
        b.setflags(write=False)

        return cls(_A=A, _b=b, _m=m, _n=n, _regularization=regularization)

    # === Properties ===

    @property
    def A(self) -> NDArray[np.floating[Any]]:
        """Coefficient matrix (m x n), read-only."""
        return self._A

    @property
    def b(self) -> NDArray[np.floating[Any]]:
        """Right-hand side (m,), read-only."""
        return self._b

    @property
    def m(self) -> int:
        """Number of equations (rows)."""
        return self._m

    @property
    def n(self) -> int:
        """Number of unknowns (columns)."""
        return self._n

    @property
    def regularization(self) -> float:
        """Ridge term λ added to A'A (0.0 for plain least squares)."""
        return self._regularization

    def AtA(self) -> NDArray[np.floating[Any]]:
        """Compute A'A + λI, the normal-equations matrix."""
        S = self._A.T @ self._A
        if self._regularization > 0.0:
            S = S + self._regularization * np.eye(self._n)
        return S

    def Atb(self) -> NDArray[np.floating[Any]]:
        """Compute A'b."""
        return self._A.T @ self._b

    def augmented(self) -> tuple[NDArray[np.floating[Any]], NDArray[np.floating[Any]]]:
        """
        Stacked system [A; √λ I], [b; 0] whose plain least-squares
        solution is the ridge solution. Returns (A, b) when λ = 0.
        """
        if self._regularization == 0.0:
            return self._A, self._b
        root = np.sqrt(self._regularization)
        A_aug = np.vstack([self._A, root * np.eye(self._n)])
        b_aug = np.concatenate([self._b, np.zeros(self._n)])
        return A_aug, b_aug
