"""
Rank and conditioning diagnostics.

Both quantities come from the singular values: the numerical rank counts
singular values above a relative tolerance, and the 2-norm condition
number is the ratio of the extreme singular values.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.compute.tolerances import default_rank_tolerance, DEFAULT_MAX_SWEEPS
from pylstsq.core.compute.linalg.svd import svd


@dataclass(frozen=True)
class RankDiagnostics:
    """
    Rank and conditioning of a matrix.

    Attributes:
        singular_values: Descending singular values
        rank: Number of singular values above ``tolerance``
        condition_number: σ_max / σ_min (inf if σ_min == 0)
        tolerance: Absolute singular value cutoff used for ``rank``
    """
    singular_values: NDArray[np.floating[Any]]
    rank: int
    condition_number: float
    tolerance: float

    @property
    def is_full_rank(self) -> bool:
        return self.rank == len(self.singular_values)


def singular_values(
    A: NDArray[np.floating[Any]],
    *,
    max_sweeps: int = DEFAULT_MAX_SWEEPS,
) -> NDArray[np.floating[Any]]:
    """Descending singular values of A."""
    return svd(A, max_sweeps=max_sweeps).s


def absolute_tolerance(
    s: NDArray[np.floating[Any]],
    shape: tuple[int, ...],
    rank_tolerance: float | None = None,
) -> float:
    """
    Absolute singular value cutoff ``rank_tolerance · σ_max``.

    ``rank_tolerance`` is relative; None selects ``ε · max(m, n)``.
    """
    if rank_tolerance is None:
        rank_tolerance = default_rank_tolerance(shape)
    s_max = float(s[0]) if len(s) else 0.0
    return rank_tolerance * s_max


def condition_number_from_singular_values(s: NDArray[np.floating[Any]]) -> float:
    """σ_max / σ_min; inf for a singular (or empty) matrix."""
    if len(s) == 0 or s[-1] == 0.0:
        return float('inf')
    return float(s[0] / s[-1])


def diagnose(
    A: NDArray[np.floating[Any]],
    *,
    rank_tolerance: float | None = None,
    s: NDArray[np.floating[Any]] | None = None,
    max_sweeps: int = DEFAULT_MAX_SWEEPS,
) -> RankDiagnostics:
    """
    Compute rank and condition number of A.

    Args:
        A: Matrix (m x n)
        rank_tolerance: Relative tolerance; None selects ε · max(m, n)
        s: Precomputed descending singular values, to avoid a second SVD
        max_sweeps: Jacobi sweep limit when s must be computed

    Returns:
        RankDiagnostics
    """
    if s is None:
        s = singular_values(A, max_sweeps=max_sweeps)
    tol = absolute_tolerance(s, A.shape, rank_tolerance)
    rank = int(np.sum(s > tol))
    return RankDiagnostics(
        singular_values=s,
        rank=rank,
        condition_number=condition_number_from_singular_values(s),
        tolerance=tol,
    )


def matrix_rank(
    A: NDArray[np.floating[Any]],
    *,
    rank_tolerance: float | None = None,
) -> int:
    """Numerical rank of A from its singular values."""
    return diagnose(np.asarray(A, dtype=np.float64), rank_tolerance=rank_tolerance).rank


def condition_number(A: NDArray[np.floating[Any]]) -> float:
    """2-norm condition number σ_max / σ_min of A."""
    return condition_number_from_singular_values(
        singular_values(np.asarray(A, dtype=np.float64))
    )
