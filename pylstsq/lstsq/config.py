"""
Per-call solver configuration.

All numerical policy lives in one frozen dataclass passed to each solve,
so there is no process-wide mutable state to coordinate.
"""

from dataclasses import dataclass
from typing import Literal

from pylstsq.core.compute.tolerances import ILL_CONDITIONED_THRESHOLD, DEFAULT_MAX_SWEEPS
from pylstsq.core.exceptions import ValidationError


# Strategy names. 'auto' chooses by rank; the rest select one backend.
StrategyChoice = Literal['auto', 'normal', 'cholesky', 'lu', 'qr', 'svd']
ExplicitStrategy = Literal['normal', 'cholesky', 'lu', 'qr', 'svd']

STRATEGIES: tuple[str, ...] = ('normal', 'cholesky', 'lu', 'qr', 'svd')

# Strategies that factor A'A instead of A
NORMAL_EQUATION_STRATEGIES = frozenset({'normal', 'cholesky', 'lu'})


@dataclass(frozen=True)
class SolverConfig:
    """
    Numerical policy for one solve.

    Attributes:
        rank_tolerance: Relative singular value cutoff for numerical rank;
            None selects ε · max(m, n)
        regularization: Ridge term λ >= 0 added to A'A (or its equivalent
            for QR/SVD). Never applied automatically.
        condition_threshold: cond(A) above which the solution is flagged
            ill-conditioned
        auto_full_rank: Strategy 'auto' uses for full-rank systems. 'qr'
            is the stable default; the normal-equations family is cheaper.
        allow_fallback: Let an explicit strategy fall back to QR (full rank)
            or SVD (rank-deficient) on structural failure. 'auto' always
            falls back from the normal-equations family.
        compute_diagnostics: Compute rank and condition number of A before
            solving. Disabling skips the SVD, and explicit strategies then
            detect rank deficiency only through their own factorization:
            the QR R-diagonal rank, the LU and Gauss-Jordan pivot
            tolerance, or a non-positive Cholesky radicand. A'A that is
            singular only up to rounding can pass the last three.
        max_sweeps: Jacobi sweep limit for SVD-based computations
    """
    rank_tolerance: float | None = None
    regularization: float = 0.0
    condition_threshold: float = ILL_CONDITIONED_THRESHOLD
    auto_full_rank: ExplicitStrategy = 'qr'
    allow_fallback: bool = False
    compute_diagnostics: bool = True
    max_sweeps: int = DEFAULT_MAX_SWEEPS

    def __post_init__(self) -> None:
        if self.auto_full_rank not in STRATEGIES:
            raise ValidationError(
                f"auto_full_rank: must be one of {STRATEGIES}, got {self.auto_full_rank!r}"
            )
        if self.rank_tolerance is not None and not self.rank_tolerance >= 0:
            raise ValidationError(
                f"rank_tolerance: must be non-negative, got {self.rank_tolerance}"
            )
        if not self.regularization >= 0:
            raise ValidationError(
                f"regularization: must be non-negative, got {self.regularization}"
            )
        if not self.condition_threshold > 1:
            raise ValidationError(
                f"condition_threshold: must be greater than 1, got {self.condition_threshold}"
            )
        if self.max_sweeps < 1:
            raise ValidationError(f"max_sweeps: must be at least 1, got {self.max_sweeps}")
