"""
Precision constants and tolerance tiers.

Defines the numerical thresholds shared by the kernels and the driver:
- machine epsilon and the default relative rank tolerance
- the condition number above which a system is reported ill-conditioned
- tolerance tiers describing how closely strategies are expected to agree

Used by the kernels, the driver's diagnostics and the test suite.
"""

from dataclasses import dataclass

import numpy as np


# Machine epsilon for float64 (~2.22e-16)
EPSILON_64: float = float(np.finfo(np.float64).eps)

# Condition number above which a solution is flagged ill-conditioned.
# At cond(A) = 1e6, cond(A'A) = 1e12: the normal-equations family has
# lost roughly 12 of its 16 significant digits.
ILL_CONDITIONED_THRESHOLD = 1e6

# Iteration cap for the one-sided Jacobi SVD
DEFAULT_MAX_SWEEPS = 60


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# Well-conditioned problems: every strategy matches to near machine precision
WELL_CONDITIONED = ToleranceTier(
    rtol=1e-9,
    atol=1e-11,
    name='well_conditioned',
    description='Double precision, cond(A) < 1e4: all strategies agree',
)

# Ill-conditioned problems: the normal-equations family squares cond(A)
ILL_CONDITIONED = ToleranceTier(
    rtol=1e-3,
    atol=1e-5,
    name='ill_conditioned',
    description='Double precision, cond(A) > 1e4: normal equations lose digits',
)


def default_rank_tolerance(shape: tuple[int, ...]) -> float:
    """
    Relative tolerance for numerical rank: ``ε · max(m, n)``.

    Singular values at or below ``tolerance · σ_max`` are treated as zero.
    This matches the convention of LAPACK-based ``matrix_rank``.
    """
    return EPSILON_64 * max(shape)


def select_tolerance(condition_number: float | None) -> ToleranceTier:
    """Select the agreement tier for a problem of the given conditioning."""
    if condition_number is not None and condition_number > 1e4:
        return ILL_CONDITIONED
    return WELL_CONDITIONED
