"""
pylstsq: linear least squares from first principles.

Five factorization strategies (normal equations, Cholesky, LU, QR, SVD)
written out on NumPy arrays, with a rank-aware driver that reports
conditioning diagnostics alongside every solution.

Submodules:
    lstsq: Least-squares driver, strategies and solution types
    core: Exceptions, result envelope, validation and linear algebra kernels
"""

__version__ = "0.1.0"

from pylstsq.lstsq import (
    solve_least_squares,
    compare_strategies,
    SolverConfig,
    LstsqSolution,
    StrategyComparison,
)
from pylstsq.core.exceptions import (
    LstsqError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    SingularTriangularMatrixError,
    NotPositiveDefiniteError,
    ConvergenceError,
    IllConditionedWarning,
    RankDeficientWarning,
    StrategyFallbackWarning,
)

__all__ = [
    "__version__",
    "solve_least_squares",
    "compare_strategies",
    "SolverConfig",
    "LstsqSolution",
    "StrategyComparison",
    "LstsqError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "SingularTriangularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
    "IllConditionedWarning",
    "RankDeficientWarning",
    "StrategyFallbackWarning",
]
