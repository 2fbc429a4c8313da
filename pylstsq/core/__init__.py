"""
Core infrastructure for pylstsq.

This module provides shared abstractions, utilities, and numerical kernels
used by the least-squares driver.

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception and warning hierarchy
    validation: Input validators
    compute: Timing, tolerances, linear algebra kernels
"""

from pylstsq.core.protocols import Backend
from pylstsq.core.result import Result
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
    # Protocols
    "Backend",
    # Result
    "Result",
    # Exceptions
    "LstsqError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "SingularTriangularMatrixError",
    "NotPositiveDefiniteError",
    "ConvergenceError",
    # Warnings
    "IllConditionedWarning",
    "RankDeficientWarning",
    "StrategyFallbackWarning",
]
