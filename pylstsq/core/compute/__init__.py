"""
Shared compute infrastructure for pylstsq.

This module provides timing utilities, tolerance constants and the linear
algebra kernels that the least-squares strategies are built from.

IMPORTANT: This is NOT where strategy backends live. Those go in
lstsq/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Precision constants and tolerance tiers
    linalg: Linear algebra kernels (triangular, Cholesky, LU, QR, SVD)
"""

from pylstsq.core.compute.timing import Timer, timed
from pylstsq.core.compute.tolerances import (
    EPSILON_64,
    ILL_CONDITIONED_THRESHOLD,
    ToleranceTier,
    default_rank_tolerance,
    select_tolerance,
)

__all__ = [
    # Timing
    "Timer",
    "timed",
    # Tolerances
    "EPSILON_64",
    "ILL_CONDITIONED_THRESHOLD",
    "ToleranceTier",
    "default_rank_tolerance",
    "select_tolerance",
]
