"""
Generic result container for all pylstsq computations.

The Result class provides a standardized envelope that solver backends
produce. This enables shared tooling for timing, diagnostics and
reproducibility while letting each payload define its own structure.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (strategy, rank, attempts, fallback)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for least-squares computations.

    Type Parameters:
        P: The payload type

    Attributes:
        params: Payload (solution vector, residuals, diagnostics)
        info: Structured metadata (method, rank, condition number)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=LstsqParams(x=x, ...),
        ...     info={'method': 'qr', 'rank': 5},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='qr'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
