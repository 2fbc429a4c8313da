"""
Least-squares solution types.

Contains the parameter payload and user-facing solution wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pylstsq.core.result import Result

if TYPE_CHECKING:
    from pylstsq.lstsq.design import Design


@dataclass(frozen=True)
class LstsqParams:
    """
    Parameter payload for a least-squares solve.

    This is the immutable data computed by backends and the driver.
    ``condition_number`` and ``singular_values`` are None when diagnostics
    were disabled and the strategy did not produce them.
    """
    x: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    residual_norm: float
    rank: int | None
    condition_number: float | None
    singular_values: NDArray[np.floating[Any]] | None = None


@dataclass
class LstsqSolution:
    """
    User-facing least-squares results.

    Wraps the backend Result and provides convenient accessors for the
    solution vector, residual diagnostics and the strategy report.
    """
    _result: Result[LstsqParams]
    _design: 'Design'

    @property
    def x(self) -> NDArray[np.floating[Any]]:
        return self._result.params.x

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        """b - A x for the original (unregularized) system."""
        return self._result.params.residuals

    @property
    def residual_norm(self) -> float:
        return self._result.params.residual_norm

    @property
    def rmse(self) -> float:
        """Root mean squared residual, ||b - Ax|| / sqrt(m)."""
        return float(self.residual_norm / np.sqrt(self._design.m))

    @property
    def rank(self) -> int | None:
        return self._result.params.rank

    @property
    def condition_number(self) -> float | None:
        return self._result.params.condition_number

    @property
    def singular_values(self) -> NDArray[np.floating[Any]] | None:
        return self._result.params.singular_values

    @property
    def strategy(self) -> str:
        """Strategy that produced x."""
        return self._result.backend_name

    @property
    def requested_strategy(self) -> str:
        return self._result.info['requested_strategy']

    @property
    def fallback(self) -> dict[str, Any] | None:
        """
        None unless a fallback occurred.

        Otherwise {'from', 'to', 'reason', 'hops'}: the first failed
        strategy, the strategy that produced x, the first failure message,
        and every {'from', 'to', 'reason'} hop in order.
        """
        return self._result.info.get('fallback')

    @property
    def is_rank_deficient(self) -> bool:
        return self.rank is not None and self.rank < self._design.n

    @property
    def is_ill_conditioned(self) -> bool:
        return bool(self._result.info.get('ill_conditioned', False))

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate a plain-text report of the solve."""
        cond = self.condition_number
        cond_str = f"{cond:.4e}" if cond is not None else "not computed"
        rank_str = str(self.rank) if self.rank is not None else "not computed"
        lines = [
            "Least-Squares Solution",
            "=" * 60,
            f"Equations: {self._design.m}",
            f"Unknowns: {self._design.n}",
            f"Rank: {rank_str}",
            f"Condition number: {cond_str}",
            f"Residual norm: {self.residual_norm:.6e}",
            f"RMSE: {self.rmse:.6e}",
        ]
        if self._design.regularization > 0:
            lines.append(f"Regularization: {self._design.regularization:.3e}")
        lines += [
            "",
            "Solution:",
            "-" * 60,
        ]
        for i, value in enumerate(self.x):
            lines.append(f"  x[{i}]: {value:18.10e}")

        lines.append("-" * 60)
        lines.append(f"Strategy: {self.strategy} (requested: {self.requested_strategy})")
        if self.fallback is not None:
            chain = [self.fallback['from']] + [hop['to'] for hop in self.fallback['hops']]
            lines.append(f"Fallback: {' -> '.join(chain)}")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LstsqSolution(m={self._design.m}, n={self._design.n}, "
            f"strategy={self.strategy!r}, rank={self.rank}, "
            f"residual_norm={self.residual_norm:.4e})"
        )
