"""
Side-by-side accuracy comparison of strategies.

Solves one system with several explicit strategies and tabulates how
their solutions and residuals differ. This is the check that shows the
normal-equations family losing accuracy on ill-conditioned problems.
"""

import itertools
from dataclasses import dataclass, field
from typing import Sequence
import numpy as np
from numpy.typing import ArrayLike

from pylstsq.core.exceptions import NumericalError
from pylstsq.lstsq.config import SolverConfig, ExplicitStrategy, STRATEGIES
from pylstsq.lstsq.solution import LstsqSolution
from pylstsq.lstsq.solvers import _solve


@dataclass(frozen=True)
class StrategyComparison:
    """
    Solutions and structural failures keyed by strategy name.

    Per-strategy conditioning warnings are not re-emitted; they remain
    available on each solution's ``warnings``.
    """
    solutions: dict[str, LstsqSolution] = field(default_factory=dict)
    errors: dict[str, NumericalError] = field(default_factory=dict)

    def rmse(self) -> dict[str, float]:
        """RMSE of the residual b - Ax for each successful strategy."""
        return {name: sol.rmse for name, sol in self.solutions.items()}

    def max_disagreement(self) -> float:
        """Largest ||x_i - x_j|| over all pairs of successful strategies."""
        worst = 0.0
        for a, b in itertools.combinations(self.solutions.values(), 2):
            worst = max(worst, float(np.linalg.norm(a.x - b.x)))
        return worst

    def summary(self) -> str:
        lines = [
            f"{'Strategy':<10} {'RMSE':>14} {'Residual norm':>16}",
            "-" * 42,
        ]
        for name, sol in self.solutions.items():
            lines.append(f"{name:<10} {sol.rmse:14.6e} {sol.residual_norm:16.6e}")
        for name, err in self.errors.items():
            lines.append(f"{name:<10} failed: {type(err).__name__}")
        return "\n".join(lines)


def compare_strategies(
    A: ArrayLike,
    b: ArrayLike,
    strategies: Sequence[ExplicitStrategy] | None = None,
    *,
    config: SolverConfig | None = None,
) -> StrategyComparison:
    """
    Solve the same system with each strategy.

    Structural failures (singular A'A, not positive definite, ...) are
    collected rather than raised, so a rank-deficient A still yields the
    strategies that succeeded. Validation errors propagate.

    Args:
        A: Coefficient matrix (m x n)
        b: Right-hand side (m,)
        strategies: Strategy names; defaults to all five
        config: Numerical policy shared by every solve

    Returns:
        StrategyComparison
    """
    if strategies is None:
        strategies = STRATEGIES
    for name in strategies:
        if name not in STRATEGIES:
            raise ValueError(f"Unknown strategy: {name!r}")

    solutions: dict[str, LstsqSolution] = {}
    errors: dict[str, NumericalError] = {}
    for name in strategies:
        try:
            solutions[name] = _solve(
                A, b, name,
                rank_tolerance=None,
                regularization=None,
                rank=None,
                config=config,
                emit_warnings=False,
            )
        except NumericalError as err:
            errors[name] = err

    return StrategyComparison(solutions=solutions, errors=errors)
