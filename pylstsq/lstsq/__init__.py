"""
Linear least squares by explicit matrix factorizations.

Public API:
    solve_least_squares(A, b, strategy='auto', ...) -> LstsqSolution
    compare_strategies(A, b, ...) -> StrategyComparison

solve_least_squares() is the single entry point for one solve. It handles:
    - Input validation
    - Design construction
    - Strategy selection (rank-based for 'auto')
    - Fallback between strategies
    - Result wrapping

Example:
    >>> from pylstsq.lstsq import solve_least_squares
    >>> result = solve_least_squares(A, b, strategy='qr')
    >>> print(result.x)
    >>> print(result.summary())
"""

from pylstsq.lstsq.config import SolverConfig, StrategyChoice, STRATEGIES
from pylstsq.lstsq.design import Design
from pylstsq.lstsq.solution import LstsqSolution, LstsqParams
from pylstsq.lstsq.solvers import solve_least_squares
from pylstsq.lstsq.compare import StrategyComparison, compare_strategies

__all__ = [
    "solve_least_squares",
    "compare_strategies",
    "SolverConfig",
    "StrategyChoice",
    "STRATEGIES",
    "Design",
    "LstsqSolution",
    "LstsqParams",
    "StrategyComparison",
]
