"""
Solver dispatch for least squares.

This module provides solve_least_squares() (public API), the 'auto'
strategy policy, and fallback between strategies.

Each strategy attempt moves through the states

    unsolved -> decomposed -> solved

or ends in 'failed' from either transition. Every attempt and its state
history is recorded in ``info['attempts']``.
"""

import dataclasses
import warnings
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pylstsq.core.exceptions import (
    LstsqError,
    NumericalError,
    SingularMatrixError,
    NotPositiveDefiniteError,
    ValidationError,
    IllConditionedWarning,
    RankDeficientWarning,
    StrategyFallbackWarning,
)
from pylstsq.core.result import Result
from pylstsq.core.protocols import Backend
from pylstsq.core.compute.timing import Timer
from pylstsq.core.compute.linalg.conditioning import RankDiagnostics, diagnose
from pylstsq.core.compute.linalg.qr import QRResult
from pylstsq.core.compute.linalg.svd import SVDResult
from pylstsq.lstsq.config import (
    SolverConfig,
    StrategyChoice,
    STRATEGIES,
    NORMAL_EQUATION_STRATEGIES,
)
from pylstsq.lstsq.design import Design
from pylstsq.lstsq.solution import LstsqParams, LstsqSolution
from pylstsq.lstsq.backends import (
    NormalEquationsBackend,
    CholeskyBackend,
    LUBackend,
    QRBackend,
    SVDBackend,
)


def solve_least_squares(
    A: ArrayLike,
    b: ArrayLike,
    strategy: StrategyChoice = 'auto',
    *,
    rank_tolerance: float | None = None,
    regularization: float | None = None,
    rank: int | None = None,
    config: SolverConfig | None = None,
) -> LstsqSolution:
    """
    Solve the linear least-squares problem min_x ||b - A x||².

    This is the primary public API. All input validation, strategy
    selection, fallback and result wrapping happens here.

    Args:
        A: Coefficient matrix (m x n) with m >= n. Any array-like.
        b: Right-hand side (m,). Any array-like.
        strategy: Factorization strategy:
            - 'auto': QR (or config.auto_full_rank) for full column rank,
              SVD minimum-norm solution for rank-deficient A
            - 'normal': explicit inverse of A'A
            - 'cholesky': Cholesky of A'A
            - 'lu': LU with partial pivoting of A'A
            - 'qr': Householder QR of A
            - 'svd': Jacobi SVD of A (minimum-norm solution)
        rank_tolerance: Relative singular value cutoff for numerical rank.
            Overrides config.rank_tolerance.
        regularization: Ridge term λ >= 0, solving min ||b - Ax||² + λ||x||².
            Overrides config.regularization.
        rank: Caller-supplied rank of A, used instead of the SVD estimate.
        config: Numerical policy; defaults to SolverConfig()

    Returns:
        LstsqSolution with x, residual diagnostics and the strategy report

    Raises:
        ValidationError: If inputs are invalid
        DimensionError: If A and b are incompatible or m < n
        NotPositiveDefiniteError: Cholesky on a rank-deficient or indefinite A'A
        SingularMatrixError: normal/LU/QR on a rank-deficient A
        ConvergenceError: If the SVD does not converge

    Example:
        >>> import numpy as np
        >>> from pylstsq import solve_least_squares
        >>>
        >>> A = np.column_stack([np.ones(50), np.linspace(0, 1, 50)])
        >>> b = A @ [1.0, 2.0]
        >>>
        >>> result = solve_least_squares(A, b)
        >>> print(result.x, result.strategy)
        >>> print(result.summary())
    """
    return _solve(
        A, b, strategy,
        rank_tolerance=rank_tolerance,
        regularization=regularization,
        rank=rank,
        config=config,
        emit_warnings=True,
    )


def _solve(
    A: ArrayLike,
    b: ArrayLike,
    strategy: StrategyChoice,
    *,
    rank_tolerance: float | None,
    regularization: float | None,
    rank: int | None,
    config: SolverConfig | None,
    emit_warnings: bool,
) -> LstsqSolution:
    """
    Body of solve_least_squares().

    With emit_warnings=False the conditioning notes are only recorded in
    Result.warnings and the warning filters are never consulted.
    """
    # === Resolve Configuration ===
    config = config if config is not None else SolverConfig()
    overrides: dict[str, Any] = {}
    if rank_tolerance is not None:
        overrides['rank_tolerance'] = rank_tolerance
    if regularization is not None:
        overrides['regularization'] = regularization
    if overrides:
        config = dataclasses.replace(config, **overrides)

    if strategy != 'auto' and strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {strategy!r}")

    # === Construct Design ===
    # This is the boundary - validate here, trust everywhere else
    design = Design.from_arrays(A, b, regularization=config.regularization)
    if rank is not None:
        rank = _check_rank(rank, design.n)

    timer = Timer()
    timer.start()
    notes: list[tuple[str, type[Warning]]] = []
    attempts: list[dict[str, Any]] = []

    # === Diagnostics ===
    # Explicit SVD gets its diagnostics from its own factorization
    diagnostics: RankDiagnostics | None = None
    if strategy == 'auto' or (config.compute_diagnostics and strategy != 'svd'):
        with timer.section('diagnostics'):
            diagnostics = diagnose(
                design.A,
                rank_tolerance=config.rank_tolerance,
                max_sweeps=config.max_sweeps,
            )
    if rank is None and diagnostics is not None:
        rank = diagnostics.rank

    # === Select Strategy ===
    if strategy == 'auto':
        chosen = _auto_strategy(design, rank, config)
    else:
        chosen = strategy

    # === Solve, with fallback ===
    hops: list[dict[str, str]] = []
    current = chosen
    while True:
        try:
            x, factorization = _attempt(current, strategy, design, rank, diagnostics, config, timer, attempts)
            break
        except NumericalError as err:
            target = _next_strategy(current, strategy, design, rank, config)
            if target is None:
                raise
            hops.append({'from': current, 'to': target, 'reason': str(err)})
            notes.append((
                f"strategy {current!r} failed ({type(err).__name__}: {err}); "
                f"fell back to {target!r}",
                StrategyFallbackWarning,
            ))
            current = target

    # 'from' is the first strategy that failed, 'to' the one that solved
    fallback: dict[str, Any] | None = None
    if hops:
        fallback = {
            'from': hops[0]['from'],
            'to': hops[-1]['to'],
            'reason': hops[0]['reason'],
            'hops': tuple(hops),
        }

    if diagnostics is None and isinstance(factorization, SVDResult):
        diagnostics = diagnose(design.A, rank_tolerance=config.rank_tolerance, s=factorization.s)
        if rank is None:
            rank = diagnostics.rank

    # === Residuals ===
    with timer.section('residuals'):
        residuals = design.b - design.A @ x
        residual_norm = float(np.linalg.norm(residuals))

    # === Conditioning Report ===
    condition_number = diagnostics.condition_number if diagnostics is not None else None
    ill_conditioned = False
    if condition_number is not None and condition_number > config.condition_threshold:
        ill_conditioned = True
        message = (
            f"ill-conditioned: cond(A) = {condition_number:.3e} exceeds "
            f"{config.condition_threshold:.1e}"
        )
        if current in NORMAL_EQUATION_STRATEGIES:
            message += f"; strategy {current!r} works with cond(A'A) ≈ {condition_number ** 2:.3e}"
        notes.append((message, IllConditionedWarning))
    elif isinstance(factorization, QRResult):
        ratio = _r_diagonal_ratio(factorization)
        if ratio * config.condition_threshold < 1.0:
            ill_conditioned = True
            notes.append((
                f"ill-conditioned: smallest |R[i,i]| is {ratio:.3e} of the largest; "
                f"A is nearly rank-deficient",
                IllConditionedWarning,
            ))

    if (
        current == 'svd'
        and rank is not None
        and rank < design.n
        and design.regularization == 0.0
    ):
        notes.append((
            f"rank-deficient: rank {rank} < {design.n} columns; "
            f"returned the minimum-norm solution via SVD",
            RankDeficientWarning,
        ))

    timer.stop()

    # === Construct Result ===
    params = LstsqParams(
        x=x,
        residuals=residuals,
        residual_norm=residual_norm,
        rank=rank,
        condition_number=condition_number,
        singular_values=diagnostics.singular_values if diagnostics is not None else None,
    )

    info: dict[str, Any] = {
        'method': current,
        'requested_strategy': strategy,
        'rank': rank,
        'condition_number': condition_number,
        'rank_tolerance': diagnostics.tolerance if diagnostics is not None else None,
        'regularization': design.regularization,
        'ill_conditioned': ill_conditioned,
        'attempts': tuple(
            {'strategy': a['strategy'], 'states': tuple(a['states'])} for a in attempts
        ),
        'fallback': fallback,
    }

    if emit_warnings:
        for message, category in notes:
            # Attribute to the caller of solve_least_squares()
            warnings.warn(message, category, stacklevel=3)

    result = Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name=current,
        warnings=tuple(message for message, _ in notes),
    )
    return LstsqSolution(_result=result, _design=design)


def _check_rank(rank: int, n: int) -> int:
    """Validate a caller-supplied rank."""
    if isinstance(rank, bool) or not isinstance(rank, (int, np.integer)):
        raise ValidationError(f"rank: expected an integer, got {type(rank).__name__}")
    if not 0 <= rank <= n:
        raise ValidationError(f"rank: must be between 0 and {n}, got {rank}")
    return int(rank)


def _is_rank_deficient(design: Design, rank: int | None) -> bool:
    """A ridge term makes every system full rank."""
    return rank is not None and rank < design.n and design.regularization == 0.0


def _auto_strategy(design: Design, rank: int | None, config: SolverConfig) -> str:
    """
    Choose a strategy by rank.

    Full column rank: only the residual is minimized, so any strategy
    solves the intended problem; use config.auto_full_rank (QR by default).
    Rank-deficient: the residual has many minimizers and the intended one
    is the minimum-norm solution, which only SVD computes. The
    normal-equations family and QR would be solving a different problem.
    """
    if _is_rank_deficient(design, rank):
        return 'svd'
    return config.auto_full_rank


def _next_strategy(
    failed: str,
    requested: str,
    design: Design,
    rank: int | None,
    config: SolverConfig,
) -> str | None:
    """Fallback target after a structural failure, or None to re-raise."""
    if requested != 'auto' and not config.allow_fallback:
        return None
    if failed == 'svd':
        return None
    if failed in NORMAL_EQUATION_STRATEGIES and not _is_rank_deficient(design, rank):
        return 'qr'
    return 'svd'


def _get_backend(name: str, config: SolverConfig) -> Backend:
    """Instantiate the backend for a strategy name."""
    if name == 'normal':
        return NormalEquationsBackend()
    elif name == 'cholesky':
        return CholeskyBackend()
    elif name == 'lu':
        return LUBackend()
    elif name == 'qr':
        return QRBackend()
    elif name == 'svd':
        return SVDBackend(rank_tolerance=config.rank_tolerance, max_sweeps=config.max_sweeps)
    else:
        raise ValueError(f"Unknown strategy: {name!r}")


def _check_preconditions(
    name: str,
    design: Design,
    rank: int | None,
    diagnostics: RankDiagnostics | None,
) -> None:
    """
    Reject rank-deficient input for strategies that cannot represent the
    minimum-norm solution.

    On a rank-deficient A the A'A factorizations often succeed on rounding
    noise and return a large, meaningless x; the rank check turns that into
    the structural error the strategy would raise in exact arithmetic.
    """
    if name == 'svd' or not _is_rank_deficient(design, rank):
        return

    cond = diagnostics.condition_number if diagnostics is not None else None
    if name == 'cholesky':
        raise NotPositiveDefiniteError(
            f"A'A is not positive definite: A is rank-deficient "
            f"(rank={rank}, expected={design.n})",
            matrix_name="A'A",
            rank=rank,
        )
    matrix_name = 'A' if name == 'qr' else "A'A"
    raise SingularMatrixError(
        f"{matrix_name} is singular: A is rank-deficient (rank={rank}, expected={design.n}). "
        f"Use strategy='svd' or 'auto' for the minimum-norm solution.",
        matrix_name=matrix_name,
        condition_number=cond,
        rank=rank,
        expected_rank=design.n,
    )


def _attempt(
    name: str,
    requested: str,
    design: Design,
    rank: int | None,
    diagnostics: RankDiagnostics | None,
    config: SolverConfig,
    timer: Timer,
    attempts: list[dict[str, Any]],
) -> tuple[NDArray[np.floating[Any]], Any]:
    """Run one strategy through decompose and solve, recording its states."""
    backend = _get_backend(name, config)
    states = ['unsolved']
    attempts.append({'strategy': name, 'states': states})
    try:
        if requested != 'auto':
            _check_preconditions(name, design, rank, diagnostics)
        with timer.section('decompose'):
            factorization = backend.decompose(design)
        states.append('decomposed')
        with timer.section('solve'):
            x = backend.solve(design, factorization)
        states.append('solved')
    except LstsqError:
        states.append('failed')
        raise
    return x, factorization


def _r_diagonal_ratio(qr: QRResult) -> float:
    """min |R[i,i]| / max |R[i,i]|, 0.0 for a zero R."""
    diag = np.abs(np.diag(qr.R))
    largest = float(np.max(diag)) if len(diag) else 0.0
    if largest == 0.0:
        return 0.0
    return float(np.min(diag)) / largest
