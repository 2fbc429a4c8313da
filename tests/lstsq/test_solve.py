"""
Tests for solve_least_squares() with explicit strategies.

Tests the complete pipeline: Design construction, strategy dispatch,
residual diagnostics and the solution wrapper.
"""

import itertools
import warnings

import numpy as np
import pytest
from scipy import linalg as sla

from pylstsq import solve_least_squares
from pylstsq.core.compute.tolerances import EPSILON_64, WELL_CONDITIONED
from pylstsq.core.exceptions import (
    DimensionError,
    IllConditionedWarning,
    ValidationError,
)
from pylstsq.lstsq import STRATEGIES, SolverConfig, LstsqSolution



# ═══════════════════════════════════════════════════════════════════════
# Agreement between strategies
# ═══════════════════════════════════════════════════════════════════════


class TestStrategyAgreement:
    """Every strategy solves the same full-rank problem."""

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_matches_reference(self, tall_system, strategy):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, strategy)
        assert isinstance(result, LstsqSolution)
        assert result.strategy == strategy
        np.testing.assert_allclose(
            result.x, sla.lstsq(A, b)[0],
            rtol=WELL_CONDITIONED.rtol, atol=WELL_CONDITIONED.atol,
        )

    def test_pairwise_within_condition_bound(self, tall_system):
        A, b, _ = tall_system
        solutions = {s: solve_least_squares(A, b, s) for s in STRATEGIES}
        kappa = solutions['qr'].condition_number
        for a, c in itertools.combinations(STRATEGIES, 2):
            x_a, x_c = solutions[a].x, solutions[c].x
            # normal equations work with cond(A'A) = kappa²
            bound = 1000 * kappa ** 2 * EPSILON_64 * np.linalg.norm(x_a)
            assert np.linalg.norm(x_a - x_c) <= bound

    def test_orthogonal_strategies_agree_near_rank_cutoff(self):
        A = np.zeros((10, 5))
        A[:4, :4] = np.eye(4)
        A[5, 4] = 3e-15
        b = A @ np.ones(5)
        with pytest.warns(IllConditionedWarning):
            via_qr = solve_least_squares(A, b, 'qr')
        with pytest.warns(IllConditionedWarning):
            via_svd = solve_least_squares(A, b, 'svd')
        assert via_qr.rank == via_svd.rank == 5
        np.testing.assert_allclose(via_svd.x, via_qr.x, rtol=1e-10)
        np.testing.assert_allclose(via_svd.x, np.ones(5), rtol=1e-10)

    def test_close_to_truth(self, tall_system):
        A, b, x_true = tall_system
        np.testing.assert_allclose(solve_least_squares(A, b).x, x_true, atol=0.1)


# ═══════════════════════════════════════════════════════════════════════
# Purity and boundaries
# ═══════════════════════════════════════════════════════════════════════


class TestPurity:

    @pytest.mark.parametrize("strategy", STRATEGIES + ('auto',))
    def test_idempotent(self, tall_system, strategy):
        A, b, _ = tall_system
        first = solve_least_squares(A, b, strategy)
        second = solve_least_squares(A, b, strategy)
        np.testing.assert_array_equal(first.x, second.x)
        assert first.residual_norm == second.residual_norm

    def test_inputs_not_modified(self, tall_system):
        A, b, _ = tall_system
        A_before, b_before = A.copy(), b.copy()
        for strategy in STRATEGIES:
            solve_least_squares(A, b, strategy)
        np.testing.assert_array_equal(A, A_before)
        np.testing.assert_array_equal(b, b_before)


class TestSquareSystem:
    """A square invertible A gives the exact linear-system solution."""

    @pytest.mark.parametrize("strategy", STRATEGIES + ('auto',))
    def test_exact_solution(self, rng, strategy):
        A = rng.standard_normal((6, 6)) + 6 * np.eye(6)
        b = rng.standard_normal(6)
        result = solve_least_squares(A, b, strategy)
        np.testing.assert_allclose(result.x, np.linalg.solve(A, b), rtol=1e-9, atol=1e-12)
        assert result.residual_norm < 1e-10

    def test_identity(self):
        b = np.array([1.0, -2.0, 3.0])
        for strategy in STRATEGIES:
            np.testing.assert_allclose(solve_least_squares(np.eye(3), b, strategy).x, b)


# ═══════════════════════════════════════════════════════════════════════
# Residuals and reporting
# ═══════════════════════════════════════════════════════════════════════


class TestSolutionProperties:

    def test_residuals(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'qr')
        np.testing.assert_allclose(result.residuals, b - A @ result.x, atol=1e-14)
        assert result.residual_norm == pytest.approx(np.linalg.norm(result.residuals))
        assert result.rmse == pytest.approx(result.residual_norm / np.sqrt(100))

    def test_residual_orthogonal_to_columns(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'svd')
        np.testing.assert_allclose(A.T @ result.residuals, np.zeros(4), atol=1e-10)

    def test_diagnostics(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'cholesky')
        assert result.rank == 4
        assert result.condition_number == pytest.approx(np.linalg.cond(A), rel=1e-10)
        np.testing.assert_allclose(
            result.singular_values, np.linalg.svd(A, compute_uv=False), rtol=1e-12
        )
        assert not result.is_ill_conditioned
        assert not result.is_rank_deficient

    def test_no_warnings_when_well_conditioned(self, tall_system):
        A, b, _ = tall_system
        with warnings.catch_warnings():
            warnings.simplefilter('error', RuntimeWarning)
            result = solve_least_squares(A, b)
        assert result.warnings == ()

    def test_state_history(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'lu')
        assert result.info['attempts'] == (
            {'strategy': 'lu', 'states': ('unsolved', 'decomposed', 'solved')},
        )
        assert result.fallback is None
        assert result.requested_strategy == 'lu'

    def test_timing_sections(self, tall_system):
        A, b, _ = tall_system
        timing = solve_least_squares(A, b, 'qr').timing
        for key in ('total_seconds', 'diagnostics', 'decompose', 'solve', 'residuals'):
            assert key in timing

    def test_summary_and_repr(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'qr')
        s = result.summary()
        assert "Strategy: qr (requested: qr)" in s
        assert "Condition number" in s
        assert "x[3]" in s
        assert "strategy='qr'" in repr(result)

    def test_explicit_svd_reports_its_own_diagnostics(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'svd')
        assert 'diagnostics' not in result.timing
        assert result.rank == 4
        assert result.condition_number == pytest.approx(np.linalg.cond(A), rel=1e-10)

    def test_diagnostics_disabled(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(
            A, b, 'qr', config=SolverConfig(compute_diagnostics=False)
        )
        assert result.condition_number is None
        assert result.rank is None
        assert "not computed" in result.summary()
        np.testing.assert_allclose(result.x, sla.lstsq(A, b)[0], rtol=1e-10)


# ═══════════════════════════════════════════════════════════════════════
# Ridge regularization
# ═══════════════════════════════════════════════════════════════════════


class TestRegularization:
    """Every strategy solves min ||b - Ax||² + λ||x||² when λ > 0."""

    @pytest.mark.parametrize("strategy", STRATEGIES + ('auto',))
    def test_ridge_solution(self, tall_system, strategy):
        A, b, _ = tall_system
        lam = 3.0
        expected = np.linalg.solve(A.T @ A + lam * np.eye(4), A.T @ b)
        result = solve_least_squares(A, b, strategy, regularization=lam)
        np.testing.assert_allclose(result.x, expected, rtol=1e-9)
        assert result.info['regularization'] == lam

    def test_keyword_overrides_config(self, tall_system):
        A, b, _ = tall_system
        config = SolverConfig(regularization=10.0)
        plain = solve_least_squares(A, b, 'qr', regularization=0.0, config=config)
        np.testing.assert_allclose(plain.x, sla.lstsq(A, b)[0], rtol=1e-10)

    def test_residuals_of_original_system(self, tall_system):
        A, b, _ = tall_system
        result = solve_least_squares(A, b, 'qr', regularization=1.0)
        np.testing.assert_allclose(result.residuals, b - A @ result.x, atol=1e-14)


# ═══════════════════════════════════════════════════════════════════════
# Input errors
# ═══════════════════════════════════════════════════════════════════════


class TestInputErrors:

    def test_dimension_mismatch(self, tall_system):
        A, b, _ = tall_system
        with pytest.raises(DimensionError):
            solve_least_squares(A, b[:50])

    def test_underdetermined(self, rng):
        with pytest.raises(DimensionError):
            solve_least_squares(rng.standard_normal((2, 3)), np.ones(2))

    def test_unknown_strategy(self, tall_system):
        A, b, _ = tall_system
        with pytest.raises(ValueError, match="Unknown strategy"):
            solve_least_squares(A, b, 'gelsy')

    @pytest.mark.parametrize("rank", [-1, 5, 2.5, True])
    def test_invalid_rank(self, tall_system, rank):
        A, b, _ = tall_system
        with pytest.raises(ValidationError, match="rank"):
            solve_least_squares(A, b, rank=rank)

    def test_non_finite_b(self, tall_system):
        A, b, _ = tall_system
        b = b.copy()
        b[0] = np.inf
        with pytest.raises(ValidationError, match="b: contains non-finite"):
            solve_least_squares(A, b)
