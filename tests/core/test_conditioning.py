"""
Tests for rank and condition number diagnostics.
"""

import numpy as np
import pytest

from pylstsq.core.compute.linalg import condition_number, diagnose, matrix_rank, svd
from pylstsq.core.compute.tolerances import (
    ILL_CONDITIONED,
    WELL_CONDITIONED,
    default_rank_tolerance,
    select_tolerance,
)


class TestRank:

    def test_full_rank(self, tall_system):
        A, _, _ = tall_system
        assert matrix_rank(A) == 4

    def test_collinear(self, collinear_system):
        A, _ = collinear_system
        assert matrix_rank(A) == np.linalg.matrix_rank(A) == 2

    def test_relative_tolerance(self):
        A = np.diag([1.0, 1e-3, 1e-6])
        assert matrix_rank(A) == 3
        assert matrix_rank(A, rank_tolerance=1e-4) == 2
        assert matrix_rank(A, rank_tolerance=1e-2) == 1

    def test_zero_matrix(self):
        diagnostics = diagnose(np.zeros((5, 3)))
        assert diagnostics.rank == 0
        assert diagnostics.condition_number == float('inf')
        assert not diagnostics.is_full_rank


class TestConditionNumber:

    def test_matches_numpy(self, tall_system):
        A, _, _ = tall_system
        assert condition_number(A) == pytest.approx(np.linalg.cond(A), rel=1e-10)

    def test_vandermonde_is_ill_conditioned(self, vandermonde_system):
        A, _, _ = vandermonde_system
        cond = condition_number(A)
        assert cond > 1e6
        assert cond == pytest.approx(np.linalg.cond(A), rel=1e-5)

    def test_orthogonal_matrix(self):
        Q, _ = np.linalg.qr(np.random.default_rng(0).standard_normal((6, 6)))
        assert condition_number(Q) == pytest.approx(1.0, abs=1e-12)


class TestDiagnose:

    def test_reuses_singular_values(self, tall_system):
        A, _, _ = tall_system
        s = svd(A).s
        diagnostics = diagnose(A, s=s)
        assert diagnostics.singular_values is s
        assert diagnostics.tolerance == pytest.approx(default_rank_tolerance(A.shape) * s[0])
        assert diagnostics.is_full_rank


class TestToleranceTiers:

    def test_select_tolerance(self):
        assert select_tolerance(10.0) is WELL_CONDITIONED
        assert select_tolerance(1e8) is ILL_CONDITIONED
        assert select_tolerance(None) is WELL_CONDITIONED

    def test_default_rank_tolerance(self):
        assert default_rank_tolerance((100, 4)) == pytest.approx(100 * np.finfo(float).eps)
