"""
Tests for Design construction and the strategy backends built on it.
"""

import numpy as np
import pytest

from pylstsq.core.exceptions import DimensionError, ValidationError
from pylstsq.core.protocols import Backend
from pylstsq.lstsq import STRATEGIES, Design
from pylstsq.lstsq.backends import (
    NormalEquationsBackend,
    CholeskyBackend,
    LUBackend,
    QRBackend,
    SVDBackend,
)


class TestDesignConstruction:

    def test_from_arrays(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b)
        assert design.m == 100
        assert design.n == 4
        assert design.regularization == 0.0

    def test_column_vector_b_flattened(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b.reshape(-1, 1))
        assert design.b.shape == (100,)

    def test_vector_a_is_single_column(self):
        design = Design.from_arrays([1.0, 2.0, 3.0], [2.0, 4.0, 6.0])
        assert design.A.shape == (3, 1)

    def test_arrays_are_private_and_read_only(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b)
        A[0, 0] = 1e6
        assert design.A[0, 0] != 1e6
        with pytest.raises(ValueError):
            design.A[0, 0] = 0.0

    def test_integer_input_promoted(self):
        design = Design.from_arrays([[1, 0], [0, 1], [1, 1]], [1, 2, 3])
        assert design.A.dtype == np.float64
        assert design.b.dtype == np.float64


class TestDesignValidation:

    def test_length_mismatch(self, tall_system):
        A, b, _ = tall_system
        with pytest.raises(DimensionError, match="A=100, b=99"):
            Design.from_arrays(A, b[:-1])

    def test_underdetermined(self, rng):
        with pytest.raises(DimensionError, match="under-determined"):
            Design.from_arrays(rng.standard_normal((3, 5)), np.ones(3))

    def test_no_columns(self):
        with pytest.raises(DimensionError, match="at least one column"):
            Design.from_arrays(np.zeros((3, 0)), np.ones(3))

    def test_matrix_b_rejected(self, rng):
        with pytest.raises(DimensionError, match="b: expected 1D"):
            Design.from_arrays(rng.standard_normal((5, 2)), np.ones((5, 2)))

    def test_nan_rejected(self, tall_system):
        A, b, _ = tall_system
        A = A.copy()
        A[3, 1] = np.nan
        with pytest.raises(ValidationError, match="A: contains non-finite"):
            Design.from_arrays(A, b)

    def test_negative_regularization(self, tall_system):
        A, b, _ = tall_system
        with pytest.raises(ValidationError, match="regularization"):
            Design.from_arrays(A, b, regularization=-1.0)


class TestDesignProducts:

    def test_normal_equations(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b, regularization=2.0)
        np.testing.assert_allclose(design.AtA(), A.T @ A + 2.0 * np.eye(4))
        np.testing.assert_allclose(design.Atb(), A.T @ b)

    def test_augmented_without_regularization(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b)
        A_aug, b_aug = design.augmented()
        assert A_aug is design.A
        assert b_aug is design.b

    def test_augmented_with_regularization(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b, regularization=4.0)
        A_aug, b_aug = design.augmented()
        assert A_aug.shape == (104, 4)
        np.testing.assert_allclose(A_aug[100:], 2.0 * np.eye(4))
        np.testing.assert_array_equal(b_aug[100:], np.zeros(4))
        np.testing.assert_allclose(A_aug.T @ A_aug, design.AtA(), atol=1e-12)


# ═══════════════════════════════════════════════════════════════════════
# Backends
# ═══════════════════════════════════════════════════════════════════════


class TestBackends:

    @pytest.mark.parametrize("backend_cls", [
        NormalEquationsBackend, CholeskyBackend, LUBackend, QRBackend, SVDBackend,
    ])
    def test_satisfy_protocol(self, backend_cls):
        assert isinstance(backend_cls(), Backend)

    def test_names_match_strategies(self):
        names = tuple(
            cls().name for cls in
            (NormalEquationsBackend, CholeskyBackend, LUBackend, QRBackend, SVDBackend)
        )
        assert names == STRATEGIES

    def test_two_phase_solve(self, tall_system):
        A, b, _ = tall_system
        design = Design.from_arrays(A, b)
        backend = QRBackend()
        factorization = backend.decompose(design)
        x = backend.solve(design, factorization)
        np.testing.assert_allclose(x, np.linalg.lstsq(A, b, rcond=None)[0], rtol=1e-10)
