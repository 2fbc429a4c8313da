"""
Tests for forward and back substitution.
"""

import numpy as np
import pytest
from scipy import linalg as sla

from pylstsq.core.exceptions import DimensionError, SingularTriangularMatrixError
from pylstsq.core.compute.linalg import solve_triangular


class TestForwardSubstitution:

    def test_integer_exact_case(self):
        T = np.array([[1.0, 0.0, 0.0], [2.0, 3.0, 0.0], [3.0, 4.0, 1.0]])
        b = np.array([1.0, 11.0, 15.0])
        x = solve_triangular(T, b, lower=True)
        np.testing.assert_array_equal(x, [1.0, 3.0, 0.0])

    def test_matches_scipy(self, rng):
        T = np.tril(rng.standard_normal((6, 6))) + 6 * np.eye(6)
        c = rng.standard_normal(6)
        x = solve_triangular(T, c, lower=True)
        np.testing.assert_allclose(x, sla.solve_triangular(T, c, lower=True), rtol=1e-12)

    def test_upper_triangle_ignored(self, rng):
        """Only the flagged triangle is read."""
        T = np.tril(rng.standard_normal((5, 5))) + 5 * np.eye(5)
        garbage = T + np.triu(rng.standard_normal((5, 5)), k=1)
        c = rng.standard_normal(5)
        np.testing.assert_array_equal(
            solve_triangular(garbage, c, lower=True),
            solve_triangular(T, c, lower=True),
        )

    def test_unit_diagonal_not_read(self):
        T = np.array([[7.0, 0.0], [2.0, 0.0]])
        x = solve_triangular(T, np.array([1.0, 4.0]), lower=True, unit_diagonal=True)
        np.testing.assert_array_equal(x, [1.0, 2.0])


class TestBackSubstitution:

    def test_matches_scipy(self, rng):
        T = np.triu(rng.standard_normal((6, 6))) + 6 * np.eye(6)
        c = rng.standard_normal(6)
        x = solve_triangular(T, c, lower=False)
        np.testing.assert_allclose(x, sla.solve_triangular(T, c, lower=False), rtol=1e-12)

    def test_multiple_right_hand_sides(self, rng):
        T = np.triu(rng.standard_normal((4, 4))) + 4 * np.eye(4)
        C = rng.standard_normal((4, 3))
        X = solve_triangular(T, C, lower=False)
        assert X.shape == (4, 3)
        np.testing.assert_allclose(T @ X, C, atol=1e-12)

    def test_residual_is_zero(self, rng):
        T = np.triu(rng.standard_normal((8, 8))) + 8 * np.eye(8)
        c = rng.standard_normal(8)
        np.testing.assert_allclose(T @ solve_triangular(T, c, lower=False), c, atol=1e-12)


class TestSingularTriangular:

    def test_zero_diagonal_raises_with_index(self):
        T = np.array([[2.0, 1.0, 1.0], [0.0, 0.0, 1.0], [0.0, 0.0, 3.0]])
        with pytest.raises(SingularTriangularMatrixError) as exc_info:
            solve_triangular(T, np.ones(3), lower=False, matrix_name='R')
        assert exc_info.value.index == 1
        assert exc_info.value.matrix_name == 'R'
        assert exc_info.value.diagonal_value == 0.0

    def test_tolerance(self):
        T = np.array([[1.0, 0.0], [1.0, 1e-14]])
        solve_triangular(T, np.ones(2), lower=True)
        with pytest.raises(SingularTriangularMatrixError):
            solve_triangular(T, np.ones(2), lower=True, tol=1e-12)


class TestTriangularDimensions:

    def test_non_square(self):
        with pytest.raises(DimensionError, match="square"):
            solve_triangular(np.ones((3, 2)), np.ones(3), lower=True)

    def test_rhs_length_mismatch(self):
        with pytest.raises(DimensionError, match="expected 3 rows"):
            solve_triangular(np.eye(3), np.ones(4), lower=True)
