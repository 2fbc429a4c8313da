"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def tall_system(rng):
    """Well-conditioned full-rank tall system with noise."""
    m, n = 100, 4
    A = rng.standard_normal((m, n))
    x_true = np.array([1.0, -2.0, 0.5, 3.0])
    b = A @ x_true + rng.standard_normal(m) * 0.1
    return A, b, x_true


@pytest.fixture
def collinear_system(rng):
    """Rank-deficient system: third column is the sum of the first two."""
    m = 100
    a1 = rng.standard_normal(m)
    a2 = rng.standard_normal(m)
    A = np.column_stack([a1, a2, a1 + a2])
    b = rng.standard_normal(m)
    return A, b


@pytest.fixture
def vandermonde_system():
    """
    Ill-conditioned polynomial fit: monomials up to degree 9 on [0, 1].

    cond(A) is several million; b is consistent (no noise) so any
    residual comes from rounding in the solve.
    """
    t = np.linspace(0.0, 1.0, 100)
    A = np.vander(t, 10, increasing=True)
    x_true = np.ones(10)
    b = A @ x_true
    return A, b, x_true
