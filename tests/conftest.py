"""
Shared fixtures: synthetic probit and rank datasets.
"""
import numpy as np
import pytest


def make_probit_data(n=500, beta=(0.3, -0.8), seed=42):
    """Outcome 0 with probability Phi(x . beta); first covariate is a constant."""
    np.random.seed(seed)
    X = np.column_stack([np.ones(n), np.random.randn(n, len(beta) - 1)])
    y = (X @ np.asarray(beta) + np.random.randn(n) <= 0).astype(float)
    return np.column_stack([y, X])


@pytest.fixture
def probit_data():
    return make_probit_data()


@pytest.fixture
def rank_data():
    """Two units whose rank columns sum to [10, 5, 2]."""
    return np.array([
        [6.0, 3.0, 1.0],
        [4.0, 2.0, 1.0],
    ])
