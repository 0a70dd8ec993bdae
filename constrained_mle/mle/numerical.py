"""
Finite-difference derivatives and the covariance they imply.

Used as the fallback gradient for models without an analytic one, and for
the covariance matrix of every estimate (inverse of the numerical Hessian
of the negative log-likelihood at the optimum).
"""

import numpy as np
from scipy.linalg import cho_factor, cho_solve
from scipy.stats import norm


GRADIENT_STEP = np.finfo(float).eps ** (1 / 3)
HESSIAN_STEP = 1e-4


def _steps(x, step):
    # Relative steps for large parameters, absolute near zero
    return step * np.maximum(1.0, np.abs(x))


def numerical_gradient(f, x, step=GRADIENT_STEP):
    """Central-difference gradient of a scalar function.

    Parameters
    ----------
    f : callable
        f(x) -> float
    x : ndarray of shape (n,)
    step : float
        Base step, scaled by max(1, |x_i|) per coordinate.

    Returns
    -------
    ndarray of shape (n,)
    """
    x = np.asarray(x, dtype=float)
    h = _steps(x, step)
    grad = np.empty_like(x)
    for i in range(x.shape[0]):
        e = np.zeros_like(x)
        e[i] = h[i]
        grad[i] = (f(x + e) - f(x - e)) / (2 * h[i])
    return grad


def numerical_hessian(f, x, gradient=None, step=HESSIAN_STEP):
    """Central-difference Hessian.

    When an analytic ``gradient`` is available the Hessian rows are central
    differences of the gradient; otherwise second differences of ``f``.
    The result is symmetrized.

    Parameters
    ----------
    f : callable
        f(x) -> float
    x : ndarray of shape (n,)
    gradient : callable or None
        gradient(x) -> ndarray of shape (n,)
    step : float, default=1e-4

    Returns
    -------
    ndarray of shape (n, n)
    """
    x = np.asarray(x, dtype=float)
    n = x.shape[0]
    h = _steps(x, step)
    hessian = np.zeros((n, n))

    if gradient is not None:
        for i in range(n):
            e = np.zeros(n)
            e[i] = h[i]
            hessian[i, :] = (gradient(x + e) - gradient(x - e)) / (2 * h[i])
    else:
        f0 = f(x)
        for i in range(n):
            ei = np.zeros(n)
            ei[i] = h[i]
            hessian[i, i] = (f(x + ei) - 2 * f0 + f(x - ei)) / h[i] ** 2
            for j in range(i + 1, n):
                ej = np.zeros(n)
                ej[j] = h[j]
                hessian[i, j] = (f(x + ei + ej) - f(x + ei - ej)
                                 - f(x - ei + ej) + f(x - ei - ej)) / (4 * h[i] * h[j])

    # Make symmetric
    return (hessian + hessian.T) / 2


def covariance_from_hessian(hessian):
    """Invert the Hessian of a negative log-likelihood.

    Raises
    ------
    numpy.linalg.LinAlgError
        If the Hessian is not finite or not positive definite; no
        covariance is fabricated in that case.
    """
    hessian = np.asarray(hessian, dtype=float)
    if not np.all(np.isfinite(hessian)):
        raise np.linalg.LinAlgError("Hessian has non-finite entries")

    factor = cho_factor(hessian)
    return cho_solve(factor, np.eye(hessian.shape[0]))


def confidence_from_covariance(parameters, covariance):
    """Confidence with which each parameter differs from zero.

    For parameter i with standard error se_i this is |1 - 2 Phi(beta_i / se_i)|:
    0 when the estimate sits at zero, approaching 1 as it moves many
    standard errors away.
    """
    se = np.sqrt(np.diag(covariance))
    return np.abs(1 - 2 * norm.cdf(parameters / se))
