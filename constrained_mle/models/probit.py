"""
Probit: binary-response model with a normal link.

Data layout: column 0 is the observed outcome (0 or 1), the remaining
columns are covariates, one parameter per covariate.

For a row with linear predictor eta = x . beta the log-likelihood
contribution is log Phi(eta) when the outcome is 0 and log(1 - Phi(eta))
when it is 1. Both are computed with ``scipy.special.log_ndtr`` so that
far-out predictors (e.g. separable data) stay finite.
"""

import numpy as np
from scipy.special import log_ndtr

from ..exceptions import ShapeError
from ..inventory import Inventory
from .base import DERIVE_FROM_DATA, Model

_LOG_SQRT_2PI = 0.5 * np.log(2 * np.pi)


class ProbitContext:
    """Linear predictor cache owned by one estimation.

    The cached ``X @ beta`` is reused only when asked for the same
    ``beta`` on the same data matrix; any other request recomputes it, and
    a different row count reallocates the buffer.

    Attributes
    ----------
    n_computed : int
        Number of times the predictor was computed.
    n_reused : int
        Number of requests served from the cache.
    """

    def __init__(self, data):
        self._data = data
        self._beta = None
        self._eta = np.empty(data.shape[0])
        self.n_computed = 0
        self.n_reused = 0

    def is_current(self, beta, data):
        return (self._beta is not None
                and data is self._data
                and np.array_equal(beta, self._beta))

    def linear_predictor(self, beta, data):
        if self.is_current(beta, data):
            self.n_reused += 1
            return self._eta

        if data.shape[0] != self._eta.shape[0]:
            self._eta = np.empty(data.shape[0])
        self._data = data
        self._eta[:] = data[:, 1:] @ beta
        self._beta = np.array(beta, dtype=float)
        self.n_computed += 1
        return self._eta


class Probit(Model):
    """The probit model.

    Supports parameters, covariance, confidence, log-likelihood and names;
    no predicted values or residuals.

    Examples
    --------
    >>> from constrained_mle.models import probit
    >>> est = probit.estimate(data)  # doctest: +SKIP
    >>> est.parameters  # doctest: +SKIP
    """

    __slots__ = ()

    name = 'Probit'
    parameter_count = DERIVE_FROM_DATA
    inventory_filter = Inventory(predicted=False, residuals=False)

    def new_context(self, data):
        return ProbitContext(data)

    def validate(self, data):
        if data.shape[1] < 2:
            raise ShapeError(
                f"Probit needs an outcome column and at least one covariate, "
                f"got {data.shape[1]} column(s)"
            )
        outcome = data[:, 0]
        if not np.all((outcome == 0) | (outcome == 1)):
            raise ShapeError("Probit outcome column (column 0) must contain only 0 and 1")

    def parameter_names(self, n_params, columns=None):
        if columns is not None and len(columns) == n_params + 1:
            return [str(c) for c in columns[1:]]
        return super().parameter_names(n_params)

    def _eta(self, beta, data, context):
        if context is None:
            context = self.new_context(data)
        return context.linear_predictor(np.asarray(beta, dtype=float), data)

    def log_likelihood(self, beta, data, context=None):
        eta = self._eta(beta, data, context)
        terms = np.where(data[:, 0] == 0, log_ndtr(eta), log_ndtr(-eta))
        # Long accumulator: many small terms of similar size
        return float(np.sum(terms, dtype=np.longdouble))

    def dlog_likelihood(self, beta, data, context=None):
        """Gradient: sum over rows of x * phi(eta) / Phi(eta) for outcome 0,
        x * phi(eta) / (Phi(eta) - 1) for outcome 1."""
        eta = self._eta(beta, data, context)
        log_pdf = -0.5 * eta ** 2 - _LOG_SQRT_2PI
        ratio = np.where(data[:, 0] == 0,
                         np.exp(log_pdf - log_ndtr(eta)),
                         -np.exp(log_pdf - log_ndtr(-eta)))
        gradient = np.sum(data[:, 1:] * ratio[:, np.newaxis], axis=0, dtype=np.longdouble)
        return gradient.astype(float)

    def fdf(self, beta, data, context=None):
        """Log-likelihood and gradient from one linear predictor."""
        if context is None:
            context = self.new_context(data)
        return (self.log_likelihood(beta, data, context),
                self.dlog_likelihood(beta, data, context))


probit = Probit()
