"""
Exponential model for rank data.

Column k of the data holds the count (or weight) of observations at rank
k, for k = 0, 1, ...; rows are independent units and are pooled. With
density Z(mu, k) = exp(-k / mu) / mu,

    ln L(mu) = sum_k sum_i data[i, k] * (-ln(mu) - k / mu)

The maximum is the weighted mean rank, so ``estimate`` is closed form and
does not run the optimizer; the likelihood and gradient are still exposed
for consistency checks and tests.

Some authors write the density as ln(C) C^(-k); convert with
mu = 1 / ln(C) and back with C = exp(1 / mu).
"""

import numpy as np
from sklearn.utils import check_random_state

from ..estimate import Estimate
from ..exceptions import DegenerateDataError, ShapeError
from ..inventory import Inventory
from ..mle.penalties import LowerBoundConstraint
from .base import Model, check_data

POSITIVE_TOLERANCE = 1e10 * np.finfo(float).eps

# mu must be strictly positive. The penalty at an infeasible mu is its
# distance to the substitute, POSITIVE_TOLERANCE - mu, rather than -mu, so
# that mu = 0 itself carries a nonzero penalty and is never taken as
# feasible.
positive_mean = LowerBoundConstraint(0.0, indices=0, tolerance=POSITIVE_TOLERANCE, strict=True)


def _rank_totals(data):
    """Column sums and rank indices, accumulated in long precision."""
    totals = np.sum(data, axis=0, dtype=np.longdouble)
    ranks = np.arange(data.shape[1], dtype=np.longdouble)
    return totals, ranks


class RankExponential(Model):
    """Single-parameter exponential decay over rank positions."""

    __slots__ = ()

    name = 'Exponential, rank data'
    parameter_count = 1
    inventory_filter = Inventory(predicted=False, residuals=False, names=False)
    constraints = (positive_mean,)

    def validate(self, data):
        if np.any(data < 0):
            raise ShapeError("Rank data must hold non-negative counts")
        if not np.sum(data) > 0:
            raise DegenerateDataError("Rank data has zero total weight")

    def parameter_names(self, n_params, columns=None):
        return ['mu']

    def log_likelihood(self, beta, data, context=None):
        mu = float(beta[0])
        if mu <= 0:
            return -np.inf
        totals, ranks = _rank_totals(data)
        return float(np.sum(totals * (-np.log(mu) - ranks / mu)))

    def dlog_likelihood(self, beta, data, context=None):
        mu = float(beta[0])
        totals, ranks = _rank_totals(data)
        return np.array([float(np.sum(totals * (ranks / mu - 1) / mu))])

    def rng(self, beta, size=None, random_state=None):
        """Draw from the exponential distribution with mean ``beta[0]``."""
        random_state = check_random_state(random_state)
        return random_state.exponential(scale=float(beta[0]), size=size)

    def estimate(self, data, uses=None, params=None):
        """Closed-form estimate: mu = sum_k k * colsum_k / sum_k colsum_k.

        ``params`` is accepted for interface compatibility and only its
        ``verbose`` level is used.
        """
        from ..mle.driver import PenalizedObjective, covariance_at
        from ..mle.numerical import confidence_from_covariance

        data = check_data(data)
        self.validate(data)
        uses = (uses if uses is not None else Inventory.all()).filter(self.inventory_filter)

        totals, ranks = _rank_totals(data)
        mu = float(np.sum(ranks * totals) / np.sum(totals))
        if not mu > 0:
            raise DegenerateDataError(
                "All weight is at rank 0; the mean rank is on the boundary mu = 0"
            )
        beta = np.array([mu])

        values = {'parameters': beta, 'names': self.parameter_names(1)}
        if uses.log_likelihood:
            values['log_likelihood'] = self.log_likelihood(beta, data)

        covariance_status = None
        if uses.covariance or uses.confidence:
            objective = PenalizedObjective(self, data, self.constraints)
            covariance, covariance_status = covariance_at(
                objective, beta, verbose=getattr(params, 'verbose', 0))
            if covariance is not None:
                values['covariance'] = covariance
                values['confidence'] = confidence_from_covariance(beta, covariance)

        return Estimate(model_name=self.name, uses=uses, status='closed form',
                        covariance_status=covariance_status, **values)


rank_exponential = RankExponential()
