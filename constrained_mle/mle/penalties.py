"""
Constraint / penalty transform.

A constraint is any callable ``constraint(beta, data) -> (penalty, substitute)``.
When ``beta`` is feasible it returns a zero penalty (the substitute is then
ignored). Otherwise it returns a strictly positive penalty that grows with
the distance from the feasible region, and a feasible substitute vector at
which the log-likelihood can be evaluated safely.

Constraints in a list are applied in order: the substitute produced by one
becomes the candidate checked by the next, and penalties add up. The
penalized log-likelihood at ``beta`` is then

    log_likelihood(substitute) - total_penalty

which is continuous at the boundary and slopes back toward the feasible
region, so an unconstrained optimizer can be used.
"""

import numpy as np

from ..exceptions import ConstraintError
from .bounds import parse_bounds


class _BoundConstraint:
    """Shared plumbing for one-sided bounds on a subset of parameters."""

    side = None

    def __init__(self, limit, indices=None, tolerance=1e-3, strict=True):
        self.limit = float(limit)
        self.indices = None if indices is None else np.atleast_1d(indices).astype(int)
        self.tolerance = float(tolerance)
        self.strict = strict

        if not np.isfinite(self.limit):
            raise ValueError(f"limit must be finite, got {limit}")
        if self.tolerance < 0 or (strict and self.tolerance == 0):
            raise ValueError(
                "tolerance must be >= 0, and > 0 for a strict bound; "
                f"got {tolerance}"
            )

    def _select(self, beta):
        if self.indices is None:
            return np.arange(beta.shape[0])
        return self.indices

    def __repr__(self):
        return (f"{type(self).__name__}(limit={self.limit}, indices={self.indices}, "
                f"tolerance={self.tolerance}, strict={self.strict})")


class LowerBoundConstraint(_BoundConstraint):
    """Keep selected parameters above ``limit``.

    Parameters
    ----------
    limit : float
        The bound.
    indices : int, sequence of int or None
        Parameters the bound applies to. None means all of them.
    tolerance : float, default=1e-3
        Distance inside the feasible region at which infeasible
        parameters are placed.
    strict : bool, default=True
        If True, ``beta == limit`` is infeasible.

    Notes
    -----
    The penalty is the total distance the bound parameters have to move to
    reach their substitute values, so it is strictly positive whenever a
    bound binds.

    Examples
    --------
    >>> c = LowerBoundConstraint(0.0, indices=0, tolerance=1e-3)
    >>> c(np.array([-2.0]), None)
    (2.001, array([0.001]))
    """

    side = 'lower'

    def __call__(self, beta, data=None):
        beta = np.asarray(beta, dtype=float)
        idx = self._select(beta)
        values = beta[idx]
        binding = values <= self.limit if self.strict else values < self.limit
        if not np.any(binding):
            return 0.0, beta

        floor = self.limit + self.tolerance
        substitute = beta.copy()
        substitute[idx] = np.where(binding, floor, values)
        penalty = float(np.sum(floor - values[binding]))
        return penalty, substitute


class UpperBoundConstraint(_BoundConstraint):
    """Keep selected parameters below ``limit``. Mirror of LowerBoundConstraint."""

    side = 'upper'

    def __call__(self, beta, data=None):
        beta = np.asarray(beta, dtype=float)
        idx = self._select(beta)
        values = beta[idx]
        binding = values >= self.limit if self.strict else values > self.limit
        if not np.any(binding):
            return 0.0, beta

        ceiling = self.limit - self.tolerance
        substitute = beta.copy()
        substitute[idx] = np.where(binding, ceiling, values)
        penalty = float(np.sum(values[binding] - ceiling))
        return penalty, substitute


def bounds_to_constraints(bounds, n_params, names=None):
    """Build an ordered constraint list from a bounds specification.

    Bounds are inclusive: a parameter exactly at its bound is feasible and
    an infeasible one is moved onto the bound.

    Parameters
    ----------
    bounds : None, tuple, list or dict
        Any format accepted by ``parse_bounds``.
    n_params : int
    names : list of str, optional

    Returns
    -------
    list
        One constraint per finite bound, in parameter order (lower first).
    """
    constraints = []
    for i, (lower, upper) in enumerate(parse_bounds(bounds, n_params, names)):
        if np.isfinite(lower):
            constraints.append(LowerBoundConstraint(lower, i, tolerance=0.0, strict=False))
        if np.isfinite(upper):
            constraints.append(UpperBoundConstraint(upper, i, tolerance=0.0, strict=False))
    return constraints


def apply_constraints(constraints, beta, data):
    """Run a constraint list against ``beta``.

    Parameters
    ----------
    constraints : sequence of callables
    beta : ndarray
        Candidate parameters. Not modified.
    data : ndarray
        Passed through to each constraint.

    Returns
    -------
    total_penalty : float
        Sum of the individual penalties (>= 0).
    beta_eval : ndarray
        The vector to evaluate the log-likelihood at: ``beta`` itself when
        every penalty is exactly zero, the last substitute otherwise.

    Raises
    ------
    ConstraintError
        If a constraint returns a negative or non-finite penalty, or a
        substitute that is not a finite vector of the right length.
    """
    candidate = beta
    total = 0.0
    for constraint in constraints:
        penalty, substitute = constraint(candidate, data)
        penalty = float(penalty)
        if not np.isfinite(penalty) or penalty < 0:
            raise ConstraintError(
                f"{constraint!r} returned an invalid penalty {penalty} at {candidate}"
            )
        # A zero penalty counts as feasible, even on the boundary
        if penalty == 0:
            continue

        substitute = np.asarray(substitute, dtype=float)
        if substitute.shape != candidate.shape or not np.all(np.isfinite(substitute)):
            raise ConstraintError(
                f"{constraint!r} could not produce a finite substitute for {candidate}"
            )
        candidate = substitute
        total += penalty

    return total, candidate


def check_start(constraints, beta, data):
    """Verify the constraint list can recover from ``beta``.

    The substitute produced at the starting point must itself be feasible
    (zero penalty). Called once before an optimization starts.

    Raises
    ------
    ConstraintError
        If recovery fails.
    """
    penalty, substitute = apply_constraints(constraints, beta, data)
    if penalty == 0:
        return

    residual, _ = apply_constraints(constraints, substitute, data)
    if residual != 0:
        raise ConstraintError(
            f"Constraints cannot recover a feasible point from {beta}: "
            f"substitute {substitute} still carries penalty {residual}"
        )
