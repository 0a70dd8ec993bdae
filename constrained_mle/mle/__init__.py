"""
Maximum-likelihood machinery: the driver, the constraint/penalty
transform, bound parsing and numerical derivatives.
"""

from .driver import PenalizedObjective, maximum_likelihood, covariance_at

from .bounds import parse_bounds, normalize_bound
from .penalties import (
    LowerBoundConstraint,
    UpperBoundConstraint,
    apply_constraints,
    bounds_to_constraints,
    check_start,
)
from .numerical import (
    numerical_gradient,
    numerical_hessian,
    covariance_from_hessian,
    confidence_from_covariance,
)

__all__ = [
    # Driver
    'maximum_likelihood',
    'PenalizedObjective',
    'covariance_at',
    # Bounds
    'parse_bounds',
    'normalize_bound',
    # Constraints
    'LowerBoundConstraint',
    'UpperBoundConstraint',
    'apply_constraints',
    'bounds_to_constraints',
    'check_start',
    # Numerical derivatives
    'numerical_gradient',
    'numerical_hessian',
    'covariance_from_hessian',
    'confidence_from_covariance',
]
