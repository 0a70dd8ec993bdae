"""
Constrained Maximum-Likelihood Estimation
=========================================

A maximum-likelihood engine for pluggable statistical models. A model
supplies a log-likelihood (and optionally a gradient, a combined
evaluator, a sampler and parameter constraints); the engine maximizes it
with scipy's unconstrained optimizers, handling constraints through a
penalty transform, and reports only the outputs the model supports and
the caller asked for.

Main Objects
------------
maximum_likelihood : The estimation driver
Model : Base class for models
probit, rank_exponential : Bundled models
Inventory : Named output flags with request/support filtering
EstimationParams : Starting point, method, step size, tolerance
Estimate : Estimation result
MaximumLikelihoodEstimator : scikit-learn compatible front end

Quick Start
-----------
>>> from constrained_mle import probit, EstimationParams, Inventory
>>>
>>> est = probit.estimate(data, uses=Inventory(covariance=False))  # doctest: +SKIP
>>> est.parameters, est.log_likelihood  # doctest: +SKIP
"""

from .exceptions import ConstraintError, DegenerateDataError, MLEError, ShapeError
from .inventory import Inventory
from .params import EstimationParams, METHODS, get_method
from .estimate import Estimate
from .models import (
    DERIVE_FROM_DATA,
    MODELS,
    Model,
    Probit,
    RankExponential,
    SupportsFdf,
    SupportsGradient,
    SupportsPrediction,
    SupportsRandom,
    get_model,
    likelihood_vector,
    probit,
    rank_exponential,
)
from .mle import (
    LowerBoundConstraint,
    PenalizedObjective,
    UpperBoundConstraint,
    apply_constraints,
    bounds_to_constraints,
    maximum_likelihood,
    numerical_hessian,
)
from .estimator import MaximumLikelihoodEstimator, MLEstimator

__version__ = "0.1.0"

__all__ = [
    # Driver and results
    'maximum_likelihood',
    'PenalizedObjective',
    'Estimate',
    'EstimationParams',
    'METHODS',
    'get_method',
    'Inventory',

    # Models
    'Model',
    'DERIVE_FROM_DATA',
    'SupportsGradient',
    'SupportsFdf',
    'SupportsRandom',
    'SupportsPrediction',
    'Probit',
    'RankExponential',
    'probit',
    'rank_exponential',
    'MODELS',
    'get_model',
    'likelihood_vector',

    # Constraints
    'LowerBoundConstraint',
    'UpperBoundConstraint',
    'apply_constraints',
    'bounds_to_constraints',
    'numerical_hessian',

    # Estimator
    'MaximumLikelihoodEstimator',
    'MLEstimator',

    # Errors
    'MLEError',
    'ShapeError',
    'DegenerateDataError',
    'ConstraintError',
]
