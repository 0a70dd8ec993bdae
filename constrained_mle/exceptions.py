"""
Exception types raised by the estimation engine.

Non-convergence and a singular covariance matrix are not errors: they are
reported on the returned Estimate. Only problems that prevent an
estimation from starting (or from evaluating safely) raise.
"""


class MLEError(Exception):
    """Base class for estimation errors."""


class ShapeError(MLEError, ValueError):
    """Data or starting point dimensions do not fit the model."""


class DegenerateDataError(ShapeError):
    """Data is empty or carries no information about the parameters."""


class ConstraintError(MLEError):
    """A constraint could not produce a finite feasible substitute."""
