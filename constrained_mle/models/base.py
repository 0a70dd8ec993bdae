"""
Model abstraction.

A model needs only ``log_likelihood``. Gradients, a combined
value-and-gradient evaluator, a sampler and fitted values are optional
capabilities, expressed as protocols: the driver checks
``isinstance(model, SupportsGradient)`` and substitutes a numerical
fallback when a capability is missing.

Models are stateless and shared. Anything a model wants to cache between
evaluations lives in the context returned by ``new_context(data)``,
which belongs to a single estimation call.
"""

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

import numpy as np
from sklearn.utils.validation import check_array

from ..exceptions import DegenerateDataError, ShapeError
from ..inventory import Inventory


# parameter_count sentinel: one parameter per data column except the first
DERIVE_FROM_DATA = -1

MAX_NAME_LENGTH = 100


@runtime_checkable
class SupportsGradient(Protocol):
    def dlog_likelihood(self, beta, data, context=None):
        ...


@runtime_checkable
class SupportsFdf(Protocol):
    def fdf(self, beta, data, context=None):
        ...


@runtime_checkable
class SupportsRandom(Protocol):
    def rng(self, beta, size=None, random_state=None):
        ...


@runtime_checkable
class SupportsPrediction(Protocol):
    def predict(self, beta, data):
        ...

    def observed(self, data):
        ...


class Model(ABC):
    """Base class for a statistical model.

    Subclasses set the class attributes and implement ``log_likelihood``;
    they may add any of the optional capability methods.

    Attributes
    ----------
    name : str
        Up to 100 characters.
    parameter_count : int
        Positive, or DERIVE_FROM_DATA for (data columns - 1).
    inventory_filter : Inventory
        Outputs the model can produce.
    constraints : tuple
        Ordered constraint callables, see ``mle.penalties``.
    """

    __slots__ = ()

    name = None
    parameter_count = DERIVE_FROM_DATA
    inventory_filter = Inventory.all()
    constraints = ()

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.name is not None and len(cls.name) > MAX_NAME_LENGTH:
            raise ValueError(f"Model name longer than {MAX_NAME_LENGTH} characters: {cls.name!r}")

    @abstractmethod
    def log_likelihood(self, beta, data, context=None):
        """Log-likelihood of ``data`` at parameters ``beta``."""

    def new_context(self, data):
        """Per-estimation scratch state; None when the model needs none."""
        return None

    def validate(self, data):
        """Model-specific data checks; raise ShapeError on failure."""

    def parameter_names(self, n_params, columns=None):
        return [f'beta_{i + 1}' for i in range(n_params)]

    def estimate(self, data, uses=None, params=None):
        """Fit the model to ``data``.

        The default is a maximum-likelihood search with this model's own
        likelihood, gradient and constraints.

        Parameters
        ----------
        data : array-like of shape (n_samples, n_columns)
        uses : Inventory, optional
            Outputs wanted. Defaults to everything the model supports.
        params : EstimationParams, optional

        Returns
        -------
        Estimate
        """
        from ..mle.driver import maximum_likelihood
        return maximum_likelihood(data, self, params=params, uses=uses)

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"


def check_data(data):
    """Validate a dataset and return a read-only float matrix.

    Raises
    ------
    ShapeError
        If data is not a 2-D numeric matrix of finite values.
    DegenerateDataError
        If it has no rows or no columns.
    """
    try:
        shape = np.shape(data)
    except ValueError as e:
        # Ragged nested sequences
        raise ShapeError(f"Data is not a rectangular matrix: {e}") from e
    if len(shape) != 2:
        raise ShapeError(f"Expected a 2-D data matrix, got shape {shape}")
    if 0 in shape:
        raise DegenerateDataError(f"Data matrix is empty (shape {shape})")

    try:
        matrix = check_array(data, dtype=np.float64)
    except (ValueError, TypeError) as e:
        raise ShapeError(f"Invalid data matrix: {e}") from e

    # Read-only view: the caller's array is never written to
    matrix = matrix.view()
    matrix.flags.writeable = False
    return matrix


def resolve_parameter_count(model, data):
    """Number of parameters of ``model`` on ``data``.

    Raises
    ------
    ShapeError
        If the count derived from the data is not positive.
    """
    if model.parameter_count == DERIVE_FROM_DATA:
        n_params = data.shape[1] - 1
        if n_params < 1:
            raise ShapeError(
                f"{model.name} needs at least 2 data columns, got {data.shape[1]}"
            )
        return n_params

    if model.parameter_count < 1:
        raise ValueError(f"Invalid parameter_count {model.parameter_count} for {model.name}")
    return model.parameter_count


def likelihood_vector(model, data, beta):
    """Log-likelihood of each row of ``data`` on its own.

    Useful for comparing two models row by row (e.g. a Vuong-style paired
    test on the differences).
    """
    data = check_data(data)
    beta = np.asarray(beta, dtype=float)
    return np.array([model.log_likelihood(beta, data[i:i + 1])
                     for i in range(data.shape[0])])
