"""
MaximumLikelihoodEstimator: scikit-learn style front end.

Wraps a Model and the maximum-likelihood driver in the estimator API
(``fit``/``score``, ``get_params``/``set_params``, ``clone``), adding
bounds on the parameters on top of the model's own constraints.
"""

import time
from datetime import datetime

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator
from sklearn.utils.validation import check_array, check_is_fitted

from .inventory import Inventory
from .mle.penalties import bounds_to_constraints
from .models import SupportsRandom, get_model, resolve_parameter_count
from .models.base import check_data
from .params import EstimationParams


class MaximumLikelihoodEstimator(BaseEstimator):
    """
    Constrained maximum-likelihood estimation of a statistical model.

    Parameters
    ----------
    model : str or Model, default='probit'
        'probit', 'rank_exponential', or any Model instance.

    x0 : array-like or None, default=None
        Starting point. None starts from a vector of ones.

    method : int or str, default=1
        Optimizer: 0 Nelder-Mead, 1 conjugate gradient, 2 BFGS,
        3 L-BFGS-B (or the scipy method name).

    step_size : float, default=1e-2
        Initial simplex edge for Nelder-Mead.

    tol : float, default=1e-5
        Convergence tolerance.

    max_iter : int, default=1000
        Maximum number of optimizer iterations.

    bounds : list, tuple, dict, or None, default=None
        Parameter bounds, enforced through the penalty transform after the
        model's own constraints. Formats:
        - None: no extra bounds
        - Single tuple (lower, upper): same bounds for all parameters
        - List of tuples: [(lb0, ub0), (lb1, ub1), ...]
        - Dict keyed by parameter name: {'x1': (0, None)}
        Use None in a tuple for an open side.

    want : Inventory or None, default=None
        Outputs to compute. None means all the model supports.

    verbose : int, default=0
        Verbosity level. 0=silent, 1=warnings, 2=detailed.

    Attributes
    ----------
    estimate_ : Estimate
        Full result of the last fit.

    params_ : ndarray of shape (n_params,)
        Estimated parameters.

    named_params_ : dict
        Parameters keyed by name.

    covariance_ : ndarray of shape (n_params, n_params) or None

    log_likelihood_ : float or None

    converged_ : bool

    n_iter_ : int

    n_features_in_ : int
        Number of data columns seen during fit (including a stacked
        outcome column).

    fit_datetime_ : datetime

    fit_duration_seconds_ : float

    Examples
    --------
    >>> import numpy as np
    >>> from constrained_mle import MaximumLikelihoodEstimator
    >>>
    >>> rng = np.random.default_rng(0)
    >>> X = rng.normal(size=(200, 2))
    >>> y = (X @ np.array([0.5, -1.0]) + rng.normal(size=200) < 0).astype(float)
    >>> est = MaximumLikelihoodEstimator(model='probit', bounds=[(0, None), (None, None)])
    >>> est.fit(X, y)  # doctest: +SKIP
    >>> est.named_params_  # doctest: +SKIP
    """

    def __init__(
        self,
        model='probit',
        x0=None,
        method=1,
        step_size=1e-2,
        tol=1e-5,
        max_iter=1000,
        bounds=None,
        want=None,
        verbose=0
    ):
        self.model = model
        self.x0 = x0
        self.method = method
        self.step_size = step_size
        self.tol = tol
        self.max_iter = max_iter
        self.bounds = bounds
        self.want = want
        self.verbose = verbose

    def _estimation_params(self):
        return EstimationParams(
            starting_point=self.x0,
            method=self.method,
            step_size=self.step_size,
            tolerance=self.tol,
            max_iter=self.max_iter,
            verbose=self.verbose,
        )

    def _stack(self, X, y):
        """Put an outcome vector in front of the covariates."""
        if y is None:
            return X
        y_name = y.name if getattr(y, 'name', None) is not None else 'y'
        if hasattr(X, 'columns'):
            return pd.concat([pd.Series(np.asarray(y), index=X.index, name=y_name), X], axis=1)
        X = check_array(X)
        y = check_array(y, ensure_2d=False)
        return np.column_stack([y, X])

    def fit(self, X, y=None):
        """
        Fit the model.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_columns)
            Data laid out as the model expects. For probit, if ``y`` is
            given, X holds only covariates.

        y : array-like of shape (n_samples,) or None
            Outcome column, stacked in front of X.

        Returns
        -------
        self : object
            Fitted estimator.
        """
        from .mle.driver import maximum_likelihood

        self.fit_datetime_ = datetime.now()
        fit_start_time = time.perf_counter()

        model = get_model(self.model)
        data = self._stack(X, y)
        matrix = check_data(data)
        self.n_features_in_ = matrix.shape[1]
        n_params = resolve_parameter_count(model, matrix)

        columns = list(data.columns) if hasattr(data, 'columns') else None
        names = model.parameter_names(n_params, columns)
        constraints = bounds_to_constraints(self.bounds, n_params, names)

        want = self.want if self.want is not None else Inventory.all()
        params = self._estimation_params()

        if constraints or self.x0 is not None:
            estimate = maximum_likelihood(data, model, params=params, uses=want,
                                          constraints=constraints)
        else:
            estimate = model.estimate(data, uses=want, params=params)

        self.estimate_ = estimate
        self.params_ = estimate.parameters
        self.covariance_ = estimate.covariance
        self.log_likelihood_ = estimate.log_likelihood
        self.converged_ = estimate.converged
        self.n_iter_ = estimate.n_iterations
        if self.params_ is not None:
            self.named_params_ = dict(zip(names, self.params_))
        else:
            self.named_params_ = {}

        self.fit_duration_seconds_ = time.perf_counter() - fit_start_time
        return self

    def score(self, X, y=None):
        """
        Log-likelihood of the data at the fitted parameters.

        Parameters
        ----------
        X : array-like
        y : array-like or None

        Returns
        -------
        float
        """
        check_is_fitted(self)
        model = get_model(self.model)
        data = check_data(self._stack(X, y))
        if data.shape[1] != self.n_features_in_:
            raise ValueError(
                f"Data has {data.shape[1]} columns, but the model was fitted "
                f"with {self.n_features_in_}"
            )
        return model.log_likelihood(self.params_, data)

    def sample(self, n_samples=1, random_state=None):
        """
        Draw from the fitted model's distribution.

        Raises
        ------
        NotImplementedError
            If the model has no random-number generator.
        """
        check_is_fitted(self)
        model = get_model(self.model)
        if not isinstance(model, SupportsRandom):
            raise NotImplementedError(f"{model.name} has no random-number generator")
        return model.rng(self.params_, size=n_samples, random_state=random_state)


# Alias for convenience
MLEstimator = MaximumLikelihoodEstimator
