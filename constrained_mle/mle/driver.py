"""
Maximum-likelihood driver.

The search is posed as minimization of the negative penalized
log-likelihood with scipy.optimize.minimize. Value, gradient and penalty
are negated together in PenalizedObjective, so the optimizer only ever
sees one consistent surface.
"""

import warnings

import numpy as np
from scipy.optimize import minimize
from sklearn.exceptions import ConvergenceWarning

from ..estimate import Estimate
from ..exceptions import ShapeError
from ..inventory import Inventory
from ..models.base import (SupportsFdf, SupportsGradient, SupportsPrediction,
                           check_data, resolve_parameter_count)
from ..params import EstimationParams
from .numerical import (confidence_from_covariance, covariance_from_hessian,
                        numerical_gradient, numerical_hessian)
from .penalties import apply_constraints, check_start


class PenalizedObjective:
    """Negative penalized log-likelihood of one model on one dataset.

    At a point ``beta`` the constraints yield a penalty and an evaluation
    point; the objective is ``-(log_likelihood(beta_eval) - penalty)``.

    Where every constraint is satisfied the model's analytic gradient (or
    its combined ``fdf``) is used. Where a constraint binds, the surface
    is the penalty slope around a substitute point, which the model's
    gradient knows nothing about, so the gradient is taken numerically.
    The likelihood at the substitute and the penalty are differenced
    separately there. Models without a gradient always use the
    numerical one.

    Parameters
    ----------
    model : Model
    data : ndarray
        Validated data matrix.
    constraints : sequence of callables
    context : object, optional
        The model's per-estimation context; created if omitted.
    """

    def __init__(self, model, data, constraints=(), context=None):
        self.model = model
        self.data = data
        self.constraints = list(constraints)
        self.context = context if context is not None else model.new_context(data)
        self.has_gradient = isinstance(model, SupportsGradient)
        self.has_fdf = isinstance(model, SupportsFdf)

    def _evaluation_point(self, x):
        return apply_constraints(self.constraints, np.asarray(x, dtype=float), self.data)

    def penalized_log_likelihood(self, x):
        """Log-likelihood at the feasible point minus the penalty."""
        penalty, beta = self._evaluation_point(x)
        return self.model.log_likelihood(beta, self.data, self.context) - penalty

    def __call__(self, x):
        return -self.penalized_log_likelihood(x)

    def _substitute_term(self, x):
        _, beta = self._evaluation_point(x)
        return -self.model.log_likelihood(beta, self.data, self.context)

    def _penalty_term(self, x):
        return self._evaluation_point(x)[0]

    def _numerical_gradient(self, x, penalty):
        if penalty == 0:
            return numerical_gradient(self, x)
        # Differentiate the two terms apart: the likelihood at the substitute
        # can be large while the penalty slope is small
        return (numerical_gradient(self._substitute_term, x)
                + numerical_gradient(self._penalty_term, x))

    def gradient(self, x):
        penalty, beta = self._evaluation_point(x)
        if penalty == 0 and self.has_gradient:
            return -np.asarray(self.model.dlog_likelihood(beta, self.data, self.context),
                               dtype=float)
        return self._numerical_gradient(x, penalty)

    def value_and_gradient(self, x):
        penalty, beta = self._evaluation_point(x)
        if penalty == 0 and self.has_fdf:
            value, grad = self.model.fdf(beta, self.data, self.context)
            return -value, -np.asarray(grad, dtype=float)
        if penalty == 0 and self.has_gradient:
            value = self.model.log_likelihood(beta, self.data, self.context)
            grad = self.model.dlog_likelihood(beta, self.data, self.context)
            return -value, -np.asarray(grad, dtype=float)
        return self(x), self._numerical_gradient(x, penalty)


def covariance_at(objective, beta, verbose=0):
    """Covariance from the numerical Hessian of ``objective`` at ``beta``.

    Returns
    -------
    covariance : ndarray or None
        None when the Hessian is singular or not positive definite.
    status : str or None
        Reason the covariance is missing.
    """
    gradient = objective.gradient if objective.has_gradient else None
    hessian = numerical_hessian(objective, beta, gradient=gradient)
    try:
        return covariance_from_hessian(hessian), None
    except np.linalg.LinAlgError as e:
        status = f"Hessian is not positive definite: {e}"
        if verbose >= 1:
            warnings.warn(f"Covariance omitted for {objective.model.name}. {status}", UserWarning)
        return None, status


def _starting_point(params, n_params):
    if params.starting_point is None:
        return np.ones(n_params)

    x0 = np.array(params.starting_point, dtype=float).ravel()
    if x0.shape[0] != n_params:
        raise ShapeError(
            f"starting_point has {x0.shape[0]} elements, "
            f"but the model has {n_params} parameters"
        )
    if not np.all(np.isfinite(x0)):
        raise ShapeError(f"starting_point must be finite, got {x0}")
    return x0


def maximum_likelihood(data, model, params=None, uses=None, constraints=None):
    """
    Find the parameters that maximize ``model``'s log-likelihood on ``data``.

    Parameters
    ----------
    data : array-like of shape (n_samples, n_columns)
        Numeric matrix, laid out as the model expects. A pandas DataFrame
        is accepted; its column names can become parameter names.
    model : Model
    params : EstimationParams, optional
        Starting point, method, step size, tolerance, iteration bound and
        verbosity. Defaults to ``EstimationParams()``.
    uses : Inventory, optional
        Outputs wanted; filtered by ``model.inventory_filter``. Defaults
        to everything the model supports.
    constraints : sequence of callables, optional
        Extra constraints applied after the model's own.

    Returns
    -------
    Estimate
        ``converged`` is False if the iteration bound was hit or the
        optimizer otherwise stopped short of its tolerance; the best
        point found is still returned. The log-likelihood is evaluated
        at the feasible optimum and never includes a penalty.

    Raises
    ------
    ShapeError
        If the data or starting point do not fit the model.
    DegenerateDataError
        If the data is empty or uninformative.
    ConstraintError
        If the constraints cannot recover a feasible point.

    Notes
    -----
    scipy's conjugate gradient (method 1) restarts badly on one-parameter
    surfaces whose first step overshoots the optimum, and may then stop
    with a precision-loss message short of it, notably when starting on a
    constraint boundary. BFGS (method 2) does not have this problem.
    """
    params = params if params is not None else EstimationParams()
    method = params.validate()

    columns = list(data.columns) if hasattr(data, 'columns') else None
    X = check_data(data)
    model.validate(X)
    n_params = resolve_parameter_count(model, X)
    uses = (uses if uses is not None else Inventory.all()).filter(model.inventory_filter)

    all_constraints = list(model.constraints) + list(constraints or [])
    x0 = _starting_point(params, n_params)
    check_start(all_constraints, x0, X)

    objective = PenalizedObjective(model, X, all_constraints)
    trace = [objective.penalized_log_likelihood(x0)]

    def record(xk):
        trace.append(objective.penalized_log_likelihood(xk))
        if params.verbose >= 2:
            print(f"  iteration {len(trace) - 1}: log-likelihood {trace[-1]:.8g}")

    options = params.scipy_options(method)
    if method == 'Nelder-Mead':
        options['initial_simplex'] = np.vstack([x0, x0 + params.step_size * np.eye(n_params)])
        result = minimize(objective, x0, method=method, callback=record, options=options)
    else:
        result = minimize(objective.value_and_gradient, x0, jac=True, method=method,
                          callback=record, options=options)

    converged = bool(result.success)
    if not converged and params.verbose >= 1:
        advice = "Try a different starting_point or increase max_iter."
        if method == 'CG':
            advice = "Try method=2 (BFGS), a different starting_point or a larger max_iter."
        warnings.warn(
            f"Optimizer did not converge for {model.name}: {result.message}. {advice}",
            ConvergenceWarning
        )

    # Report the feasible point, in un-penalized units
    _, beta = apply_constraints(all_constraints, np.asarray(result.x, dtype=float), X)
    beta = np.array(beta, dtype=float)

    values = {
        'parameters': beta,
        'log_likelihood': model.log_likelihood(beta, X, objective.context),
        'names': model.parameter_names(n_params, columns),
    }

    covariance_status = None
    if uses.covariance or uses.confidence:
        covariance, covariance_status = covariance_at(objective, beta, params.verbose)
        if covariance is not None:
            values['covariance'] = covariance
            values['confidence'] = confidence_from_covariance(beta, covariance)

    if (uses.predicted or uses.residuals) and isinstance(model, SupportsPrediction):
        predicted = np.asarray(model.predict(beta, X), dtype=float)
        values['predicted'] = predicted
        values['residuals'] = np.asarray(model.observed(X), dtype=float) - predicted

    n_iterations = int(getattr(result, 'nit', len(trace) - 1))
    if params.verbose >= 1:
        print(f"{model.name}: log-likelihood {values['log_likelihood']:.6f} "
              f"after {n_iterations} iterations ({result.message})")

    return Estimate(
        model_name=model.name,
        uses=uses,
        converged=converged,
        status=str(result.message),
        n_iterations=n_iterations,
        trace=trace,
        covariance_status=covariance_status,
        **values
    )
