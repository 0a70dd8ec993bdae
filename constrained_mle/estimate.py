"""
The result of one estimation.

An Estimate only carries the outputs its ``uses`` inventory marks as valid.
``uses`` starts as the caller's request filtered by what the model
supports, and loses any flag whose value could not be computed (e.g.
covariance from a singular Hessian).
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd
from scipy.stats import norm

from .inventory import Inventory


@dataclass
class Estimate:
    """Parameters and auxiliary outputs of a fitted model.

    Attributes
    ----------
    model_name : str
    uses : Inventory
        Which of the output fields below are populated.
    parameters : ndarray of shape (n_params,) or None
    covariance : ndarray of shape (n_params, n_params) or None
    confidence : ndarray of shape (n_params,) or None
        Confidence with which each parameter differs from zero.
    predicted, residuals : ndarray of shape (n_samples,) or None
    log_likelihood : float or None
        Log-likelihood at the optimum, without any constraint penalty.
    names : list of str or None
    converged : bool
        False when the optimizer stopped without meeting its tolerance;
        the parameters are then the best point found.
    status : str
        Optimizer message.
    n_iterations : int
    trace : list of float
        Penalized log-likelihood at the start and at each accepted iterate.
    covariance_status : str or None
        Why the covariance is missing, when it was requested but failed.
    """
    model_name: str
    uses: Inventory
    parameters: Optional[np.ndarray] = None
    covariance: Optional[np.ndarray] = None
    confidence: Optional[np.ndarray] = None
    predicted: Optional[np.ndarray] = None
    residuals: Optional[np.ndarray] = None
    log_likelihood: Optional[float] = None
    names: Optional[List[str]] = None
    converged: bool = True
    status: str = ''
    n_iterations: int = 0
    trace: List[float] = field(default_factory=list)
    covariance_status: Optional[str] = None

    def __post_init__(self):
        dropped = []
        for name, wanted in self.uses:
            if not wanted:
                setattr(self, name, None)
            elif getattr(self, name) is None:
                dropped.append(name)
        if dropped:
            self.uses = self.uses.without(*dropped)

    @property
    def std_errors(self):
        """Square roots of the covariance diagonal, or None."""
        if self.covariance is None:
            return None
        return np.sqrt(np.diag(self.covariance))

    def conf_int(self, alpha=0.05):
        """Normal-approximation confidence intervals.

        Parameters
        ----------
        alpha : float, default=0.05
            1 - confidence level.

        Returns
        -------
        ndarray of shape (n_params, 2)
            Lower and upper limits per parameter.

        Raises
        ------
        ValueError
            If parameters or covariance are not available.
        """
        if self.parameters is None or self.covariance is None:
            raise ValueError(
                "conf_int needs both parameters and covariance; "
                f"this estimate has {self.covariance_status or 'neither requested'}"
            )
        z = norm.ppf(1 - alpha / 2)
        se = self.std_errors
        return np.column_stack([self.parameters - z * se, self.parameters + z * se])

    def to_frame(self):
        """Parameters, standard errors and confidence as a DataFrame."""
        if self.parameters is None:
            raise ValueError("Estimate has no parameters")

        index = self.names if self.names is not None else \
            [f'beta_{i + 1}' for i in range(len(self.parameters))]
        frame = pd.DataFrame({'parameter': self.parameters}, index=index)
        if self.covariance is not None:
            frame['std_error'] = self.std_errors
        if self.confidence is not None:
            frame['confidence'] = self.confidence
        return frame
