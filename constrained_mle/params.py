"""
Estimation parameters for the maximum-likelihood driver.

Every default is documented here; nothing is read from the environment.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np


# Integer method codes mapped to scipy.optimize.minimize methods.
METHODS = {
    0: 'Nelder-Mead',
    1: 'CG',
    2: 'BFGS',
    3: 'L-BFGS-B',
}


def get_method(method):
    """Resolve a method code or name to a scipy method name.

    Parameters
    ----------
    method : int or str
        Either an integer code from ``METHODS`` or one of its values
        (case-insensitive).

    Returns
    -------
    str
        The scipy.optimize.minimize method name.

    Raises
    ------
    ValueError
        If the method is unknown.

    Examples
    --------
    >>> get_method(1)
    'CG'
    >>> get_method('bfgs')
    'BFGS'
    """
    if isinstance(method, (int, np.integer)) and not isinstance(method, bool):
        if method in METHODS:
            return METHODS[int(method)]
    elif isinstance(method, str):
        for name in METHODS.values():
            if name.lower() == method.lower():
                return name

    raise ValueError(
        f"Unknown method {method!r}. Use one of {list(METHODS)} or {list(METHODS.values())}."
    )


@dataclass
class EstimationParams:
    """Settings for one maximum-likelihood search.

    Attributes
    ----------
    starting_point : array-like or None
        Initial parameter vector. None starts from a vector of ones whose
        length is the model's resolved parameter count.
    method : int or str
        Optimizer selector, see ``METHODS``. Defaults to conjugate gradient;
        prefer BFGS for single-parameter models started on a bound.
    step_size : float
        Initial simplex edge for Nelder-Mead. The gradient methods take no
        initial step and ignore it.
    tolerance : float
        Convergence tolerance on the gradient norm (or on successive
        objective values for Nelder-Mead).
    max_iter : int
        Iteration bound; reaching it is reported as non-convergence.
    verbose : int
        0=silent, 1=warnings and a fit summary, 2=per-iteration output.
    """
    starting_point: Optional[Union[Sequence[float], np.ndarray]] = None
    method: Union[int, str] = 1
    step_size: float = 1e-2
    tolerance: float = 1e-5
    max_iter: int = 1000
    verbose: int = 0

    def validate(self):
        """Check ranges; return the resolved scipy method name."""
        if not self.step_size > 0:
            raise ValueError(f"step_size must be > 0, got {self.step_size}")
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be > 0, got {self.tolerance}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {self.max_iter}")
        return get_method(self.method)

    def scipy_options(self, method):
        """Translate tolerance/iteration settings into scipy options."""
        options = {'maxiter': self.max_iter}
        if method == 'Nelder-Mead':
            options['xatol'] = self.tolerance
            options['fatol'] = self.tolerance
        elif method == 'L-BFGS-B':
            options['gtol'] = self.tolerance
            options['ftol'] = self.tolerance
        else:
            options['gtol'] = self.tolerance

        if self.verbose >= 2:
            options['disp'] = True

        return options
