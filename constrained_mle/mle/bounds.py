"""
Parameter bound parsing.

Bounds are accepted in several formats and normalized to one
(lower, upper) pair per parameter, which ``penalties.bounds_to_constraints``
turns into an ordered constraint list.
"""

import numpy as np


def normalize_bound(bound):
    """Replace None in a (lower, upper) pair with -inf / +inf.

    Parameters
    ----------
    bound : tuple
        A (lower, upper) pair where None means unbounded on that side.

    Returns
    -------
    tuple of float

    Raises
    ------
    ValueError
        If the pair is not of length two or lower > upper.

    Examples
    --------
    >>> normalize_bound((0, None))
    (0.0, inf)
    """
    if len(bound) != 2:
        raise ValueError(f"A bound must be a (lower, upper) pair, got {bound!r}")

    lower = float(bound[0]) if bound[0] is not None else -np.inf
    upper = float(bound[1]) if bound[1] is not None else np.inf
    if lower > upper:
        raise ValueError(f"Lower bound {lower} exceeds upper bound {upper}")
    return (lower, upper)


def parse_bounds(bounds, n_params, names=None):
    """Parse a bounds specification into one (lower, upper) pair per parameter.

    Supported formats:
    - None: every parameter unbounded
    - Single tuple: same bounds for every parameter
    - List of tuples: one pair per parameter, in order
    - Dict: pairs keyed by parameter name (requires ``names``);
      parameters not mentioned are unbounded

    Parameters
    ----------
    bounds : None, tuple, list or dict
    n_params : int
        Resolved parameter count.
    names : list of str, optional
        Parameter names, required for dict-based bounds.

    Returns
    -------
    list of tuple

    Raises
    ------
    ValueError
        If the format is invalid or does not match ``n_params``.

    Examples
    --------
    >>> parse_bounds((0, None), 2)
    [(0.0, inf), (0.0, inf)]
    >>> parse_bounds({'mu': (0, None)}, 1, names=['mu'])
    [(0.0, inf)]
    """
    if bounds is None:
        return [(-np.inf, np.inf)] * n_params

    if isinstance(bounds, dict):
        if names is None:
            raise ValueError("names must be provided when using dict-based bounds")
        return _parse_dict_bounds(bounds, names)

    # A single pair of scalars applies to every parameter
    if isinstance(bounds, tuple) and len(bounds) == 2:
        if not isinstance(bounds[0], (tuple, list)):
            return [normalize_bound(bounds)] * n_params

    if hasattr(bounds, '__iter__'):
        bounds_list = list(bounds)
        if len(bounds_list) != n_params:
            raise ValueError(
                f"bounds has {len(bounds_list)} elements, "
                f"but model has {n_params} parameters"
            )
        return [normalize_bound(b) for b in bounds_list]

    raise ValueError("bounds must be None, tuple, list of tuples, or dict")


def _parse_dict_bounds(bounds, names):
    """Order dict-based bounds by parameter name."""
    unknown = set(bounds) - set(names)
    if unknown:
        raise ValueError(
            f"bounds contains unknown parameter names: {sorted(unknown)}. "
            f"Valid names are: {list(names)}"
        )
    return [normalize_bound(bounds[name]) if name in bounds else (-np.inf, np.inf)
            for name in names]
