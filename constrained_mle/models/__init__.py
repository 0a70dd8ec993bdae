"""
Model abstraction and the bundled models.

``probit`` and ``rank_exponential`` are shared, stateless instances.
"""

from .base import (
    DERIVE_FROM_DATA,
    Model,
    SupportsFdf,
    SupportsGradient,
    SupportsPrediction,
    SupportsRandom,
    check_data,
    likelihood_vector,
    resolve_parameter_count,
)
from .probit import Probit, ProbitContext, probit
from .rank_exponential import RankExponential, positive_mean, rank_exponential

# Registry of bundled models
MODELS = {
    'probit': probit,
    'rank_exponential': rank_exponential,
}


def get_model(model):
    """Get a model by name or pass a Model instance through.

    Parameters
    ----------
    model : str or Model
        'probit', 'rank_exponential', or any Model instance.

    Returns
    -------
    Model

    Raises
    ------
    ValueError
        If ``model`` is a string but not a registered name.
    """
    if isinstance(model, Model):
        return model

    if model not in MODELS:
        raise ValueError(f"Unknown model {model!r}. Use {list(MODELS)} or a Model instance.")

    return MODELS[model]


__all__ = [
    'DERIVE_FROM_DATA',
    'Model',
    'SupportsGradient',
    'SupportsFdf',
    'SupportsRandom',
    'SupportsPrediction',
    'check_data',
    'likelihood_vector',
    'resolve_parameter_count',
    'Probit',
    'ProbitContext',
    'probit',
    'RankExponential',
    'positive_mean',
    'rank_exponential',
    'MODELS',
    'get_model',
]
