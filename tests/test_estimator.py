"""
Tests for the scikit-learn style MaximumLikelihoodEstimator.
"""
import numpy as np
import pandas as pd
import pytest
from sklearn.base import clone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from constrained_mle import (
    Inventory,
    MaximumLikelihoodEstimator,
    MLEstimator,
    ShapeError,
    probit,
    rank_exponential,
)

from conftest import make_probit_data


class TestMaximumLikelihoodEstimator:
    """Tests for fitting through the estimator API."""

    @pytest.fixture
    def covariates_and_outcome(self):
        data = make_probit_data(n=800, beta=(0.3, -0.8))
        return data[:, 1:], data[:, 0]

    def test_fit_probit(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        model = MaximumLikelihoodEstimator(model='probit', tol=1e-6)
        model.fit(X, y)

        direct = probit.estimate(np.column_stack([y, X]),
                                 params=model._estimation_params())
        np.testing.assert_array_equal(model.params_, direct.parameters)
        assert model.log_likelihood_ == direct.log_likelihood
        assert model.covariance_.shape == (2, 2)
        assert model.n_features_in_ == 3
        assert model.fit_duration_seconds_ >= 0
        assert set(model.named_params_) == {'beta_1', 'beta_2'}

    def test_fit_stacked_data(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        a = MaximumLikelihoodEstimator().fit(X, y)
        b = MaximumLikelihoodEstimator().fit(np.column_stack([y, X]))
        np.testing.assert_array_equal(a.params_, b.params_)

    def test_dataframe_names(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        X = pd.DataFrame(X, columns=['const', 'price'])
        y = pd.Series(y, name='bought')
        model = MaximumLikelihoodEstimator().fit(X, y)
        assert list(model.named_params_) == ['const', 'price']
        assert model.estimate_.names == ['const', 'price']

    def test_bounds(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        # True slope is -0.8; forbid negative slopes
        model = MaximumLikelihoodEstimator(bounds=[(None, None), (0, None)])
        model.fit(X, y)
        assert model.params_[1] >= 0
        assert model.params_[1] == pytest.approx(0, abs=1e-2)
        assert np.isfinite(model.log_likelihood_)

    def test_named_bounds(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        X = pd.DataFrame(X, columns=['const', 'price'])
        model = MaximumLikelihoodEstimator(bounds={'price': (None, -1.0)})
        model.fit(X, y)
        assert model.named_params_['price'] <= -1.0

    def test_want_filters_outputs(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        model = MaximumLikelihoodEstimator(want=Inventory(covariance=False, confidence=False))
        model.fit(X, y)
        assert model.covariance_ is None
        assert model.estimate_.confidence is None
        assert model.params_ is not None

    def test_score_is_log_likelihood(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        model = MaximumLikelihoodEstimator().fit(X, y)
        assert model.score(X, y) == pytest.approx(model.log_likelihood_)

    def test_score_shape_mismatch(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        model = MaximumLikelihoodEstimator().fit(X, y)
        with pytest.raises(ValueError):
            model.score(np.column_stack([X, X]), y)

    def test_rank_exponential_closed_form(self, rank_data):
        model = MaximumLikelihoodEstimator(model='rank_exponential').fit(rank_data)
        assert model.params_[0] == pytest.approx(9 / 17)
        assert model.converged_
        assert model.estimate_.status == 'closed form'

    def test_rank_exponential_with_start_uses_driver(self, rank_data):
        model = MaximumLikelihoodEstimator(model=rank_exponential, x0=[2.0], tol=1e-6)
        model.fit(rank_data)
        assert model.params_[0] == pytest.approx(9 / 17, abs=1e-4)
        assert model.estimate_.status != 'closed form'

    def test_sample(self, rank_data):
        model = MaximumLikelihoodEstimator(model='rank_exponential').fit(rank_data)
        draws = model.sample(1000, random_state=0)
        assert draws.shape == (1000,)
        np.testing.assert_array_equal(draws, model.sample(1000, random_state=0))

    def test_sample_without_rng(self, covariates_and_outcome):
        X, y = covariates_and_outcome
        model = MaximumLikelihoodEstimator().fit(X, y)
        with pytest.raises(NotImplementedError):
            model.sample(5)

    def test_shape_error(self):
        with pytest.raises(ShapeError):
            MaximumLikelihoodEstimator().fit(np.array([[1.0], [0.0]]))

    def test_unfitted(self, covariates_and_outcome):
        from sklearn.exceptions import NotFittedError
        X, y = covariates_and_outcome
        with pytest.raises(NotFittedError):
            MaximumLikelihoodEstimator().score(X, y)


class TestSklearnCompatibility:
    """Test sklearn API compatibility."""

    def test_get_set_params(self):
        model = MaximumLikelihoodEstimator(method=2, tol=1e-4)

        params = model.get_params()
        assert params['method'] == 2
        assert params['tol'] == 1e-4

        model.set_params(max_iter=50)
        assert model.max_iter == 50

    def test_clone(self):
        model = MaximumLikelihoodEstimator(bounds=[(0, None)], want=Inventory(names=False))
        cloned = clone(model)

        assert cloned.bounds == model.bounds
        assert cloned.want == model.want
        assert not hasattr(cloned, 'params_')

    def test_alias(self):
        assert MLEstimator is MaximumLikelihoodEstimator


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
