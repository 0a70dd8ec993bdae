"""
Tests for the constraint / penalty transform and bound parsing.
"""
import numpy as np
import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from constrained_mle import ConstraintError, LowerBoundConstraint, UpperBoundConstraint
from constrained_mle.mle import (
    apply_constraints,
    bounds_to_constraints,
    check_start,
    normalize_bound,
    parse_bounds,
)


class TestBoundConstraints:
    """Tests for single lower/upper bound constraints."""

    @pytest.mark.parametrize('beta', [[0.5, 3.0], [1e-6, 1.0], [100.0, 0.1]])
    def test_feasible_is_untouched(self, beta):
        beta = np.array(beta)
        c = LowerBoundConstraint(0.0)
        penalty, substitute = c(beta, None)
        assert penalty == 0
        np.testing.assert_array_equal(substitute, beta)

    @pytest.mark.parametrize('beta', [[-0.5, 3.0], [0.0, 1.0], [-10.0, -2.0]])
    def test_infeasible_penalized_and_recovered(self, beta):
        beta = np.array(beta)
        c = LowerBoundConstraint(0.0, tolerance=1e-3)
        penalty, substitute = c(beta, None)
        assert penalty > 0
        assert np.all(substitute > 0)
        # The substitute is feasible
        assert c(substitute, None)[0] == 0

    def test_penalty_grows_with_distance(self):
        c = LowerBoundConstraint(0.0, indices=0)
        p_near, _ = c(np.array([-0.1]), None)
        p_far, _ = c(np.array([-5.0]), None)
        assert p_far > p_near > 0

    def test_indices_limit_scope(self):
        c = LowerBoundConstraint(0.0, indices=[1], tolerance=1e-3)
        penalty, substitute = c(np.array([-4.0, -1.0]), None)
        assert penalty == pytest.approx(1.001)
        np.testing.assert_allclose(substitute, [-4.0, 1e-3])

    def test_does_not_modify_input(self):
        beta = np.array([-1.0, -2.0])
        LowerBoundConstraint(0.0)(beta, None)
        np.testing.assert_array_equal(beta, [-1.0, -2.0])

    def test_upper_bound(self):
        c = UpperBoundConstraint(1.0, tolerance=0.01)
        assert c(np.array([0.5]), None)[0] == 0
        penalty, substitute = c(np.array([3.0]), None)
        assert penalty == pytest.approx(2.01)
        np.testing.assert_allclose(substitute, [0.99])

    def test_inclusive_bound(self):
        c = LowerBoundConstraint(0.0, tolerance=0.0, strict=False)
        assert c(np.array([0.0]), None)[0] == 0
        penalty, substitute = c(np.array([-2.0]), None)
        assert penalty == 2.0
        np.testing.assert_array_equal(substitute, [0.0])

    def test_strict_bound_needs_tolerance(self):
        with pytest.raises(ValueError):
            LowerBoundConstraint(0.0, tolerance=0.0, strict=True)

    def test_non_finite_limit(self):
        with pytest.raises(ValueError):
            UpperBoundConstraint(np.inf)


class TestApplyConstraints:
    """Tests for ordered composition of constraint lists."""

    def test_no_constraints(self):
        beta = np.array([1.0, -1.0])
        penalty, beta_eval = apply_constraints([], beta, None)
        assert penalty == 0
        assert beta_eval is beta

    def test_feasible_returns_original(self):
        beta = np.array([0.5])
        constraints = [LowerBoundConstraint(0.0), UpperBoundConstraint(1.0)]
        penalty, beta_eval = apply_constraints(constraints, beta, None)
        assert penalty == 0
        assert beta_eval is beta

    def test_penalties_add_and_substitutes_chain(self):
        calls = []

        def first(beta, data):
            calls.append(beta.copy())
            return 1.5, beta + 10.0

        def second(beta, data):
            calls.append(beta.copy())
            return 0.25, beta * 2

        penalty, beta_eval = apply_constraints([first, second], np.array([1.0]), None)
        assert penalty == 1.75
        np.testing.assert_array_equal(calls[1], [11.0])
        np.testing.assert_array_equal(beta_eval, [22.0])

    def test_zero_penalty_ignores_substitute(self):
        """A zero penalty on the boundary keeps the original point."""
        def boundary(beta, data):
            return 0.0, beta + 1.0

        beta = np.array([0.0])
        penalty, beta_eval = apply_constraints([boundary], beta, None)
        assert penalty == 0
        np.testing.assert_array_equal(beta_eval, beta)

    @pytest.mark.parametrize('result', [
        (-1.0, np.array([0.0])),
        (np.nan, np.array([0.0])),
        (1.0, np.array([np.nan])),
        (1.0, np.array([0.0, 1.0])),
    ])
    def test_invalid_constraint_output(self, result):
        def bad(beta, data):
            return result

        with pytest.raises(ConstraintError):
            apply_constraints([bad], np.array([-1.0]), None)

    def test_check_start_recovers(self):
        check_start([LowerBoundConstraint(0.0)], np.array([-3.0]), None)

    def test_check_start_rejects_unrecoverable(self):
        def stuck(beta, data):
            # Claims a substitute that is still infeasible
            return 1.0, beta

        with pytest.raises(ConstraintError):
            check_start([stuck], np.array([-1.0]), None)


class TestBounds:
    """Tests for bound parsing and conversion to constraints."""

    def test_normalize_bound(self):
        assert normalize_bound((0, None)) == (0.0, np.inf)
        assert normalize_bound((None, 1)) == (-np.inf, 1.0)

    def test_normalize_bound_rejects_reversed(self):
        with pytest.raises(ValueError):
            normalize_bound((1, 0))

    def test_parse_none(self):
        assert parse_bounds(None, 2) == [(-np.inf, np.inf)] * 2

    def test_parse_single_tuple(self):
        assert parse_bounds((-1, 0), 3) == [(-1.0, 0.0)] * 3

    def test_parse_list(self):
        assert parse_bounds([(0, None), (None, 2)], 2) == [(0.0, np.inf), (-np.inf, 2.0)]

    def test_parse_list_wrong_length(self):
        with pytest.raises(ValueError):
            parse_bounds([(0, 1)], 2)

    def test_parse_dict(self):
        parsed = parse_bounds({'b': (0, None)}, 2, names=['a', 'b'])
        assert parsed == [(-np.inf, np.inf), (0.0, np.inf)]

    def test_parse_dict_needs_names(self):
        with pytest.raises(ValueError):
            parse_bounds({'b': (0, None)}, 2)

    def test_parse_dict_unknown_name(self):
        with pytest.raises(ValueError):
            parse_bounds({'c': (0, None)}, 2, names=['a', 'b'])

    def test_bounds_to_constraints(self):
        constraints = bounds_to_constraints([(0, 1), (None, None), (None, 5)], 3)
        assert [(c.side, int(c.indices[0])) for c in constraints] == \
            [('lower', 0), ('upper', 0), ('upper', 2)]

        penalty, beta_eval = apply_constraints(constraints, np.array([-1.0, 7.0, 6.0]), None)
        assert penalty == pytest.approx(2.0)
        np.testing.assert_allclose(beta_eval, [0.0, 7.0, 5.0])


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
