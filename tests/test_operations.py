"""Tests for elementwise operations over real and dual values."""

import numpy as np
import pytest

from chunkgrad import operations as ops
from chunkgrad.dual import Dual


class TestDispatch:
    """Operations return results matching the input representation."""

    @pytest.mark.parametrize(
        "func", [ops.exp, ops.expm1, ops.log, ops.log1p, ops.sqrt, ops.sin,
                 ops.cos, ops.tanh, ops.gammaln, ops.sigmoid, ops.log_sigmoid]
    )
    def test_real_matches_dual_real_part(self, func):
        value = 0.8
        real_result = func(value)
        dual_result = func(Dual(value, [1.0]))

        assert not isinstance(real_result, Dual)
        assert isinstance(dual_result, Dual)
        assert dual_result.real == pytest.approx(real_result)

    @pytest.mark.parametrize(
        "func", [ops.exp, ops.expm1, ops.log, ops.log1p, ops.sqrt, ops.sin,
                 ops.cos, ops.tanh, ops.gammaln, ops.sigmoid, ops.log_sigmoid]
    )
    def test_derivative_matches_finite_difference(self, func):
        value, step = 0.8, 1e-6
        expected = (func(value + step) - func(value - step)) / (2 * step)
        result = func(Dual(value, [1.0]))
        assert result.partials[0] == pytest.approx(expected, rel=1e-6)

    def test_float_array(self):
        result = ops.exp(np.array([0.0, 1.0]))
        assert result.dtype == np.float64
        np.testing.assert_allclose(result, [1.0, np.e])

    def test_mixed_object_array(self):
        """Object arrays holding both reals and duals are handled elementwise."""
        values = np.empty(2, dtype=object)
        values[0] = 2.0
        values[1] = Dual(3.0, [1.0])

        result = ops.log(values)
        assert result.dtype == object
        assert result[0] == pytest.approx(np.log(2.0))
        assert result[1].partials[0] == pytest.approx(1 / 3)

    def test_object_array_without_duals_becomes_float(self):
        values = np.array([1.0, 2.0], dtype=object)
        assert ops.sqrt(values).dtype == np.float64


class TestSigmoid:
    """Numerically stable sigmoid and log-sigmoid."""

    def test_extreme_inputs_are_finite(self):
        values = np.array([-1000.0, 0.0, 1000.0])
        np.testing.assert_allclose(ops.sigmoid(values), [0.0, 0.5, 1.0])
        assert np.all(np.isfinite(ops.log_sigmoid(values)))

    def test_sigmoid_derivative(self):
        result = ops.sigmoid(Dual(0.0, [1.0]))
        assert result.real == 0.5
        assert result.partials[0] == pytest.approx(0.25)

    @pytest.mark.parametrize("value", [-30.0, -1.0, 0.0, 2.0, 30.0])
    def test_log_sigmoid_derivative(self, value):
        """d/dx log(sigmoid(x)) = 1 - sigmoid(x)."""
        result = ops.log_sigmoid(Dual(value, [1.0]))
        assert result.partials[0] == pytest.approx(1 - ops.sigmoid(value))
