"""Tests for dual number arithmetic and NumPy interoperability."""

import numpy as np
import pytest

from scipy import special

from chunkgrad.dual import Dual, dualpart, is_dual, realpart
from chunkgrad.exceptions import DualWidthMismatchError


@pytest.fixture
def x():
    return Dual(3.0, [1.0, 0.0])


@pytest.fixture
def y():
    return Dual(2.0, [0.0, 1.0])


class TestConstruction:
    """Construction and value semantics."""

    def test_partials_are_copied(self):
        """Mutating the seed buffer after construction should not affect the dual."""
        buffer = np.zeros(3)
        buffer[1] = 1.0
        seeded = Dual(1.0, buffer)
        buffer[1] = 0.0
        buffer[2] = 1.0

        np.testing.assert_array_equal(seeded.partials, [0.0, 1.0, 0.0])

    def test_partials_are_read_only(self, x):
        with pytest.raises(ValueError):
            x.partials[0] = 5.0

    def test_zero(self):
        zero = Dual.zero(4)
        assert zero.real == 0.0
        assert zero.width == 4
        np.testing.assert_array_equal(zero.partials, np.zeros(4))

    def test_nested_dual_rejected(self, x):
        with pytest.raises(TypeError):
            Dual(x, [1.0, 0.0])

    def test_partials_must_be_1d(self):
        with pytest.raises(ValueError):
            Dual(1.0, np.eye(2))


class TestArithmetic:
    """Forward-mode rules for arithmetic operators."""

    def test_add_sub(self, x, y):
        total = x + y
        assert total.real == 5.0
        np.testing.assert_array_equal(total.partials, [1.0, 1.0])

        diff = x - y
        assert diff.real == 1.0
        np.testing.assert_array_equal(diff.partials, [1.0, -1.0])

    def test_mul(self, x, y):
        product = x * y
        assert product.real == 6.0
        np.testing.assert_array_equal(product.partials, [2.0, 3.0])

    def test_div(self, x, y):
        quotient = x / y
        assert quotient.real == 1.5
        np.testing.assert_allclose(quotient.partials, [0.5, -0.75])

    def test_rdiv(self, x):
        inverse = 1.0 / x
        assert inverse.real == pytest.approx(1 / 3)
        np.testing.assert_allclose(inverse.partials, [-1 / 9, 0.0])

    def test_pow_real_exponent(self, x):
        cube = x**3
        assert cube.real == 27.0
        np.testing.assert_allclose(cube.partials, [27.0, 0.0])

    def test_pow_zero_exponent(self):
        at_zero = Dual(0.0, [1.0]) ** 0
        assert at_zero.real == 1.0
        np.testing.assert_array_equal(at_zero.partials, [0.0])

    def test_pow_dual_exponent(self, x, y):
        power = x**y
        assert power.real == pytest.approx(9.0)
        np.testing.assert_allclose(power.partials, [6.0, 9.0 * np.log(3.0)])

    def test_rpow(self, x):
        power = 2.0**x
        assert power.real == pytest.approx(8.0)
        np.testing.assert_allclose(power.partials, [8.0 * np.log(2.0), 0.0])

    def test_unary(self, x):
        np.testing.assert_array_equal((-x).partials, [-1.0, 0.0])
        assert abs(-x).real == 3.0
        np.testing.assert_array_equal(abs(-x).partials, [1.0, 0.0])

    def test_division_by_zero_is_not_an_error(self):
        """IEEE semantics apply to the real part and the partials."""
        with np.errstate(divide="ignore", invalid="ignore"):
            result = Dual(1.0, [1.0]) / 0.0
        assert np.isinf(result.real)
        assert np.isinf(result.partials[0])


class TestPromotion:
    """Mixing reals and duals."""

    @pytest.mark.parametrize("real", [2.0, 2, np.float64(2.0), np.int64(2)])
    def test_real_and_dual_give_dual(self, x, real):
        for result in (x + real, real + x, x * real, real * x, real - x, x / real):
            assert isinstance(result, Dual)
            assert result.width == 2

    def test_real_and_real_stay_real(self):
        assert not is_dual(2.0 * 3.0)

    def test_width_mismatch(self, x):
        other = Dual(1.0, [1.0, 0.0, 0.0])
        with pytest.raises(DualWidthMismatchError):
            x + other
        with pytest.raises(ValueError):
            x * other


class TestComparison:
    """Comparisons act on the real part."""

    def test_ordering(self, x, y):
        assert x > y
        assert y < x
        assert x >= 3.0
        assert 1.0 < y

    def test_equality(self, x):
        assert x == 3.0
        assert x == Dual(3.0, [0.0, 0.0])
        assert x != 2.0


class TestElementaryFunctions:
    """Derivatives of transcendental functions."""

    @pytest.mark.parametrize(
        "name, derivative",
        [
            ("exp", np.exp),
            ("expm1", np.exp),
            ("log", lambda v: 1 / v),
            ("log1p", lambda v: 1 / (1 + v)),
            ("sqrt", lambda v: 0.5 / np.sqrt(v)),
            ("sin", np.cos),
            ("cos", lambda v: -np.sin(v)),
            ("tanh", lambda v: 1 - np.tanh(v) ** 2),
            ("gammaln", special.digamma),
        ],
    )
    def test_derivative(self, name, derivative):
        value = 0.7
        result = getattr(Dual(value, [1.0, 2.0]), name)()
        np.testing.assert_allclose(
            result.partials, [derivative(value), 2 * derivative(value)]
        )

    def test_numpy_ufunc(self, x):
        result = np.exp(x)
        assert isinstance(result, Dual)
        np.testing.assert_allclose(result.partials, [np.exp(3.0), 0.0])

    def test_numpy_scalar_left_operand(self, x):
        result = np.float64(2.0) * x
        assert isinstance(result, Dual)
        np.testing.assert_array_equal(result.partials, [2.0, 0.0])

    def test_object_arrays(self, x, y):
        """Arrays of duals support elementwise arithmetic and reductions."""
        values = np.array([1.0, 2.0]) * x
        assert values.dtype == object
        np.testing.assert_array_equal(values[1].partials, [2.0, 0.0])

        total = np.sum(np.exp(np.array([x, y], dtype=object)))
        assert isinstance(total, Dual)
        np.testing.assert_allclose(total.partials, [np.exp(3.0), np.exp(2.0)])


class TestRealAndDualParts:
    """Helpers for stripping and reading derivative information."""

    def test_realpart(self, x):
        assert realpart(x) == 3.0
        assert realpart(2) == 2.0
        np.testing.assert_array_equal(
            realpart(np.array([x, 1.5], dtype=object)), [3.0, 1.5]
        )
        np.testing.assert_array_equal(realpart(np.array([1.0, 2.0])), [1.0, 2.0])

    def test_realpart_rejects_other_types(self):
        with pytest.raises(TypeError):
            realpart("3.0")

    def test_dualpart_of_real(self):
        np.testing.assert_array_equal(dualpart(4.0, width=3), np.zeros(3))
        with pytest.raises(ValueError):
            dualpart(4.0)

    def test_dualpart_width_check(self, x):
        np.testing.assert_array_equal(dualpart(x, width=2), [1.0, 0.0])
        with pytest.raises(DualWidthMismatchError):
            dualpart(x, width=3)

    def test_is_dual(self, x):
        assert is_dual(x)
        assert is_dual(np.array([1.0, x], dtype=object))
        assert not is_dual(np.array([1.0, 2.0]))
        assert not is_dual(1.0)
