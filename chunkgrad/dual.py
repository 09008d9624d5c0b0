# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


r"""Dual numbers for forward-mode automatic differentiation.

A dual number pairs a real value with a vector of sensitivities, one per
differentiation direction. Every arithmetic or transcendental operation applied
to a dual number propagates the sensitivities using the chain rule, so that after
evaluating a function :math:`f` on inputs seeded with one-hot sensitivity
vectors, the sensitivities of the output hold the partial derivatives of
:math:`f` with respect to the seeded inputs.

Values mix freely with real numbers following these promotion rules:

    - real :math:`\oplus` real :math:`\rightarrow` real
    - real :math:`\oplus` dual :math:`\rightarrow` dual
    - dual :math:`\oplus` dual :math:`\rightarrow` dual (widths must match)

:py:class:`Dual` instances are immutable. Their sensitivity vector is copied on
construction and marked read-only, so a buffer used to build one dual can be
safely reused to build the next.

Dual numbers interoperate with NumPy: ufuncs such as ``np.exp`` accept them, and
object arrays of duals support elementwise arithmetic and reductions such as
``np.sum``.
"""

from __future__ import annotations

import numbers
import operator

from typing import Optional, TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from scipy import special

from chunkgrad.exceptions import DualWidthMismatchError

if TYPE_CHECKING:
    from chunkgrad import custom_types


def _freeze(array: npt.NDArray) -> npt.NDArray:
    """Mark an array read-only and return it."""
    array.setflags(write=False)
    return array


class Dual:
    """A real value together with a fixed-width vector of sensitivities.

    :param real: The real part of the dual number
    :type real: custom_types.Real
    :param partials: Sensitivity vector. Copied on construction.
    :type partials: npt.ArrayLike

    :ivar real: Real part, stored as a NumPy float so that IEEE semantics
        (e.g., division by zero giving ``inf``) apply.
    :ivar partials: Read-only 1D float64 array of sensitivities.

    :raises TypeError: If ``real`` is itself a dual number
    :raises ValueError: If ``partials`` is not one-dimensional

    Example:
        >>> x = Dual(3.0, [1.0, 0.0])
        >>> y = Dual(2.0, [0.0, 1.0])
        >>> z = x * x + y * y
        >>> z.real, z.partials
        (13.0, array([6., 4.]))
    """

    __slots__ = ("real", "partials")

    def __init__(self, real: "custom_types.Real", partials):

        # Nested duals are not supported
        if isinstance(real, Dual):
            raise TypeError("The real part of a dual number cannot be a dual number.")

        # Copy the partials so that the caller's buffer can be reused
        partials = np.array(partials, dtype=np.float64, copy=True)
        if partials.ndim != 1:
            raise ValueError(
                "The partials of a dual number must be one-dimensional. Got an "
                f"array of shape {partials.shape}."
            )

        self.real = np.float64(real)
        self.partials = _freeze(partials)

    @classmethod
    def _wrap(cls, real, partials: npt.NDArray) -> "Dual":
        """Build a dual from a freshly computed partials array without copying."""
        instance = cls.__new__(cls)
        instance.real = np.float64(real)
        instance.partials = (
            _freeze(partials) if partials.flags.writeable else partials
        )
        return instance

    @classmethod
    def zero(cls, width: "custom_types.Integer") -> "Dual":
        """Build the additive identity for duals of a given width.

        :param width: Number of sensitivities
        :type width: custom_types.Integer

        :returns: A dual with real part 0 and all sensitivities 0
        :rtype: Dual
        """
        return cls._wrap(0.0, np.zeros(width))

    @property
    def width(self) -> int:
        """Number of sensitivities carried by this dual."""
        return int(self.partials.shape[0])

    def _check_width(self, other: "Dual") -> None:
        if self.partials.shape != other.partials.shape:
            raise DualWidthMismatchError(
                f"Cannot combine dual numbers of width {self.width} and {other.width}."
            )

    def _chain(self, value, derivative) -> "Dual":
        """Apply the chain rule for a unary function with the given derivative."""
        return Dual._wrap(value, derivative * self.partials)

    # Arithmetic
    def __add__(self, other):
        if isinstance(other, Dual):
            self._check_width(other)
            return Dual._wrap(self.real + other.real, self.partials + other.partials)
        if isinstance(other, numbers.Real):
            return Dual._wrap(self.real + other, self.partials)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Dual):
            self._check_width(other)
            return Dual._wrap(self.real - other.real, self.partials - other.partials)
        if isinstance(other, numbers.Real):
            return Dual._wrap(self.real - other, self.partials)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Real):
            return Dual._wrap(other - self.real, -self.partials)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Dual):
            self._check_width(other)
            return Dual._wrap(
                self.real * other.real,
                self.partials * other.real + other.partials * self.real,
            )
        if isinstance(other, numbers.Real):
            return Dual._wrap(self.real * other, self.partials * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Dual):
            self._check_width(other)
            return Dual._wrap(
                self.real / other.real,
                (self.partials * other.real - other.partials * self.real)
                / (other.real * other.real),
            )
        if isinstance(other, numbers.Real):
            other = np.float64(other)
            return Dual._wrap(self.real / other, self.partials / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            value = np.float64(other) / self.real
            return self._chain(value, -value / self.real)
        return NotImplemented

    def __pow__(self, other):
        if isinstance(other, Dual):
            self._check_width(other)
            value = np.power(self.real, other.real)
            return Dual._wrap(
                value,
                value
                * (
                    other.partials * np.log(self.real)
                    + other.real * self.partials / self.real
                ),
            )
        if isinstance(other, numbers.Real):

            # x ** 0 is constant. Handling it here avoids 0 * inf at x == 0.
            if other == 0:
                return Dual._wrap(1.0, np.zeros_like(self.partials))
            return self._chain(
                np.power(self.real, other), other * np.power(self.real, other - 1)
            )
        return NotImplemented

    def __rpow__(self, other):
        if isinstance(other, numbers.Real):
            value = np.power(np.float64(other), self.real)
            return self._chain(value, value * np.log(other))
        return NotImplemented

    def __neg__(self):
        return Dual._wrap(-self.real, -self.partials)

    def __pos__(self):
        return self

    def __abs__(self):
        return self if self.real >= 0 else -self

    # Comparisons act on the real part only
    def _compare(self, other, op):
        if isinstance(other, Dual):
            return op(self.real, other.real)
        if isinstance(other, numbers.Real):
            return op(self.real, other)
        return NotImplemented

    def __eq__(self, other):
        return self._compare(other, operator.eq)

    def __ne__(self, other):
        return self._compare(other, operator.ne)

    def __lt__(self, other):
        return self._compare(other, operator.lt)

    def __le__(self, other):
        return self._compare(other, operator.le)

    def __gt__(self, other):
        return self._compare(other, operator.gt)

    def __ge__(self, other):
        return self._compare(other, operator.ge)

    # Elementary functions. The method names match the NumPy ufunc names so that
    # ufuncs applied to object arrays of duals dispatch to them.
    def exp(self) -> "Dual":
        value = np.exp(self.real)
        return self._chain(value, value)

    def expm1(self) -> "Dual":
        return self._chain(np.expm1(self.real), np.exp(self.real))

    def log(self) -> "Dual":
        return self._chain(np.log(self.real), 1.0 / self.real)

    def log1p(self) -> "Dual":
        return self._chain(np.log1p(self.real), 1.0 / (1.0 + self.real))

    def sqrt(self) -> "Dual":
        value = np.sqrt(self.real)
        return self._chain(value, 0.5 / value)

    def sin(self) -> "Dual":
        return self._chain(np.sin(self.real), np.cos(self.real))

    def cos(self) -> "Dual":
        return self._chain(np.cos(self.real), -np.sin(self.real))

    def tanh(self) -> "Dual":
        value = np.tanh(self.real)
        return self._chain(value, 1.0 - value * value)

    def gammaln(self) -> "Dual":
        """Log of the absolute value of the gamma function."""
        return self._chain(special.gammaln(self.real), special.digamma(self.real))

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        """Evaluate NumPy ufuncs on duals through NumPy's object loops.

        Duals are wrapped in 0-dimensional object arrays and any other arrays are
        cast to object dtype, so that NumPy applies the ufunc elementwise using the
        Python operators and the methods defined on this class.
        """
        if method != "__call__" or "out" in kwargs:
            return NotImplemented

        # Prepare the inputs for the object loop
        prepared = []
        for value in inputs:
            if isinstance(value, Dual):
                boxed = np.empty((), dtype=object)
                boxed[()] = value
                prepared.append(boxed)
            elif isinstance(value, np.ndarray):
                prepared.append(value.astype(object))
            elif isinstance(value, np.generic):
                prepared.append(value.item())
            else:
                prepared.append(value)

        # Run and unbox scalar results
        result = ufunc(*prepared, **kwargs)
        if isinstance(result, np.ndarray) and result.ndim == 0:
            return result[()]
        return result

    def __repr__(self):
        partials = ", ".join(f"{p:g}" for p in self.partials)
        return f"Dual({self.real:g}; [{partials}])"


def is_dual(value) -> bool:
    """Check whether a value carries derivative information.

    :param value: A scalar or array
    :returns: True if ``value`` is a dual or an array containing at least one dual
    :rtype: bool
    """
    if isinstance(value, Dual):
        return True
    if isinstance(value, np.ndarray) and value.dtype == object:
        return any(isinstance(element, Dual) for element in value.flat)
    return False


def realpart(value):
    """Strip derivative information from a value.

    This is defined for every value that can be held by a variable store, whether
    it is currently real- or dual-typed.

    :param value: A real scalar, a dual, or an array of either
    :type value: Union[custom_types.Scalar, npt.NDArray]

    :returns: The real part. Scalars give ``np.float64``; arrays give float64 arrays
        of the same shape.
    :rtype: Union[np.float64, npt.NDArray[np.float64]]

    :raises TypeError: If the value is neither real nor dual
    """
    if isinstance(value, Dual):
        return value.real
    if isinstance(value, np.ndarray):
        if value.dtype == object:
            return np.array(
                [realpart(element) for element in value.flat], dtype=np.float64
            ).reshape(value.shape)
        return value.astype(np.float64)
    if isinstance(value, numbers.Real):
        return np.float64(value)
    raise TypeError(f"Cannot take the real part of a value of type {type(value)}.")


def dualpart(
    value, width: Optional["custom_types.Integer"] = None
) -> npt.NDArray[np.float64]:
    """Get the sensitivity vector of a scalar.

    :param value: A real scalar or a dual
    :type value: custom_types.Scalar
    :param width: Expected number of sensitivities. Required when ``value`` is
        real, in which case all sensitivities are zero. When given for a dual, the
        dual's width is checked against it. Defaults to None.
    :type width: Optional[custom_types.Integer]

    :returns: Sensitivity vector (read-only for duals)
    :rtype: npt.NDArray[np.float64]

    :raises DualWidthMismatchError: If ``value`` is a dual of a width other than
        ``width``
    :raises ValueError: If ``value`` is real and ``width`` is not given
    :raises TypeError: If ``value`` is neither real nor dual
    """
    if isinstance(value, Dual):
        if width is not None and value.width != width:
            raise DualWidthMismatchError(
                f"Expected a dual number of width {width}, got width {value.width}."
            )
        return value.partials
    if isinstance(value, numbers.Real):
        if width is None:
            raise ValueError("`width` must be provided for real-valued inputs.")
        return np.zeros(width)
    raise TypeError(f"Cannot take the dual part of a value of type {type(value)}.")
