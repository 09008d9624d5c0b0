# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Elementwise mathematical operations over real and dual values.

Models evaluated by ChunkGrad are run once per chunk with a different mix of
real and dual inputs: variables in the current chunk hold dual numbers while all
others hold plain reals. The functions in this module accept any of these
representations and return a result of the matching type, so that a model can be
written once and evaluated under every seeding:

    - Python and NumPy real scalars give NumPy real scalars
    - :py:class:`~chunkgrad.dual.Dual` scalars give duals
    - float arrays give float arrays
    - object arrays holding duals (and possibly reals) give object arrays

Plain arithmetic (``+``, ``-``, ``*``, ``/``, ``**``) needs no special handling
and can be written with the usual Python operators.

Example:
    >>> from chunkgrad import operations as ops
    >>> def model(vi, sampler):
    ...     x = vi["x"]
    ...     vi.acclogp(-ops.log1p(x**2))
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from scipy import special

from chunkgrad import dual, utils


def _dispatch(method_name: str, real_func: Callable, value):
    """Route a value to the dual method or the real-valued function."""
    if isinstance(value, dual.Dual):
        return getattr(value, method_name)()
    if isinstance(value, np.ndarray) and value.dtype == object:
        return utils.map_elementwise(
            lambda element: _dispatch(method_name, real_func, element), value
        )
    return real_func(value)


def exp(value):
    """Elementwise exponential."""
    return _dispatch("exp", np.exp, value)


def expm1(value):
    """Elementwise ``exp(x) - 1``, accurate for small ``x``."""
    return _dispatch("expm1", np.expm1, value)


def log(value):
    """Elementwise natural logarithm."""
    return _dispatch("log", np.log, value)


def log1p(value):
    """Elementwise ``log(1 + x)``, accurate for small ``x``."""
    return _dispatch("log1p", np.log1p, value)


def sqrt(value):
    """Elementwise square root."""
    return _dispatch("sqrt", np.sqrt, value)


def sin(value):
    return _dispatch("sin", np.sin, value)


def cos(value):
    return _dispatch("cos", np.cos, value)


def tanh(value):
    return _dispatch("tanh", np.tanh, value)


def gammaln(value):
    """Elementwise log of the absolute value of the gamma function.

    Derivatives are given by the digamma function.
    """
    return _dispatch("gammaln", special.gammaln, value)


def sigmoid(value):
    """Elementwise logistic sigmoid, computed in a numerically stable way.

    :param value: Real or dual scalar or array
    :returns: Sigmoid of the input, of the same representation
    """
    if isinstance(value, dual.Dual):
        sigma = utils.stable_sigmoid(value.real)
        return dual.Dual(sigma, sigma * (1.0 - sigma) * value.partials)
    if isinstance(value, np.ndarray) and value.dtype == object:
        return utils.map_elementwise(sigmoid, value)
    return utils.stable_sigmoid(value)


def log_sigmoid(value):
    """Elementwise ``log(sigmoid(x))``.

    Computed as ``-log1p(exp(-x))`` for non-negative inputs and
    ``x - log1p(exp(x))`` for negative inputs to avoid overflow.
    """
    if isinstance(value, dual.Dual):
        if value.real >= 0:
            return -log1p(exp(-value))
        return value - log1p(exp(value))
    if isinstance(value, np.ndarray) and value.dtype == object:
        return utils.map_elementwise(log_sigmoid, value)
    value = np.asarray(value, dtype=np.float64)
    result = np.where(
        value >= 0,
        -np.log1p(np.exp(-np.abs(value))),
        value - np.log1p(np.exp(-np.abs(value))),
    )
    if result.ndim == 0:
        return result[()]
    return result
