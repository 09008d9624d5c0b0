# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Utility functions for the ChunkGrad package.

This module provides various utility functions that support the core
functionality of ChunkGrad, including:

    - Conversion of user-provided values (scalars, sequences, NumPy arrays, and
      PyTorch tensors) to flat float vectors
    - Elementwise mapping over arrays that may hold dual numbers
    - Numerically stable scalar functions

Users will not typically need to interact with this module directly--it is designed
to be used internally by ChunkGrad.
"""

from __future__ import annotations

from typing import Any, Callable, TYPE_CHECKING

import numpy as np
import numpy.typing as npt
import torch

from chunkgrad import dual

if TYPE_CHECKING:
    from chunkgrad import custom_types


def to_vector(value: "custom_types.ValueLike") -> npt.NDArray[np.float64]:
    """Convert a user-provided value to a flat float64 vector.

    :param value: Scalar, sequence, NumPy array, or PyTorch tensor of real values
    :type value: custom_types.ValueLike

    :returns: A new 1D float64 array. Scalars become length-one vectors.
    :rtype: npt.NDArray[np.float64]

    :raises TypeError: If the value holds dual numbers

    Example:
        >>> to_vector(3.0)
        array([3.])
        >>> to_vector(torch.ones(2, 2))
        array([1., 1., 1., 1.])
    """
    # Tensors are detached and moved to the cpu first
    if isinstance(value, torch.Tensor):
        value = value.detach().cpu().numpy()

    # Values must be plain reals
    if dual.is_dual(value) or (
        isinstance(value, (list, tuple))
        and any(isinstance(element, dual.Dual) for element in value)
    ):
        raise TypeError("Variable values must be real; got dual numbers.")

    return np.array(value, dtype=np.float64, copy=True).ravel()


def map_elementwise(func: Callable[[Any], Any], array: npt.NDArray) -> npt.NDArray:
    """Apply a scalar function to every element of an array.

    The result is a float64 array if no element of the output is a dual number
    and an object array of the same shape otherwise.

    :param func: Function to apply to each element
    :type func: Callable[[Any], Any]
    :param array: Input array of reals and/or duals
    :type array: npt.NDArray

    :returns: Array of outputs with the same shape as the input
    :rtype: npt.NDArray
    """
    results = [func(element) for element in array.flat]

    # Drop back to a float array if nothing carries derivative information
    if not any(isinstance(result, dual.Dual) for result in results):
        return np.array(results, dtype=np.float64).reshape(array.shape)

    out = np.empty(array.shape, dtype=object)
    for index, result in zip(np.ndindex(array.shape), results):
        out[index] = result
    return out


def stable_sigmoid(exponent):
    r"""Compute the sigmoid function in a numerically stable way.

    This function avoids overflow by using different computational approaches for
    positive and negative inputs.

    :param exponent: Input values for sigmoid computation
    :type exponent: Union[custom_types.Real, npt.NDArray[np.floating]]

    :returns: Sigmoid values with the same shape as input. Scalars give
        ``np.float64``.
    :rtype: Union[np.float64, npt.NDArray[np.float64]]

    The function uses the identity:

    .. math::

        \sigma(x) =
        \begin{cases}
            \frac{1}{1 + e^{-x}} & \text{if } x \geq 0 \\
            \frac{e^{x}}{1 + e^{x}} & \text{if } x < 0
        \end{cases}
    """
    exponent = np.asarray(exponent, dtype=np.float64)

    # Empty array to store the results
    sigma_exponent = np.full_like(exponent, np.nan)

    # Different approach for positive and negative values
    mask = exponent >= 0
    sigma_exponent[mask] = 1 / (1 + np.exp(-exponent[mask]))
    neg_calc = np.exp(exponent[~mask])
    sigma_exponent[~mask] = neg_calc / (1 + neg_calc)

    # Unbox scalars
    if sigma_exponent.ndim == 0:
        return sigma_exponent[()]
    return sigma_exponent
