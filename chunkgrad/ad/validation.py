# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Validation of gradient maps."""

from __future__ import annotations

import warnings

from typing import Hashable, Mapping, TYPE_CHECKING

import numpy as np

from chunkgrad.defaults import DEFAULT_VERBOSITY
from chunkgrad.exceptions import NonFiniteGradientWarning

if TYPE_CHECKING:
    from chunkgrad import custom_types


def verify_gradient(
    grad: Mapping[Hashable, "custom_types.ValueLike"],
    verbose: "custom_types.Integer" = DEFAULT_VERBOSITY,
) -> bool:
    """Check that every entry of a gradient map is finite.

    Non-finite gradients are not treated as errors: samplers routinely propose
    points where the density overflows, and whether to retry, reject, or abort is
    left to the caller. When the check fails, a
    :py:class:`~chunkgrad.exceptions.NonFiniteGradientWarning` is issued instead.

    :param grad: Gradient map, from :py:func:`~chunkgrad.ad.gradient.gradient` or
        elsewhere. Not modified.
    :type grad: Mapping[Hashable, custom_types.ValueLike]
    :param verbose: Level of detail of the warning. At 0, the offending keys are
        named. At 1 or above, the full gradient map is included. Defaults to
        ``DEFAULT_VERBOSITY``.
    :type verbose: custom_types.Integer

    :returns: True if every entry is neither NaN nor infinite
    :rtype: bool

    Example:
        >>> verify_gradient({"x": np.array([1.0, 2.0])})
        True
        >>> verify_gradient({"x": np.array([1.0, np.nan])})
        False
    """
    offending = [
        key for key, value in grad.items() if not np.all(np.isfinite(value))
    ]
    if not offending:
        return True

    # Report the failure
    message = f"NaN/Inf gradients for {', '.join(repr(key) for key in offending)}"
    if verbose >= 1:
        message += f"; grad = {dict(grad)}"
    warnings.warn(message, NonFiniteGradientWarning)

    return False
