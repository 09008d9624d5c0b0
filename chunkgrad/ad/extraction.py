# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Extraction of per-variable gradients from a differentiated log-density."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from chunkgrad import dual

if TYPE_CHECKING:
    from chunkgrad import custom_types
    from chunkgrad.ad import chunking
    from chunkgrad.model import varinfo


def extract_chunk_gradient(
    logp: "custom_types.Scalar",
    chunk: "chunking.Chunk",
    vi: "varinfo.VariableStore",
    grad: "custom_types.GradientMap",
) -> None:
    """Write the gradient of the negative log-density for one chunk's variables.

    The sensitivities of ``logp`` are negated and sliced back into one vector per
    variable, using the same chunk-local positions assigned when the chunk was
    seeded (see :py:func:`~chunkgrad.ad.seeding.seed_chunk`).

    :param logp: Log-density from the forward pass over the seeded store. A real
        value means the log-density does not depend on the chunk's variables and
        gives zero gradients.
    :type logp: custom_types.Scalar
    :param chunk: The chunk that was seeded
    :type chunk: chunking.Chunk
    :param vi: Store the forward pass was run over, used for variable dimensions
    :type vi: varinfo.VariableStore
    :param grad: Gradient map to write into. Modified in place.
    :type grad: custom_types.GradientMap

    :raises DualWidthMismatchError: If ``logp`` is a dual of a width other than
        ``chunk.dim``
    """
    sensitivities = -dual.dualpart(logp, width=chunk.dim)

    position = 0
    for key in chunk.keys:
        assert key not in grad, f"Gradient for {key!r} was already extracted."
        dim = vi.dim(key)
        grad[key] = np.array(sensitivities[position : position + dim], dtype=np.float64)
        position += dim
