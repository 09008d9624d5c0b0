# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Seeding of a variable store with dual numbers for one chunk."""

from __future__ import annotations

from typing import Hashable, Sequence, TYPE_CHECKING

import numpy as np

from chunkgrad.dual import Dual

if TYPE_CHECKING:
    from chunkgrad.ad import chunking
    from chunkgrad.model import varinfo


def seed_chunk(
    vi: "varinfo.VariableStore",
    keys: Sequence[Hashable],
    chunk: "chunking.Chunk",
) -> None:
    """Prepare a store for the forward pass differentiating one chunk.

    Every variable in ``keys`` is rewritten in place:

        - Variables in the chunk have each scalar replaced by a dual number with
          the same real part and a one-hot sensitivity vector of width
          ``chunk.dim``. The hot position is the scalar's index within the chunk,
          counting from 0 in key order and then in order within each variable.
        - Variables outside the chunk have each scalar replaced by its real part,
          so they carry no derivative information during this pass.

    :param vi: Working store. Modified in place.
    :type vi: varinfo.VariableStore
    :param keys: All selected variable keys, in store order. The chunk's keys must
        appear in this sequence in the same relative order.
    :type keys: Sequence[Hashable]
    :param chunk: The chunk being differentiated
    :type chunk: chunking.Chunk
    """
    in_chunk = set(chunk.keys)

    # One buffer is reused for every seed. Dual copies it on construction.
    onehot = np.zeros(chunk.dim)
    position = 0

    for key in keys:
        reals = vi.realpart(key)
        if key in in_chunk:
            for index, real in enumerate(reals):
                onehot[position] = 1.0
                vi.set_value(key, index, Dual(real, onehot))
                onehot[position] = 0.0
                position += 1
        else:
            for index, real in enumerate(reals):
                vi.set_value(key, index, float(real))

    assert position == chunk.dim, "Chunk dimension does not match its variables."
