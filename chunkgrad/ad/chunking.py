# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Partitioning of variables into dimension-bounded chunks.

Forward-mode differentiation carries one sensitivity per differentiated scalar
through every operation of the model. Differentiating many scalars at once makes
each operation proportionally more expensive, so the variables are split into
chunks whose total dimension is bounded by a chunk size, and each chunk is
differentiated in its own forward pass.
"""

from __future__ import annotations

from typing import Callable, Hashable, NamedTuple, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from chunkgrad import custom_types


class Chunk(NamedTuple):
    """An ordered group of variables differentiated together in one forward pass.

    :ivar keys: Keys of the variables in the chunk, in store order
    :ivar dim: Total number of scalars across the chunk's variables. This is the
        width of the dual numbers used to differentiate the chunk.
    """

    keys: tuple
    dim: int


def plan_chunks(
    keys: Sequence[Hashable],
    dim_of: Callable[[Hashable], int],
    chunk_size: "custom_types.Integer",
) -> list[Chunk]:
    """Split an ordered sequence of variables into dimension-bounded chunks.

    Variables are accumulated greedily from left to right. A new chunk is started
    whenever adding the next variable would take the running dimension above
    ``chunk_size`` and the current chunk already holds at least one variable.

    :param keys: Variable keys, in the order they should be differentiated
    :type keys: Sequence[Hashable]
    :param dim_of: Function giving the number of scalars held by a variable
    :type dim_of: Callable[[Hashable], int]
    :param chunk_size: Maximum total dimension of a chunk
    :type chunk_size: custom_types.Integer

    :returns: Chunks whose keys, concatenated in order, give back ``keys``. Empty if
        ``keys`` is empty.
    :rtype: list[Chunk]

    :raises ValueError: If ``chunk_size`` is not a positive integer

    Every chunk has dimension at most ``chunk_size``, with one exception: a
    variable whose own dimension exceeds ``chunk_size`` is placed alone in an
    oversized chunk rather than being split.

    Example:
        >>> dims = {"a": 2, "b": 2, "c": 5, "d": 1}
        >>> plan_chunks(["a", "b", "c", "d"], dims.__getitem__, 3)
        [Chunk(keys=('a',), dim=2), Chunk(keys=('b',), dim=2),
         Chunk(keys=('c',), dim=5), Chunk(keys=('d',), dim=1)]
    """
    if chunk_size < 1:
        raise ValueError(f"`chunk_size` must be a positive integer, got {chunk_size}.")

    chunks = []
    current_keys = []
    current_dim = 0
    for key in keys:

        # Close the current chunk if this variable would overflow it
        dim = dim_of(key)
        if current_keys and current_dim + dim > chunk_size:
            chunks.append(Chunk(tuple(current_keys), current_dim))
            current_keys = []
            current_dim = 0

        # Add the variable to the (possibly new) chunk
        current_keys.append(key)
        current_dim += dim

    # Close the final chunk
    if current_keys:
        chunks.append(Chunk(tuple(current_keys), current_dim))

    return chunks
