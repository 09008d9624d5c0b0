# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Chunked forward-mode gradients of a model's log-joint density.

:py:func:`gradient` computes the gradient of the negative log-joint density of a
model with respect to a selected subset of its random variables. The selected
variables are split into chunks of bounded total dimension
(:py:mod:`~chunkgrad.ad.chunking`), and for each chunk in turn:

    1. the working store is seeded with one-hot dual numbers for the chunk's
       scalars and plain reals for everything else
       (:py:mod:`~chunkgrad.ad.seeding`),
    2. the model is evaluated over the seeded store, with the log-density
       accumulator initialized to a dual zero of the chunk's width
       (:py:func:`~chunkgrad.model.model.run_model`), and
    3. the sensitivities of the resulting log-density are negated and written to
       the gradient map (:py:mod:`~chunkgrad.ad.extraction`).

Chunks are processed one at a time over a single private copy of the store, so
peak memory is one store plus duals of at most ``chunk_size`` sensitivities
(or, for a single oversized variable, that variable's dimension).
"""

from __future__ import annotations

from typing import Hashable, Optional, Sequence, TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from tqdm import tqdm

from chunkgrad.ad.chunking import plan_chunks
from chunkgrad.ad.extraction import extract_chunk_gradient
from chunkgrad.ad.seeding import seed_chunk
from chunkgrad.defaults import DEFAULT_CHUNK_SIZE, DEFAULT_PROGRESS_BAR
from chunkgrad.dual import Dual
from chunkgrad.model.model import run_model
from chunkgrad.model.sampler import select_keys
from chunkgrad.model.varinfo import VariableStore

if TYPE_CHECKING:
    from chunkgrad import custom_types
    from chunkgrad.model import sampler as chunkgrad_sampler


def gradient(
    vi: VariableStore,
    model: "custom_types.ModelFunction",
    sampler: Optional["chunkgrad_sampler.Sampler"] = None,
    *,
    chunk_size: "custom_types.Integer" = DEFAULT_CHUNK_SIZE,
    progress_bar: bool = DEFAULT_PROGRESS_BAR,
) -> "custom_types.GradientMap":
    """Compute the gradient of a model's negative log-joint density.

    :param vi: Store holding the point at which to differentiate. Not modified;
        all work is done on a private copy.
    :type vi: VariableStore
    :param model: Model to differentiate, or any callable with the same signature
    :type model: custom_types.ModelFunction
    :param sampler: Selection context. When given, only the variables it selects
        are differentiated (see :py:func:`~chunkgrad.model.sampler.select_keys`),
        and it is passed through to the model. Defaults to None, in which case
        every variable is differentiated.
    :type sampler: Optional[chunkgrad_sampler.Sampler]
    :param chunk_size: Maximum number of scalars differentiated per forward pass.
        Defaults to ``DEFAULT_CHUNK_SIZE``.
    :type chunk_size: custom_types.Integer
    :param progress_bar: Whether to display a progress bar over chunks. Defaults to
        ``DEFAULT_PROGRESS_BAR``.
    :type progress_bar: bool

    :returns: Map from each selected variable key to the vector of partial
        derivatives of the negative log-joint density with respect to that
        variable's scalars. Empty if no variable is selected.
    :rtype: custom_types.GradientMap

    :raises ValueError: If ``chunk_size`` is not a positive integer

    Any exception raised while evaluating the model propagates unchanged, and no
    partial result is returned.

    Example:
        >>> vi = VariableStore()
        >>> vi.push("x", 3.0)
        >>> vi.push("y", 2.0)
        >>> def model(vi, sampler):
        ...     vi.acclogp(-(vi["x"][0] ** 2 + vi["y"][0] ** 2))
        >>> gradient(vi, model, chunk_size=1)
        {'x': array([6.]), 'y': array([4.])}
    """
    # Initialisation
    working = vi.copy()
    grad = {}

    # Split the selected variables into chunks
    keys = select_keys(working, sampler)
    chunks = plan_chunks(keys, working.dim, chunk_size)

    # Chunk-wise forward differentiation
    with tqdm(
        total=len(chunks), desc="Chunks", disable=not progress_bar, leave=False
    ) as pbar:
        for chunk in chunks:
            seed_chunk(working, keys, chunk)
            working = run_model(model, working, sampler, Dual.zero(chunk.dim))
            extract_chunk_gradient(working.logp, chunk, working, grad)

            pbar.update(1)
            pbar.set_postfix({"width": chunk.dim})

    return grad


def gradient_vector(
    grad: "custom_types.GradientMap", keys: Sequence[Hashable]
) -> npt.NDArray[np.float64]:
    """Flatten a gradient map into a single vector.

    :param grad: Gradient map
    :type grad: custom_types.GradientMap
    :param keys: Keys to include, in the order their entries should appear
    :type keys: Sequence[Hashable]

    :returns: Concatenation of ``grad[key]`` over ``keys``
    :rtype: npt.NDArray[np.float64]

    :raises KeyError: If a key has no entry in the gradient map

    Example:
        >>> gradient_vector({"x": np.array([6.0]), "y": np.array([4.0])}, ["y", "x"])
        array([4., 6.])
    """
    if len(keys) == 0:
        return np.zeros(0)
    return np.concatenate([np.asarray(grad[key], dtype=np.float64) for key in keys])
