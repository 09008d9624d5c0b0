# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Chunked forward-mode automatic differentiation of model log-densities.

The entry point is :py:func:`~chunkgrad.ad.gradient.gradient`, which computes the
gradient of a model's negative log-joint density with respect to a selected
subset of its variables. :py:func:`~chunkgrad.ad.validation.verify_gradient`
checks a gradient map for non-finite entries.

The building blocks of the computation are also exposed:

    - :py:func:`~chunkgrad.ad.chunking.plan_chunks` splits variables into
      dimension-bounded chunks.
    - :py:func:`~chunkgrad.ad.seeding.seed_chunk` seeds a store with dual numbers
      for one chunk.
    - :py:func:`~chunkgrad.ad.extraction.extract_chunk_gradient` reads one chunk's
      gradients back out of the log-density.
"""

from chunkgrad.ad.chunking import Chunk, plan_chunks
from chunkgrad.ad.extraction import extract_chunk_gradient
from chunkgrad.ad.gradient import gradient, gradient_vector
from chunkgrad.ad.seeding import seed_chunk
from chunkgrad.ad.validation import verify_gradient
