# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Model definition, variable storage, and sampler context for ChunkGrad.

This submodule provides the collaborators that the differentiation engine in
:py:mod:`chunkgrad.ad` operates on:

    - :py:class:`~chunkgrad.model.varinfo.VariableStore`, which holds the current
      values of a model's random variables along with their group identifiers,
      symbols, and the log-density accumulator.
    - :py:class:`~chunkgrad.model.sampler.Sampler`, which selects the subset of
      variables a sampler is responsible for.
    - :py:class:`~chunkgrad.model.model.Model` and
      :py:func:`~chunkgrad.model.model.run_model`, which wrap and evaluate a
      log-density accumulating function.
    - :py:mod:`~chunkgrad.model.logdensities`, which provides dual-compatible
      log-densities of common distributions for writing models.

Example:
    >>> from chunkgrad.model import Model, Sampler, VariableStore
    >>> vi = VariableStore()
    >>> vi.push("x", 3.0)
    >>> model = Model(lambda vi, spl: vi.acclogp(-vi["x"] ** 2))
    >>> model.logjoint(vi)
    -9.0
"""

from chunkgrad.model.model import Model, run_model
from chunkgrad.model.sampler import Sampler, select_keys
from chunkgrad.model.varinfo import VariableStore
