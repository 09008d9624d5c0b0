# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
ChunkGrad: Chunked forward-mode gradients of probabilistic model log-densities.

ChunkGrad computes the gradient of a probabilistic model's log-joint density with
respect to a selected subset of its random variables using forward-mode automatic
differentiation with dual numbers. Variables are differentiated in chunks of
bounded total dimension, so the cost of each forward pass is bounded regardless of
how many variables the model has.

Key Features:
    - Dual numbers that interoperate with Python arithmetic and NumPy ufuncs
    - Dimension-bounded chunking with reproducible, sequential evaluation
    - Variable selection by sampler group and symbol for compositional inference
    - Dual-compatible log-densities of common distributions
    - Runtime type checking of the public API

Global Variables:
    __version__: Package version string

Example:
    >>> import chunkgrad as cg
    >>> vi = cg.VariableStore()
    >>> vi.push("x", 3.0)
    >>> vi.push("y", 2.0)
    >>> model = cg.Model(lambda vi, spl: vi.acclogp(-(vi["x"] ** 2 + vi["y"] ** 2)))
    >>> grad = cg.gradient(vi, model, chunk_size=1)
    >>> cg.verify_gradient(grad)
    True
"""

from typeguard import install_import_hook

# Define the version
__version__ = "0.1.0"

# Set up type checking
install_import_hook("chunkgrad")

# Import objects that should be easily accessible from the package level
# pylint: disable=wrong-import-position
from chunkgrad import operations
from chunkgrad.ad import gradient, gradient_vector, verify_gradient
from chunkgrad.dual import Dual, dualpart, realpart
from chunkgrad.model import Model, Sampler, VariableStore
from chunkgrad.model import logdensities
