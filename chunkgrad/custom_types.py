# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Custom type definitions for ChunkGrad.

This module provides type aliases and unions for values used throughout the
ChunkGrad package, including scalar types, variable keys, and gradient maps.

All imports are conditional on TYPE_CHECKING to avoid circular imports while
maintaining proper type hints for development and documentation tools.
"""

from typing import Callable, Hashable, Sequence, TYPE_CHECKING, Union

# Everything in this file is only imported if TYPE_CHECKING is True.
if TYPE_CHECKING:

    import numpy as np
    import numpy.typing as npt
    import torch

    from chunkgrad import dual
    from chunkgrad.model import sampler, varinfo

# Scalar types
Integer = Union[int, "np.integer"]
"""Type alias for integer values.

Accepts both Python's built-in int and NumPy integer types.

:type: Union[int, np.integer]
"""

Float = Union[float, "np.floating"]
"""Type alias for floating-point values.

Accepts both Python's built-in float and NumPy floating-point types.

:type: Union[float, np.floating]
"""

Real = Union[Integer, Float]
"""Type alias for any real scalar.

:type: Union[Integer, Float]
"""

Scalar = Union[Real, "dual.Dual"]
"""Type alias for a scalar that may or may not carry derivative information.

:type: Union[Real, dual.Dual]
"""

# Variable store types
VariableKey = Hashable
"""Type alias for the key identifying one random variable in a variable store.

Any hashable is allowed. Strings such as ``"x"`` or ``"mu[1]"`` are typical.

:type: Hashable
"""

ValueLike = Union[Real, Sequence[Real], "npt.NDArray", "torch.Tensor"]
"""Type alias for anything that can be stored as the value of a random variable.

Scalars are stored as length-one vectors; everything else is flattened.

:type: Union[Real, Sequence[Real], npt.NDArray, torch.Tensor]
"""

GradientMap = dict[Hashable, "npt.NDArray[np.float64]"]
"""Type alias for the result of a gradient computation.

Maps each differentiated variable key to the vector of partial derivatives of
the negative log-joint density with respect to that variable's scalars.

:type: dict[Hashable, npt.NDArray[np.float64]]
"""

ModelFunction = Callable[
    ["varinfo.VariableStore", Union["sampler.Sampler", None]],
    Union["varinfo.VariableStore", None],
]
"""Type alias for the callable wrapped by a model.

The callable reads variable values from the store, accumulates log-density into
it, and optionally returns the store.

:type: Callable[[varinfo.VariableStore, Optional[sampler.Sampler]], Optional[varinfo.VariableStore]]
"""
