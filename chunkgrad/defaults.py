# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Default configuration values for ChunkGrad package components.

This module centralizes default values used across the ChunkGrad package. The
values are used as keyword defaults by the functions that need them, so they
can be overridden on a per-call basis.

The module is organized into logical groups covering:
    - Forward-mode differentiation settings
    - Diagnostic reporting settings

Default values cannot be programmatically altered. This documentation serves as a
reference for users and developers to understand the standard configuration used
by ChunkGrad.
"""

# Differentiation defaults
DEFAULT_CHUNK_SIZE: int = 10
"""Default maximum number of scalar dimensions differentiated per forward pass.

Each forward pass carries dual numbers whose sensitivity vectors are as wide as
the chunk being differentiated. Larger chunks mean fewer model evaluations but
wider (and more expensive) dual arithmetic.

:type: int
"""

DEFAULT_PROGRESS_BAR: bool = False
"""Default setting for displaying a progress bar over chunks.

:type: bool
"""

# Diagnostic defaults
DEFAULT_VERBOSITY: int = 0
"""Default level of detail for diagnostic warnings.

At level 0, warnings name the offending variables only. At level 1 and above,
warnings also include the full offending values.

:type: int
"""
