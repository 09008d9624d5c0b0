# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Custom exception and warning classes for the ChunkGrad package.

This module defines a hierarchy of custom exceptions used throughout the
ChunkGrad package to provide clear error reporting and exception handling.
All custom exceptions inherit from the base ChunkGradError class to allow
for unified exception handling when needed. Where an error is also a more
familiar built-in error (e.g., a missing variable is also a ``KeyError``), the
custom class inherits from both so that either can be caught.

Diagnostics that should not interrupt a computation (e.g., non-finite gradients)
are reported as warnings deriving from ChunkGradWarning.
"""


class ChunkGradError(Exception):
    """Base class for all exceptions in the ChunkGrad package.

    This exception serves as the root of the ChunkGrad exception hierarchy,
    allowing users to catch all package-specific exceptions with a single
    except clause.

    :param message: Error message describing the exception
    :type message: str

    Example:
        >>> try:
        ...     grad = chunkgrad.gradient(vi, model)
        ... except ChunkGradError as e:
        ...     print(f"ChunkGrad error occurred: {e}")
    """


class DualWidthMismatchError(ChunkGradError, ValueError):
    """Raised when dual numbers of different sensitivity widths are combined.

    Dual numbers seeded for one chunk all share the same width. Combining two
    duals of different widths means values from two different differentiation
    passes have been mixed, which is never meaningful.

    :param message: Error message naming the two widths
    :type message: str
    """


class UnknownVariableError(ChunkGradError, KeyError):
    """Raised when a variable key is not present in a variable store.

    :param message: Error message naming the missing key
    :type message: str
    """


class DuplicateVariableError(ChunkGradError, ValueError):
    """Raised when a variable key is pushed to a variable store twice.

    :param message: Error message naming the duplicated key
    :type message: str
    """


class ChunkGradWarning(UserWarning):
    """Base class for all warnings issued by the ChunkGrad package."""


class NonFiniteGradientWarning(ChunkGradWarning):
    """Issued when a gradient map contains NaN or infinite entries.

    Non-finite gradients are an expected outcome for some proposals made by a
    sampler (e.g., overflow in the tails of a density), so they are reported
    rather than raised. The caller decides whether to retry, reject, or abort.
    """
