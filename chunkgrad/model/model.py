# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Model definition and evaluation.

A ChunkGrad model is a Python callable that reads the current values of its random
variables from a :py:class:`~chunkgrad.model.varinfo.VariableStore` and adds the
log-density of each term of the joint distribution to the store's accumulator:

    >>> from chunkgrad.model import logdensities as ld
    >>> def regression(vi, sampler):
    ...     mu = vi["mu"][0]
    ...     vi.acclogp(ld.normal_logpdf(mu, 0.0, 1.0))
    ...     vi.acclogp(ld.normal_logpdf(observed_y, mu, 0.5))
    >>> model = Model(regression)

Models must be written with operations that accept both real and dual inputs
(Python arithmetic, :py:mod:`chunkgrad.operations`, and
:py:mod:`chunkgrad.model.logdensities`), as they are evaluated once per chunk of
differentiated variables with a different mix of the two.
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from chunkgrad import dual
from chunkgrad.defaults import DEFAULT_CHUNK_SIZE, DEFAULT_PROGRESS_BAR
from chunkgrad.model import varinfo

if TYPE_CHECKING:
    from chunkgrad import custom_types
    from chunkgrad.model import sampler as chunkgrad_sampler


class Model:
    """A probabilistic model defined by a log-density accumulating function.

    :param fn: Function evaluating the model. Called as ``fn(vi, sampler)``; it
        should add log-density terms with ``vi.acclogp`` and may return the store.
    :type fn: custom_types.ModelFunction
    :param name: Name of the model. Defaults to None, in which case the function's
        name is used.
    :type name: Optional[str]

    :ivar fn: The wrapped function
    :ivar name: Name of the model
    """

    def __init__(self, fn: "custom_types.ModelFunction", name: Optional[str] = None):
        if not callable(fn):
            raise TypeError(f"Model function must be callable, got {type(fn)}.")

        self.fn = fn
        self.name = getattr(fn, "__name__", "model") if name is None else name

    def __call__(
        self,
        vi: varinfo.VariableStore,
        sampler: Optional["chunkgrad_sampler.Sampler"] = None,
    ):
        return self.fn(vi, sampler)

    def logjoint(
        self,
        vi: varinfo.VariableStore,
        sampler: Optional["chunkgrad_sampler.Sampler"] = None,
    ) -> float:
        """Evaluate the log-joint density in plain real arithmetic.

        The store is not modified: the model is run on a copy in which every value
        has been reduced to its real part.

        :param vi: Store holding the variable values
        :type vi: varinfo.VariableStore
        :param sampler: Selection context passed through to the model. Defaults
            to None.
        :type sampler: Optional[chunkgrad_sampler.Sampler]

        :returns: Log-joint density
        :rtype: float
        """
        # Strip any derivative information on a private copy
        working = vi.copy()
        for key in working:
            working[key] = working.realpart(key)

        return float(dual.realpart(run_model(self, working, sampler, 0.0).logp))

    def gradient(
        self,
        vi: varinfo.VariableStore,
        sampler: Optional["chunkgrad_sampler.Sampler"] = None,
        *,
        chunk_size: "custom_types.Integer" = DEFAULT_CHUNK_SIZE,
        progress_bar: bool = DEFAULT_PROGRESS_BAR,
    ) -> "custom_types.GradientMap":
        """Compute the gradient of the negative log-joint density.

        This is a convenience wrapper around :py:func:`chunkgrad.ad.gradient.gradient`.
        See there for details on the parameters.
        """
        # pylint: disable=import-outside-toplevel
        from chunkgrad.ad.gradient import gradient

        return gradient(
            vi, self, sampler, chunk_size=chunk_size, progress_bar=progress_bar
        )

    def __repr__(self):
        return f"Model({self.name})"


def run_model(
    model: "custom_types.ModelFunction",
    vi: varinfo.VariableStore,
    sampler: Optional["chunkgrad_sampler.Sampler"],
    logp_zero: "custom_types.Scalar",
) -> varinfo.VariableStore:
    """Evaluate a model over a store, accumulating its log-density.

    The accumulator is first set to ``logp_zero``, which fixes the numeric type of
    the result before any term is added: pass ``Dual.zero(width)`` when the store
    has been seeded with duals of that width and ``0.0`` for plain evaluation.

    Any exception raised by the model propagates unchanged.

    :param model: Model, or any callable with the same signature
    :type model: custom_types.ModelFunction
    :param vi: Store to evaluate the model over. Modified in place.
    :type vi: varinfo.VariableStore
    :param sampler: Selection context passed through to the model
    :type sampler: Optional[chunkgrad_sampler.Sampler]
    :param logp_zero: Initial value of the accumulator
    :type logp_zero: custom_types.Scalar

    :returns: The store holding the model's log-density. This is the store returned
        by the model if it returned one, and ``vi`` otherwise.
    :rtype: varinfo.VariableStore

    :raises TypeError: If the model returns something other than a store or None
    """
    vi.logp = logp_zero
    result = model(vi, sampler)

    # The model may hand back a different store
    if result is None:
        return vi
    if isinstance(result, varinfo.VariableStore):
        return result
    raise TypeError(
        "A model must return a VariableStore or None, got a value of type "
        f"{type(result)}."
    )
