# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Storage of random variable values and the log-density accumulator.

The :py:class:`VariableStore` holds the current value of every random variable in
a model, keyed by a hashable variable key. Each variable is a vector of scalars
(scalar variables are vectors of length one) and carries two tags:

    - a **symbol**, the name of the variable in the model source (e.g., ``"mu"``
      for the key ``"mu[2]"``), and
    - a **group identifier**, which partitions variables among samplers operating
      on disjoint subsets of a model. Group ``0`` marks ungrouped (global)
      variables.

The store also holds a single log-density accumulator, ``logp``, which a model adds
to as it is evaluated. Both the variable values and ``logp`` may be real- or
dual-typed depending on how the store was last seeded; the real part of every
value is always available through :py:meth:`VariableStore.realpart`.

Values are held as a flat sequence of scalars. Reading a variable returns an
array view that is cached until one of that variable's scalars is overwritten.

Example:
    >>> vi = VariableStore()
    >>> vi.push("x", 3.0)
    >>> vi.push("mu", [0.0, 1.0], group_id=1)
    >>> vi["mu"]
    array([0., 1.])
"""

from __future__ import annotations

from typing import Hashable, Iterator, Optional, TYPE_CHECKING

import numpy as np
import numpy.typing as npt

from chunkgrad import dual, utils
from chunkgrad.exceptions import DuplicateVariableError, UnknownVariableError

if TYPE_CHECKING:
    from chunkgrad import custom_types


def default_symbol(key: Hashable) -> str:
    """Derive a symbol from a variable key.

    For string keys, everything before the first ``[`` is used, so ``"mu[2]"``
    maps to ``"mu"``. For tuple keys, the first element is used. Otherwise the
    string form of the key is used.

    :param key: Variable key
    :type key: Hashable

    :returns: Symbol name
    :rtype: str
    """
    if isinstance(key, str):
        return key.split("[", 1)[0]
    if isinstance(key, tuple) and len(key) > 0:
        return str(key[0])
    return str(key)


class VariableStore:
    """Ordered store of random variable values with a log-density accumulator.

    :ivar logp: Log-density accumulator. Real- or dual-typed depending on the last
        value written to it.

    Variables keep the order in which they were pushed. This order defines the
    order of gradient computation and of flattened parameter vectors.
    """

    def __init__(self):

        # Flat storage of all scalars and the per-key bookkeeping
        self._vals: list = []
        self._ranges: dict[Hashable, range] = {}
        self._symbols: dict[Hashable, str] = {}
        self._group_ids: dict[Hashable, int] = {}

        # Cached array views of each variable, dropped on write
        self._views: dict[Hashable, npt.NDArray] = {}

        # The log-density accumulator
        self.logp = 0.0

    def push(
        self,
        key: Hashable,
        value: "custom_types.ValueLike",
        *,
        symbol: Optional[str] = None,
        group_id: "custom_types.Integer" = 0,
    ) -> None:
        """Add a new variable to the store.

        :param key: Key identifying the variable
        :type key: Hashable
        :param value: Initial real value(s) of the variable. Flattened.
        :type value: custom_types.ValueLike
        :param symbol: Symbol of the variable. Defaults to None, in which case
            it is derived from the key (see :py:func:`default_symbol`).
        :type symbol: Optional[str]
        :param group_id: Group identifier of the variable. Defaults to 0 (global).
        :type group_id: custom_types.Integer

        :raises DuplicateVariableError: If the key is already in the store
        :raises TypeError: If the value holds dual numbers
        """
        if key in self._ranges:
            raise DuplicateVariableError(f"Variable {key!r} is already in the store.")

        # Append the scalars to the flat storage
        values = utils.to_vector(value)
        start = len(self._vals)
        self._vals.extend(values.tolist())

        # Record bookkeeping
        self._ranges[key] = range(start, start + len(values))
        self._symbols[key] = default_symbol(key) if symbol is None else symbol
        self._group_ids[key] = int(group_id)

    def _range(self, key: Hashable) -> range:
        try:
            return self._ranges[key]
        except KeyError as error:
            raise UnknownVariableError(
                f"Variable {key!r} is not in the store."
            ) from error

    def keys(self) -> list:
        """Get all variable keys in insertion order."""
        return list(self._ranges)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._ranges)

    def __len__(self) -> int:
        return len(self._ranges)

    def __contains__(self, key) -> bool:
        return key in self._ranges

    def getrange(self, key: Hashable) -> range:
        """Get the positions of a variable's scalars in the flat storage.

        :param key: Variable key
        :type key: Hashable

        :returns: Range of flat positions
        :rtype: range

        :raises UnknownVariableError: If the key is not in the store
        """
        return self._range(key)

    def dim(self, key: Hashable) -> int:
        """Get the number of scalars held by a variable.

        :raises UnknownVariableError: If the key is not in the store
        """
        return len(self._range(key))

    @property
    def total_dim(self) -> int:
        """Total number of scalars across all variables."""
        return len(self._vals)

    def symbol(self, key: Hashable) -> str:
        """Get the symbol of a variable.

        :raises UnknownVariableError: If the key is not in the store
        """
        self._range(key)
        return self._symbols[key]

    def group_id(self, key: Hashable) -> int:
        """Get the group identifier of a variable.

        :raises UnknownVariableError: If the key is not in the store
        """
        self._range(key)
        return self._group_ids[key]

    def set_group_id(self, key: Hashable, group_id: "custom_types.Integer") -> None:
        """Assign a variable to a group.

        :raises UnknownVariableError: If the key is not in the store
        """
        self._range(key)
        self._group_ids[key] = int(group_id)

    def __getitem__(self, key: Hashable) -> npt.NDArray:
        """Get the current value of a variable.

        :param key: Variable key
        :type key: Hashable

        :returns: Read-only 1D array of the variable's scalars. The array is float64
            if all scalars are real and of object dtype if any is a dual number.
        :rtype: npt.NDArray

        :raises UnknownVariableError: If the key is not in the store
        """
        # Return the cached view if there is one
        if (view := self._views.get(key)) is not None:
            return view

        # Build the view
        values = [self._vals[i] for i in self._range(key)]
        if any(isinstance(value, dual.Dual) for value in values):
            view = np.empty(len(values), dtype=object)
            view[:] = values
        else:
            view = np.array(values, dtype=np.float64)
        view.setflags(write=False)

        # Cache and return
        self._views[key] = view
        return view

    def __setitem__(self, key: Hashable, values) -> None:
        """Overwrite all scalars of a variable.

        :param key: Variable key
        :type key: Hashable
        :param values: New scalars, real or dual. Must match the variable's dimension.
        :type values: Union[custom_types.Scalar, Sequence[custom_types.Scalar], npt.NDArray]

        :raises UnknownVariableError: If the key is not in the store
        :raises ValueError: If the number of values does not match the dimension
        """
        # Scalars and arrays are both handled as flat sequences
        if isinstance(values, np.ndarray):
            values = list(values.flat)
        elif not isinstance(values, (list, tuple)):
            values = [values]

        # Check the size
        if len(values) != self.dim(key):
            raise ValueError(
                f"Variable {key!r} has dimension {self.dim(key)}, but {len(values)} "
                "values were provided."
            )

        for index, value in enumerate(values):
            self.set_value(key, index, value)

    def set_value(
        self, key: Hashable, index: "custom_types.Integer", value: "custom_types.Scalar"
    ) -> None:
        """Overwrite a single scalar of a variable.

        Any cached view of the variable is invalidated before writing, so the next
        read observes the new value and its type.

        :param key: Variable key
        :type key: Hashable
        :param index: Position of the scalar within the variable
        :type index: custom_types.Integer
        :param value: New value, real or dual
        :type value: custom_types.Scalar

        :raises UnknownVariableError: If the key is not in the store
        :raises IndexError: If the index is out of range for the variable
        """
        position = self._range(key)[index]
        self.invalidate(key)
        self._vals[position] = value

    def invalidate(self, key: Hashable) -> None:
        """Discard any cached state derived from a variable's current values."""
        self._views.pop(key, None)

    def realpart(self, key: Hashable) -> npt.NDArray[np.float64]:
        """Get the real part of a variable's value, whatever its current type.

        :param key: Variable key
        :type key: Hashable

        :returns: 1D float64 array
        :rtype: npt.NDArray[np.float64]

        :raises UnknownVariableError: If the key is not in the store
        """
        return dual.realpart(self[key])

    def acclogp(self, value) -> None:
        """Add a log-density term to the accumulator.

        Arrays are summed before being added. Real and dual terms combine following
        the usual promotion rules.

        :param value: Log-density term
        :type value: Union[custom_types.Scalar, npt.NDArray]
        """
        if isinstance(value, np.ndarray):
            value = value.sum()
        self.logp = self.logp + value

    def resetlogp(self) -> None:
        """Reset the accumulator to a real zero."""
        self.logp = 0.0

    def copy(self) -> "VariableStore":
        """Build an independent copy of the store.

        Dual numbers are immutable and so are shared between the copies; every
        container is duplicated. Cached views are not carried over.

        :returns: A new store with the same variables, tags, values, and ``logp``
        :rtype: VariableStore
        """
        new = VariableStore()
        new._vals = list(self._vals)
        new._ranges = dict(self._ranges)
        new._symbols = dict(self._symbols)
        new._group_ids = dict(self._group_ids)
        new.logp = self.logp
        return new

    def __repr__(self):
        entries = ", ".join(
            f"{key!r}: {self.realpart(key).tolist()}" for key in self._ranges
        )
        return f"VariableStore({{{entries}}}, logp={dual.realpart(self.logp):g})"
