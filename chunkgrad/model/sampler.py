# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


"""Sampler context and variable selection.

In compositional inference (e.g., Gibbs sampling), several samplers operate on
disjoint subsets of a model's variables. A :py:class:`Sampler` identifies the
subset one sampler is responsible for through two pieces of information:

    - a **group identifier**: every variable tagged with this group belongs to the
      sampler, and
    - a **space**: a set of symbols. Global variables (group ``0``) whose symbol is
      in the space also belong to the sampler.

:py:func:`select_keys` applies this filter to a variable store.
"""

from __future__ import annotations

from typing import Hashable, Iterable, Optional, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from chunkgrad import custom_types
    from chunkgrad.model import varinfo


class Sampler:
    """Selection context for a sampler operating on part of a model.

    :param group_id: Group identifier owned by this sampler. Defaults to 0.
    :type group_id: custom_types.Integer
    :param space: Symbols of global variables also owned by this sampler. A single
        string is treated as one symbol. Defaults to an empty space.
    :type space: Union[str, Iterable[str]]

    :ivar group_id: Group identifier owned by this sampler
    :ivar space: Frozen set of symbols

    Example:
        >>> spl = Sampler(group_id=1, space={"mu", "sigma"})
        >>> keys = select_keys(vi, spl)
    """

    def __init__(
        self,
        group_id: "custom_types.Integer" = 0,
        space: Union[str, Iterable[str]] = (),
    ):
        if isinstance(space, str):
            space = (space,)

        self.group_id = int(group_id)
        self.space = frozenset(space)

    def selects(self, vi: "varinfo.VariableStore", key: Hashable) -> bool:
        """Check whether a variable belongs to this sampler.

        :param vi: Store holding the variable
        :type vi: varinfo.VariableStore
        :param key: Variable key
        :type key: Hashable

        :returns: True if the variable is in this sampler's group, or is global with
            a symbol in this sampler's space
        :rtype: bool
        """
        group_id = vi.group_id(key)
        return group_id == self.group_id or (
            group_id == 0 and vi.symbol(key) in self.space
        )

    def __repr__(self):
        return f"Sampler(group_id={self.group_id}, space={set(self.space) or '{}'})"


def select_keys(
    vi: "varinfo.VariableStore", sampler: Optional[Sampler] = None
) -> list:
    """Get the keys of the variables selected by a sampler, in store order.

    :param vi: Store holding the variables
    :type vi: varinfo.VariableStore
    :param sampler: Selection context. Defaults to None, in which case every
        variable is selected.
    :type sampler: Optional[Sampler]

    :returns: Selected keys, in the order they appear in the store
    :rtype: list
    """
    if sampler is None:
        return vi.keys()
    return [key for key in vi if sampler.selects(vi, key)]
