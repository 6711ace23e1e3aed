#!/usr/bin/env python3
"""
Chain State
===========
Immutable window of the most recently seen symbols, used as the lookup key
for transition and terminal weights.
"""

from typing import Any, Iterable, Iterator


class ChainState:
    """
    An ordered, immutable sequence of symbols.

    Two states are equal when they have the same length and are equal
    element by element. Advancing the window always builds a new state.
    """

    __slots__ = ('_items', '_hash')

    def __init__(self, items: Iterable[Any]):
        if items is None:
            raise ValueError("items is required")
        object.__setattr__(self, '_items', tuple(items))
        object.__setattr__(self, '_hash', hash((ChainState, self._items)))

    @classmethod
    def of(cls, previous, order: int) -> 'ChainState':
        """Build a state from a ChainState or any iterable, keeping the last ``order`` items."""
        if previous is None:
            raise ValueError("previous is required")
        state = previous if isinstance(previous, cls) else cls(previous)
        return state.truncate(order)

    @property
    def items(self) -> tuple:
        return self._items

    def truncate(self, order: int) -> 'ChainState':
        """Return a state holding at most the ``order`` most recent items."""
        if order < 0:
            raise ValueError(f"order must be non-negative, got {order}")
        if len(self._items) <= order:
            return self
        if order == 0:
            return ChainState(())
        return ChainState(self._items[-order:])

    def push(self, item: Any, order: int) -> 'ChainState':
        """Append ``item``, dropping the oldest items so at most ``order`` remain."""
        if order < 0:
            raise ValueError(f"order must be non-negative, got {order}")
        if order == 0:
            return ChainState(())
        if order == 1:
            return ChainState((item,))
        return ChainState(self._items[-(order - 1):] + (item,))

    def __reduce__(self):
        return (ChainState, (self._items,))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __eq__(self, other) -> bool:
        if self is other:
            return True
        if not isinstance(other, ChainState):
            return NotImplemented
        return self._items == other._items

    def __hash__(self) -> int:
        return self._hash

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def __getitem__(self, index):
        return self._items[index]

    def __repr__(self) -> str:
        return f"ChainState({list(self._items)!r})"
