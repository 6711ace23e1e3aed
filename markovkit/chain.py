#!/usr/bin/env python3
"""
Markov Chain
============
Fixed-order weighted transition table with a weighted random walk.

Every state is the window of (at most) ``order`` most recent symbols. For each
state the chain keeps:
- transitions: {next_symbol: weight}, never empty, weights > 0
- terminals: weight of the sequence ending at this state, > 0 when present

Weights are integers. Adding a negative weight un-trains data; stored weights
are clamped at zero, and a zero weight removes the entry (and an emptied row).

Usage:
    from markovkit import MarkovChain

    chain = MarkovChain(order=2)
    chain.add("fool")
    chain.add("food")
    word = ''.join(chain.chain(rand=42))
"""

import logging
from abc import ABC, abstractmethod
from collections import deque
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterable, Iterator, Mapping, Optional, Tuple

from .entropy import RandomSource, as_random_source
from .state import ChainState

logger = logging.getLogger(__name__)

Step = Optional[Tuple[Any, ChainState]]

# Outcome of a draw that picked the terminal weight
END = object()


def _check_weight(weight) -> int:
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise TypeError(f"weight must be an int, got {type(weight).__name__}")
    return weight


# =============================================================================
# Capability
# =============================================================================

class WeightedChain(ABC):
    """
    Read/write interface shared by the fixed-order chain and the backoff chain.

    Implementations provide the edge/terminal primitives, the lookups and a
    single generation ``step``; sequence training and the lazy walk are built
    on top of those here.
    """

    @property
    @abstractmethod
    def order(self) -> int:
        """Longest context, in symbols, the chain looks at."""

    @abstractmethod
    def add_transition(self, previous, item: Hashable, weight: int = 1) -> None:
        """Add ``weight`` to the edge from the ``previous`` window to ``item``."""

    @abstractmethod
    def add_terminal(self, previous, weight: int = 1) -> None:
        """Add ``weight`` to the chance of the sequence ending at ``previous``."""

    @abstractmethod
    def get_next_states(self, previous) -> Optional[Dict[Any, int]]:
        """Copy of the successor weights for ``previous``, or None."""

    @abstractmethod
    def get_terminal_weight(self, previous) -> int:
        """Terminal weight for ``previous`` (0 when unknown)."""

    @abstractmethod
    def get_states(self) -> Iterator[ChainState]:
        """Every state holding successor or terminal weight, each once."""

    @abstractmethod
    def step(self, previous, rand: RandomSource) -> Step:
        """
        Make one weighted draw from the ``previous`` window.

        Returns:
            (item, next_window), or None when the walk ends here
        """

    def add(self, items: Iterable[Any], weight: int = 1) -> None:
        """
        Train on a whole sequence.

        Every item is added as a transition from the window preceding it, and
        the window after the last item receives the terminal weight.
        """
        if items is None:
            raise ValueError("items is required")
        _check_weight(weight)

        previous = deque(maxlen=self.order)
        for item in items:
            self.add_transition(ChainState(previous), item, weight)
            previous.append(item)

        self.add_terminal(ChainState(previous), weight)

    def get_initial_states(self) -> Optional[Dict[Any, int]]:
        """Successor weights of the empty window (how sequences start)."""
        return self.get_next_states(ChainState(()))

    def chain(self, previous: Iterable[Any] = (), rand=None) -> Iterator[Any]:
        """
        Lazily walk the chain.

        Args:
            previous: Symbols to continue from (default: start of a sequence)
            rand: RandomSource, random.Random, int seed, or None for a fresh
                  default source

        Returns:
            Iterator yielding one symbol per weighted draw until the walk ends
        """
        if previous is None:
            raise ValueError("previous is required")
        rand = as_random_source(rand)
        return self._walk(ChainState(previous), rand)

    def _walk(self, state: ChainState, rand: RandomSource) -> Iterator[Any]:
        while True:
            result = self.step(state, rand)
            if result is None:
                return
            item, state = result
            yield item

    def to_dict(self) -> Dict[Tuple, Dict[Any, int]]:
        """
        Snapshot of the trained tables.

        Keys are state tuples; values map successors to weights, with the
        terminal weight (if any) stored under the ``END`` sentinel.
        """
        snapshot = {}
        for state in self.get_states():
            row = dict(self.get_next_states(state) or {})
            terminal = self.get_terminal_weight(state)
            if terminal > 0:
                row[END] = terminal
            snapshot[state.items] = row
        return snapshot

    def __len__(self) -> int:
        return sum(1 for _ in self.get_states())

    def __bool__(self) -> bool:
        return next(iter(self.get_states()), None) is not None


def weighted_choice(weights: Mapping[Any, int], terminal: int, rand: RandomSource) -> Any:
    """
    Cumulative-weight draw over ``weights`` plus a terminal weight.

    Each successor is picked with probability weight / (total + terminal);
    returns END when the terminal outcome is drawn.
    """
    total = sum(weights.values())
    value = rand.next(total + terminal) + 1
    if value > total:
        return END

    current = 0
    for item, weight in weights.items():
        current += weight
        if current >= value:
            return item
    raise RuntimeError(f"successor weights changed during draw (expected total {total})")


# =============================================================================
# Fixed-order chain
# =============================================================================

class MarkovChain(WeightedChain):
    """
    Builds and walks weighted transitions between states of a fixed order.

    An order of 1 picks each item based on the previous item, an order of 2
    on the previous two items, and so on. Order 0 is allowed: every state is
    the empty start state and items are chosen by overall frequency.
    """

    def __init__(self, order: int):
        if order < 0:
            raise ValueError(f"order must be non-negative, got {order}")

        self._order = order
        self._transitions: Dict[ChainState, Dict[Any, int]] = {}
        self._terminals: Dict[ChainState, int] = {}
        logger.debug("Created MarkovChain(order=%d)", order)

    @property
    def order(self) -> int:
        return self._order

    def add_transition(self, previous, item: Hashable, weight: int = 1) -> None:
        _check_weight(weight)
        state = ChainState.of(previous, self._order)

        weights = self._transitions.get(state)
        if weights is None:
            weights = {}

        new_weight = max(0, weights.get(item, 0) + weight)
        if new_weight == 0:
            weights.pop(item, None)
            if not weights:
                self._transitions.pop(state, None)
        else:
            weights[item] = new_weight
            self._transitions[state] = weights

    def add_terminal(self, previous, weight: int = 1) -> None:
        _check_weight(weight)
        state = ChainState.of(previous, self._order)

        new_weight = max(0, self._terminals.get(state, 0) + weight)
        if new_weight == 0:
            self._terminals.pop(state, None)
        else:
            self._terminals[state] = new_weight

    def get_next_states(self, previous) -> Optional[Dict[Any, int]]:
        weights = self._transitions.get(ChainState.of(previous, self._order))
        return dict(weights) if weights is not None else None

    def get_next_states_view(self, previous) -> Optional[Mapping[Any, int]]:
        """Read-only live view of the successor weights for ``previous``, or None."""
        weights = self._transitions.get(ChainState.of(previous, self._order))
        return MappingProxyType(weights) if weights is not None else None

    def get_terminal_weight(self, previous) -> int:
        return self._terminals.get(ChainState.of(previous, self._order), 0)

    def get_states(self) -> Iterator[ChainState]:
        yield from self._transitions
        for state in self._terminals:
            if state not in self._transitions:
                yield state

    def step(self, previous, rand: RandomSource) -> Step:
        state = ChainState.of(previous, self._order)

        weights = self._transitions.get(state)
        if weights is None:
            return None

        item = weighted_choice(weights, self._terminals.get(state, 0), rand)
        if item is END:
            return None
        return item, state.push(item, self._order)

    def __repr__(self) -> str:
        return f"MarkovChain(order={self._order}, states={len(self)})"
