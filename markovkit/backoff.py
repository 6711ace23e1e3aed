#!/usr/bin/env python3
"""
Markov Chain with Backoff
=========================
Composite of fixed-order chains at every order from ``maximum_order`` down
to 1, trained on the same data.

High orders reproduce the style of the corpus closely but sparse contexts
end up quoting it verbatim. At every lookup the backoff chain picks the
highest order whose context has at least ``desired_num_next_states``
distinct successors, falling back to shorter contexts (and ultimately to
order 1) when the longer ones are too specific.

Usage:
    from markovkit import BackoffChain

    chain = BackoffChain(maximum_order=5, desired_num_next_states=2)
    chain.add("fool")
    chain.get_next_states("foo")   # {'o': 1, 'l': 1}
"""

import logging
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional

from .chain import END, MarkovChain, Step, WeightedChain, weighted_choice
from .entropy import RandomSource
from .state import ChainState

logger = logging.getLogger(__name__)


class BackoffChain(WeightedChain):
    """Fixed-order chains at descending orders with adaptive context length."""

    def __init__(self, maximum_order: int, desired_num_next_states: int):
        """
        Args:
            maximum_order: Longest context considered (>= 1)
            desired_num_next_states: Minimum number of distinct successors a
                context needs before it is used without backing off (>= 0)
        """
        if maximum_order < 1:
            raise ValueError(f"maximum_order must be at least 1, got {maximum_order}")
        if desired_num_next_states < 0:
            raise ValueError(
                f"desired_num_next_states must be non-negative, got {desired_num_next_states}"
            )

        self._maximum_order = maximum_order
        self._desired_num_next_states = desired_num_next_states
        self._chains: List[MarkovChain] = [
            MarkovChain(order) for order in range(maximum_order, 0, -1)
        ]
        logger.debug(
            "Created BackoffChain(maximum_order=%d, desired_num_next_states=%d)",
            maximum_order, desired_num_next_states,
        )

    @property
    def order(self) -> int:
        return self._maximum_order

    @property
    def maximum_order(self) -> int:
        return self._maximum_order

    @property
    def desired_num_next_states(self) -> int:
        return self._desired_num_next_states

    @property
    def chains(self) -> List[MarkovChain]:
        """Sub-chains, highest order first."""
        return list(self._chains)

    @property
    def primary(self) -> MarkovChain:
        """The maximum-order chain."""
        return self._chains[0]

    def chain_for_order(self, order: int) -> MarkovChain:
        if not 1 <= order <= self._maximum_order:
            raise ValueError(f"order must be between 1 and {self._maximum_order}, got {order}")
        return self._chains[self._maximum_order - order]

    # -------------------------------------------------------------------------
    # Write path
    # -------------------------------------------------------------------------

    def add_transition(self, previous, item: Hashable, weight: int = 1) -> None:
        state = ChainState.of(previous, self._maximum_order)
        for chain in self._chains:
            chain.add_transition(state, item, weight)

    def add_terminal(self, previous, weight: int = 1) -> None:
        state = ChainState.of(previous, self._maximum_order)
        for chain in self._chains:
            chain.add_terminal(state, weight)

    # -------------------------------------------------------------------------
    # Read path
    # -------------------------------------------------------------------------

    def get_desired_order_target(self, previous) -> int:
        """
        Select the order used for lookups from ``previous``.

        Starting at maximum_order, accept the first order whose successor
        set exists and has at least desired_num_next_states entries. A
        context unknown at some order always falls through to the next one,
        whatever the threshold. Order 1 is always accepted.
        """
        state = ChainState.of(previous, self._maximum_order)

        order_target = self._maximum_order
        while order_target > 1:
            weights = self.chain_for_order(order_target).get_next_states_view(state)
            if weights is None:
                logger.debug("Backing off from order %d: no next states", order_target)
            elif len(weights) >= self._desired_num_next_states:
                break
            else:
                logger.debug(
                    "Backing off from order %d: %d of %d desired next states",
                    order_target, len(weights), self._desired_num_next_states,
                )
            order_target -= 1

        return order_target

    def _get_next_states_internal(self, state: ChainState) -> Optional[Mapping[Any, int]]:
        order_target = self.get_desired_order_target(state)
        return self.chain_for_order(order_target).get_next_states_view(state)

    def get_next_states(self, previous) -> Optional[Dict[Any, int]]:
        weights = self._get_next_states_internal(ChainState.of(previous, self._maximum_order))
        return dict(weights) if weights is not None else None

    def get_terminal_weight(self, previous) -> int:
        state = ChainState.of(previous, self._maximum_order)
        order_target = self.get_desired_order_target(state)
        return self.chain_for_order(order_target).get_terminal_weight(state)

    def get_states(self) -> Iterator[ChainState]:
        seen = set()
        for chain in self._chains:
            for state in chain.get_states():
                if state not in seen:
                    seen.add(state)
                    yield state

    def step(self, previous, rand: RandomSource) -> Step:
        state = ChainState.of(previous, self._maximum_order)

        # The order is derived separately for the successor and terminal
        # lookups; both see the same tables within one step.
        weights = self._get_next_states_internal(state)
        if weights is None:
            return None

        item = weighted_choice(weights, self.get_terminal_weight(state), rand)
        if item is END:
            return None
        return item, state.push(item, self._maximum_order)

    def __repr__(self) -> str:
        return (
            f"BackoffChain(maximum_order={self._maximum_order}, "
            f"desired_num_next_states={self._desired_num_next_states})"
        )
