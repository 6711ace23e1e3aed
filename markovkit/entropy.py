#!/usr/bin/env python3
"""
Random Sources
==============
The random walk only needs one capability from its random number generator:
a uniformly distributed integer in ``[0, max_value)``.

Two adapters are provided:
- PseudoRandom - wraps ``random.Random`` (fast, seedable, reproducible)
- SecureRandom - draws 64-bit words from ``os.urandom()`` and uses rejection
  sampling so that the result carries no modulo bias

Usage:
    from markovkit.entropy import make_random

    rand = make_random("secure")
    rand.next(10)   # 0..9
"""

import os
import random
from abc import ABC, abstractmethod
from typing import Callable, Optional, Union

from .settings import get_setting

RANDOM_SOURCES = ('pseudo', 'secure')

# Native word size of SecureRandom draws
_WORD_BYTES = 8
_WORD_RANGE = 1 << (_WORD_BYTES * 8)


# =============================================================================
# Capability
# =============================================================================

class RandomSource(ABC):
    """Produces unbiased integers in ``[0, max_value)``."""

    def next(self, max_value: int) -> int:
        """
        Return a uniformly distributed integer N with ``0 <= N < max_value``.

        ``next(0)`` is defined to return 0.

        Raises:
            ValueError: If max_value is negative
        """
        if max_value < 0:
            raise ValueError(f"max_value must be non-negative, got {max_value}")
        if max_value == 0:
            return 0
        return self._next(max_value)

    @abstractmethod
    def _next(self, max_value: int) -> int:
        """Draw for a strictly positive max_value."""


# =============================================================================
# Adapters
# =============================================================================

class PseudoRandom(RandomSource):
    """Adapter over the Mersenne Twister in ``random.Random``."""

    def __init__(self, rng: Optional[random.Random] = None, seed=None):
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both")
        self._rng = rng if rng is not None else random.Random(seed)

    def _next(self, max_value: int) -> int:
        return self._rng.randrange(max_value)

    def __repr__(self) -> str:
        return f"PseudoRandom({self._rng!r})"


class SecureRandom(RandomSource):
    """
    Cryptographically strong adapter.

    Words are drawn from the system entropy pool. Draws at or above the
    largest multiple of ``max_value`` that fits in 64 bits are discarded,
    so every residue is equally likely.
    """

    def __init__(self, randbytes: Callable[[int], bytes] = os.urandom):
        if randbytes is None:
            raise ValueError("randbytes is required")
        self._randbytes = randbytes

    def _next_word(self) -> int:
        return int.from_bytes(self._randbytes(_WORD_BYTES), 'little')

    def _next(self, max_value: int) -> int:
        if max_value >= _WORD_RANGE:
            raise ValueError(f"max_value must be below 2**64, got {max_value}")

        chop = _WORD_RANGE - (_WORD_RANGE % max_value)
        word = self._next_word()
        while word >= chop:
            word = self._next_word()
        return word % max_value

    def __repr__(self) -> str:
        return "SecureRandom()"


# =============================================================================
# Factories
# =============================================================================

def make_random(source: Optional[str] = None, seed=None) -> RandomSource:
    """
    Build a fresh random source.

    Args:
        source: 'pseudo' or 'secure'; defaults to the ``random.source`` setting
        seed: Seed for a pseudo source (not allowed for 'secure')

    Returns:
        A new RandomSource; nothing is shared between calls
    """
    if source is None:
        source = get_setting("random.source", "pseudo")

    if source == 'pseudo':
        return PseudoRandom(seed=seed)
    if source == 'secure':
        if seed is not None:
            raise ValueError("A secure random source cannot be seeded")
        return SecureRandom()

    available = ', '.join(RANDOM_SOURCES)
    raise ValueError(f"Unknown random source '{source}'. Available sources: {available}")


def as_random_source(rand: Union[RandomSource, random.Random, int, None]) -> RandomSource:
    """
    Coerce the ``rand`` argument accepted by the generators.

    - None: a fresh default source from make_random()
    - int: a seeded PseudoRandom
    - random.Random: wrapped in PseudoRandom
    - RandomSource: returned unchanged
    """
    if rand is None:
        return make_random()
    if isinstance(rand, RandomSource):
        return rand
    if isinstance(rand, random.Random):
        return PseudoRandom(rng=rand)
    # bool is an int subclass but never a meaningful seed
    if isinstance(rand, int) and not isinstance(rand, bool):
        return PseudoRandom(seed=rand)
    raise TypeError(f"Expected a RandomSource, random.Random or int seed, got {type(rand).__name__}")
