#!/usr/bin/env python3
"""
markovkit - Weighted Markov Chains with Backoff
===============================================

Finite-order Markov chains over any hashable symbols (characters, words,
tokens) with integer weights, un-training by negative weight, and a lazy
weighted random walk.

Quick Start
-----------
    from markovkit import MarkovChain, BackoffChain

    chain = MarkovChain(order=2)
    for word in ["fool", "food", "loose"]:
        chain.add(word)
    print(''.join(chain.chain(rand=42)))

    # Back off to shorter contexts when a context has fewer than 2 successors
    backoff = BackoffChain(maximum_order=5, desired_num_next_states=2)
    backoff.add("fool")
    backoff.get_next_states("foo")   # {'o': 1, 'l': 1}

Modules
-------
    markovkit.state    - ChainState, the immutable context window
    markovkit.chain    - WeightedChain interface and fixed-order MarkovChain
    markovkit.backoff  - BackoffChain composite
    markovkit.entropy  - RandomSource adapters (pseudo / secure)
    markovkit.config   - ChainConfig and factories driven by configs/app.yaml
"""

__version__ = "0.1.0"
__author__ = "markovkit"

from .state import ChainState
from .chain import MarkovChain, WeightedChain
from .backoff import BackoffChain
from .entropy import (
    RandomSource,
    PseudoRandom,
    SecureRandom,
    make_random,
    as_random_source,
)
from .config import ChainConfig, build_chain, build_random

__all__ = [
    "__version__",
    "ChainState",
    "WeightedChain",
    "MarkovChain",
    "BackoffChain",
    "RandomSource",
    "PseudoRandom",
    "SecureRandom",
    "make_random",
    "as_random_source",
    "ChainConfig",
    "build_chain",
    "build_random",
]
