#!/usr/bin/env python3
"""
Configuration
=============
Chain construction settings, with defaults read from ``configs/app.yaml``.

Usage:
    from markovkit.config import ChainConfig, build_chain, build_random

    config = ChainConfig(maximum_order=4)   # other fields from app.yaml
    chain = build_chain(config)
    chain.add("fool")
    word = ''.join(chain.chain(rand=build_random(config, seed=7)))
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .backoff import BackoffChain
from .chain import WeightedChain
from .entropy import RANDOM_SOURCES, RandomSource, make_random
from .settings import get_setting

logger = logging.getLogger(__name__)


@dataclass
class ChainConfig:
    """Settings for building a chain and its random source."""
    maximum_order: Optional[int] = None            # Longest context considered
    desired_num_next_states: Optional[int] = None  # Backoff threshold (0 backs off only past unknown contexts)
    random_source: Optional[str] = None            # 'pseudo' or 'secure'

    def __post_init__(self):
        cfg = get_setting("chain", {}) or {}
        if self.maximum_order is None:
            self.maximum_order = cfg.get("maximum_order")
        if self.desired_num_next_states is None:
            self.desired_num_next_states = cfg.get("desired_num_next_states")
        if self.random_source is None:
            self.random_source = get_setting("random.source")

        missing = [
            name for name, value in (
                ("chain.maximum_order", self.maximum_order),
                ("chain.desired_num_next_states", self.desired_num_next_states),
                ("random.source", self.random_source),
            )
            if value is None
        ]
        if missing:
            raise ValueError(f"chain settings missing in app.yaml: {', '.join(missing)}")

        if self.maximum_order < 1:
            raise ValueError(f"maximum_order must be at least 1, got {self.maximum_order}")
        if self.desired_num_next_states < 0:
            raise ValueError(
                f"desired_num_next_states must be non-negative, got {self.desired_num_next_states}"
            )
        if self.random_source not in RANDOM_SOURCES:
            available = ', '.join(RANDOM_SOURCES)
            raise ValueError(
                f"Unknown random source '{self.random_source}'. Available sources: {available}"
            )


def build_chain(config: ChainConfig = None) -> WeightedChain:
    """
    Build an empty backoff chain for ``config``.

    A threshold of 0 still backs off past contexts unknown at the higher
    orders.
    """
    if config is None:
        config = ChainConfig()

    logger.debug(
        "Building BackoffChain(maximum_order=%d, desired_num_next_states=%d)",
        config.maximum_order, config.desired_num_next_states,
    )
    return BackoffChain(config.maximum_order, config.desired_num_next_states)


def build_random(config: ChainConfig = None, seed=None) -> RandomSource:
    """Build a fresh random source of the configured kind."""
    if config is None:
        config = ChainConfig()
    return make_random(config.random_source, seed=seed)
