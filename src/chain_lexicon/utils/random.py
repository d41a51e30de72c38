"""Randomness helpers for deterministic behaviour."""

from __future__ import annotations

import hashlib
import os
import random
from typing import Optional, Union

import numpy as np

SeedLike = Union[int, np.random.Generator, None]


def deterministic_hash(value: str) -> int:
    """Return a deterministic integer hash for ``value``."""
    digest = hashlib.sha256(value.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)


def seed_everything(seed: Optional[int] = None) -> int:
    """Seed Python and NumPy randomness sources."""
    if seed is None:
        seed = deterministic_hash(os.getenv("CHAIN_LEXICON_SEED", "chain-lexicon")) % (2**32)
    random.seed(seed)
    np.random.seed(seed)
    return seed


def ensure_rng(seed: SeedLike = None) -> np.random.Generator:
    """Return ``seed`` if it is already a generator, else build one from it."""
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(seed)
