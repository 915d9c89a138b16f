"""
rng.py — Seeded RNG helpers for the randomised neighbourhoods and graphs.

Provides:
  - make_rng(seed)             → np.random.Generator
  - seed_sequence(seed)        → root np.random.SeedSequence
  - child_rng(ss, key)         → Generator for child stream 'key' of ss
  - random_index(rng, n, skip) → uniform index in [0, n) different from skip
"""

from __future__ import annotations
import numpy as np

def make_rng(seed: int | np.random.Generator | None) -> np.random.Generator:
    """Construct a PCG64-based Generator. If seed is None, uses entropy."""
    if isinstance(seed, np.random.Generator):
        return seed
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(np.random.PCG64(seed))

def seed_sequence(seed: int | np.random.Generator | np.random.SeedSequence | None) -> np.random.SeedSequence:
    """
    Root of a family of independent streams. A Generator contributes one
    draw as entropy; None uses fresh OS entropy.
    """
    if isinstance(seed, np.random.SeedSequence):
        return seed
    if isinstance(seed, np.random.Generator):
        return np.random.SeedSequence(int(seed.integers(0, 2**32 - 1, dtype=np.uint32)))
    return np.random.SeedSequence(seed)

def child_rng(ss: np.random.SeedSequence, key: int) -> np.random.Generator:
    """
    Stream number 'key' under ss, independent of which other keys were
    asked for or in what order (the same child ss.spawn() hands out at
    that position).
    """
    child = np.random.SeedSequence(
        ss.entropy, spawn_key=tuple(ss.spawn_key) + (int(key),), pool_size=ss.pool_size
    )
    return np.random.default_rng(np.random.PCG64(child))

def random_index(rng: np.random.Generator, n: int, skip: int) -> int:
    """Redraw until the index differs from 'skip'. Needs n >= 2."""
    s = int(rng.integers(0, n))
    while s == skip:
        s = int(rng.integers(0, n))
    return s
