"""
Seed utilities for deterministic terrain generation.

Generation never draws from a shared random stream: every random-looking
choice is a pure hash of the seed, so a given seed reproduces the same
field regardless of what ran before it.
"""

import time
from typing import Optional

UINT32_MASK = 0xFFFFFFFF
MAX_SEED = UINT32_MASK


def _uint32(n: int) -> int:
    """Convert to unsigned 32-bit integer."""
    return int(n) & UINT32_MASK


def rand_from_seed(seed: int, k1: int = 0, k2: int = 0) -> float:
    """
    Hash a seed and two salts into a float in [0, 1).

    Args:
        seed: Base seed
        k1: First salt, picks an independent value per feature
        k2: Second salt

    Returns:
        Deterministic value in [0, 1)
    """
    h = _uint32(seed) ^ 0x9E3779B9 ^ _uint32(k1) ^ _uint32(k2 * 0x85EBCA6B)
    h ^= h >> 16
    h = _uint32(h * 0x27D4EB2D)
    h ^= h >> 15
    return h / 4294967296.0


def resolve_seed(seed: Optional[int] = None) -> int:
    """
    Resolve an optional seed into a concrete 32-bit seed.

    Missing seeds are derived from the clock, so unseeded generations
    differ between calls while seeded ones stay reproducible.
    """
    if seed is None:
        return int(time.time() * 1000) % 2147483647
    return _uint32(seed)

