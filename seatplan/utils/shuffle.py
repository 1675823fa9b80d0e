"""Seeded, reproducible shuffling of student order."""

from __future__ import annotations

import math
from typing import Iterator, Optional, Sequence, TypeVar


T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


def lcg_stream(seed: int) -> Iterator[float]:
    """Yield floats in [0, 1) from a linear congruential generator."""
    state = seed
    while True:
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        yield state / LCG_MODULUS


def seeded_shuffle(items: Sequence[T], seed: Optional[int]) -> list[T]:
    """Fisher-Yates from the last element backward, driven by ``lcg_stream``.

    Returns a new list; ``seed=None`` keeps the original order.
    """
    shuffled = list(items)
    if seed is None:
        return shuffled

    draws = lcg_stream(seed)
    remaining = len(shuffled)
    while remaining:
        pick = math.floor(next(draws) * remaining)
        remaining -= 1
        shuffled[remaining], shuffled[pick] = shuffled[pick], shuffled[remaining]
    return shuffled
