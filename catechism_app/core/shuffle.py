"""The single shuffle primitive used by the option sampler and the blank generator.

The Fisher-Yates (Durstenfeld) shuffle walks the list from the last index down
to 1 and swaps position ``i`` with a position ``j`` drawn uniformly from
``[0, i]``. For a list of ``n`` items this makes ``n!`` equally likely sequences
of draws, each producing a distinct permutation, so every permutation has
probability ``1 / n!`` provided the random source is uniform.

The random source is anything exposing ``randrange(stop)``. Production code
passes a ``random.Random``; tests pass a seeded instance or a fixed-sequence
substitute to make sampling deterministic.
"""

from __future__ import annotations

import random
from typing import Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


_default_rng = random.Random()


def shuffle(items: Sequence[T], rng: RandomSource | None = None) -> list[T]:
    """Return a uniformly shuffled copy of ``items``; the input is left untouched."""
    source = rng if rng is not None else _default_rng
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = source.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled
