"""Injectable random source.

Every random decision in the arcade (tile values, food cells, shuffles,
AI tie-breaks, mole placement) goes through a single ``random()`` call on
a ``RandomSource`` so tests can substitute a scripted sequence.
"""

import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``random() -> float`` in ``[0, 1)``; ``random.Random`` qualifies."""

    def random(self) -> float: ...


def create_random(seed: Optional[int] = None) -> random.Random:
    """Create the default random source, reproducible when ``seed`` is given."""
    return random.Random(seed)


def pick_index(rng: RandomSource, n: int) -> int:
    """Uniform index in ``range(n)``."""
    if n <= 0:
        raise ValueError("cannot pick from an empty range")
    return min(int(rng.random() * n), n - 1)


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Uniform choice from a non-empty sequence."""
    return items[pick_index(rng, len(items))]


def uniform(rng: RandomSource, low: float, high: float) -> float:
    return low + (high - low) * rng.random()


def chance(rng: RandomSource, probability: float) -> bool:
    return rng.random() < probability


def shuffled(rng: RandomSource, items: Sequence[T]) -> list[T]:
    """Fisher-Yates shuffle from the top, returning a new list."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = pick_index(rng, i + 1)
        result[i], result[j] = result[j], result[i]
    return result
