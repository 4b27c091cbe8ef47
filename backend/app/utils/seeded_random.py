"""
Reproducible pseudo-random sequencer for draw generation.

Not suitable for anything security-sensitive. The recurrence is a small
linear congruential generator so the same seed always yields the same
shuffle, which keeps mixer rounds reproducible in tests.
"""
from typing import List, Sequence, TypeVar

T = TypeVar("T")

LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280


class SeededRandom:
    """seed = (seed * 9301 + 49297) mod 233280; value = seed / 233280."""

    def __init__(self, seed: int):
        self.seed = seed % LCG_MODULUS

    def next_float(self) -> float:
        """Advance the sequence and return a value in [0, 1)."""
        self.seed = (self.seed * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.seed / LCG_MODULUS

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a Fisher-Yates shuffled copy of items."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = int(self.next_float() * (i + 1))
            result[i], result[j] = result[j], result[i]
        return result


def seeded_shuffle(items: Sequence[T], seed: int) -> List[T]:
    return SeededRandom(seed).shuffle(items)
