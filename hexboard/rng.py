"""Seeded random source injected into the board generator.

The generator only needs ``next_int`` and an in-place ``shuffle``; anything
providing both (a scripted fake in tests, for example) can stand in.
"""

from __future__ import annotations

import random
import typing

T = typing.TypeVar('T')


class RandomSource(typing.Protocol):
    """Deterministic-given-seed randomness used by the core."""

    def next_int(self, min_value: int, max_value: int) -> int:
        """Return an int in ``[min_value, max_value]`` (both inclusive)."""
        ...

    def shuffle(self, items: list[typing.Any]) -> None:
        """Shuffle *items* in place."""
        ...


class SeededRandom:
    """:class:`RandomSource` backed by :class:`random.Random`.

    Accepts int or str seeds; ``None`` seeds from system entropy.
    """

    def __init__(self, seed: int | str | None = None) -> None:
        self.seed = seed
        self._rng = random.Random(seed)

    def next_int(self, min_value: int, max_value: int) -> int:
        if min_value > max_value:
            raise ValueError(f'Empty range [{min_value}, {max_value}]')
        return self._rng.randint(min_value, max_value)

    def shuffle(self, items: list[typing.Any]) -> None:
        self._rng.shuffle(items)

    def choice(self, items: typing.Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""
        return items[self.next_int(0, len(items) - 1)]
