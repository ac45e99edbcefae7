"""Sources of non-deterministic data handed to tasks that ask for random values."""

from __future__ import annotations

from abc import ABC, abstractmethod

from schedcheck.rng import Pcg64Mcg

__all__ = ["DataSource", "RandomDataSource", "FixedDataSource"]


class DataSource(ABC):
    """An oracle producing random values that can be replayed from a seed."""

    @abstractmethod
    def reinitialize(self) -> int:
        """Reset for a new execution and return the seed that reproduces it."""

    @abstractmethod
    def next_u64(self) -> int:
        """Return the next non-deterministic 64-bit value."""


class RandomDataSource(DataSource):
    """Draws data from an RNG that is re-seeded at every new execution."""

    def __init__(self, seed: int) -> None:
        self._rng = Pcg64Mcg.seed_from_u64(seed)
        self._next_seed: int | None = seed

    def __repr__(self) -> str:
        return f"{type(self).__name__}(rng={self._rng!r}, next_seed={self._next_seed!r})"

    def reinitialize(self) -> int:
        if self._next_seed is not None:
            seed, self._next_seed = self._next_seed, None
        else:
            seed = self._rng.next_u64()
        self._rng = Pcg64Mcg.seed_from_u64(seed)
        return seed

    def next_u64(self) -> int:
        return self._rng.next_u64()


class FixedDataSource(DataSource):
    """Produces the same stream of data on every execution."""

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._source = RandomDataSource(seed)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self._seed!r})"

    def reinitialize(self) -> int:
        self._source = RandomDataSource(self._seed)
        return self._source.reinitialize()

    def next_u64(self) -> int:
        return self._source.next_u64()