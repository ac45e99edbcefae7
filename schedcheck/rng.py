"""A 128-bit multiplicative congruential generator with XSL-RR output (PCG64 MCG).

Random choices are drawn the same way as the classic ``rand`` crate
algorithms: uniform ranges by widening multiplication with rejection,
slice choice and Fisher-Yates shuffle by ``gen_index``, and index sampling
by Floyd's, in-place or rejection sampling chosen by size.
"""

from __future__ import annotations

import struct
from collections.abc import MutableSequence, Sequence
from typing import TypeVar

__all__ = ["Pcg64Mcg"]

T = TypeVar("T")

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1
_MASK128 = (1 << 128) - 1
_MULTIPLIER = 0x2360_ED05_1FC6_5DA4_4385_DF64_9FCC_F645
_SEED_MUL = 6364136223846793005
_SEED_INC = 11634580027462260723


def _rotr(value: int, rot: int, width: int) -> int:
    rot %= width
    mask = (1 << width) - 1
    return ((value >> rot) | (value << (width - rot))) & mask


def _f32(value: float) -> float:
    """Round a float to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


class Pcg64Mcg:
    """PCG random number generator with 128 bits of state and 64-bit output."""

    __slots__ = ("state",)

    def __init__(self, state: int) -> None:
        self.state = (state | 1) & _MASK128

    def __repr__(self) -> str:
        return f"{type(self).__name__}(state={self.state:#x})"

    @classmethod
    def seed_from_u64(cls, seed: int) -> Pcg64Mcg:
        """Build a generator whose 128-bit state is expanded from a 64-bit seed."""
        if not 0 <= seed <= _MASK64:
            raise ValueError(f"seed must be an unsigned 64-bit integer, got {seed}")
        state = seed
        value = 0
        for chunk in range(4):
            state = (state * _SEED_MUL + _SEED_INC) & _MASK64
            xorshifted = (((state >> 18) ^ state) >> 27) & _MASK32
            rot = state >> 59
            value |= _rotr(xorshifted, rot, 32) << (32 * chunk)
        return cls(value)

    def next_u64(self) -> int:
        """Advance the generator and return the next 64-bit value."""
        self.state = (self.state * _MULTIPLIER) & _MASK128
        rot = self.state >> 122
        xsl = ((self.state >> 64) ^ self.state) & _MASK64
        return _rotr(xsl, rot, 64)

    def _next_u32(self) -> int:
        return self.next_u64() & _MASK32

    def _sample_single(self, low: int, high: int, width: int) -> int:
        if low >= high:
            raise ValueError(f"empty range: low={low} >= high={high}")
        mask = (1 << width) - 1
        span = high - low
        if span > mask:
            raise ValueError(f"range {low}..{high} does not fit in {width} bits")
        zone = ((span << (width - span.bit_length())) & mask) - 1
        draw = self.next_u64 if width == 64 else self._next_u32
        while True:
            product = draw() * span
            if product & mask <= zone:
                return low + (product >> width)

    def gen_range(self, low: int, high: int) -> int:
        """Return a uniformly chosen integer in ``[low, high)``."""
        return self._sample_single(low, high, 64)

    def _gen_index(self, bound: int) -> int:
        if bound <= _MASK32:
            return self._sample_single(0, bound, 32)
        return self._sample_single(0, bound, 64)

    def choose(self, items: Sequence[T]) -> T:
        """Return a uniformly chosen element of a non-empty sequence."""
        if not items:
            raise IndexError("cannot choose from an empty sequence")
        return items[self._gen_index(len(items))]

    def shuffle(self, items: MutableSequence[T]) -> None:
        """Shuffle a mutable sequence in place."""
        for i in reversed(range(1, len(items))):
            j = self._gen_index(i + 1)
            items[i], items[j] = items[j], items[i]

    def sample(self, length: int, amount: int) -> list[int]:
        """Return ``amount`` distinct integers drawn from ``range(length)``."""
        if amount < 0 or length < 0:
            raise ValueError("length and amount must not be negative")
        if amount > length:
            raise ValueError("amount of samples must be less than or equal to length")
        if length > _MASK32:
            return self._sample_rejection(length, amount, 64)

        small = length < 500_000
        length_f = _f32(float(length))
        amount_f = _f32(float(amount))
        if amount < 163:
            m4 = _f32(_f32(1.6 if small else 8.0 / 45.0) * amount_f)
            c1 = _f32(10.0 if small else 70.0 / 9.0)
            if amount > 11 and length_f < _f32(_f32(c1 + m4) * amount_f):
                return self._sample_inplace(length, amount)
            return self._sample_floyd(length, amount)
        factor = _f32(270.0 if small else 330.0 / 9.0)
        if length_f < _f32(factor * amount_f):
            return self._sample_inplace(length, amount)
        return self._sample_rejection(length, amount, 32)

    def _sample_floyd(self, length: int, amount: int) -> list[int]:
        floyd_shuffle = amount < 50
        indices: list[int] = []
        for j in range(length - amount, length):
            t = self._sample_single(0, j + 1, 32)
            if t in indices:
                if floyd_shuffle:
                    indices.insert(indices.index(t), j)
                else:
                    indices.append(j)
                continue
            indices.append(t)
        if not floyd_shuffle:
            for i in reversed(range(1, amount)):
                j = self._sample_single(0, i + 1, 32)
                indices[i], indices[j] = indices[j], indices[i]
        return indices

    def _sample_inplace(self, length: int, amount: int) -> list[int]:
        indices = list(range(length))
        for i in range(amount):
            j = self._sample_single(i, length, 32)
            indices[i], indices[j] = indices[j], indices[i]
        return indices[:amount]

    def _sample_rejection(self, length: int, amount: int, width: int) -> list[int]:
        mask = (1 << width) - 1
        rejected = (mask - length + 1) % length
        zone = mask - rejected
        draw = self.next_u64 if width == 64 else self._next_u32

        def uniform() -> int:
            while True:
                product = draw() * length
                if product & mask <= zone:
                    return product >> width

        seen: set[int] = set()
        indices: list[int] = []
        for _ in range(amount):
            pos = uniform()
            while pos in seen:
                pos = uniform()
            seen.add(pos)
            indices.append(pos)
        return indices