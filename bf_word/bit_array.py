"""Word-packed bitset backing the Bloom filter.

Bits live in an ``array('Q')`` of unsigned 64-bit words. For speed the hot
path does no bounds checking and never grows the array; lengths are validated
once, when the array is built.
"""
from __future__ import annotations

from array import array
from typing import Iterable

WORD_BITS = 64
MASK64 = (1 << 64) - 1


class BitArray:
    """Fixed-size bitset over 64-bit words."""

    __slots__ = ("_data",)

    def __init__(self, num_bits: int) -> None:
        num_words = -(-num_bits // WORD_BITS)
        if num_words <= 0:
            raise ValueError("bit array needs at least one word")
        self._data = array("Q", bytes(num_words * 8))

    @classmethod
    def from_words(cls, words: Iterable[int]) -> "BitArray":
        """Build a bitset from existing words (signed or unsigned 64-bit)."""
        data = array("Q", (w & MASK64 for w in words))
        if not data:
            raise ValueError("data length is zero")
        bits = cls.__new__(cls)
        bits._data = data
        return bits

    def set(self, index: int) -> None:
        self._data[index >> 6] |= 1 << (index & 63)

    def get(self, index: int) -> bool:
        return bool(self._data[index >> 6] & (1 << (index & 63)))

    def bit_size(self) -> int:
        """Number of bits (always a multiple of 64)."""
        return len(self._data) * WORD_BITS

    def put_all(self, other: "BitArray") -> None:
        """OR ``other`` into this bitset in place."""
        if len(self._data) != len(other._data):
            raise ValueError(
                f"BitArrays must be of equal length ({len(self._data)} != {len(other._data)})"
            )
        data = self._data
        for i, word in enumerate(other._data):
            data[i] |= word

    @property
    def data(self) -> array:
        """Expose the internal array('Q') for direct word access."""
        return self._data

    def __len__(self) -> int:
        return len(self._data)
