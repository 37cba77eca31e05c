"""64-bit hashing and single-word probe derivation.

One 64-bit digest is split into two 32-bit halves (Kirsch-Mitzenmacher
double hashing). The sum of the halves picks the word; ``h1 + i * h2`` for
``i = 2..k`` picks bit offsets inside that word, so every insert or query
touches exactly one 64-bit word.
"""
from __future__ import annotations

from typing import Callable, Dict, Tuple

import mmh3
import xxhash

_MASK32 = 0xFFFFFFFF
_SIGN32 = 0x80000000
_TOP_BIT = 1 << 63

HashFn = Callable[[bytes], int]


def murmur3_64(data: bytes) -> int:
    """First 64-bit half of MurmurHash3 x64/128, unsigned."""
    return mmh3.hash64(data, seed=0, signed=False)[0]


def xxh64(data: bytes) -> int:
    return xxhash.xxh64(data, seed=0).intdigest()


HASHERS: Dict[str, HashFn] = {
    "murmur3": murmur3_64,
    "xxh64": xxh64,
}
DEFAULT_HASHER = "murmur3"


def get_hasher(name: str) -> HashFn:
    try:
        return HASHERS[name]
    except KeyError:
        raise ValueError(
            f"unknown hasher {name!r}; expected one of {sorted(HASHERS)}"
        ) from None


def _positive32(value: int) -> int:
    # 32-bit wrap, then flip all bits if the sign bit is set
    value &= _MASK32
    if value & _SIGN32:
        value ^= _MASK32
    return value


def probe(hash64: int, num_hashes: int, num_words: int) -> Tuple[int, int]:
    """Return ``(word_index, mask)`` for a 64-bit hash.

    The mask always carries bit 63 and up to ``num_hashes - 1`` further bits.
    """
    h1 = hash64 & _MASK32
    h2 = (hash64 >> 32) & _MASK32

    word_idx = _positive32(h1 + h2) % num_words
    mask = _TOP_BIT
    for i in range(2, num_hashes + 1):
        mask |= 1 << (_positive32(h1 + i * h2) & 63)
    return word_idx, mask
