"""Word-blocked Bloom filter with mergeable, serializable state."""
from __future__ import annotations

from .bit_array import BitArray
from .bloom_filter import (
    DEFAULT_FPP,
    BloomFilter,
    optimal_num_of_bits,
    optimal_num_of_hash_functions,
)
from .hashing import DEFAULT_HASHER, HASHERS

__all__ = [
    "DEFAULT_FPP",
    "DEFAULT_HASHER",
    "HASHERS",
    "BitArray",
    "BloomFilter",
    "optimal_num_of_bits",
    "optimal_num_of_hash_functions",
]
