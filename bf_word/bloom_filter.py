"""Word-blocked Bloom filter sized from capacity and false positive rate.

A single 64-bit hash selects one machine word and the ``k`` bit offsets to
touch inside it, so both insert and query are one word read (plus one write
for insert) regardless of ``k``.

Filters can be merged (bitwise OR) when compatible and persisted as a flat
list of 64-bit integers::

    [capacity, bits(false_positive_rate), word_0, word_1, ...]

The hash function is not part of that layout; deserialize with the same
``hasher`` the filter was built with.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable, List, Sequence, Union

from .bit_array import WORD_BITS, BitArray
from .encoding import (
    byte_to_bytes,
    double_to_bytes,
    double_to_long_bits,
    float_to_bytes,
    int_to_bytes_le,
    long_bits_to_double,
    long_to_bytes_le,
    string_to_bytes,
    to_signed64,
)
from .hashing import DEFAULT_HASHER, get_hasher, probe

logger = logging.getLogger(__name__)

DEFAULT_FPP = 0.05

BytesLike = Union[bytes, bytearray, memoryview]


def optimal_num_of_bits(n: int, p: float) -> int:
    """Bits needed for ``n`` entries at false positive probability ``p``."""
    if p == 0:
        p = math.ulp(0.0)
    return int(-n * math.log(p) / (math.log(2) * math.log(2)))


def optimal_num_of_hash_functions(n: int, m: int) -> int:
    """Probe count for ``n`` entries over ``m`` bits, never below 1."""
    if n == 0:
        return 1
    return max(1, math.floor(m / n * math.log(2) + 0.5))


class BloomFilter:
    """Bloom filter whose ``k`` probes for an item share one 64-bit word.

    Not safe for concurrent mutation; concurrent ``test*`` calls without a
    writer are fine.
    """

    __slots__ = ("_n", "_fpp", "_m", "_k", "_hasher_name", "_hash", "_bits")

    def __init__(
        self,
        capacity: int,
        false_positive_rate: float = DEFAULT_FPP,
        *,
        hasher: str = DEFAULT_HASHER,
    ) -> None:
        """Initialize a Bloom filter.

        Args:
            capacity: Expected maximum number of distinct entries.
            false_positive_rate: Target false positive probability, in (0, 1).
            hasher: Name of the 64-bit hash function (see ``HASHERS``).

        Raises:
            ValueError: If capacity is not positive, the rate is outside
                (0, 1), or the hasher is unknown.
        """
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if not 0.0 < false_positive_rate < 1.0:
            raise ValueError("false_positive_rate must be > 0.0 and < 1.0")

        self._hash = get_hasher(hasher)
        self._hasher_name = hasher
        self._n = capacity
        self._fpp = false_positive_rate
        self._m = optimal_num_of_bits(capacity, false_positive_rate)
        self._k = optimal_num_of_hash_functions(capacity, self._m)
        # tiny configurations can derive m == 0; keep one word so the filter works
        self._bits = BitArray(max(self._m, WORD_BITS))
        logger.debug(
            "Created BloomFilter n=%d p=%s m=%d k=%d words=%d",
            self._n, self._fpp, self._m, self._k, len(self._bits),
        )

    @classmethod
    def from_serialized(
        cls, serialized: Sequence[int], *, hasher: str = DEFAULT_HASHER
    ) -> "BloomFilter":
        """Rebuild a filter from the output of :meth:`serialize`.

        ``hasher`` must name the hash the filter was built with; it is not
        stored in the layout. Filters written by the Java implementation share
        this layout but hash with Hive's Murmur3 ``hash64``, which neither
        hasher here reproduces, so values added there will test absent here.
        """
        if len(serialized) < 3:
            raise ValueError(
                f"serialized bloom filter needs at least 3 entries, got {len(serialized)}"
            )
        capacity = serialized[0]
        fpp = long_bits_to_double(serialized[1])
        bloom = cls(capacity, fpp, hasher=hasher)

        bits = BitArray.from_words(serialized[2:])
        if len(bits) != len(bloom._bits):
            raise ValueError(
                f"serialized word count {len(bits)} does not match "
                f"{len(bloom._bits)} words derived from n={capacity}, p={fpp}"
            )
        bloom._bits = bits
        logger.debug("Deserialized BloomFilter n=%d p=%s words=%d", capacity, fpp, len(bits))
        return bloom

    # -- byte path ---------------------------------------------------------

    def add_bytes(self, val: BytesLike) -> None:
        """Insert raw bytes."""
        data = self._bits.data
        word_idx, mask = probe(self._hash(bytes(val)), self._k, len(data))
        data[word_idx] |= mask

    def test_bytes(self, val: BytesLike) -> bool:
        """Return True if ``val`` may be present, False if definitely absent."""
        data = self._bits.data
        word_idx, mask = probe(self._hash(bytes(val)), self._k, len(data))
        return (data[word_idx] & mask) == mask

    add = add_bytes
    test = test_bytes

    def update(self, items: Iterable[BytesLike]) -> None:
        """Insert each byte sequence from ``items``."""
        for item in items:
            self.add_bytes(item)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, str):
            return self.test_string(item)
        if isinstance(item, (bytes, bytearray, memoryview)):
            return self.test_bytes(item)
        raise TypeError(
            f"'in' needs bytes or str, not {type(item).__name__}; use a typed test_* method"
        )

    # -- typed wrappers ----------------------------------------------------

    def add_byte(self, val: int) -> None:
        self.add_bytes(byte_to_bytes(val))

    def test_byte(self, val: int) -> bool:
        return self.test_bytes(byte_to_bytes(val))

    def add_int(self, val: int) -> None:
        # 32-bit little endian
        self.add_bytes(int_to_bytes_le(val))

    def test_int(self, val: int) -> bool:
        return self.test_bytes(int_to_bytes_le(val))

    def add_long(self, val: int) -> None:
        # 64-bit little endian
        self.add_bytes(long_to_bytes_le(val))

    def test_long(self, val: int) -> bool:
        return self.test_bytes(long_to_bytes_le(val))

    def add_float(self, val: float) -> None:
        self.add_bytes(float_to_bytes(val))

    def test_float(self, val: float) -> bool:
        return self.test_bytes(float_to_bytes(val))

    def add_double(self, val: float) -> None:
        self.add_bytes(double_to_bytes(val))

    def test_double(self, val: float) -> bool:
        return self.test_bytes(double_to_bytes(val))

    def add_string(self, val: str, encoding: str = "utf-8") -> None:
        self.add_bytes(string_to_bytes(val, encoding))

    def test_string(self, val: str, encoding: str = "utf-8") -> bool:
        return self.test_bytes(string_to_bytes(val, encoding))

    # -- merge / serialize -------------------------------------------------

    def is_compatible(self, other: "BloomFilter") -> bool:
        """True if ``other`` is a distinct filter with the same m and k."""
        return (
            self is not other
            and self.bit_size == other.bit_size
            and self.num_hash_functions == other.num_hash_functions
        )

    def merge(self, other: "BloomFilter") -> None:
        """OR ``other`` into this filter.

        Compatibility is not checked here; call :meth:`is_compatible` first.
        Filters with different word counts raise ``ValueError``.
        """
        self._bits.put_all(other._bits)
        logger.debug("Merged BloomFilter with %d words", len(self._bits))

    def serialize(self) -> List[int]:
        """Return ``[n, bits(p), word_0, ...]`` as signed 64-bit integers."""
        serialized = [self._n, to_signed64(double_to_long_bits(self._fpp))]
        serialized.extend(to_signed64(word) for word in self._bits.data)
        return serialized

    # -- accessors ---------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._n

    @property
    def false_positive_rate(self) -> float:
        return self._fpp

    @property
    def bit_size(self) -> int:
        """Derived bit count ``m`` (before rounding up to whole words)."""
        return self._m

    @property
    def num_hash_functions(self) -> int:
        return self._k

    @property
    def hasher(self) -> str:
        return self._hasher_name

    @property
    def bit_array(self) -> BitArray:
        """Expose the underlying bitset (primarily for inspection)."""
        return self._bits

    def size_in_bytes(self) -> int:
        return self._bits.bit_size() // 8

    def __repr__(self) -> str:
        return (
            f"BloomFilter(capacity={self._n}, false_positive_rate={self._fpp}, "
            f"bit_size={self._m}, num_hash_functions={self._k}, hasher={self._hasher_name!r})"
        )
