"""Canonical byte encodings for typed filter values.

Integers are written little-endian with Java-style wrapping, floating point
values go through their IEEE-754 bit pattern first. Each call returns a fresh
``bytes`` object.
"""
from __future__ import annotations

import math
import struct

_FLOAT_NAN_BITS = 0x7FC00000
_DOUBLE_NAN_BITS = 0x7FF8000000000000
_FLOAT_POS_INF_BITS = 0x7F800000
_FLOAT_NEG_INF_BITS = 0xFF800000
# smallest magnitudes that round to infinity when narrowed
_FLOAT_OVERFLOW = 2.0**128 - 2.0**103
_DOUBLE_OVERFLOW = 2**1024 - 2**970


def _to_double(val: float) -> float:
    """Convert to a Python float, sending ints past the double range to +/-inf."""
    if isinstance(val, int) and abs(val) >= _DOUBLE_OVERFLOW:
        return math.inf if val > 0 else -math.inf
    return float(val)


def byte_to_bytes(val: int) -> bytes:
    return bytes((val & 0xFF,))


def int_to_bytes_le(val: int) -> bytes:
    """Encode ``val`` as a 32-bit little-endian integer (wraps like a cast)."""
    return (val & 0xFFFFFFFF).to_bytes(4, "little")


def long_to_bytes_le(val: int) -> bytes:
    """Encode ``val`` as a 64-bit little-endian integer (wraps like a cast)."""
    return (val & 0xFFFFFFFFFFFFFFFF).to_bytes(8, "little")


def float_to_int_bits(val: float) -> int:
    """Raw IEEE-754 single precision bits of ``val``; NaN is canonicalised.

    Values too large for a 32-bit float become infinity, like a narrowing cast.
    """
    val = _to_double(val)
    if math.isnan(val):
        return _FLOAT_NAN_BITS
    if abs(val) >= _FLOAT_OVERFLOW:
        return _FLOAT_POS_INF_BITS if val > 0 else _FLOAT_NEG_INF_BITS
    return struct.unpack("<I", struct.pack("<f", val))[0]


def double_to_long_bits(val: float) -> int:
    """Raw IEEE-754 double precision bits of ``val``; NaN is canonicalised."""
    val = _to_double(val)
    if math.isnan(val):
        return _DOUBLE_NAN_BITS
    return struct.unpack("<Q", struct.pack("<d", val))[0]


def long_bits_to_double(bits: int) -> float:
    return struct.unpack("<d", struct.pack("<Q", bits & 0xFFFFFFFFFFFFFFFF))[0]


def float_to_bytes(val: float) -> bytes:
    return int_to_bytes_le(float_to_int_bits(val))


def double_to_bytes(val: float) -> bytes:
    return long_to_bytes_le(double_to_long_bits(val))


def string_to_bytes(val: str, encoding: str = "utf-8") -> bytes:
    return val.encode(encoding)


def to_signed64(val: int) -> int:
    """Reinterpret an unsigned 64-bit value as two's-complement."""
    val &= 0xFFFFFFFFFFFFFFFF
    return val - (1 << 64) if val & (1 << 63) else val
