"""Hash values as little-endian byte strings, and helpers to view them as words."""

from __future__ import annotations

import struct
from collections.abc import Iterable

HASH256_SIZE = 32
HASH512_SIZE = 64
HASH1024_SIZE = 128
HASH2048_SIZE = 256

_WORD32_MAX = 0xFFFFFFFF
_WORD64_MAX = 0xFFFFFFFFFFFFFFFF


def hash256_from_bytes(data: bytes) -> bytes:
    """Return a 256-bit hash built from the first 32 bytes of ``data``."""
    raw = bytes(data)
    if len(raw) < HASH256_SIZE:
        raise ValueError(f"need at least {HASH256_SIZE} bytes, got {len(raw)}")
    return raw[:HASH256_SIZE]


def _check_multiple(data: bytes, size: int) -> bytes:
    raw = bytes(data)
    if len(raw) % size:
        raise ValueError(f"length {len(raw)} is not a multiple of {size}")
    return raw


def to_words32(data: bytes) -> tuple[int, ...]:
    """Split ``data`` into little-endian 32-bit words."""
    raw = _check_multiple(data, 4)
    return struct.unpack(f"<{len(raw) // 4}I", raw)


def from_words32(words: Iterable[int]) -> bytes:
    """Join 32-bit words into little-endian bytes."""
    values = list(words)
    for value in values:
        if not 0 <= value <= _WORD32_MAX:
            raise ValueError(f"{value} does not fit in 32 bits")
    return struct.pack(f"<{len(values)}I", *values)


def to_words64(data: bytes) -> tuple[int, ...]:
    """Split ``data`` into little-endian 64-bit words."""
    raw = _check_multiple(data, 8)
    return struct.unpack(f"<{len(raw) // 8}Q", raw)


def from_words64(words: Iterable[int]) -> bytes:
    """Join 64-bit words into little-endian bytes."""
    values = list(words)
    for value in values:
        if not 0 <= value <= _WORD64_MAX:
            raise ValueError(f"{value} does not fit in 64 bits")
    return struct.pack(f"<{len(values)}Q", *values)


def xor_bytes(a: bytes, b: bytes) -> bytes:
    """Bitwise XOR of two byte strings of equal length."""
    if len(a) != len(b):
        raise ValueError(f"length mismatch: {len(a)} != {len(b)}")
    return bytes(x ^ y for x, y in zip(a, b))


def is_less_or_equal(a: bytes, b: bytes) -> bool:
    """Compare two hashes as big-endian numbers: ``a <= b``."""
    if len(a) != len(b):
        raise ValueError(f"length mismatch: {len(a)} != {len(b)}")
    return bytes(a) <= bytes(b)


def is_equal(a: bytes, b: bytes) -> bool:
    """Return whether two hashes hold the same bytes."""
    return bytes(a) == bytes(b)