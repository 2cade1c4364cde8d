"""Keccak-f permutations and the Keccak-256/512 hash functions (original padding)."""

from __future__ import annotations

from collections.abc import Iterable

from Crypto.Hash import keccak as _keccak

STATE_WORDS = 25

# Rotation offsets of the rho step, indexed by x + 5 * y.
_RHO = (
    0, 1, 62, 28, 27,
    36, 44, 6, 55, 20,
    3, 10, 43, 25, 39,
    41, 45, 15, 21, 8,
    18, 2, 61, 56, 14,
)


def _rc_bit(t: int) -> int:
    """Output bit of the Keccak round-constant LFSR at step ``t``."""
    t %= 255
    if t == 0:
        return 1
    r = 1
    for _ in range(t):
        r <<= 1
        if r & 0x100:
            r ^= 0x171
    return r & 1


def _round_constants(count: int) -> tuple[int, ...]:
    constants = []
    for i in range(count):
        rc = 0
        for j in range(7):
            if _rc_bit(j + 7 * i):
                rc |= 1 << ((1 << j) - 1)
        constants.append(rc)
    return tuple(constants)


ROUND_CONSTANTS_1600 = _round_constants(24)
"""Iota constants of Keccak-f[1600], 24 rounds."""

ROUND_CONSTANTS_800 = tuple(rc & 0xFFFFFFFF for rc in ROUND_CONSTANTS_1600[:22])
"""Iota constants of Keccak-f[800], 22 rounds."""


def _check_state(state: Iterable[int], width: int) -> list[int]:
    words = list(state)
    if len(words) != STATE_WORDS:
        raise ValueError(f"state must have {STATE_WORDS} words, got {len(words)}")
    limit = 1 << width
    for word in words:
        if not 0 <= word < limit:
            raise ValueError(f"{word} does not fit in {width} bits")
    return words


def _permute(words: list[int], width: int, round_constants: tuple[int, ...]) -> list[int]:
    mask = (1 << width) - 1

    def rol(value: int, shift: int) -> int:
        shift %= width
        return ((value << shift) | (value >> (width - shift))) & mask

    a = words
    for rc in round_constants:
        # theta
        c = [a[x] ^ a[x + 5] ^ a[x + 10] ^ a[x + 15] ^ a[x + 20] for x in range(5)]
        d = [c[(x - 1) % 5] ^ rol(c[(x + 1) % 5], 1) for x in range(5)]
        # rho and pi
        b = [0] * STATE_WORDS
        for y in range(5):
            for x in range(5):
                i = x + 5 * y
                b[y + 5 * ((2 * x + 3 * y) % 5)] = rol(a[i] ^ d[x], _RHO[i])
        # chi
        a = [
            b[x + 5 * y] ^ (~b[(x + 1) % 5 + 5 * y] & mask & b[(x + 2) % 5 + 5 * y])
            for y in range(5)
            for x in range(5)
        ]
        # iota
        a[0] ^= rc
    return a


def keccakf1600(state: Iterable[int]) -> list[int]:
    """Apply Keccak-f[1600] to 25 64-bit words and return the new state."""
    return _permute(_check_state(state, 64), 64, ROUND_CONSTANTS_1600)


def keccakf800(state: Iterable[int]) -> list[int]:
    """Apply Keccak-f[800] to 25 32-bit words and return the new state."""
    return _permute(_check_state(state, 32), 32, ROUND_CONSTANTS_800)


def keccak256(data: bytes) -> bytes:
    """Keccak-256 digest (32 bytes) of ``data``."""
    return _keccak.new(digest_bits=256, data=bytes(data)).digest()


def keccak512(data: bytes) -> bytes:
    """Keccak-512 digest (64 bytes) of ``data``."""
    return _keccak.new(digest_bits=512, data=bytes(data)).digest()