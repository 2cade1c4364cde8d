"""Ethash and ProgPoW proof-of-work hashing, verification and search in pure Python."""

__version__ = "0.4.3"

__all__ = [
    "bits",
    "epoch",
    "ethash",
    "hashtypes",
    "keccak",
    "kiss99",
    "managed",
    "primes",
    "progpow",
]