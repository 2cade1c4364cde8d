"""Ethash hashing, verification and nonce search over an epoch context."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .bits import fnv1
from .epoch import NUM_DATASET_ACCESSES, EpochContext, calculate_dataset_item_1024
from .hashtypes import (
    HASH256_SIZE,
    HASH1024_SIZE,
    from_words32,
    is_equal,
    is_less_or_equal,
    to_words32,
)
from .keccak import keccak256, keccak512

_MASK64 = 0xFFFFFFFFFFFFFFFF
_WORDS_PER_ITEM = HASH1024_SIZE // 4

_Lookup = Callable[[EpochContext, int], bytes]


@dataclass(frozen=True)
class Result:
    """Final hash and mix hash of one nonce."""

    final_hash: bytes
    mix_hash: bytes


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a nonce search; ``solution_found`` is False when nothing matched."""

    solution_found: bool = False
    nonce: int = 0
    final_hash: bytes = bytes(HASH256_SIZE)
    mix_hash: bytes = bytes(HASH256_SIZE)


def _check_hash256(value: bytes, name: str) -> bytes:
    raw = bytes(value)
    if len(raw) != HASH256_SIZE:
        raise ValueError(f"{name} must be {HASH256_SIZE} bytes, got {len(raw)}")
    return raw


def _check_nonce(nonce: int) -> int:
    if not 0 <= nonce <= _MASK64:
        raise ValueError(f"nonce {nonce} does not fit in 64 bits")
    return nonce


def _hash_seed(header_hash: bytes, nonce: int) -> bytes:
    return keccak512(header_hash + nonce.to_bytes(8, "little"))


def _hash_final(seed: bytes, mix_hash: bytes) -> bytes:
    return keccak256(seed + mix_hash)


def _lazy_lookup(context: EpochContext, index: int) -> bytes:
    """Fetch a full dataset item, generating and storing it on first use."""
    dataset = context.full_dataset
    item = dataset.get(index)
    if item is None:
        item = calculate_dataset_item_1024(context, index)
        dataset[index] = item
    return item


def _hash_kernel(context: EpochContext, seed: bytes, lookup: _Lookup) -> bytes:
    index_limit = context.full_dataset_num_items
    seed_words = to_words32(seed)
    seed_init = seed_words[0]

    mix = list(seed_words) * 2
    for i in range(NUM_DATASET_ACCESSES):
        p = fnv1(i ^ seed_init, mix[i % _WORDS_PER_ITEM]) % index_limit
        newdata = to_words32(lookup(context, p))
        mix = [fnv1(a, b) for a, b in zip(mix, newdata)]

    compressed = []
    for i in range(0, _WORDS_PER_ITEM, 4):
        h = fnv1(fnv1(fnv1(mix[i], mix[i + 1]), mix[i + 2]), mix[i + 3])
        compressed.append(h)
    return from_words32(compressed)


def _lookup_for(context: EpochContext) -> _Lookup:
    return _lazy_lookup if context.is_full else calculate_dataset_item_1024


def hash_nonce(context: EpochContext, header_hash: bytes, nonce: int) -> Result:
    """Compute the Ethash final hash and mix hash of ``header_hash`` with ``nonce``."""
    header_hash = _check_hash256(header_hash, "header hash")
    nonce = _check_nonce(nonce)
    seed = _hash_seed(header_hash, nonce)
    mix_hash = _hash_kernel(context, seed, _lookup_for(context))
    return Result(_hash_final(seed, mix_hash), mix_hash)


def verify_final_hash(
    header_hash: bytes, mix_hash: bytes, nonce: int, boundary: bytes
) -> bool:
    """Check only that the final hash built from ``mix_hash`` is within ``boundary``."""
    header_hash = _check_hash256(header_hash, "header hash")
    mix_hash = _check_hash256(mix_hash, "mix hash")
    boundary = _check_hash256(boundary, "boundary")
    seed = _hash_seed(header_hash, _check_nonce(nonce))
    return is_less_or_equal(_hash_final(seed, mix_hash), boundary)


def verify(
    context: EpochContext,
    header_hash: bytes,
    mix_hash: bytes,
    nonce: int,
    boundary: bytes,
) -> bool:
    """Check the final hash against ``boundary`` and recompute the mix hash."""
    header_hash = _check_hash256(header_hash, "header hash")
    mix_hash = _check_hash256(mix_hash, "mix hash")
    boundary = _check_hash256(boundary, "boundary")
    seed = _hash_seed(header_hash, _check_nonce(nonce))
    if not is_less_or_equal(_hash_final(seed, mix_hash), boundary):
        return False
    expected = _hash_kernel(context, seed, calculate_dataset_item_1024)
    return is_equal(expected, mix_hash)


def _search(
    context: EpochContext,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    boundary = _check_hash256(boundary, "boundary")
    start_nonce = _check_nonce(start_nonce)
    if iterations < 0:
        raise ValueError(f"iterations must not be negative, got {iterations}")
    end_nonce = (start_nonce + iterations) & _MASK64
    for nonce in range(start_nonce, end_nonce):
        r = hash_nonce(context, header_hash, nonce)
        if is_less_or_equal(r.final_hash, boundary):
            return SearchResult(True, nonce, r.final_hash, r.mix_hash)
    return SearchResult()


def search_light(
    context: EpochContext,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    """Try ``iterations`` nonces from ``start_nonce``; return the first within ``boundary``."""
    return _search(context, header_hash, boundary, start_nonce, iterations)


def search(
    context: EpochContext,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    """Like :func:`search_light`, but on a full context whose dataset fills lazily."""
    if not context.is_full:
        raise ValueError("search needs a full epoch context")
    return _search(context, header_hash, boundary, start_nonce, iterations)