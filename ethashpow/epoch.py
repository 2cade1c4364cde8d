"""Epoch parameters, the light cache and dataset items, and epoch contexts."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from .bits import FNV_PRIME, MASK32
from .hashtypes import (
    HASH256_SIZE,
    HASH512_SIZE,
    HASH1024_SIZE,
    HASH2048_SIZE,
    from_words32,
    to_words32,
    xor_bytes,
)
from .keccak import keccak256, keccak512
from .primes import find_largest_prime

REVISION = "23"
"""The Ethash algorithm revision."""

EPOCH_LENGTH = 388800
LIGHT_CACHE_ITEM_SIZE = 64
FULL_DATASET_ITEM_SIZE = 128
NUM_DATASET_ACCESSES = 64

LIGHT_CACHE_INIT_SIZE = 1 << 24
LIGHT_CACHE_GROWTH = 1 << 21
LIGHT_CACHE_ROUNDS = 3
FULL_DATASET_INIT_SIZE = 1 << 32
FULL_DATASET_GROWTH = 1 << 26
FULL_DATASET_ITEM_PARENTS = 512

L1_CACHE_SIZE = 16 * 1024
"""Size in bytes of the cache of leading dataset items kept in every context."""

L1_CACHE_NUM_ITEMS = L1_CACHE_SIZE // 4

_FIND_EPOCH_TRIES = 30000
_WORDS_PER_ITEM = HASH512_SIZE // 4


@dataclass(eq=False)
class EpochContext:
    """Per-epoch data: the light cache, the L1 cache and, optionally, the full dataset.

    ``full_dataset`` is ``None`` for a light context; for a full context it maps
    item indexes to 128-byte items that have been generated so far.
    """

    epoch_number: int
    light_cache: tuple[bytes, ...]
    full_dataset_num_items: int
    l1_cache: tuple[int, ...] = ()
    full_dataset: dict[int, bytes] | None = None
    light_cache_words: tuple[tuple[int, ...], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.light_cache = tuple(bytes(item) for item in self.light_cache)
        self.light_cache_words = tuple(to_words32(item) for item in self.light_cache)

    @property
    def light_cache_num_items(self) -> int:
        return len(self.light_cache)

    @property
    def is_full(self) -> bool:
        return self.full_dataset is not None


def calculate_epoch_seed(epoch_number: int) -> bytes:
    """Seed hash of an epoch: Keccak-256 applied ``epoch_number`` times to zeros."""
    seed = bytes(HASH256_SIZE)
    for _ in range(epoch_number):
        seed = keccak256(seed)
    return seed


def calculate_light_cache_num_items(epoch_number: int) -> int:
    """Number of 64-byte items in the light cache of an epoch."""
    init = LIGHT_CACHE_INIT_SIZE // LIGHT_CACHE_ITEM_SIZE
    growth = LIGHT_CACHE_GROWTH // LIGHT_CACHE_ITEM_SIZE
    return find_largest_prime(init + epoch_number * growth)


def calculate_full_dataset_num_items(epoch_number: int) -> int:
    """Number of 128-byte items in the full dataset of an epoch."""
    init = FULL_DATASET_INIT_SIZE // FULL_DATASET_ITEM_SIZE
    growth = FULL_DATASET_GROWTH // FULL_DATASET_ITEM_SIZE
    return find_largest_prime(init + epoch_number * growth)


def get_epoch_number(block_number: int) -> int:
    """Epoch a block belongs to (division truncated toward zero)."""
    quotient = abs(block_number) // EPOCH_LENGTH
    return quotient if block_number >= 0 else -quotient


def get_light_cache_size(num_items: int) -> int:
    """Size in bytes of a light cache with ``num_items`` items."""
    return num_items * LIGHT_CACHE_ITEM_SIZE


def get_full_dataset_size(num_items: int) -> int:
    """Size in bytes of a full dataset with ``num_items`` items."""
    return num_items * FULL_DATASET_ITEM_SIZE


def build_light_cache(num_items: int, seed: bytes) -> list[bytes]:
    """Build the light cache of ``num_items`` 64-byte items from an epoch seed."""
    if num_items < 1:
        raise ValueError(f"light cache needs at least one item, got {num_items}")
    item = keccak512(seed)
    cache = [item]
    for _ in range(1, num_items):
        item = keccak512(item)
        cache.append(item)

    for _ in range(LIGHT_CACHE_ROUNDS):
        for i in range(num_items):
            v = int.from_bytes(cache[i][:4], "little") % num_items
            w = (num_items + i - 1) % num_items
            cache[i] = keccak512(xor_bytes(cache[v], cache[w]))
    return cache


def _item_words(context: EpochContext, index: int) -> list[int]:
    """Compute the 16 words of a 512-bit dataset item before the final hash."""
    cache = context.light_cache_words
    num_cache_items = len(cache)
    seed = index & MASK32

    words = list(cache[index % num_cache_items])
    words[0] ^= seed
    mix = list(to_words32(keccak512(from_words32(words))))

    for round_ in range(FULL_DATASET_ITEM_PARENTS):
        t = (((seed ^ round_) * FNV_PRIME) & MASK32) ^ mix[round_ % _WORDS_PER_ITEM]
        parent = cache[t % num_cache_items]
        mix = [((a * FNV_PRIME) & MASK32) ^ b for a, b in zip(mix, parent)]
    return mix


def calculate_dataset_item_512(context: EpochContext, index: int) -> bytes:
    """Compute one 512-bit dataset item."""
    return keccak512(from_words32(_item_words(context, index)))


def calculate_dataset_item_1024(context: EpochContext, index: int) -> bytes:
    """Compute a full dataset item: two consecutive 512-bit items."""
    base = index * 2
    return b"".join(calculate_dataset_item_512(context, base + k) for k in range(2))


def calculate_dataset_item_2048(context: EpochContext, index: int) -> bytes:
    """Compute four consecutive 512-bit items as one 2048-bit item."""
    base = index * 4
    return b"".join(calculate_dataset_item_512(context, base + k) for k in range(4))


def create_epoch_context(
    epoch_number: int,
    full: bool = False,
    light_cache_num_items: int | None = None,
    full_dataset_num_items: int | None = None,
) -> EpochContext:
    """Create the context of an epoch.

    The item counts default to those the epoch defines; they may be given
    explicitly to build smaller contexts. A full context starts with the
    dataset items held in the L1 cache and generates the rest on demand.
    """
    if epoch_number < 0:
        raise ValueError(f"epoch number must not be negative, got {epoch_number}")
    if light_cache_num_items is None:
        light_cache_num_items = calculate_light_cache_num_items(epoch_number)
    if full_dataset_num_items is None:
        full_dataset_num_items = calculate_full_dataset_num_items(epoch_number)
    if full_dataset_num_items < 1:
        raise ValueError(
            f"full dataset needs at least one item, got {full_dataset_num_items}"
        )

    seed = calculate_epoch_seed(epoch_number)
    light_cache = build_light_cache(light_cache_num_items, seed)
    context = EpochContext(
        epoch_number=epoch_number,
        light_cache=tuple(light_cache),
        full_dataset_num_items=full_dataset_num_items,
    )

    l1_data = b"".join(
        calculate_dataset_item_2048(context, i)
        for i in range(L1_CACHE_SIZE // HASH2048_SIZE)
    )
    context.l1_cache = to_words32(l1_data)

    if full:
        count = min(L1_CACHE_SIZE // HASH1024_SIZE, full_dataset_num_items)
        context.full_dataset = {
            i: l1_data[i * HASH1024_SIZE:(i + 1) * HASH1024_SIZE] for i in range(count)
        }
    return context


_search_cache = threading.local()


def find_epoch_number(seed: bytes) -> int:
    """Recover the epoch number from an epoch seed hash, or -1 if not found."""
    seed = bytes(seed)
    if len(seed) != HASH256_SIZE:
        raise ValueError(f"seed must be {HASH256_SIZE} bytes, got {len(seed)}")
    seed_part = seed[:4]

    cached_epoch = getattr(_search_cache, "epoch_number", 0)
    cached_seed = getattr(_search_cache, "seed", bytes(HASH256_SIZE))

    if cached_seed[:4] == seed_part:
        return cached_epoch

    candidate = keccak256(cached_seed)
    if candidate[:4] == seed_part:
        _search_cache.seed = candidate
        _search_cache.epoch_number = cached_epoch + 1
        return cached_epoch + 1

    candidate = bytes(HASH256_SIZE)
    for epoch in range(_FIND_EPOCH_TRIES):
        if candidate[:4] == seed_part:
            _search_cache.seed = candidate
            _search_cache.epoch_number = epoch
            return epoch
        candidate = keccak256(candidate)
    return -1