"""ProgPoW hashing, verification and nonce search on top of Ethash epoch contexts."""

from __future__ import annotations

import functools
from typing import NamedTuple

from .bits import (
    FNV_OFFSET_BASIS,
    MASK32,
    clz32,
    fnv1a,
    mul_hi32,
    popcount32,
    rotl32,
    rotr32,
)
from .epoch import L1_CACHE_NUM_ITEMS, L1_CACHE_SIZE, EpochContext, calculate_dataset_item_2048
from .ethash import Result, SearchResult
from .hashtypes import (
    HASH256_SIZE,
    HASH2048_SIZE,
    from_words32,
    is_equal,
    is_less_or_equal,
    to_words32,
)
from .keccak import keccakf800
from .kiss99 import Kiss99

REVISION = "0.9.3"
"""The ProgPoW algorithm revision."""

LIBRARY_VERSION = "0.4.3"
"""Version of the Ethash library this implementation follows."""

PERIOD_LENGTH = 10
NUM_REGS = 32
NUM_LANES = 16
NUM_CACHE_ACCESSES = 11
NUM_MATH_OPERATIONS = 18
NUM_ROUNDS = 64

__all__ = [
    "L1_CACHE_NUM_ITEMS",
    "L1_CACHE_SIZE",
    "MixRngState",
    "hash_mix",
    "hash_nonce",
    "init_mix",
    "keccak_progpow_256",
    "keccak_progpow_64",
    "random_math",
    "random_merge",
    "search",
    "search_light",
    "verify",
]

_MASK64 = 0xFFFFFFFFFFFFFFFF
_WORDS_PER_LANE = HASH2048_SIZE // (4 * NUM_LANES)
_HASH256_WORDS = HASH256_SIZE // 4
_ZERO_HASH256 = bytes(HASH256_SIZE)


def _check_hash256(value: bytes, name: str) -> bytes:
    raw = bytes(value)
    if len(raw) != HASH256_SIZE:
        raise ValueError(f"{name} must be {HASH256_SIZE} bytes, got {len(raw)}")
    return raw


def _check_nonce(nonce: int) -> int:
    if not 0 <= nonce <= _MASK64:
        raise ValueError(f"nonce {nonce} does not fit in 64 bits")
    return nonce


def keccak_progpow_256(header_hash: bytes, nonce: int, mix_hash: bytes) -> bytes:
    """Keccak-f[800] over header, nonce and mix (576 bits, no padding); 256-bit output."""
    header_hash = _check_hash256(header_hash, "header hash")
    mix_hash = _check_hash256(mix_hash, "mix hash")
    nonce = _check_nonce(nonce)

    state = [
        *to_words32(header_hash),
        nonce & MASK32,
        nonce >> 32,
        *to_words32(mix_hash),
    ]
    state.extend([0] * (25 - len(state)))
    return from_words32(keccakf800(state)[:_HASH256_WORDS])


def keccak_progpow_64(header_hash: bytes, nonce: int) -> int:
    """Top 64 bits (big-endian prefix) of :func:`keccak_progpow_256` with a zero mix."""
    digest = keccak_progpow_256(header_hash, nonce, _ZERO_HASH256)
    return int.from_bytes(digest[:8], "big")


class MixRngState:
    """KISS99 generator plus random permutations of mix destination and source registers."""

    __slots__ = ("rng", "_dst_seq", "_src_seq", "_dst_counter", "_src_counter")

    def __init__(self, seed: int) -> None:
        seed &= _MASK64
        seed_lo = seed & MASK32
        seed_hi = seed >> 32

        z = fnv1a(FNV_OFFSET_BASIS, seed_lo)
        w = fnv1a(z, seed_hi)
        jsr = fnv1a(w, seed_lo)
        jcong = fnv1a(jsr, seed_hi)
        self.rng = Kiss99(z, w, jsr, jcong)

        # Fisher-Yates shuffle of both register sequences.
        dst = list(range(NUM_REGS))
        src = list(range(NUM_REGS))
        for i in range(NUM_REGS, 1, -1):
            j = self.rng() % i
            dst[i - 1], dst[j] = dst[j], dst[i - 1]
            j = self.rng() % i
            src[i - 1], src[j] = src[j], src[i - 1]

        self._dst_seq = tuple(dst)
        self._src_seq = tuple(src)
        self._dst_counter = 0
        self._src_counter = 0

    def next_dst(self) -> int:
        """Next destination register, cycling through the permutation."""
        value = self._dst_seq[self._dst_counter % NUM_REGS]
        self._dst_counter += 1
        return value

    def next_src(self) -> int:
        """Next source register, cycling through the permutation."""
        value = self._src_seq[self._src_counter % NUM_REGS]
        self._src_counter += 1
        return value


def random_math(a: int, b: int, selector: int) -> int:
    """Apply one of eleven 32-bit operations to ``a`` and ``b``, chosen by ``selector``."""
    a &= MASK32
    b &= MASK32
    op = selector % 11
    if op == 0:
        return (a + b) & MASK32
    if op == 1:
        return (a * b) & MASK32
    if op == 2:
        return mul_hi32(a, b)
    if op == 3:
        return min(a, b)
    if op == 4:
        return rotl32(a, b)
    if op == 5:
        return rotr32(a, b)
    if op == 6:
        return a & b
    if op == 7:
        return a | b
    if op == 8:
        return a ^ b
    if op == 9:
        return clz32(a) + clz32(b)
    return popcount32(a) + popcount32(b)


def random_merge(a: int, b: int, selector: int) -> int:
    """Merge ``b`` into ``a`` with an entropy-keeping operation; return the new ``a``."""
    a &= MASK32
    b &= MASK32
    x = ((selector >> 16) % 31) + 1
    op = selector % 4
    if op == 0:
        return (a * 33 + b) & MASK32
    if op == 1:
        return ((a ^ b) * 33) & MASK32
    if op == 2:
        return rotl32(a, x) ^ b
    return rotr32(a, x) ^ b


def init_mix(seed: int) -> list[list[int]]:
    """Initial mix registers: ``NUM_LANES`` lanes of ``NUM_REGS`` words each."""
    seed &= _MASK64
    z = fnv1a(FNV_OFFSET_BASIS, seed & MASK32)
    w = fnv1a(z, seed >> 32)

    mix = []
    for lane in range(NUM_LANES):
        jsr = fnv1a(w, lane)
        jcong = fnv1a(jsr, lane)
        rng = Kiss99(z, w, jsr, jcong)
        mix.append([rng() for _ in range(NUM_REGS)])
    return mix


class _CacheOp(NamedTuple):
    src: int
    dst: int
    sel: int


class _MathOp(NamedTuple):
    src1: int
    src2: int
    sel1: int
    dst: int
    sel2: int


class _RoundProgram(NamedTuple):
    ops: tuple[_CacheOp | _MathOp, ...]
    dag: tuple[tuple[int, int], ...]


@functools.lru_cache(maxsize=16)
def _round_program(period_seed: int) -> _RoundProgram:
    """Operations of one round; every round starts from the same generator state."""
    state = MixRngState(period_seed)
    ops: list[_CacheOp | _MathOp] = []
    for i in range(max(NUM_CACHE_ACCESSES, NUM_MATH_OPERATIONS)):
        if i < NUM_CACHE_ACCESSES:
            src = state.next_src()
            dst = state.next_dst()
            sel = state.rng()
            ops.append(_CacheOp(src, dst, sel))
        if i < NUM_MATH_OPERATIONS:
            src_rnd = state.rng() % (NUM_REGS * (NUM_REGS - 1))
            src1 = src_rnd % NUM_REGS
            src2 = src_rnd // NUM_REGS
            if src2 >= src1:
                src2 += 1
            sel1 = state.rng()
            dst = state.next_dst()
            sel2 = state.rng()
            ops.append(_MathOp(src1, src2, sel1, dst, sel2))

    dag = []
    for i in range(_WORDS_PER_LANE):
        dst = 0 if i == 0 else state.next_dst()
        sel = state.rng()
        dag.append((dst, sel))
    return _RoundProgram(tuple(ops), tuple(dag))


def _run_round(
    context: EpochContext, r: int, mix: list[list[int]], program: _RoundProgram
) -> None:
    num_items = context.full_dataset_num_items // 2
    item_index = mix[r % NUM_LANES][0] % num_items
    item = to_words32(calculate_dataset_item_2048(context, item_index))
    l1_cache = context.l1_cache

    for op in program.ops:
        if isinstance(op, _CacheOp):
            for lane in mix:
                word = l1_cache[lane[op.src] % L1_CACHE_NUM_ITEMS]
                lane[op.dst] = random_merge(lane[op.dst], word, op.sel)
        else:
            for lane in mix:
                data = random_math(lane[op.src1], lane[op.src2], op.sel1)
                lane[op.dst] = random_merge(lane[op.dst], data, op.sel2)

    for l, lane in enumerate(mix):
        offset = ((l ^ r) % NUM_LANES) * _WORDS_PER_LANE
        for i, (dst, sel) in enumerate(program.dag):
            lane[dst] = random_merge(lane[dst], item[offset + i], sel)


def _period_seed(block_number: int) -> int:
    quotient = abs(block_number) // PERIOD_LENGTH
    return (quotient if block_number >= 0 else -quotient) & _MASK64


def hash_mix(context: EpochContext, block_number: int, seed: int) -> bytes:
    """Run the ProgPoW rounds for ``seed`` and reduce the mix to a 256-bit hash."""
    mix = init_mix(seed)
    program = _round_program(_period_seed(block_number))
    for r in range(NUM_ROUNDS):
        _run_round(context, r, mix, program)

    lane_hashes = []
    for lane in mix:
        h = FNV_OFFSET_BASIS
        for word in lane:
            h = fnv1a(h, word)
        lane_hashes.append(h)

    mix_hash = [FNV_OFFSET_BASIS] * _HASH256_WORDS
    for l, lane_hash in enumerate(lane_hashes):
        k = l % _HASH256_WORDS
        mix_hash[k] = fnv1a(mix_hash[k], lane_hash)
    return from_words32(mix_hash)


def hash_nonce(
    context: EpochContext, block_number: int, header_hash: bytes, nonce: int
) -> Result:
    """Compute the ProgPoW final hash and mix hash of a header and nonce."""
    header_hash = _check_hash256(header_hash, "header hash")
    seed = keccak_progpow_64(header_hash, _check_nonce(nonce))
    mix_hash = hash_mix(context, block_number, seed)
    final_hash = keccak_progpow_256(header_hash, seed, mix_hash)
    return Result(final_hash, mix_hash)


def verify(
    context: EpochContext,
    block_number: int,
    header_hash: bytes,
    mix_hash: bytes,
    nonce: int,
    boundary: bytes,
) -> bool:
    """Check the final hash against ``boundary`` and recompute the mix hash."""
    header_hash = _check_hash256(header_hash, "header hash")
    mix_hash = _check_hash256(mix_hash, "mix hash")
    boundary = _check_hash256(boundary, "boundary")
    seed = keccak_progpow_64(header_hash, _check_nonce(nonce))
    final_hash = keccak_progpow_256(header_hash, seed, mix_hash)
    if not is_less_or_equal(final_hash, boundary):
        return False
    return is_equal(hash_mix(context, block_number, seed), mix_hash)


def _search(
    context: EpochContext,
    block_number: int,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    header_hash = _check_hash256(header_hash, "header hash")
    boundary = _check_hash256(boundary, "boundary")
    start_nonce = _check_nonce(start_nonce)
    if iterations < 0:
        raise ValueError(f"iterations must not be negative, got {iterations}")
    end_nonce = (start_nonce + iterations) & _MASK64
    for nonce in range(start_nonce, end_nonce):
        r = hash_nonce(context, block_number, header_hash, nonce)
        if is_less_or_equal(r.final_hash, boundary):
            return SearchResult(True, nonce, r.final_hash, r.mix_hash)
    return SearchResult()


def search_light(
    context: EpochContext,
    block_number: int,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    """Try ``iterations`` nonces from ``start_nonce``; return the first within ``boundary``."""
    return _search(context, block_number, header_hash, boundary, start_nonce, iterations)


def search(
    context: EpochContext,
    block_number: int,
    header_hash: bytes,
    boundary: bytes,
    start_nonce: int,
    iterations: int,
) -> SearchResult:
    """Like :func:`search_light`, but requires a full epoch context."""
    if not context.is_full:
        raise ValueError("search needs a full epoch context")
    return _search(context, block_number, header_hash, boundary, start_nonce, iterations)