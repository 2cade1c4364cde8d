# ethashpow

A pure-Python library for the Ethash proof-of-work algorithm and its ProgPoW
variant:

- Keccak-256 and Keccak-512 hashing, and the raw Keccak-f[1600] and
  Keccak-f[800] permutations
- epoch seeds, light cache and full dataset sizes, light cache building and
  dataset item generation
- Ethash and ProgPoW hashing, verification and nonce search
- per-epoch contexts shared between threads

Hashes are plain `bytes` (32 bytes for a 256-bit hash, 64 for a 512-bit one);
words inside them are little-endian. Inputs of the wrong length, nonces that
do not fit in 64 bits and negative iteration counts raise `ValueError`.

The code aims at clarity and correctness, not speed. Building the context of
a real epoch, whose light cache has hundreds of thousands of items, takes a
long time in Python, so tests and experiments normally use small contexts
built with explicit item counts.

## Installation

```
pip install ethashpow
```

To run the test suite:

```
pip install ethashpow[test]
pytest
```

## Usage

### Keccak

```python
from ethashpow.keccak import keccak256, keccak512, keccakf800

digest = keccak256(b"")          # 32 bytes
wide = keccak512(b"abc")         # 64 bytes
state = keccakf800([0] * 25)     # new list of 25 32-bit words
```

`keccakf1600` takes and returns 25 64-bit words in the same way.

### Epoch parameters

```python
from ethashpow.epoch import (
    calculate_epoch_seed,
    calculate_full_dataset_num_items,
    calculate_light_cache_num_items,
    find_epoch_number,
    get_epoch_number,
    get_full_dataset_size,
    get_light_cache_size,
)

epoch = get_epoch_number(1_000_000)          # 2
seed = calculate_epoch_seed(epoch)
assert find_epoch_number(seed) == epoch      # -1 when no epoch matches

light_bytes = get_light_cache_size(calculate_light_cache_num_items(epoch))
dataset_bytes = get_full_dataset_size(calculate_full_dataset_num_items(epoch))
```

Item counts are the largest primes not above the size bound of the epoch,
found with `ethashpow.primes.find_largest_prime`.

### Hashing with a small context

`create_epoch_context` takes optional item counts, so a context can be built
quickly:

```python
from ethashpow import ethash, progpow
from ethashpow.epoch import create_epoch_context

context = create_epoch_context(
    0, full=False, light_cache_num_items=1021, full_dataset_num_items=2039
)

header = bytes(32)
result = ethash.hash_nonce(context, header, 0)
print(result.final_hash.hex(), result.mix_hash.hex())

boundary = b"\xff" * 32
assert ethash.verify(context, header, result.mix_hash, 0, boundary)

found = progpow.search_light(context, 0, header, boundary, 0, 10)
if found.solution_found:
    print("nonce", found.nonce)
```

`search_light` tries `iterations` nonces from `start_nonce` and returns a
`SearchResult` for the first whose final hash, read as a big-endian number,
is not above the boundary; when none is, `solution_found` is `False`.
`search` does the same but needs a context created with `full=True` (it
raises `ValueError` otherwise); for Ethash, dataset items of a full context
are generated on first use and kept. `ethash.verify_final_hash` checks only
the final hash, without recomputing the mix hash.

ProgPoW also exposes its building blocks: `keccak_progpow_256`,
`keccak_progpow_64`, `MixRngState`, `random_math`, `random_merge`,
`init_mix` and `hash_mix`.

### Shared contexts

`ethashpow.managed.get_global_epoch_context(epoch_number)` and
`get_global_epoch_context_full(epoch_number)` return a context built with the
epoch's full-size item counts. It is built once, shared by all threads, and
reused until a different epoch is asked for, which replaces it.

## Modules

| Module | Contents |
| --- | --- |
| `ethashpow.hashtypes` | byte/word conversions, XOR, hash comparison |
| `ethashpow.bits` | 32-bit rotates, bit counts, `mul_hi32`, FNV-1 and FNV-1a |
| `ethashpow.kiss99` | the `Kiss99` pseudo-random generator |
| `ethashpow.primes` | `find_largest_prime` |
| `ethashpow.keccak` | Keccak permutations and hashes |
| `ethashpow.epoch` | `EpochContext`, seeds, sizes, light cache and dataset items |
| `ethashpow.ethash` | Ethash `hash_nonce`, `verify`, `verify_final_hash`, `search_light`, `search` |
| `ethashpow.managed` | shared per-epoch contexts |
| `ethashpow.progpow` | ProgPoW `hash_nonce`, `verify`, `search_light`, `search` and helpers |

## What this package does not do

It is a hashing library only. It has no command-line tool, does not mine on
CPUs or GPUs, does not talk to mining pools, and does not save epoch contexts
or datasets to disk.