import pytest

from ethashpow.keccak import (
    keccak256,
    keccak512,
    keccakf800,
    keccakf1600,
)


def test_keccak256_empty():
    assert keccak256(b"").hex() == (
        "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
    )


def test_keccak256_of_zero_hash():
    assert keccak256(bytes(32)).hex() == (
        "290decd9548b62a8d60345a988386fc84ba6bc95484008f6362f93160ef3e563"
    )


def test_keccakf1600_zero_state_first_lane():
    out = keccakf1600([0] * 25)
    assert out[0] == 0xF1258F7940E1DDE7


def test_digest_sizes():
    assert len(keccak256(b"abc")) == 32
    assert len(keccak512(b"abc")) == 64


def test_accepts_bytes_like():
    data = b"header data"
    assert keccak256(bytearray(data)) == keccak256(data)
    assert keccak512(memoryview(data)) == keccak512(data)


@pytest.mark.parametrize("size", [71, 72, 73, 135, 136, 137, 300])
def test_block_boundary_inputs_are_distinct(size):
    a = b"\x00" * size
    b = b"\x00" * (size + 1)
    assert keccak256(a) != keccak256(b)
    assert keccak512(a) != keccak512(b)


def test_keccak512_is_not_extended_keccak256():
    data = b"seed"
    assert keccak512(data)[:32] != keccak256(data)


def test_keccakf1600_does_not_mutate_input():
    state = list(range(25))
    copy = list(state)
    keccakf1600(state)
    assert state == copy


def test_keccakf1600_deterministic_and_in_range():
    state = [i * 0x0101010101010101 for i in range(25)]
    first = keccakf1600(state)
    assert first == keccakf1600(state)
    assert len(first) == 25
    assert all(0 <= w < 1 << 64 for w in first)


def test_keccakf800_in_range_and_nontrivial():
    out = keccakf800([0] * 25)
    assert len(out) == 25
    assert all(0 <= w < 1 << 32 for w in out)
    assert any(out)


def test_keccakf800_differs_on_single_bit_change():
    a = keccakf800([0] * 25)
    b = keccakf800([1] + [0] * 24)
    assert a != b


@pytest.mark.parametrize("func", [keccakf1600, keccakf800])
def test_wrong_state_length_raises(func):
    with pytest.raises(ValueError):
        func([0] * 24)


def test_keccakf800_rejects_wide_word():
    with pytest.raises(ValueError):
        keccakf800([1 << 32] + [0] * 24)


def test_keccakf1600_rejects_negative_word():
    with pytest.raises(ValueError):
        keccakf1600([-1] + [0] * 24)