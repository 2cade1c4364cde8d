import pytest

from ethashpow.epoch import (
    EPOCH_LENGTH,
    FULL_DATASET_INIT_SIZE,
    FULL_DATASET_ITEM_SIZE,
    L1_CACHE_NUM_ITEMS,
    LIGHT_CACHE_ITEM_SIZE,
    build_light_cache,
    calculate_dataset_item_512,
    calculate_dataset_item_1024,
    calculate_dataset_item_2048,
    calculate_epoch_seed,
    calculate_full_dataset_num_items,
    calculate_light_cache_num_items,
    create_epoch_context,
    find_epoch_number,
    get_epoch_number,
    get_full_dataset_size,
    get_light_cache_size,
)
from ethashpow.hashtypes import to_words32
from ethashpow.keccak import keccak256
from ethashpow.primes import find_largest_prime


@pytest.fixture(scope="module")
def full_context():
    return create_epoch_context(
        3, full=True, light_cache_num_items=11, full_dataset_num_items=509
    )


@pytest.fixture(scope="module")
def light_context():
    return create_epoch_context(
        3, full=False, light_cache_num_items=11, full_dataset_num_items=509
    )


def test_epoch_seed_zero_is_zero_bytes():
    assert calculate_epoch_seed(0) == bytes(32)


def test_epoch_seed_one_is_keccak_of_zeros():
    assert calculate_epoch_seed(1).hex() == (
        "290decd9548b62a8d60345a988386fc84ba6bc95484008f6362f93160ef3e563"
    )


def test_epoch_seed_chain():
    assert calculate_epoch_seed(4) == keccak256(calculate_epoch_seed(3))


def test_light_cache_num_items_epoch_zero():
    assert calculate_light_cache_num_items(0) == 262139


def test_light_cache_num_items_grows_and_is_prime():
    n0 = calculate_light_cache_num_items(0)
    n1 = calculate_light_cache_num_items(1)
    assert n1 > n0
    assert find_largest_prime(n1) == n1


def test_full_dataset_num_items_is_prime_below_bound():
    n = calculate_full_dataset_num_items(0)
    assert n <= FULL_DATASET_INIT_SIZE // FULL_DATASET_ITEM_SIZE
    assert find_largest_prime(n) == n


@pytest.mark.parametrize(
    "block, epoch",
    [(0, 0), (EPOCH_LENGTH - 1, 0), (EPOCH_LENGTH, 1), (5 * EPOCH_LENGTH + 7, 5)],
)
def test_get_epoch_number(block, epoch):
    assert get_epoch_number(block) == epoch


def test_sizes():
    assert get_light_cache_size(10) == 10 * LIGHT_CACHE_ITEM_SIZE
    assert get_full_dataset_size(10) == 10 * FULL_DATASET_ITEM_SIZE


def test_build_light_cache_shape_and_determinism():
    seed = calculate_epoch_seed(2)
    cache = build_light_cache(7, seed)
    assert len(cache) == 7
    assert all(len(item) == 64 for item in cache)
    assert build_light_cache(7, seed) == cache


def test_build_light_cache_depends_on_seed():
    assert build_light_cache(5, calculate_epoch_seed(1)) != build_light_cache(
        5, calculate_epoch_seed(2)
    )


def test_build_light_cache_rejects_empty():
    with pytest.raises(ValueError):
        build_light_cache(0, bytes(32))


def test_dataset_item_1024_is_two_512_items(light_context):
    item = calculate_dataset_item_1024(light_context, 5)
    assert len(item) == 128
    assert item == calculate_dataset_item_512(light_context, 10) + calculate_dataset_item_512(
        light_context, 11
    )


def test_dataset_item_2048_is_four_512_items(light_context):
    item = calculate_dataset_item_2048(light_context, 2)
    expected = b"".join(calculate_dataset_item_512(light_context, i) for i in range(8, 12))
    assert item == expected


def test_dataset_item_2048_is_two_1024_items(light_context):
    assert calculate_dataset_item_2048(light_context, 1) == (
        calculate_dataset_item_1024(light_context, 2)
        + calculate_dataset_item_1024(light_context, 3)
    )


def test_context_fields(light_context):
    assert light_context.epoch_number == 3
    assert light_context.light_cache_num_items == 11
    assert light_context.full_dataset_num_items == 509
    assert light_context.light_cache == tuple(build_light_cache(11, calculate_epoch_seed(3)))
    assert light_context.full_dataset is None
    assert not light_context.is_full


def test_l1_cache_holds_leading_dataset_items(light_context):
    assert len(light_context.l1_cache) == L1_CACHE_NUM_ITEMS
    assert light_context.l1_cache[:64] == to_words32(
        calculate_dataset_item_2048(light_context, 0)
    )
    assert light_context.l1_cache[-64:] == to_words32(
        calculate_dataset_item_2048(light_context, 63)
    )


def test_full_context_prefills_dataset(full_context):
    assert full_context.is_full
    assert len(full_context.full_dataset) == 128
    assert full_context.full_dataset[0] == calculate_dataset_item_1024(full_context, 0)
    assert full_context.full_dataset[127] == calculate_dataset_item_1024(full_context, 127)


def test_full_and_light_share_l1(full_context, light_context):
    assert full_context.l1_cache == light_context.l1_cache


def test_create_epoch_context_rejects_negative_epoch():
    with pytest.raises(ValueError):
        create_epoch_context(-1, light_cache_num_items=11, full_dataset_num_items=509)


def test_find_epoch_number_round_trip():
    assert find_epoch_number(calculate_epoch_seed(17)) == 17
    assert find_epoch_number(calculate_epoch_seed(18)) == 18
    assert find_epoch_number(calculate_epoch_seed(0)) == 0
    assert find_epoch_number(calculate_epoch_seed(250)) == 250


def test_find_epoch_number_unknown_seed():
    assert find_epoch_number(b"\xff" * 32) == -1


def test_find_epoch_number_rejects_wrong_length():
    with pytest.raises(ValueError):
        find_epoch_number(b"\x00" * 31)