import pytest

from pubky.blakehash import Hasher, blake3


def test_small_entry_hash():
    assert blake3(bytes([1, 2, 3, 4, 5])) == bytes(
        [
            2, 79, 103, 192, 66, 90, 61, 192, 47, 186, 245, 140, 185, 61, 229, 19,
            46, 61, 117, 197, 25, 250, 160, 186, 218, 33, 73, 29, 136, 201, 112, 87,
        ]
    )


def test_chunked_entry_hash():
    hasher = Hasher()
    hasher.update(bytes(1024 * 1024))
    assert hasher.finalize() == bytes(
        [
            72, 141, 226, 2, 247, 59, 217, 118, 222, 78, 112, 72, 244, 225, 243, 154,
            119, 109, 134, 213, 130, 183, 52, 143, 245, 59, 244, 50, 185, 135, 252, 168,
        ]
    )


def test_empty_input():
    assert blake3(b"").hex() == (
        "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"
    )


@pytest.mark.parametrize("size", [0, 1, 63, 64, 65, 1023, 1024, 1025, 2048, 3073, 5000])
@pytest.mark.parametrize("split", [1, 7, 64, 1000])
def test_incremental_matches_one_shot(size, split):
    data = bytes(i % 251 for i in range(size))
    hasher = Hasher()
    for start in range(0, len(data), split):
        hasher.update(data[start:start + split])
    assert hasher.finalize() == blake3(data)


def test_finalize_does_not_consume_state():
    hasher = Hasher(b"abc")
    first = hasher.finalize()
    assert hasher.finalize() == first
    hasher.update(b"def")
    assert hasher.finalize() == blake3(b"abcdef")


def test_update_is_chainable_and_output_length():
    digest = Hasher().update(b"a").update(b"b").finalize()
    assert digest == blake3(b"ab")
    assert len(digest) == 32


def test_different_inputs_differ():
    assert blake3(b"\x00") != blake3(b"\x01")
    assert blake3(bytes(1024)) != blake3(bytes(1025))