import pytest

from pubky.crypto import (
    CryptoError,
    decrypt,
    encrypt,
    hash_bytes,
    random_bytes,
    random_hash,
)


def test_encrypt_decrypt():
    plain_text = b"Plain text!"
    encryption_key = bytes(32)

    encrypted = encrypt(plain_text, encryption_key)
    decrypted = decrypt(encrypted, encryption_key)

    assert decrypted == plain_text


def test_encrypted_layout_length():
    encrypted = encrypt(b"12345", bytes(32))
    assert len(encrypted) == 24 + 16 + 5


def test_nonce_is_fresh():
    first = encrypt(b"same", bytes(32))
    second = encrypt(b"same", bytes(32))

    assert len({first[:24], second[:24]}) == 2
    assert decrypt(first, bytes(32)) == b"same"
    assert decrypt(second, bytes(32)) == b"same"


def test_wrong_key_fails():
    encrypted = encrypt(b"hello", bytes(32))
    with pytest.raises(CryptoError):
        decrypt(encrypted, b"\x01" * 32)


def test_tampered_ciphertext_fails():
    encrypted = bytearray(encrypt(b"hello", bytes(32)))
    encrypted[-1] ^= 0xFF
    with pytest.raises(CryptoError):
        decrypt(bytes(encrypted), bytes(32))


def test_short_input_fails():
    with pytest.raises(CryptoError):
        decrypt(b"\x00" * 10, bytes(32))


def test_bad_key_length():
    with pytest.raises(CryptoError):
        encrypt(b"hello", bytes(16))


def test_random_bytes():
    assert len(random_bytes(16)) == 16
    assert random_bytes(32) != random_bytes(32)
    assert len(random_hash()) == 32


def test_hash_bytes_matches_known_digest():
    assert hash_bytes(bytes([1, 2, 3, 4, 5]))[:4] == bytes([2, 79, 103, 192])