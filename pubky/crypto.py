"""Symmetric encryption (XSalsa20-Poly1305), hashing and randomness helpers."""

from __future__ import annotations

import secrets

import nacl.exceptions
import nacl.secret

from pubky.blakehash import blake3

PUBKY_AUTH = b"PUBKY:AUTH"

NONCE_SIZE = nacl.secret.SecretBox.NONCE_SIZE
KEY_SIZE = nacl.secret.SecretBox.KEY_SIZE


class CryptoError(Exception):
    """Raised when encryption or decryption fails."""


def random_bytes(n: int) -> bytes:
    """Return `n` cryptographically secure random bytes."""
    return secrets.token_bytes(n)


def random_hash() -> bytes:
    """Return a random 32-byte value usable as a hash."""
    return random_bytes(32)


def hash_bytes(data: bytes) -> bytes:
    """Return the BLAKE3 digest of `data`."""
    return blake3(data)


def _secret_box(encryption_key: bytes) -> nacl.secret.SecretBox:
    if len(encryption_key) != KEY_SIZE:
        raise CryptoError(f"encryption key should be {KEY_SIZE} bytes")
    return nacl.secret.SecretBox(bytes(encryption_key))


def encrypt(plain_text: bytes, encryption_key: bytes) -> bytes:
    """Encrypt with a fresh random nonce; returns `nonce || ciphertext`."""
    box = _secret_box(encryption_key)
    try:
        return bytes(box.encrypt(bytes(plain_text)))
    except (nacl.exceptions.CryptoError, ValueError, TypeError) as exc:
        raise CryptoError(str(exc)) from exc


def decrypt(data: bytes, encryption_key: bytes) -> bytes:
    """Decrypt `nonce || ciphertext` produced by :func:`encrypt`."""
    box = _secret_box(encryption_key)
    if len(data) < NONCE_SIZE:
        raise CryptoError("encrypted data is shorter than the nonce")
    try:
        return bytes(box.decrypt(bytes(data[NONCE_SIZE:]), bytes(data[:NONCE_SIZE])))
    except (nacl.exceptions.CryptoError, ValueError, TypeError) as exc:
        raise CryptoError(str(exc) or "decryption failed") from exc