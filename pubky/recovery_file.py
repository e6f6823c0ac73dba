"""Passphrase-encrypted recovery files holding a keypair's secret key."""

from __future__ import annotations

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from pubky.crypto import CryptoError, decrypt, encrypt
from pubky.keys import Keypair

SPEC_NAME = "recovery"
SPEC_LINE = "pubky.org/recovery"
_LEGACY_SPEC_LINE = b"pkarr.org/recovery"

# Argon2id defaults: 19 MiB memory, 2 passes, 1 lane, 32-byte output.
_ARGON2_MEMORY_KIB = 19 * 1024
_ARGON2_ITERATIONS = 2
_ARGON2_LANES = 1


class RecoveryFileError(Exception):
    """Raised when a recovery file cannot be created or decrypted."""


def _encryption_key(passphrase: str) -> bytes:
    try:
        kdf = Argon2id(
            salt=SPEC_NAME.encode(),
            length=32,
            iterations=_ARGON2_ITERATIONS,
            lanes=_ARGON2_LANES,
            memory_cost=_ARGON2_MEMORY_KIB,
        )
        return kdf.derive(passphrase.encode())
    except (UnsupportedAlgorithm, ValueError) as exc:
        raise RecoveryFileError(str(exc)) from exc


def create_recovery_file(keypair: Keypair, passphrase: str) -> bytes:
    """Return the spec line, a newline, and the encrypted secret key."""
    encryption_key = _encryption_key(passphrase)
    try:
        encrypted = encrypt(keypair.secret_key(), encryption_key)
    except CryptoError as exc:
        raise RecoveryFileError(str(exc)) from exc
    return SPEC_LINE.encode() + b"\n" + encrypted


def decrypt_recovery_file(recovery_file: bytes, passphrase: str) -> Keypair:
    """Recover the keypair stored in `recovery_file` using `passphrase`."""
    encryption_key = _encryption_key(passphrase)

    spec_line, newline, encrypted = bytes(recovery_file).partition(b"\n")
    if not newline:
        raise RecoveryFileError(
            "Recovery file should start with a spec line, followed by a new line character"
        )
    if not (spec_line.startswith(SPEC_LINE.encode()) or spec_line.startswith(_LEGACY_SPEC_LINE)):
        raise RecoveryFileError(
            "Recovery file should start with a spec line, followed by a new line character"
        )
    if not encrypted:
        raise RecoveryFileError(
            "Recovery file should contain an encrypted secret key after the new line character"
        )

    try:
        secret_key = decrypt(encrypted, encryption_key)
    except CryptoError as exc:
        raise RecoveryFileError(str(exc)) from exc

    if len(secret_key) != 32:
        raise RecoveryFileError(
            f"Recovery file encrypted secret key should be 32 bytes, got {len(secret_key)}"
        )
    return Keypair.from_secret_key(secret_key)