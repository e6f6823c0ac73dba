import pytest

from pubky.keys import Keypair
from pubky.recovery_file import (
    RecoveryFileError,
    create_recovery_file,
    decrypt_recovery_file,
)

PASSPHRASE = "password"


def test_encrypt_decrypt_recovery_file():
    keypair = Keypair.random()

    recovery_file = create_recovery_file(keypair, PASSPHRASE)
    recovered = decrypt_recovery_file(recovery_file, PASSPHRASE)

    assert recovered.public_key() == keypair.public_key()


def test_spec_line_prefix():
    recovery_file = create_recovery_file(Keypair.random(), PASSPHRASE)
    assert recovery_file.startswith(b"pubky.org/recovery\n")
    assert len(recovery_file) == len(b"pubky.org/recovery\n") + 24 + 16 + 32


def test_legacy_spec_line_accepted():
    keypair = Keypair.random()
    recovery_file = create_recovery_file(keypair, PASSPHRASE)
    legacy = b"pkarr.org/recovery" + recovery_file[len(b"pubky.org/recovery"):]
    assert decrypt_recovery_file(legacy, PASSPHRASE) == keypair


def test_wrong_passphrase():
    recovery_file = create_recovery_file(Keypair.random(), PASSPHRASE)
    with pytest.raises(RecoveryFileError):
        decrypt_recovery_file(recovery_file, "secret")


def test_missing_newline():
    with pytest.raises(RecoveryFileError, match="spec line"):
        decrypt_recovery_file(b"pubky.org/recovery", PASSPHRASE)


def test_unsupported_version():
    recovery_file = create_recovery_file(Keypair.random(), PASSPHRASE)
    unsupported = b"other.org/recovery" + recovery_file[len(b"pubky.org/recovery"):]
    with pytest.raises(RecoveryFileError, match="spec line"):
        decrypt_recovery_file(unsupported, PASSPHRASE)


def test_missing_encrypted_secret_key():
    with pytest.raises(RecoveryFileError, match="encrypted secret key"):
        decrypt_recovery_file(b"pubky.org/recovery\n", PASSPHRASE)