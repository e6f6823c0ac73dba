"""Ed25519 keys and their z-base-32 text form."""

from __future__ import annotations

from dataclasses import dataclass

import nacl.exceptions
import nacl.signing

_ALPHABET = "ybndrfg8ejkmcpqxot1uwisza345h769"
_DECODE = {char: index for index, char in enumerate(_ALPHABET)}

PUBLIC_KEY_LENGTH = 32
ENCODED_LENGTH = 52


def z32_encode(data: bytes) -> str:
    """Encode bytes as z-base-32 without padding."""
    nbits = len(data) * 8
    nchars = -(-nbits // 5)
    value = int.from_bytes(data, "big") << (nchars * 5 - nbits)
    return "".join(
        _ALPHABET[(value >> shift) & 31] for shift in range((nchars - 1) * 5, -1, -5)
    )


def z32_decode(text: str) -> bytes:
    """Decode z-base-32 text; trailing bits that do not fill a byte are dropped."""
    value = 0
    for char in text:
        try:
            value = (value << 5) | _DECODE[char]
        except KeyError:
            raise ValueError(f"invalid z-base-32 character: {char!r}") from None
    nbits = len(text) * 5
    nbytes = nbits // 8
    return (value >> (nbits - nbytes * 8)).to_bytes(nbytes, "big")


@dataclass(frozen=True)
class PublicKey:
    """An Ed25519 public key, shown as 52 z-base-32 characters."""

    key: bytes

    def __post_init__(self) -> None:
        if len(self.key) != PUBLIC_KEY_LENGTH:
            raise ValueError(f"public key should be {PUBLIC_KEY_LENGTH} bytes")
        object.__setattr__(self, "key", bytes(self.key))

    @classmethod
    def parse(cls, value: "str | bytes | PublicKey") -> "PublicKey":
        """Parse a key from raw bytes, its encoding, or a URL/domain ending in it."""
        if isinstance(value, PublicKey):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(bytes(value))

        text = value.strip()
        if "://" in text:
            text = text.split("://", 1)[1]
        text = text.split("/", 1)[0]
        text = text.split(":", 1)[0]
        text = text.rsplit(".", 1)[-1]
        if len(text) != ENCODED_LENGTH:
            raise ValueError(f"invalid public key: {value!r}")
        return cls(z32_decode(text))

    def to_bytes(self) -> bytes:
        return self.key

    def verify(self, signature: bytes, message: bytes) -> bool:
        """Return whether `signature` is a valid signature of `message`."""
        try:
            nacl.signing.VerifyKey(self.key).verify(bytes(message), bytes(signature))
        except (nacl.exceptions.BadSignatureError, ValueError, TypeError):
            return False
        return True

    def __str__(self) -> str:
        return z32_encode(self.key)


class Keypair:
    """An Ed25519 signing keypair."""

    __slots__ = ("_signing_key",)

    def __init__(self, signing_key: nacl.signing.SigningKey) -> None:
        self._signing_key = signing_key

    @classmethod
    def random(cls) -> "Keypair":
        return cls(nacl.signing.SigningKey.generate())

    @classmethod
    def from_secret_key(cls, secret_key: bytes) -> "Keypair":
        if len(secret_key) != 32:
            raise ValueError("secret key should be 32 bytes")
        return cls(nacl.signing.SigningKey(bytes(secret_key)))

    def public_key(self) -> PublicKey:
        return PublicKey(bytes(self._signing_key.verify_key))

    def secret_key(self) -> bytes:
        return bytes(self._signing_key)

    def sign(self, message: bytes) -> bytes:
        """Return the 64-byte detached signature of `message`."""
        return self._signing_key.sign(bytes(message)).signature

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Keypair):
            return NotImplemented
        return self.secret_key() == other.secret_key()

    def __hash__(self) -> int:
        return hash(self.secret_key())

    def __repr__(self) -> str:
        return f"Keypair(public_key={self.public_key()})"