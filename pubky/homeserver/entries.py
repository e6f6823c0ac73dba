"""Entry metadata records and key thresholds for listing."""

from __future__ import annotations

from dataclasses import dataclass, field

from pubky.homeserver.postcard import DecodeError, Reader, encode_str, encode_varint
from pubky.timestamp import Timestamp

HASH_LENGTH = 32


@dataclass(frozen=True)
class Entry:
    """Metadata of a stored file: when, its hash, length and content type."""

    version: int = 0
    timestamp: Timestamp = field(default_factory=Timestamp)
    content_hash: bytes = bytes(HASH_LENGTH)
    content_length: int = 0
    content_type: str = ""

    def __post_init__(self) -> None:
        if len(self.content_hash) != HASH_LENGTH:
            raise ValueError(f"content hash should be {HASH_LENGTH} bytes")
        object.__setattr__(self, "content_hash", bytes(self.content_hash))

    @property
    def etag(self) -> str:
        """The quoted hex content hash, as used in ETag headers."""
        return f'"{self.content_hash.hex()}"'

    def serialize(self) -> bytes:
        return b"".join(
            (
                encode_varint(self.version),
                self.timestamp.to_bytes(),
                self.content_hash,
                encode_varint(self.content_length),
                encode_str(self.content_type),
            )
        )

    @classmethod
    def deserialize(cls, data: bytes) -> "Entry":
        if not data:
            raise DecodeError("empty entry")
        if data[0] > 0:
            raise DecodeError("Unknown Entry version")
        reader = Reader(data)
        return cls(
            version=reader.read_varint(),
            timestamp=Timestamp.from_bytes(reader.read_bytes(8)),
            content_hash=reader.read_bytes(HASH_LENGTH),
            content_length=reader.read_varint(),
            content_type=reader.read_str(),
        )


def next_threshold(
    path: str,
    file_or_directory: str,
    is_directory: bool,
    reverse: bool,
    shallow: bool,
) -> str:
    """The key to search beyond (or below, when `reverse`) when listing `path`."""
    if not file_or_directory:
        # `\x7f` sorts after every key under `path`.
        suffix = "\x7f" if reverse else ""
    elif shallow and is_directory:
        # `\x2e` sorts just below `/`, `\x7f` above it: skip the whole directory.
        suffix = "\x2e" if reverse else "\x7f"
    else:
        suffix = ""
    return f"{path}{file_or_directory}{suffix}"