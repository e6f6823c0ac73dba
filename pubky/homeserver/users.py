"""Users stored by the homeserver."""

from __future__ import annotations

from dataclasses import dataclass

from pubky.homeserver.postcard import Reader, encode_varint


@dataclass(frozen=True)
class User:
    """A registered user and when it was first seen (microseconds)."""

    created_at: int

    def serialize(self) -> bytes:
        return encode_varint(self.created_at)

    @classmethod
    def deserialize(cls, data: bytes) -> "User":
        return cls(created_at=Reader(data).read_varint())