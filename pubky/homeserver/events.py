"""Public write events (PUT and DELETE of entries), for syncing indexers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pubky.homeserver.postcard import DecodeError, Reader, encode_str, encode_varint


class Operation(Enum):
    """The kind of change an event records; values are the feed labels."""

    PUT = "PUT"
    DELETE = "DEL"

    @property
    def tag(self) -> int:
        return _TAGS.index(self)


_TAGS = (Operation.PUT, Operation.DELETE)


@dataclass(frozen=True)
class Event:
    """A change to the entry at `url`."""

    operation: Operation
    url: str

    @classmethod
    def put(cls, url: str) -> "Event":
        return cls(Operation.PUT, url)

    @classmethod
    def delete(cls, url: str) -> "Event":
        return cls(Operation.DELETE, url)

    def serialize(self) -> bytes:
        return encode_varint(self.operation.tag) + encode_str(self.url)

    @classmethod
    def deserialize(cls, data: bytes) -> "Event":
        if not data:
            raise DecodeError("empty event")
        if data[0] >= len(_TAGS):
            raise DecodeError("Unknown Event version")
        reader = Reader(data)
        operation = _TAGS[reader.read_varint()]
        return cls(operation, reader.read_str())

    def line(self) -> str:
        """The feed line: `<OP> <url>`."""
        return f"{self.operation.value} {self.url}"