"""Minimal postcard wire format: LEB128 varints, raw bytes and strings."""

from __future__ import annotations

_MAX_VARINT_BYTES = 10
_U64_LIMIT = 1 << 64


class DecodeError(ValueError):
    """Raised when bytes do not hold a valid encoded value."""


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a LEB128 varint."""
    if not 0 <= value < _U64_LIMIT:
        raise ValueError("varint value should fit in an unsigned 64-bit integer")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def encode_str(value: str) -> bytes:
    """Encode a string as its UTF-8 length followed by its bytes."""
    data = value.encode("utf-8")
    return encode_varint(len(data)) + data


class Reader:
    """Sequential decoder over a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self.position

    def read_varint(self) -> int:
        result = 0
        for index in range(_MAX_VARINT_BYTES):
            if self.position >= len(self._data):
                raise DecodeError("unexpected end of input in varint")
            byte = self._data[self.position]
            self.position += 1
            result |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                if result >= _U64_LIMIT:
                    raise DecodeError("varint overflows 64 bits")
                return result
        raise DecodeError("varint is too long")

    def read_bytes(self, n: int) -> bytes:
        if n > self.remaining:
            raise DecodeError(f"expected {n} bytes, only {self.remaining} left")
        chunk = self._data[self.position : self.position + n]
        self.position += n
        return chunk

    def read_str(self) -> str:
        length = self.read_varint()
        try:
            return self.read_bytes(length).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError("string is not valid UTF-8") from exc