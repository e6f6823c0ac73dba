"""Strictly monotonic microsecond timestamps with a sortable text form."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from email.utils import formatdate

_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_DECODE = {char: index for index, char in enumerate(_ALPHABET)}
_DECODE.update({char.lower(): index for char, index in list(_DECODE.items())})
_DECODE.update({"O": 0, "o": 0, "I": 1, "i": 1, "L": 1, "l": 1})

_BYTES = 8
_MAX = 1 << 64
_ENCODED_LENGTH = 13


class _Clock:
    """Hands out strictly increasing microsecond readings."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last = 0

    def tick(self) -> int:
        with self._lock:
            current = time.time_ns() // 1_000
            if current <= self._last:
                current = self._last + 1
            self._last = current
            return current


_CLOCK = _Clock()


@dataclass(frozen=True, order=True)
class Timestamp:
    """Microseconds since the Unix epoch, as an unsigned 64-bit value."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value < _MAX:
            raise ValueError("timestamp should fit in an unsigned 64-bit integer")

    @classmethod
    def now(cls) -> "Timestamp":
        """The current time; never equal to or earlier than a previous call."""
        return cls(_CLOCK.tick())

    @classmethod
    def parse(cls, value: str) -> "Timestamp":
        """Parse the 13-character base32 Crockford form produced by `str()`."""
        bits = 0
        for char in value:
            try:
                bits = (bits << 5) | _DECODE[char]
            except KeyError:
                raise ValueError(f"invalid base32 character: {char!r}") from None
        nbits = len(value) * 5
        nbytes = nbits // 8
        if nbytes != _BYTES:
            raise ValueError(f"timestamp should be {_BYTES} bytes, got {nbytes}")
        return cls(bits >> (nbits - nbytes * 8))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Timestamp":
        """Build from 8 big-endian bytes."""
        if len(data) != _BYTES:
            raise ValueError(f"timestamp should be {_BYTES} bytes, got {len(data)}")
        return cls(int.from_bytes(data, "big"))

    def to_bytes(self) -> bytes:
        """The 8 big-endian bytes; their order matches numeric order."""
        return self.value.to_bytes(_BYTES, "big")

    @property
    def seconds(self) -> int:
        return self.value // 1_000_000

    def format_http_date(self) -> str:
        """The timestamp as an HTTP date, to whole seconds."""
        return formatdate(self.seconds, usegmt=True)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        nbits = _BYTES * 8
        padded = self.value << (_ENCODED_LENGTH * 5 - nbits)
        return "".join(
            _ALPHABET[(padded >> shift) & 31]
            for shift in range((_ENCODED_LENGTH - 1) * 5, -1, -5)
        )