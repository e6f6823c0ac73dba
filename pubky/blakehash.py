"""BLAKE3 hashing (default 32-byte output, unkeyed mode)."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFF
_CHUNK_LEN = 1024
_BLOCK_LEN = 64
_OUT_LEN = 32

_CHUNK_START = 1 << 0
_CHUNK_END = 1 << 1
_PARENT = 1 << 2
_ROOT = 1 << 3

_IV = (
    0x6A09E667,
    0xBB67AE85,
    0x3C6EF372,
    0xA54FF53A,
    0x510E527F,
    0x9B05688C,
    0x1F83D9AB,
    0x5BE0CD19,
)

_PERMUTATION = (2, 6, 3, 10, 7, 0, 4, 13, 1, 11, 12, 5, 9, 14, 15, 8)

# (a, b, c, d, first message word, second message word) for each G call of a round.
_G_CALLS = (
    (0, 4, 8, 12, 0, 1),
    (1, 5, 9, 13, 2, 3),
    (2, 6, 10, 14, 4, 5),
    (3, 7, 11, 15, 6, 7),
    (0, 5, 10, 15, 8, 9),
    (1, 6, 11, 12, 10, 11),
    (2, 7, 8, 13, 12, 13),
    (3, 4, 9, 14, 14, 15),
)


def _message_schedule() -> tuple[tuple[int, ...], ...]:
    order = tuple(range(16))
    rounds = []
    for _ in range(7):
        rounds.append(order)
        order = tuple(order[p] for p in _PERMUTATION)
    return tuple(rounds)


_SCHEDULE = _message_schedule()


def _compress(cv, words, counter: int, block_len: int, flags: int) -> list[int]:
    s = [*cv, *_IV[:4], counter & _MASK, (counter >> 32) & _MASK, block_len, flags]
    for order in _SCHEDULE:
        for a, b, c, d, x, y in _G_CALLS:
            sa = (s[a] + s[b] + words[order[x]]) & _MASK
            sd = s[d] ^ sa
            sd = ((sd >> 16) | (sd << 16)) & _MASK
            sc = (s[c] + sd) & _MASK
            sb = s[b] ^ sc
            sb = ((sb >> 12) | (sb << 20)) & _MASK
            sa = (sa + sb + words[order[y]]) & _MASK
            sd ^= sa
            sd = ((sd >> 8) | (sd << 24)) & _MASK
            sc = (sc + sd) & _MASK
            sb ^= sc
            sb = ((sb >> 7) | (sb << 25)) & _MASK
            s[a], s[b], s[c], s[d] = sa, sb, sc, sd
    low = [x ^ y for x, y in zip(s[:8], s[8:])]
    high = [x ^ k for x, k in zip(s[8:], cv)]
    return low + high


class _Output:
    __slots__ = ("cv", "words", "counter", "block_len", "flags")

    def __init__(self, cv, words, counter: int, block_len: int, flags: int) -> None:
        self.cv = cv
        self.words = words
        self.counter = counter
        self.block_len = block_len
        self.flags = flags

    def chaining_value(self) -> list[int]:
        return _compress(self.cv, self.words, self.counter, self.block_len, self.flags)[:8]

    def root_bytes(self, length: int) -> bytes:
        out = bytearray()
        counter = 0
        while len(out) < length:
            words = _compress(
                self.cv, self.words, counter, self.block_len, self.flags | _ROOT
            )
            out += struct.pack("<16I", *words)
            counter += 1
        return bytes(out[:length])


def _parent_output(left, right, key, flags: int) -> _Output:
    return _Output(key, (*left, *right), 0, _BLOCK_LEN, _PARENT | flags)


class _ChunkState:
    __slots__ = ("cv", "counter", "flags", "block", "blocks_compressed")

    def __init__(self, key, counter: int, flags: int) -> None:
        self.cv = key
        self.counter = counter
        self.flags = flags
        self.block = bytearray()
        self.blocks_compressed = 0

    def __len__(self) -> int:
        return _BLOCK_LEN * self.blocks_compressed + len(self.block)

    def _start_flag(self) -> int:
        return _CHUNK_START if self.blocks_compressed == 0 else 0

    def update(self, data: memoryview) -> None:
        while data:
            if len(self.block) == _BLOCK_LEN:
                words = struct.unpack("<16I", self.block)
                self.cv = _compress(
                    self.cv,
                    words,
                    self.counter,
                    _BLOCK_LEN,
                    self.flags | self._start_flag(),
                )[:8]
                self.blocks_compressed += 1
                self.block = bytearray()
            take = _BLOCK_LEN - len(self.block)
            self.block += data[:take]
            data = data[take:]

    def output(self) -> _Output:
        words = struct.unpack("<16I", bytes(self.block).ljust(_BLOCK_LEN, b"\x00"))
        return _Output(
            self.cv,
            words,
            self.counter,
            len(self.block),
            self.flags | self._start_flag() | _CHUNK_END,
        )


class Hasher:
    """Incremental BLAKE3 hasher."""

    def __init__(self, data: bytes = b"") -> None:
        self._key = _IV
        self._flags = 0
        self._chunk = _ChunkState(self._key, 0, self._flags)
        self._stack: list[list[int]] = []
        if data:
            self.update(data)

    def _push_chunk_cv(self, cv, total_chunks: int) -> None:
        while total_chunks & 1 == 0:
            cv = _parent_output(self._stack.pop(), cv, self._key, self._flags).chaining_value()
            total_chunks >>= 1
        self._stack.append(cv)

    def update(self, data: bytes) -> "Hasher":
        """Feed more input; returns the hasher to allow chaining."""
        view = memoryview(data).cast("B")
        while view:
            if len(self._chunk) == _CHUNK_LEN:
                chunk_cv = self._chunk.output().chaining_value()
                total_chunks = self._chunk.counter + 1
                self._push_chunk_cv(chunk_cv, total_chunks)
                self._chunk = _ChunkState(self._key, total_chunks, self._flags)
            take = _CHUNK_LEN - len(self._chunk)
            self._chunk.update(view[:take])
            view = view[take:]
        return self

    def finalize(self) -> bytes:
        """Return the 32-byte digest of everything fed so far."""
        output = self._chunk.output()
        for cv in reversed(self._stack):
            output = _parent_output(cv, output.chaining_value(), self._key, self._flags)
        return output.root_bytes(_OUT_LEN)


def blake3(data: bytes) -> bytes:
    """Return the 32-byte BLAKE3 digest of `data`."""
    return Hasher(data).finalize()