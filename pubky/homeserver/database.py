"""LMDB-backed storage for the homeserver: users, sessions, entries, blobs and events."""

from __future__ import annotations

import mmap
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

import lmdb

from pubky.blakehash import Hasher
from pubky.homeserver.entries import Entry, next_threshold
from pubky.homeserver.events import Event
from pubky.homeserver.users import User
from pubky.keys import PublicKey
from pubky.timestamp import Timestamp

USERS_TABLE = "users"
SESSIONS_TABLE = "sessions"
BLOBS_TABLE = "blobs"
ENTRIES_TABLE = "entries"
EVENTS_TABLE = "events"

TABLE_NAMES = (USERS_TABLE, SESSIONS_TABLE, BLOBS_TABLE, ENTRIES_TABLE, EVENTS_TABLE)
TABLES_COUNT = len(TABLE_NAMES)

DEFAULT_MAP_SIZE = 10 * 1024 * 1024 * 1024
DEFAULT_LIST_LIMIT = 100
MAX_LIST_LIMIT = 1000

_FIRST_EVENT_CURSOR = "0000000000000"


def max_chunk_size() -> int:
    """The largest blob chunk that keeps two records per LMDB page."""
    page_size = mmap.PAGESIZE
    # 16 bytes page header, two records per page, ~10 bytes overhead per record,
    # and a 12-byte key (8-byte timestamp + 4-byte chunk index).
    return ((page_size - 16) // 2) - (8 + 2) - 12


@dataclass(frozen=True)
class _Tables:
    users: object
    sessions: object
    blobs: object
    entries: object
    events: object


def _greater_than(txn, db, key: bytes) -> Optional[tuple[bytes, bytes]]:
    cursor = txn.cursor(db)
    if not cursor.set_range(key):
        return None
    if cursor.key() == key and not cursor.next():
        return None
    return cursor.key(), cursor.value()


def _lower_than(txn, db, key: bytes) -> Optional[tuple[bytes, bytes]]:
    cursor = txn.cursor(db)
    if cursor.set_range(key):
        if not cursor.prev():
            return None
    elif not cursor.last():
        return None
    return cursor.key(), cursor.value()


def _entry_key(public_key: object, path: str) -> str:
    return f"{public_key}/{path}"


class Database:
    """The homeserver's persistent store."""

    def __init__(
        self,
        env: lmdb.Environment,
        tables: _Tables,
        storage: Path,
        buffers_dir: Path,
        default_list_limit: int,
        max_list_limit: int,
    ) -> None:
        self._env = env
        self._tables = tables
        self.storage = storage
        self.buffers_dir = buffers_dir
        self.default_list_limit = default_list_limit
        self.max_list_limit = max_list_limit
        self.max_chunk_size = max_chunk_size()

    @classmethod
    def open(
        cls,
        storage,
        map_size: int = DEFAULT_MAP_SIZE,
        default_list_limit: int = DEFAULT_LIST_LIMIT,
        max_list_limit: int = MAX_LIST_LIMIT,
    ) -> "Database":
        """Open (creating if needed) the store under `storage`."""
        storage = Path(storage)
        buffers_dir = storage / "buffers"

        # Leftover buffers only survive if the directory is not empty.
        try:
            buffers_dir.rmdir()
        except OSError:
            pass
        buffers_dir.mkdir(parents=True, exist_ok=True)

        env = lmdb.open(str(storage), max_dbs=TABLES_COUNT, map_size=map_size, subdir=True)
        with env.begin(write=True) as txn:
            handles = {
                name: env.open_db(name.encode(), txn=txn, create=True) for name in TABLE_NAMES
            }
        tables = _Tables(**handles)
        return cls(env, tables, storage, buffers_dir, default_list_limit, max_list_limit)

    def close(self) -> None:
        self._env.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # === Entries ===

    def write_entry(self, public_key, path: str) -> "EntryWriter":
        """Start writing the content of the entry at `path`."""
        return EntryWriter(self, public_key, path)

    def delete_entry(self, public_key, path: str) -> bool:
        """Delete an entry and its blob; True only if both were removed."""
        key = _entry_key(public_key, path)
        with self._env.begin(write=True) as txn:
            raw = txn.get(key.encode(), db=self._tables.entries)
            if raw is None:
                return False
            entry = Entry.deserialize(raw)

            prefix = entry.timestamp.to_bytes()
            deleted_chunks = False
            cursor = txn.cursor(self._tables.blobs)
            cursor.set_range(prefix)
            while cursor.key().startswith(prefix):
                deleted_chunks = cursor.delete()

            deleted_entry = txn.delete(key.encode(), db=self._tables.entries)

            if path.startswith("pub/"):
                event = Event.delete(f"pubky://{key}")
                txn.put(
                    str(Timestamp.now()).encode(),
                    event.serialize(),
                    db=self._tables.events,
                )

        return deleted_entry and deleted_chunks

    def get_entry(self, public_key, path: str) -> Optional[Entry]:
        with self._env.begin(db=self._tables.entries) as txn:
            raw = txn.get(_entry_key(public_key, path).encode())
        return None if raw is None else Entry.deserialize(raw)

    def read_entry_content(self, entry: Entry) -> Iterator[bytes]:
        """Yield the stored chunks of `entry`'s content in order."""
        prefix = entry.timestamp.to_bytes()
        with self._env.begin(db=self._tables.blobs) as txn:
            cursor = txn.cursor()
            if not cursor.set_range(prefix):
                return
            for key, value in cursor.iternext():
                if not key.startswith(prefix):
                    break
                yield bytes(value)

    def contains_directory(self, path: str) -> bool:
        with self._env.begin() as txn:
            return _greater_than(txn, self._tables.entries, path.encode()) is not None

    def list(
        self,
        path: str,
        reverse: bool = False,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        shallow: bool = False,
    ) -> list[str]:
        """Return pubky urls under `path`, optionally collapsing directories."""
        limit = min(self.default_list_limit if limit is None else limit, self.max_list_limit)

        if cursor is not None:
            file_or_directory = cursor.lstrip("/")
            if cursor.startswith("pubky://"):
                file_or_directory = cursor.split(path)[-1]
            threshold = next_threshold(
                path,
                file_or_directory,
                file_or_directory.endswith("/"),
                reverse,
                shallow,
            )
        else:
            threshold = next_threshold(path, "", False, reverse, shallow)

        find = _lower_than if reverse else _greater_than
        results: list[str] = []
        with self._env.begin() as txn:
            for _ in range(limit):
                found = find(txn, self._tables.entries, threshold.encode())
                if found is None:
                    break
                key = found[0].decode()
                if not key.startswith(path):
                    break

                if shallow:
                    file_or_directory, slash, _ = key[len(path):].partition("/")
                    is_directory = bool(slash)
                    threshold = next_threshold(
                        path, file_or_directory, is_directory, reverse, shallow
                    )
                    results.append(
                        f"pubky://{path}{file_or_directory}{'/' if is_directory else ''}"
                    )
                else:
                    threshold = key
                    results.append(f"pubky://{key}")
        return results

    # === Events ===

    def list_events(self, limit: Optional[int] = None, cursor: Optional[str] = None) -> list[str]:
        """Return `<OP> <url>` lines after `cursor`, then a `cursor: ...` line."""
        limit = min(self.default_list_limit if limit is None else limit, self.max_list_limit)
        next_cursor = _FIRST_EVENT_CURSOR if cursor is None else cursor

        result: list[str] = []
        with self._env.begin() as txn:
            for _ in range(limit):
                found = _greater_than(txn, self._tables.events, next_cursor.encode())
                if found is None:
                    break
                key, value = found
                result.append(Event.deserialize(value).line())
                next_cursor = key.decode()

        if result:
            result.append(f"cursor: {next_cursor}")
        return result

    # === Users ===

    def touch_user(self, public_key: PublicKey) -> User:
        """Record the user, keeping its creation time if it already exists."""
        key = public_key.to_bytes()
        with self._env.begin(write=True, db=self._tables.users) as txn:
            raw = txn.get(key)
            user = User(created_at=Timestamp.now().value) if raw is None else User.deserialize(raw)
            txn.put(key, user.serialize())
        return user

    def get_user(self, public_key: PublicKey) -> Optional[User]:
        with self._env.begin(db=self._tables.users) as txn:
            raw = txn.get(public_key.to_bytes())
        return None if raw is None else User.deserialize(raw)


class EntryWriter:
    """Buffers an entry's content on disk, then commits it to the store."""

    def __init__(self, db: Database, public_key, path: str) -> None:
        self._db = db
        self._hasher = Hasher()
        self.timestamp = Timestamp.now()
        self._buffer_path = db.buffers_dir / str(self.timestamp)
        self._buffer = open(self._buffer_path, "wb")
        self.entry_key = _entry_key(public_key, path)
        self.is_public = path.startswith("pub/")
        self._committed = False

    def write(self, chunk: bytes) -> int:
        """Append a chunk to the buffer; returns its length."""
        self._hasher.update(chunk)
        self._buffer.write(chunk)
        return len(chunk)

    def update(self, chunk: bytes) -> "EntryWriter":
        """Like :meth:`write`, returning the writer for chaining."""
        self.write(chunk)
        return self

    def commit(self) -> Entry:
        """Move the buffered content into the store and record the entry."""
        content_hash = self._hasher.finalize()
        self._buffer.close()
        db = self._db
        tables = db._tables

        with db._env.begin(write=True) as txn, open(self._buffer_path, "rb") as buffer:
            prefix = self.timestamp.to_bytes()
            chunk_index = 0
            while chunk := buffer.read(db.max_chunk_size):
                txn.put(prefix + chunk_index.to_bytes(4, "big"), chunk, db=tables.blobs)
                chunk_index += 1

            entry = Entry(
                timestamp=self.timestamp,
                content_hash=content_hash,
                content_length=os.path.getsize(self._buffer_path),
            )
            txn.put(self.entry_key.encode(), entry.serialize(), db=tables.entries)

            if self.is_public:
                event = Event.put(f"pubky://{self.entry_key}")
                txn.put(str(entry.timestamp).encode(), event.serialize(), db=tables.events)

        self._buffer_path.unlink()
        self._committed = True
        return entry

    def __enter__(self) -> "EntryWriter":
        return self

    def __exit__(self, *args) -> None:
        if not self._committed:
            self._buffer.close()
            self._buffer_path.unlink(missing_ok=True)