"""Request handling logic of the homeserver: entries, listings and the event feed."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from email.utils import mktime_tz, parsedate_tz
from http import HTTPStatus
from typing import Iterable, Mapping, Optional, Union

from pubky.homeserver.database import Database
from pubky.homeserver.entries import Entry
from pubky.homeserver.errors import HttpError
from pubky.homeserver.extractors import ListQueryParams
from pubky.timestamp import Timestamp

_FORBIDDEN_HOST_CHARS = set(" #%/:<>?@[\\]^|\t\n\r\x00")
_NUMERIC_LABEL = re.compile(r"[0-9]+|0[xX][0-9a-fA-F]*")

Body = Union[bytes, Iterable[bytes]]


@dataclass
class Response:
    """An HTTP response: status, headers and a body of bytes or byte chunks."""

    status: HTTPStatus = HTTPStatus.OK
    headers: dict[str, str] = field(default_factory=dict)
    body: Body = b""

    @property
    def content(self) -> bytes:
        """The whole body; chunked bodies are joined once and kept."""
        if not isinstance(self.body, (bytes, bytearray)):
            self.body = b"".join(self.body)
        return bytes(self.body)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def _text_response(text: str) -> Response:
    return Response(
        HTTPStatus.OK, {"content-type": "text/plain"}, text.encode("utf-8")
    )


def root() -> Response:
    """The homeserver's landing response."""
    return Response(HTTPStatus.OK, {"content-type": "text/plain; charset=utf-8"},
                    b"This a Pubky homeserver.")


def is_secure(host: str) -> bool:
    """Whether cookies for `host` should be `Secure` and `SameSite=None`.

    Anything addressed by a domain other than `localhost` is assumed to be
    reached over HTTPS; IP addresses and invalid hosts are not.
    """
    if not host or host.startswith("["):
        return False
    if any(char in _FORBIDDEN_HOST_CHARS for char in host):
        return False
    labels = host.split(".")
    if len(labels) > 1 and labels[-1] == "":
        labels.pop()
    if _NUMERIC_LABEL.fullmatch(labels[-1]):
        return False
    return host.lower() != "localhost"


def verify_path(path: str) -> None:
    """Only paths under `pub/` may be accessed."""
    if not path.startswith("pub/"):
        raise HttpError(
            HTTPStatus.FORBIDDEN,
            "Writing to directories other than '/pub/' is forbidden",
        )


def entry_headers(entry: Entry) -> dict[str, str]:
    """The response headers describing `entry`."""
    return {
        "content-length": str(entry.content_length),
        "last-modified": entry.timestamp.format_http_date(),
        "content-type": entry.content_type,
        "etag": entry.etag,
    }


def _http_date_seconds(value: str) -> Optional[int]:
    try:
        parsed = parsedate_tz(value)
        return None if parsed is None else mktime_tz(parsed)
    except (TypeError, ValueError, OverflowError):
        return None


def get_entry(
    headers: Mapping[str, str],
    entry: Optional[Entry],
    body: Optional[Body] = None,
) -> Response:
    """Build the response for an entry, honouring conditional request headers."""
    if entry is None:
        raise HttpError.with_status(HTTPStatus.NOT_FOUND)

    request_headers = {name.lower(): value for name, value in headers.items()}
    response = Response(HTTPStatus.OK, entry_headers(entry))

    if_modified_since = request_headers.get("if-modified-since")
    if if_modified_since is not None:
        condition = _http_date_seconds(if_modified_since)
        if condition is not None and condition >= entry.timestamp.seconds:
            response.status = HTTPStatus.NOT_MODIFIED

    if_none_match = request_headers.get("if-none-match")
    if if_none_match is not None and entry.etag in if_none_match.strip().split(","):
        response.status = HTTPStatus.NOT_MODIFIED

    if body is not None:
        response.body = body
    return response


def list_directory(
    db: Database, public_key, path: str, params: ListQueryParams
) -> Response:
    """List the entries in the directory `path` (ending in `/`) of `public_key`."""
    verify_path(path)
    full_path = f"{public_key}/{path}"
    if not db.contains_directory(full_path):
        raise HttpError(HTTPStatus.NOT_FOUND, "Directory Not Found")

    urls = db.list(
        full_path,
        reverse=params.reverse,
        limit=params.limit,
        cursor=params.cursor,
        shallow=params.shallow,
    )
    return _text_response("\n".join(urls))


def feed(db: Database, params: ListQueryParams) -> Response:
    """The public event feed after the optional cursor."""
    if params.cursor is not None:
        try:
            Timestamp.parse(params.cursor)
        except ValueError as exc:
            raise HttpError(
                HTTPStatus.BAD_REQUEST,
                "Cursor should be valid base32 Crockford encoding of a timestamp",
            ) from exc

    lines = db.list_events(params.limit, params.cursor)
    return _text_response("\n".join(lines))