"""Building homeserver list requests and reading their responses."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote_plus, urlsplit, urlunsplit

_U16_MAX = 0xFFFF


def _form_encode(value: str) -> str:
    return quote_plus(value, safe="*")


def list_url(
    url: str,
    reverse: bool = False,
    limit: Optional[int] = None,
    cursor: Optional[str] = None,
    shallow: bool = False,
) -> str:
    """The URL of a list request for the directory containing `url`.

    A path that does not end with `/` is cut back to its parent directory,
    and the options are appended to the query.
    """
    if limit is not None and not 0 <= limit <= _U16_MAX:
        raise ValueError(f"limit should be between 0 and {_U16_MAX}")

    parts = urlsplit(url)
    path = parts.path or "/"
    if not path.endswith("/"):
        path = path.rsplit("/", 1)[0] + "/"

    query = [parts.query] if parts.query else []
    if reverse:
        query.append("reverse")
    if shallow:
        query.append("shallow")
    if limit is not None:
        query.append(f"limit={limit}")
    if cursor is not None:
        query.append(f"cursor={_form_encode(cursor)}")

    return urlunsplit((parts.scheme, parts.netloc, path, "&".join(query), parts.fragment))


def parse_list_response(data: bytes) -> list[str]:
    """The lines of a list response body, decoded leniently."""
    text = bytes(data).decode("utf-8", errors="replace")
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]