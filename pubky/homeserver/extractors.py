"""Extraction of path and query parameters for homeserver requests."""

from __future__ import annotations

import re
from dataclasses import dataclass
from http import HTTPStatus
from typing import Mapping, Optional
from urllib.parse import parse_qsl

from pubky.homeserver.errors import HttpError
from pubky.keys import PublicKey

_U16_MAX = 0xFFFF
_UNSIGNED = re.compile(r"\+?[0-9]+")


def _parse_u16(value: str) -> Optional[int]:
    if not _UNSIGNED.fullmatch(value):
        return None
    number = int(value)
    return number if number <= _U16_MAX else None


@dataclass(frozen=True)
class ListQueryParams:
    """Options of a listing request: limit, cursor, order and depth."""

    limit: Optional[int] = None
    cursor: Optional[str] = None
    reverse: bool = False
    shallow: bool = False

    @classmethod
    def from_query(cls, query: "str | Mapping[str, str]") -> "ListQueryParams":
        """Read the options from a query string or an already parsed mapping."""
        if isinstance(query, str):
            params = dict(parse_qsl(query.removeprefix("?"), keep_blank_values=True))
        else:
            params = dict(query)

        limit_value = params.get("limit")
        limit = _parse_u16(limit_value) if limit_value else None
        cursor = params.get("cursor") or None

        return cls(
            limit=limit,
            cursor=cursor,
            reverse="reverse" in params,
            shallow="shallow" in params,
        )


def extract_pubky(params: Mapping[str, str]) -> PublicKey:
    """The public key in the `pubky` path parameter."""
    pubky_id = params.get("pubky")
    if pubky_id is None:
        raise HttpError(HTTPStatus.NOT_FOUND, "pubky param missing")
    try:
        return PublicKey.parse(str(pubky_id))
    except ValueError as exc:
        raise HttpError(HTTPStatus.BAD_REQUEST, exc) from exc


def extract_entry_path(params: Mapping[str, str]) -> str:
    """The entry path in the `path` path parameter."""
    path = params.get("path")
    if path is None:
        raise HttpError(HTTPStatus.NOT_FOUND, "entry path missing")
    return str(path)