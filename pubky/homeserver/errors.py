"""HTTP errors raised by homeserver handlers."""

from __future__ import annotations

from http import HTTPStatus
from typing import Optional


class HttpError(Exception):
    """An error that becomes an HTTP response: a status and an optional detail."""

    def __init__(
        self,
        status: "HTTPStatus | int" = HTTPStatus.INTERNAL_SERVER_ERROR,
        detail: Optional[object] = None,
    ) -> None:
        self.status = HTTPStatus(status)
        self.detail = None if detail is None else str(detail)
        super().__init__(self.detail if self.detail is not None else self.status.phrase)

    @classmethod
    def with_status(cls, status: "HTTPStatus | int") -> "HttpError":
        """An error with only a status and no detail."""
        return cls(status)

    def body(self) -> bytes:
        """The response body: the detail text, or nothing."""
        return b"" if self.detail is None else self.detail.encode("utf-8")

    def __repr__(self) -> str:
        return f"HttpError(status={int(self.status)}, detail={self.detail!r})"