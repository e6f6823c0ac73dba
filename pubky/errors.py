"""Errors raised by the Pubky client."""

from __future__ import annotations


class PubkyError(Exception):
    """Base error of the client; raised directly it is a generic error."""

    _template = "Generic error: {}"

    def __init__(self, detail: object = "") -> None:
        self.detail = str(detail)
        super().__init__(self._template.format(self.detail))


class ResolveEndpointError(PubkyError):
    """The endpoint (homeserver) of a target could not be resolved."""

    _template = "Could not resolve endpoint for {}"

    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(target)


class InvalidUrlError(PubkyError, ValueError):
    """A value could not be converted into a URL."""

    _template = "Could not convert the passed type into a Url"

    def __init__(self, detail: object = "") -> None:
        super().__init__(detail)