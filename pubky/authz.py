"""Reading the capabilities requested by a `pubkyauth://` URL."""

from __future__ import annotations

from typing import Iterable
from urllib.parse import parse_qsl, urlsplit

from pubky.capabilities import Capabilities, Capability, CapabilityError


def requested_capabilities(url: str) -> Capabilities:
    """The valid capabilities in the first `caps` query parameter of `url`."""
    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key != "caps":
            continue
        parsed = []
        for item in value.split(","):
            try:
                parsed.append(Capability.parse(item))
            except CapabilityError:
                continue
        return Capabilities.of(parsed)
    return Capabilities()


def describe_capabilities(capabilities: Iterable[Capability]) -> str:
    """A human readable listing of capabilities, or an empty string if none."""
    lines = [
        "    {} : [{}]".format(
            capability.scope,
            ", ".join(action.name.capitalize() for action in capability.actions),
        )
        for capability in capabilities
    ]
    if not lines:
        return ""
    return "\n".join(["Required Capabilities:", *lines])