"""Capabilities: scoped read/write permissions in the `<scope>:<actions>` form."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator


class CapabilityError(ValueError):
    """Raised when a capability string cannot be parsed."""

    INVALID_SCOPE = "Capability: Invalid scope: does not start with `/`"
    INVALID_FORMAT = "Capability: Invalid format should be <scope>:<abilities>"
    INVALID_ACTION = "Capability: Invalid Action"
    INVALID_CAPABILITIES = "Capabilities: Invalid capabilities format"


class Action(Enum):
    """An action a capability grants on its scope."""

    READ = "r"
    WRITE = "w"

    @classmethod
    def from_char(cls, char: str) -> "Action":
        try:
            return cls(char)
        except ValueError:
            raise CapabilityError(CapabilityError.INVALID_ACTION) from None

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Capability:
    """A scope (path) together with the actions allowed within it."""

    scope: str
    actions: tuple[Action, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", tuple(self.actions))

    @classmethod
    def root(cls) -> "Capability":
        """The capability at `/` with every available action."""
        return cls("/", (Action.READ, Action.WRITE))

    @classmethod
    def parse(cls, value: str) -> "Capability":
        """Parse `<scope>:<actions>`; actions are sorted and deduplicated."""
        if value.count(":") != 1:
            raise CapabilityError(CapabilityError.INVALID_FORMAT)
        if not value.startswith("/"):
            raise CapabilityError(CapabilityError.INVALID_SCOPE)

        scope, actions_str = value.split(":")
        chars: list[str] = []
        for char in actions_str:
            Action.from_char(char)
            index = bisect.bisect_left(chars, char)
            if index == len(chars) or chars[index] != char:
                chars.insert(index, char)

        return cls(scope, tuple(Action(char) for char in chars))

    def __str__(self) -> str:
        return f"{self.scope}:{''.join(action.value for action in self.actions)}"


@dataclass(frozen=True)
class Capabilities:
    """An ordered collection of capabilities, serialized comma separated."""

    capabilities: tuple[Capability, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "capabilities", tuple(self.capabilities))

    @classmethod
    def parse(cls, value: str) -> "Capabilities":
        """Parse a comma separated list, silently skipping invalid items."""
        parsed = []
        for item in value.split(","):
            try:
                parsed.append(Capability.parse(item))
            except CapabilityError:
                continue
        return cls(tuple(parsed))

    @classmethod
    def of(cls, capabilities: Iterable[Capability]) -> "Capabilities":
        return cls(tuple(capabilities))

    def __str__(self) -> str:
        return ",".join(str(capability) for capability in self.capabilities)

    def __contains__(self, capability: object) -> bool:
        return capability in self.capabilities

    def __iter__(self) -> Iterator[Capability]:
        return iter(self.capabilities)

    def __len__(self) -> int:
        return len(self.capabilities)