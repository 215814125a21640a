import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any

from relaystore.core.exceptions import (
    DuplicateRegistrationError,
    RegistryFrozenError,
    UnknownTypeError,
)

logger = logging.getLogger(__name__)

# Loaders receive the request context first so they can reach its session
LoadOne = Callable[[Any, Any], Awaitable[Any | None]]
LoadMany = Callable[[Any, Sequence[Any]], Awaitable[Sequence[Any | None]]]


@dataclass(frozen=True)
class NodeRegistration:
    """Everything needed to load nodes of one type by raw primary key."""

    type_tag: str
    load_one: LoadOne
    load_many: LoadMany
    # Turns the textual key embedded in a global ID back into the native key
    parse_key: Callable[[str], Any] = str


class NodeRegistry:
    """Maps a node type tag to its registration.

    Populated once at startup, then frozen; lookups are pure reads.
    """

    def __init__(self):
        self._registrations: dict[str, NodeRegistration] = {}
        self._frozen = False

    def register(
        self,
        type_tag: str,
        load_one: LoadOne,
        load_many: LoadMany,
        parse_key: Callable[[str], Any] = str,
    ) -> NodeRegistration:
        if self._frozen:
            raise RegistryFrozenError(type_tag)
        if not type_tag or ":" in type_tag:
            raise ValueError(f"Invalid node type tag: {type_tag!r}")
        if type_tag in self._registrations:
            raise DuplicateRegistrationError(type_tag)

        registration = NodeRegistration(
            type_tag=type_tag,
            load_one=load_one,
            load_many=load_many,
            parse_key=parse_key,
        )
        self._registrations[type_tag] = registration
        logger.debug(f"Registered node type '{type_tag}'")
        return registration

    def lookup(self, type_tag: str) -> NodeRegistration:
        try:
            return self._registrations[type_tag]
        except KeyError:
            raise UnknownTypeError(type_tag) from None

    def get(self, type_tag: str) -> NodeRegistration | None:
        return self._registrations.get(type_tag)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def type_tags(self) -> tuple[str, ...]:
        return tuple(self._registrations)

    def __contains__(self, type_tag: object) -> bool:
        return type_tag in self._registrations

    def __len__(self) -> int:
        return len(self._registrations)


# Process-wide registry, populated when the schema module is imported
node_registry = NodeRegistry()
