"""Node kind registry.

Maps kind aliases to driver factories and default credentials. The
registry is an ordinary object: the process builds one at start-up and
hands it to whatever dispatches lifecycle calls, tests build their own.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable

from labnode.errors import RegistrationConflict
from labnode.kinds.base import Credentials

if TYPE_CHECKING:
    from labnode.kinds.base import Node

logger = logging.getLogger(__name__)

NodeFactory = Callable[[], "Node"]


class NodeRegistry:
    """Registry of node kinds and their default credentials."""

    def __init__(self):
        self._factories: dict[str, NodeFactory] = {}
        self._credentials: dict[str, Credentials] = {}

    def register(self, aliases: Iterable[str], factory: NodeFactory) -> None:
        """Register a driver factory under every alias.

        Raises:
            RegistrationConflict: an alias is already registered; nothing
                is registered in that case
        """
        aliases = list(aliases)
        if not aliases:
            raise ValueError("at least one alias is required")
        for alias in aliases:
            if alias in self._factories:
                raise RegistrationConflict(alias)
        for alias in aliases:
            self._factories[alias] = factory
        logger.debug(f"Registered node kind: {', '.join(aliases)}")

    def set_default_credentials(
        self,
        aliases: Iterable[str],
        username: str,
        password: str,
    ) -> None:
        """Associate default credentials with every alias.

        Raises:
            RegistrationConflict: an alias already has credentials
        """
        aliases = list(aliases)
        for alias in aliases:
            if alias in self._credentials:
                raise RegistrationConflict(alias, what="default credentials for")
        creds = Credentials(username=username, password=password)
        for alias in aliases:
            self._credentials[alias] = creds

    def new_node(self, kind: str) -> Node:
        """Create a fresh driver for a node of the given kind.

        Raises:
            KeyError: the kind is not registered
        """
        try:
            factory = self._factories[kind]
        except KeyError:
            raise KeyError(f"unknown node kind {kind!r}") from None
        return factory()

    def credentials(self, kind: str) -> Credentials | None:
        """Default credentials of a kind, if any were registered."""
        return self._credentials.get(kind)

    def is_registered(self, kind: str) -> bool:
        return kind in self._factories

    def kinds(self) -> list[str]:
        """All registered aliases, sorted."""
        return sorted(self._factories)
