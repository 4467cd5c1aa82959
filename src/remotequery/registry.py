"""Tag-keyed factories for grammars, connections, transformers and endpoints."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum
from typing import TYPE_CHECKING, overload

from remotequery.connection import Connection
from remotequery.errors import configuration_missing
from remotequery.grammar import Grammar, RestGrammar, SearchGrammar
from remotequery.transformers import IdentityTransformer, Transformer, WrapDataTransformer

if TYPE_CHECKING:
    from remotequery.endpoints import Endpoint


class GrammarKind(StrEnum):
    """Built-in grammar tags."""

    REST = "rest"
    SEARCH = "search"


class ConnectionKind(StrEnum):
    """Built-in connection tags."""

    DEFAULT = "default"


class TransformerKind(StrEnum):
    """Built-in transformer tags."""

    IDENTITY = "identity"
    WRAP_DATA = "wrap_data"


class Registry[T]:
    """Map explicit string tags to factories producing ``T``."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._factories: dict[str, Callable[..., T]] = {}

    def __contains__(self, tag: object) -> bool:
        return str(tag) in self._factories

    def tags(self) -> list[str]:
        """Return registered tags in sorted order."""
        return sorted(self._factories)

    @overload
    def register(self, tag: str) -> Callable[[Callable[..., T]], Callable[..., T]]: ...

    @overload
    def register(self, tag: str, factory: Callable[..., T]) -> Callable[..., T]: ...

    def register(
        self, tag: str, factory: Callable[..., T] | None = None
    ) -> Callable[..., T] | Callable[[Callable[..., T]], Callable[..., T]]:
        """
        Register ``factory`` under ``tag``; usable as a class decorator.

        Returns
        -------
        Callable
            The factory itself, or a decorator when ``factory`` is omitted.
        """
        if factory is not None:
            self._factories[str(tag)] = factory
            return factory

        def _decorator(target: Callable[..., T]) -> Callable[..., T]:
            self._factories[str(tag)] = target
            return target

        return _decorator

    def unregister(self, tag: str) -> None:
        """Remove ``tag`` if registered."""
        self._factories.pop(str(tag), None)

    def resolve(self, tag: str | None) -> Callable[..., T]:
        """
        Return the factory registered under ``tag``.

        Returns
        -------
        Callable[..., T]
            Registered factory.

        Raises
        ------
        ConfigurationMissingError
            When ``tag`` is empty or unknown.
        """
        if not tag:
            message = f"No {self.kind} configured; define one or set a default"
            raise configuration_missing(message, kind=self.kind)
        factory = self._factories.get(str(tag))
        if factory is None:
            message = f"Unknown {self.kind} '{tag}'; registered: {', '.join(self.tags())}"
            raise configuration_missing(message, kind=self.kind, tag=str(tag))
        return factory

    def create(self, tag: str | None, *args: object, **kwargs: object) -> T:
        """
        Instantiate the factory registered under ``tag``.

        Returns
        -------
        T
            New instance.
        """
        return self.resolve(tag)(*args, **kwargs)


GRAMMARS: Registry[Grammar] = Registry("grammar")
GRAMMARS.register(GrammarKind.REST, RestGrammar)
GRAMMARS.register(GrammarKind.SEARCH, SearchGrammar)

CONNECTIONS: Registry[Connection] = Registry("connection")
CONNECTIONS.register(ConnectionKind.DEFAULT, Connection)

TRANSFORMERS: Registry[Transformer] = Registry("transformer")
TRANSFORMERS.register(TransformerKind.IDENTITY, IdentityTransformer)
TRANSFORMERS.register(TransformerKind.WRAP_DATA, WrapDataTransformer)

ENDPOINTS: Registry[Endpoint] = Registry("endpoint")

__all__ = [
    "CONNECTIONS",
    "ENDPOINTS",
    "GRAMMARS",
    "TRANSFORMERS",
    "ConnectionKind",
    "GrammarKind",
    "Registry",
    "TransformerKind",
]
