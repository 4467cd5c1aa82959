"""Endpoint resolver supplying base URI, grammar, connection and path templates."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import ClassVar

from remotequery.cache.store import CacheStore
from remotequery.config.models import ConsumerConfig
from remotequery.connection import Connection, ConnectionObservability
from remotequery.errors import configuration_missing, missing_argument
from remotequery.grammar import Grammar
from remotequery.registry import CONNECTIONS, ENDPOINTS, GRAMMARS, TRANSFORMERS
from remotequery.transformers import Transformer
from remotequery.transport.httpx_consumer import HttpxConsumer, ParameterLocation
from remotequery.transport.protocols import TransportConsumer

PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")
LOG = logging.getLogger("remotequery.endpoints")


class Endpoint:
    """
    Logical resource descriptor.

    Subclasses may pin ``base_uri``, ``grammar_kind``, ``connection_kind``,
    ``transformer_kind`` and ``cache_ttl``; anything left unset falls back to
    the ``ConsumerConfig`` defaults. A missing base URI, grammar or connection
    fails at construction.
    """

    base_uri: ClassVar[str | None] = None
    grammar_kind: ClassVar[str | None] = None
    connection_kind: ClassVar[str | None] = None
    transformer_kind: ClassVar[str | None] = None
    cache_ttl: ClassVar[int | None] = None
    parameter_location: ClassVar[ParameterLocation] = "json"

    def __init__(  # noqa: PLR0913
        self,
        endpoints: Mapping[str, str],
        *,
        config: ConsumerConfig,
        base_uri: str | None = None,
        grammar: Grammar | None = None,
        consumer: TransportConsumer | None = None,
        cache_store: CacheStore | None = None,
        default_ttl: int | None = None,
    ) -> None:
        self.config = config
        self.endpoints = dict(endpoints)
        self.resolved_base_uri = self._resolve_base_uri(base_uri)
        self.default_ttl = self._resolve_ttl(default_ttl)
        self.grammar = grammar if grammar is not None else self._create_grammar()
        self.consumer = consumer if consumer is not None else self.create_consumer()
        self.connection = self._create_connection(cache_store)
        LOG.debug(
            "endpoint %s ready (base_uri=%s, ttl=%s)",
            type(self).__name__,
            self.resolved_base_uri,
            self.default_ttl,
        )

    def has_endpoint(self, endpoint_type: str) -> bool:
        """Return True when a template is configured for ``endpoint_type``."""
        return endpoint_type in self.endpoints

    def get_endpoint(self, endpoint_type: str) -> str:
        """
        Return the raw path template for ``endpoint_type``.

        Returns
        -------
        str
            Template possibly containing ``{placeholder}`` tokens.

        Raises
        ------
        MissingArgumentError
            When no template is configured for the type.
        """
        template = self.endpoints.get(endpoint_type)
        if template is None:
            message = f"No endpoint template configured for '{endpoint_type}'"
            raise missing_argument(message, endpoint_type=endpoint_type)
        return template

    def parse_endpoint(
        self, endpoint_type: str, params: Mapping[str, object] | None = None
    ) -> str:
        """
        Substitute every ``{name}`` token in a template with ``params[name]``.

        ``/api/v1/exhibitions/{exhibition_id}/artworks/{id}`` with
        ``{"exhibition_id": 3, "id": 42}`` yields
        ``/api/v1/exhibitions/3/artworks/42``.

        Returns
        -------
        str
            Concrete endpoint path.

        Raises
        ------
        MissingArgumentError
            When a referenced placeholder has no value in ``params``.
        """
        template = self.get_endpoint(endpoint_type)
        values = params or {}
        missing = [
            name for name in PLACEHOLDER_PATTERN.findall(template) if values.get(name) is None
        ]
        if missing:
            message = (
                f"Endpoint '{endpoint_type}' ({template}) needs values for: {', '.join(missing)}"
            )
            raise missing_argument(message, endpoint_type=endpoint_type, missing=missing)
        return PLACEHOLDER_PATTERN.sub(lambda match: str(values[match.group(1)]), template)

    def create_consumer(self) -> TransportConsumer:
        """
        Build the default transport consumer for this endpoint.

        Override to plug in another consumer or extra client options.

        Returns
        -------
        TransportConsumer
            HTTPX consumer bound to the resolved base URI.
        """
        return HttpxConsumer(
            self.resolved_base_uri,
            timeout=self.config.timeout_seconds,
            parameter_location=self.parameter_location,
            default_headers=self.config.default_headers,
        )

    def _resolve_base_uri(self, explicit: str | None) -> str:
        base_uri = explicit or type(self).base_uri or self.config.base_uri
        if not base_uri:
            message = (
                "Define a base URI for this endpoint, or set a default one in the "
                "consumer configuration"
            )
            raise configuration_missing(message, endpoint=type(self).__name__)
        return base_uri

    def _resolve_ttl(self, explicit: int | None) -> int:
        if explicit is not None:
            return explicit
        if type(self).cache_ttl is not None:
            return int(type(self).cache_ttl)
        return self.config.cache_default_ttl

    def _create_grammar(self) -> Grammar:
        return GRAMMARS.create(type(self).grammar_kind or self.config.default_grammar)

    def _create_transformer(self) -> Transformer | None:
        tag = type(self).transformer_kind or self.config.default_transformer
        if not tag:
            return None
        return TRANSFORMERS.create(tag)

    def _create_connection(self, cache_store: CacheStore | None) -> Connection:
        return CONNECTIONS.create(
            type(self).connection_kind or self.config.default_connection,
            self.consumer,
            default_ttl=self.default_ttl,
            transformer=self._create_transformer(),
            cache_store=cache_store,
            cache_enabled=self.config.cache_enabled,
            cache_version=self.config.cache_version,
            observability=ConnectionObservability(enabled=self.config.logging_enabled),
        )


ENDPOINTS.register("default", Endpoint)
