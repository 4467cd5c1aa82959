"""Per-resource orchestration of caching, logging and transformation around one call."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar

from remotequery.cache.keys import build_cache_key
from remotequery.cache.store import CacheStore, MemoryCacheStore
from remotequery.errors import unsupported_operation
from remotequery.transformers import Transformer
from remotequery.transport.protocols import SUCCESS_STATUS, ApiResponse, TransportConsumer

SUPPORTED_VERBS = frozenset({"GET", "POST"})
LOG = logging.getLogger("remotequery.connection")


@dataclass
class CallRecord:
    """Structured description of one connection call."""

    verb: str
    endpoint: str
    ttl: int | None
    options: Mapping[str, object]
    cache: str


@dataclass
class ConnectionObservability:
    """Configuration for per-call logging."""

    enabled: bool = False
    logger: logging.Logger = field(default_factory=lambda: LOG)

    def record(self, call: CallRecord) -> None:
        """
        Emit a structured log line for a connection call.

        Parameters
        ----------
        call:
            Verb, endpoint, resolved TTL and merged options of the call.
        """
        if not self.enabled or not self.logger.isEnabledFor(logging.INFO):
            return
        payload: dict[str, object] = {
            "verb": call.verb,
            "endpoint": call.endpoint,
            "ttl": call.ttl,
            "options": dict(call.options),
            "cache": call.cache,
        }
        self.logger.info("api_call %s", payload)


class Connection:
    """
    Wrap a transport consumer with caching, logging and response transformation.

    Non-200 responses are returned as data, never raised; when caching is on
    they are evicted right after being stored so a failure is never served
    from cache.
    """

    cache_namespace: ClassVar[str] = "version-1.0"

    def __init__(  # noqa: PLR0913
        self,
        consumer: TransportConsumer,
        *,
        default_ttl: int | None,
        transformer: Transformer | None = None,
        cache_store: CacheStore | None = None,
        cache_enabled: bool = False,
        cache_version: str = "1",
        observability: ConnectionObservability | None = None,
    ) -> None:
        self.consumer = consumer
        self.default_ttl = default_ttl
        self.transformer = transformer
        self.cache_enabled = cache_enabled
        self.cache_version = cache_version
        self.cache_store: CacheStore | None = cache_store
        if cache_enabled and cache_store is None:
            self.cache_store = MemoryCacheStore()
        self.observability = observability or ConnectionObservability()

    def resolve_ttl(self, ttl: int | None = None) -> int | None:
        """Return the per-call override, else the connection default."""
        return self.default_ttl if ttl is None else ttl

    def get(self, endpoint: str, params: Mapping[str, object], *, ttl: int | None = None) -> object:
        """Run a GET call against the API."""
        return self.execute("GET", endpoint, params, ttl=ttl)

    def post(self, endpoint: str, params: Mapping[str, object], *, ttl: int | None = None) -> object:
        """Run a POST call against the API."""
        return self.execute("POST", endpoint, params, ttl=ttl)

    def execute(
        self,
        verb: str,
        endpoint: str,
        params: Mapping[str, object],
        *,
        ttl: int | None = None,
    ) -> object:
        """
        Execute one call through the consumer, cache and transformer.

        Parameters
        ----------
        verb:
            HTTP verb; only GET and POST are supported.
        endpoint:
            Endpoint path relative to the consumer's base URI.
        params:
            Wire parameters compiled by a grammar.
        ttl:
            Optional cache lifetime override for this call.

        Returns
        -------
        object
            Transformed response, or the raw ``ApiResponse`` without a transformer.

        Raises
        ------
        UnsupportedOperationError
            When ``verb`` is not supported.
        """
        method = verb.upper()
        if method not in SUPPORTED_VERBS:
            message = f"Verb not supported: {verb}. Use one of {sorted(SUPPORTED_VERBS)}"
            raise unsupported_operation(message, verb=verb)

        options = {**self.prepare_parameters(params), **self.prepare_headers(params)}
        resolved_ttl = self.resolve_ttl(ttl)
        self.observability.record(
            CallRecord(
                verb=method,
                endpoint=endpoint,
                ttl=resolved_ttl,
                options=options,
                cache="enabled" if self.cache_enabled else "disabled",
            )
        )
        response = self._dispatch(method, endpoint, options, resolved_ttl)
        return self.transform(response)

    def prepare_parameters(self, params: Mapping[str, object]) -> dict[str, object]:
        """Let the consumer adapt parameters to its request shape."""
        return self.consumer.adapt_parameters(params)

    def prepare_headers(self, params: Mapping[str, object]) -> dict[str, object]:
        """Let the consumer derive header options."""
        return self.consumer.adapt_headers(params)

    def transform(self, response: ApiResponse) -> object:
        """Pass the envelope through the configured transformer, if any."""
        if self.transformer is None:
            return response
        return self.transformer.transform(response)

    def cache_key(self, verb: str, endpoint: str, options: Mapping[str, object]) -> str:
        """Return the cache key for a call on this connection."""
        return build_cache_key(verb, endpoint, options, self.cache_version, self.cache_namespace)

    def _dispatch(
        self,
        method: str,
        endpoint: str,
        options: dict[str, object],
        ttl: int | None,
    ) -> ApiResponse:
        store = self.cache_store
        if not self.cache_enabled or store is None:
            return self.consumer.send(method, endpoint, options)

        key = self.cache_key(method, endpoint, options)
        if LOG.isEnabledFor(logging.DEBUG):
            LOG.debug("cache %s for %s %s", "hit" if store.has(key) else "miss", method, endpoint)
        response = store.remember(key, ttl, lambda: self.consumer.send(method, endpoint, options))
        status = getattr(response, "status", SUCCESS_STATUS)
        if status != SUCCESS_STATUS:
            store.forget(key)
            LOG.debug("evicted cached %s %s after status %s", method, endpoint, status)
        return response
