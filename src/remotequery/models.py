"""Pydantic model surface tying a record type to its endpoint and query builder."""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict

from remotequery.cache.store import CacheStore, MemoryCacheStore
from remotequery.collection import ResultCollection
from remotequery.config.models import ConsumerConfig
from remotequery.endpoints import PLACEHOLDER_PATTERN, Endpoint
from remotequery.errors import configuration_missing
from remotequery.query.builder import QueryBuilder
from remotequery.registry import ENDPOINTS
from remotequery.transport.protocols import TransportConsumer


@dataclass(frozen=True)
class ModelBinding:
    """Configuration and shared resources a model class builds its endpoint from."""

    config: ConsumerConfig
    cache_store: CacheStore | None = None
    consumer: TransportConsumer | None = None


_BINDINGS: dict[type[ApiModel], ModelBinding] = {}
_ENDPOINT_CACHE: dict[type[ApiModel], Endpoint] = {}


def _is_empty(argument: object) -> bool:
    return argument is None or (isinstance(argument, Sized) and len(argument) == 0)


def _static_path(endpoint: Endpoint, endpoint_type: str) -> str | None:
    """Return the template for endpoint_type unless it needs placeholder values."""
    template = endpoint.endpoints.get(endpoint_type)
    if template is None or PLACEHOLDER_PATTERN.search(template):
        return None
    return template


class ApiModel(BaseModel):
    """
    Record type backed by a remote API resource.

    Subclasses declare ``endpoints`` (endpoint type to path template, e.g.
    ``collection``, ``detail``, ``search``) and optionally ``endpoint_class``
    and ``default_scopes``. Unknown payload fields are kept as extra attributes.
    """

    model_config = ConfigDict(extra="allow")

    endpoints: ClassVar[dict[str, str]] = {}
    endpoint_class: ClassVar[type[Endpoint] | None] = None
    default_scopes: ClassVar[dict[str, object]] = {}
    primary_key: ClassVar[str] = "id"

    def __getitem__(self, key: str) -> object:
        """
        Allow dict-style access to fields.

        Parameters
        ----------
        key : str
            Field name to retrieve.

        Returns
        -------
        object
            Value for the requested field.
        """
        return self.model_dump()[key]

    @property
    def route_key(self) -> object:
        """Primary key value used when building URLs to this record."""
        return getattr(self, self.primary_key, None)

    @classmethod
    def bind(
        cls,
        config: ConsumerConfig,
        *,
        cache_store: CacheStore | None = None,
        consumer: TransportConsumer | None = None,
    ) -> None:
        """
        Attach configuration to this model class and its subclasses.

        A shared in-memory cache is created when caching is enabled and no
        store is given. Endpoints cached for affected classes are dropped.
        """
        if cache_store is None and config.cache_enabled:
            cache_store = MemoryCacheStore()
        _BINDINGS[cls] = ModelBinding(config=config, cache_store=cache_store, consumer=consumer)
        for model in list(_ENDPOINT_CACHE):
            if issubclass(model, cls):
                del _ENDPOINT_CACHE[model]

    @classmethod
    def binding(cls) -> ModelBinding:
        """
        Return the nearest binding along the class hierarchy.

        Returns
        -------
        ModelBinding
            Binding registered via ``bind``.

        Raises
        ------
        ConfigurationMissingError
            When neither this class nor a base class was bound.
        """
        for klass in cls.__mro__:
            binding = _BINDINGS.get(klass)  # type: ignore[arg-type]
            if binding is not None:
                return binding
        message = f"{cls.__name__} is not bound to a ConsumerConfig; call bind() first"
        raise configuration_missing(message, model=cls.__name__)

    @classmethod
    def get_endpoint(cls) -> Endpoint:
        """
        Return the endpoint for this class, constructing it on first use.

        Returns
        -------
        Endpoint
            Cached endpoint instance.
        """
        cached = _ENDPOINT_CACHE.get(cls)
        if cached is not None:
            return cached
        binding = cls.binding()
        factory = cls.endpoint_class or ENDPOINTS.resolve(binding.config.default_endpoint)
        endpoint = factory(
            cls.endpoints,
            config=binding.config,
            consumer=binding.consumer,
            cache_store=binding.cache_store,
        )
        _ENDPOINT_CACHE[cls] = endpoint
        return endpoint

    @classmethod
    def query(cls) -> QueryBuilder[Self]:
        """
        Start a query hydrating records into this model.

        Returns
        -------
        QueryBuilder[Self]
            Builder targeting the ``collection`` endpoint, default scopes applied.
        """
        endpoint = cls.get_endpoint()
        builder: QueryBuilder[Self] = QueryBuilder(
            endpoint.connection,
            endpoint.grammar,
            entity_factory=cls.model_validate,
            default_endpoint=_static_path(endpoint, "collection"),
        )
        return cls.apply_default_scopes(builder)

    @classmethod
    def search(cls, text: str | None) -> QueryBuilder[Self]:
        """
        Start a free-text search against the ``search`` endpoint.

        Falls back to the ``collection`` endpoint when no search template exists.

        Returns
        -------
        QueryBuilder[Self]
            Builder with the search text set.
        """
        builder = cls.query()
        search_path = _static_path(cls.get_endpoint(), "search")
        if search_path is not None:
            builder.default_endpoint = search_path
        return builder.search(text)

    @classmethod
    def find(cls, identifier: object) -> Self | object | None:
        """
        Fetch one record from the ``detail`` endpoint.

        Returns
        -------
        Self | object | None
            The record, None when the API returned no data, or the
            non-success body unchanged.
        """
        endpoint = cls.get_endpoint()
        path = endpoint.parse_endpoint("detail", {cls.primary_key: identifier, "id": identifier})
        result = cls.query().get(endpoint=path)
        if isinstance(result, ResultCollection):
            return result.first()
        return result

    @classmethod
    def apply_default_scopes(cls, builder: QueryBuilder[Self]) -> QueryBuilder[Self]:
        """
        Call each builder method named in ``default_scopes``.

        Empty arguments call the method without arguments; tuples are unpacked.

        Returns
        -------
        QueryBuilder[Self]
            The same builder.
        """
        for name, argument in cls.default_scopes.items():
            method = getattr(builder, name)
            if _is_empty(argument):
                method()
            elif isinstance(argument, tuple):
                method(*argument)
            else:
                method(argument)
        return builder
