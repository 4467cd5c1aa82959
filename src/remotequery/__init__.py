"""Query remote HTTP/JSON APIs with a fluent, relational-style builder."""

from __future__ import annotations

from remotequery.cache import MemoryCacheStore, build_cache_key
from remotequery.collection import ResultCollection
from remotequery.config import ConsumerConfig, load_config
from remotequery.connection import Connection, ConnectionObservability
from remotequery.endpoints import Endpoint
from remotequery.errors import (
    ConfigurationMissingError,
    MissingArgumentError,
    ProblemError,
    TransportError,
    UnsupportedOperationError,
)
from remotequery.grammar import RestGrammar, SearchGrammar
from remotequery.models import ApiModel
from remotequery.query import LengthAwarePaginator, QueryBuilder, request_context
from remotequery.registry import CONNECTIONS, ENDPOINTS, GRAMMARS, TRANSFORMERS
from remotequery.transformers import IdentityTransformer, WrapDataTransformer
from remotequery.transport import ApiResponse, HttpxConsumer

__version__ = "0.1.0"

__all__ = [
    "CONNECTIONS",
    "ENDPOINTS",
    "GRAMMARS",
    "TRANSFORMERS",
    "ApiModel",
    "ApiResponse",
    "ConfigurationMissingError",
    "Connection",
    "ConnectionObservability",
    "ConsumerConfig",
    "Endpoint",
    "HttpxConsumer",
    "IdentityTransformer",
    "LengthAwarePaginator",
    "MemoryCacheStore",
    "MissingArgumentError",
    "ProblemError",
    "QueryBuilder",
    "RestGrammar",
    "ResultCollection",
    "SearchGrammar",
    "TransportError",
    "UnsupportedOperationError",
    "WrapDataTransformer",
    "build_cache_key",
    "load_config",
    "request_context",
]
