"""Pytest configuration for the remotequery test suite."""

from __future__ import annotations

import pytest

from remotequery.cache.store import MemoryCacheStore
from remotequery.config.models import ConsumerConfig
from remotequery.connection import Connection
from remotequery.grammar.rest import RestGrammar
from remotequery.query.builder import QueryBuilder
from tests._helpers.fakes import FakeClock, RecordingConsumer

BASE_URI = "https://api.example.test"


@pytest.fixture
def consumer() -> RecordingConsumer:
    """Provide a consumer answering 200 with an empty data envelope.

    Returns
    -------
    RecordingConsumer
        Fake transport; queue responses with ``consumer.queue(...)``.
    """
    return RecordingConsumer()


@pytest.fixture
def clock() -> FakeClock:
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def cache_store(clock: FakeClock) -> MemoryCacheStore:
    """Provide an in-memory cache driven by the fake clock."""
    return MemoryCacheStore(time_func=clock)


@pytest.fixture
def connection(consumer: RecordingConsumer) -> Connection:
    """Provide a connection without caching or transformation."""
    return Connection(consumer, default_ttl=60)


@pytest.fixture
def builder(connection: Connection) -> QueryBuilder[object]:
    """Provide a REST builder targeting ``/items``."""
    return QueryBuilder(connection, RestGrammar(), default_endpoint="/items")


@pytest.fixture
def config() -> ConsumerConfig:
    """Provide a configuration pointing at the test API."""
    return ConsumerConfig(base_uri=BASE_URI)

