"""ApiModel binding, endpoint construction and query entry points."""

from __future__ import annotations

from collections.abc import Iterator
from typing import ClassVar

import pytest

from remotequery.config.models import ConsumerConfig
from remotequery.endpoints import Endpoint
from remotequery.errors import ConfigurationMissingError, MissingArgumentError
from remotequery.models import _BINDINGS, _ENDPOINT_CACHE, ApiModel
from tests._helpers.expect import expect_collection, expect_equal, expect_true
from tests._helpers.fakes import RecordingConsumer, failure, ok


@pytest.fixture(autouse=True)
def _reset_model_bindings() -> Iterator[None]:
    """Drop model bindings and cached endpoints between tests.

    Yields
    ------
    None
        Control to the test.
    """
    yield
    _BINDINGS.clear()
    _ENDPOINT_CACHE.clear()


class Artwork(ApiModel):
    endpoints: ClassVar[dict[str, str]] = {
        "collection": "/api/v1/artworks",
        "detail": "/api/v1/artworks/{id}",
        "search": "/api/v1/artworks/search",
    }
    endpoint_class: ClassVar[type[Endpoint] | None] = Endpoint

    id: int
    title: str | None = None


class FeaturedArtwork(Artwork):
    default_scopes: ClassVar[dict[str, object]] = {
        "order_by": ("title", "desc"),
        "include": ["artist"],
        "limit": 5,
        "search": None,
    }


class Exhibit(ApiModel):
    endpoints: ClassVar[dict[str, str]] = {"collection": "/exhibits/{year}"}

    id: int


def test_query_hydrates_models(config: ConsumerConfig, consumer: RecordingConsumer) -> None:
    Artwork.bind(config, consumer=consumer)
    consumer.queue(ok({"data": [{"id": 1, "title": "Haystacks"}, {"id": 2, "medium": "oil"}]}))
    result = expect_collection(Artwork.query().get())
    expect_equal(consumer.last.uri, "/api/v1/artworks")
    first, second = result
    expect_true(isinstance(first, Artwork), message="records hydrate into the model")
    expect_equal(first, Artwork(id=1, title="Haystacks"))
    expect_equal(second["medium"], "oil")
    expect_equal(result.pluck("id"), [1, 2])


def test_find_uses_detail_template(config: ConsumerConfig, consumer: RecordingConsumer) -> None:
    Artwork.bind(config, consumer=consumer)
    consumer.queue(ok({"data": {"id": 42, "title": "Irises"}}))
    found = Artwork.find(42)
    expect_equal(consumer.last.uri, "/api/v1/artworks/42")
    expect_equal(found, Artwork(id=42, title="Irises"))
    expect_equal(getattr(found, "route_key", None), 42)


def test_find_returns_failure_body(config: ConsumerConfig, consumer: RecordingConsumer) -> None:
    Artwork.bind(config, consumer=consumer)
    consumer.queue(failure(404, {"error": "not found"}))
    expect_equal(Artwork.find(7), {"error": "not found"})


def test_find_with_empty_data_returns_none(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Artwork.bind(config, consumer=consumer)
    consumer.queue(ok({"data": []}))
    expect_equal(Artwork.find(7), None)


def test_search_targets_search_template(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Artwork.bind(config, consumer=consumer)
    Artwork.search("monet").get()
    expect_equal(consumer.last.uri, "/api/v1/artworks/search")
    expect_equal(consumer.last.params.get("q"), "monet")


def test_default_scopes_are_applied(config: ConsumerConfig, consumer: RecordingConsumer) -> None:
    FeaturedArtwork.bind(config, consumer=consumer)
    state = FeaturedArtwork.query().state
    expect_equal(state.orders, [("title", "desc")])
    expect_equal(state.include, ["artist"])
    expect_equal(state.limit, 5)
    expect_equal(state.search_text, None)


def test_binding_is_inherited(config: ConsumerConfig, consumer: RecordingConsumer) -> None:
    ApiModel.bind(config, consumer=consumer)
    expect_true(Artwork.binding().consumer is consumer, message="base binding inherited")


def test_unbound_model_raises() -> None:
    with pytest.raises(ConfigurationMissingError):
        Artwork.query()


def test_endpoint_is_cached_until_rebound(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Artwork.bind(config, consumer=consumer)
    first = Artwork.get_endpoint()
    expect_true(Artwork.get_endpoint() is first, message="endpoint cached per class")
    Artwork.bind(config, consumer=consumer)
    expect_true(Artwork.get_endpoint() is not first, message="rebinding drops the cache")


def test_bind_creates_shared_cache_store(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    cached = config.model_copy(update={"cache_enabled": True})
    ApiModel.bind(cached, consumer=consumer)
    store = ApiModel.binding().cache_store
    expect_true(store is not None, message="store created when caching is enabled")
    expect_true(Artwork.get_endpoint().connection.cache_store is store, message="shared store")
    expect_true(
        FeaturedArtwork.get_endpoint().connection.cache_store is store, message="shared store"
    )


def test_default_endpoint_tag_from_config(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Exhibit.bind(config.model_copy(update={"default_endpoint": "default"}), consumer=consumer)
    expect_true(type(Exhibit.get_endpoint()) is Endpoint, message="registry endpoint used")


def test_missing_endpoint_class_and_tag_raises(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Exhibit.bind(config, consumer=consumer)
    with pytest.raises(ConfigurationMissingError):
        Exhibit.get_endpoint()


def test_templated_collection_needs_explicit_endpoint(
    config: ConsumerConfig, consumer: RecordingConsumer
) -> None:
    Exhibit.bind(config.model_copy(update={"default_endpoint": "default"}), consumer=consumer)
    builder = Exhibit.query()
    expect_equal(builder.default_endpoint, None)
    with pytest.raises(MissingArgumentError):
        builder.get()
    path = Exhibit.get_endpoint().parse_endpoint("collection", {"year": 1874})
    builder.get(endpoint=path)
    expect_equal(consumer.last.uri, "/exhibits/1874")
