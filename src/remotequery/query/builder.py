"""Fluent accumulator of query intent and its execution entry points."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from remotequery.collection import ResultCollection
from remotequery.connection import Connection
from remotequery.errors import missing_argument, unsupported_operation
from remotequery.query.merge import merge_recursive
from remotequery.query.pagination import (
    LengthAwarePaginator,
    resolve_current_page,
    resolve_current_path,
)
from remotequery.query.state import (
    ALL_COLUMNS,
    Identifier,
    QueryState,
    clamp_offset,
    normalize_direction,
)
from remotequery.transport.protocols import SUCCESS_STATUS

if TYPE_CHECKING:
    from remotequery.grammar.base import Grammar, WireParameters

ID_COLUMN = "id"
DEFAULT_PER_PAGE = 15
SUPPORTED_VERBS = ("GET", "POST")
LOG = logging.getLogger("remotequery.query")

Columns = Sequence[str] | str | None


def _response_field(response: object, name: str) -> object | None:
    if isinstance(response, Mapping):
        return response.get(name)
    return getattr(response, name, None)


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    try:
        return int(str(value))
    except ValueError:
        return None


def _as_values[V](values: Iterable[V] | V | None) -> list[V]:
    # A bare string or scalar identifier is one value, not a sequence of characters.
    if values is None or values == "":
        return []
    if isinstance(values, str | int):
        return [values]  # type: ignore[list-item]
    return list(values)  # type: ignore[arg-type]


def _as_records(data: object) -> list[object]:
    if data is None:
        return []
    if isinstance(data, list | tuple):
        return list(data)
    return [data]


@dataclass(frozen=True)
class PaginationData:
    """Pagination block captured from the last successful execution."""

    total: int
    per_page: int | None = None
    current_page: int | None = None

    @classmethod
    def from_payload(cls, payload: object) -> PaginationData | None:
        """
        Parse a ``pagination`` block; accepts ``per_page`` or ``limit``.

        Returns
        -------
        PaginationData | None
            Parsed data, or None when the block or its ``total`` is missing.
        """
        if not isinstance(payload, Mapping):
            return None
        total = _optional_int(payload.get("total"))
        if total is None:
            return None
        per_page = payload.get("per_page", payload.get("limit"))
        return cls(
            total=total,
            per_page=_optional_int(per_page),
            current_page=_optional_int(payload.get("current_page")),
        )


class QueryBuilder[T]:
    """
    Accumulate filters, ordering, paging and search for one remote resource.

    Every fluent method returns the builder. Executing (``get``, ``post``, the
    raw variants, ``paginate``) leaves the accumulated state in place except for
    the projection, which is restored to its pre-call value so the builder can
    be executed again with different columns.

    Successful executions return a ``ResultCollection``. Any non-200 response
    is returned as its body (or the whole envelope when it has no body), so
    callers must check the result type.
    """

    def __init__(
        self,
        connection: Connection,
        grammar: Grammar,
        *,
        entity_factory: Callable[[object], T] | None = None,
        default_endpoint: str | None = None,
    ) -> None:
        self.connection = connection
        self.grammar = grammar
        self.entity_factory = entity_factory
        self.default_endpoint = default_endpoint
        self.state = QueryState()
        self.pagination_data: PaginationData | None = None

    def clone(self) -> QueryBuilder[T]:
        """
        Return an independent copy sharing connection and grammar.

        Returns
        -------
        QueryBuilder[T]
            Builder with a deep copy of the current state.
        """
        twin: QueryBuilder[T] = QueryBuilder(
            self.connection,
            self.grammar,
            entity_factory=self.entity_factory,
            default_endpoint=self.default_endpoint,
        )
        twin.state = copy.deepcopy(self.state)
        return twin

    # Filtering

    def where(
        self,
        column: str,  # noqa: ARG002
        operator: object = None,  # noqa: ARG002
        value: object = None,  # noqa: ARG002
        boolean: str = "and",  # noqa: ARG002
    ) -> Self:
        """
        Accept a where clause without applying it.

        The remote API has no general predicate filtering; chains written
        against a relational builder keep working but are not filtered.
        Use ``ids`` or ``where_in("id", ...)`` to filter by identifier.

        Returns
        -------
        Self
            This builder, unchanged.
        """
        LOG.debug("where(%s) ignored: predicate filtering is not supported remotely", column)
        return self

    def where_not_in(
        self,
        column: str,
        values: Iterable[object],  # noqa: ARG002
        boolean: str = "and",  # noqa: ARG002
    ) -> Self:
        """
        Accept a where-not-in clause without applying it.

        Returns
        -------
        Self
            This builder, unchanged.
        """
        LOG.debug(
            "where_not_in(%s) ignored: predicate filtering is not supported remotely", column
        )
        return self

    def where_in(
        self,
        column: str,
        values: Iterable[Identifier],
        boolean: str = "and",  # noqa: ARG002
    ) -> Self:
        """
        Filter by identifiers; only the ``id`` column is supported.

        Returns
        -------
        Self
            This builder.

        Raises
        ------
        UnsupportedOperationError
            When ``column`` is not the identifier column.
        """
        if column != ID_COLUMN:
            message = f"where_in is only supported for '{ID_COLUMN}', got '{column}'"
            raise unsupported_operation(message, column=column)
        return self.ids(values)

    def ids(self, values: Iterable[Identifier] | Identifier | None = None) -> Self:
        """Replace the identifier filter; an empty list keeps the previous one."""
        identifiers = _as_values(values)
        if identifiers:
            self.state.ids = identifiers
        return self

    def include(self, fields: Iterable[str] | str | None = None) -> Self:
        """Replace the extra fields to include; an empty list keeps the previous ones."""
        inclusions = _as_values(fields)
        if inclusions:
            self.state.include = inclusions
        return self

    def search(self, text: str | None = None) -> Self:
        """Set the free-text search; empty or None clears it."""
        self.state.search_text = text or None
        return self

    def raw_query(self, fragment: Mapping[str, object]) -> Self:
        """Merge a raw query fragment into the accumulated one."""
        self.state.raw_query = merge_recursive(self.state.raw_query, fragment)
        return self

    def aggregations(self, fragment: Mapping[str, object]) -> Self:
        """Merge an aggregation fragment into the accumulated one."""
        self.state.aggregations = merge_recursive(self.state.aggregations, fragment)
        return self

    # Ordering and paging

    def order_by(self, column: str, direction: str = "asc") -> Self:
        """Append an ordering; any direction other than ``asc`` means ``desc``."""
        self.state.orders.append((column, normalize_direction(direction)))
        return self

    def offset(self, value: int) -> Self:
        """Set the number of records to skip, floored at 0; clears the page marker."""
        self.state.offset = clamp_offset(value)
        self.state.page = None
        return self

    def skip(self, value: int) -> Self:
        """Alias of ``offset``."""
        return self.offset(value)

    def limit(self, value: int) -> Self:
        """Set the maximum number of records; negative values are ignored."""
        if value >= 0:
            self.state.limit = int(value)
        return self

    def take(self, value: int) -> Self:
        """Alias of ``limit``."""
        return self.limit(value)

    def for_page(self, page: int, per_page: int = DEFAULT_PER_PAGE) -> Self:
        """Derive offset and limit from a page number and remember the page."""
        self.skip((page - 1) * per_page).take(per_page)
        self.state.page = page
        return self

    def ttl(self, value: int | None = None) -> Self:
        """Override the cache lifetime for this query; None uses the connection default."""
        self.state.ttl = value
        return self

    # Execution

    def compile_parameters(self) -> WireParameters:
        """Compile the current state through the grammar."""
        return self.grammar.compile_parameters(self.state)

    def get(self, columns: Columns = None, endpoint: str | None = None) -> object:
        """Execute a GET and wrap ``body.data`` in a ResultCollection."""
        return self.execute(columns, endpoint, "GET")

    def post(self, columns: Columns = None, endpoint: str | None = None) -> object:
        """Execute a POST and wrap ``body.data`` in a ResultCollection."""
        return self.execute(columns, endpoint, "POST")

    def get_raw(self, columns: Columns = None, endpoint: str | None = None) -> object:
        """Execute a GET and wrap the whole body in a ResultCollection."""
        return self.execute_raw(columns, endpoint, "GET")

    def post_raw(self, columns: Columns = None, endpoint: str | None = None) -> object:
        """Execute a POST and wrap the whole body in a ResultCollection."""
        return self.execute_raw(columns, endpoint, "POST")

    def execute(
        self, columns: Columns = None, endpoint: str | None = None, verb: str = "GET"
    ) -> ResultCollection[T] | object:
        """
        Run the query and wrap ``body.data`` in a ResultCollection.

        A single record is wrapped as a one-element collection; a missing
        ``data`` key yields an empty collection.

        Parameters
        ----------
        columns:
            Projection for this call; used only when none was set before.
        endpoint:
            Endpoint path; defaults to the builder's default endpoint.
        verb:
            ``GET`` or ``POST``.

        Returns
        -------
        ResultCollection[T] | object
            Collection on status 200, otherwise the body or raw envelope.
        """
        response = self._run(columns, endpoint, verb)
        status = _response_field(response, "status")
        body = _response_field(response, "body")
        if status is not None and status != SUCCESS_STATUS:
            return response if body is None else body

        data = body.get("data") if isinstance(body, Mapping) else None
        records = _as_records(data)
        collection: ResultCollection[T] = ResultCollection(self._hydrate(records))
        return self._attach_metadata(collection, body, response)

    def execute_raw(
        self, columns: Columns = None, endpoint: str | None = None, verb: str = "GET"
    ) -> ResultCollection[object] | object:
        """
        Run the query and wrap the entire body, for non-envelope payloads.

        Returns
        -------
        ResultCollection[object] | object
            Collection on status 200, otherwise the body or raw envelope.
        """
        response = self._run(columns, endpoint, verb)
        status = _response_field(response, "status")
        body = _response_field(response, "body")
        if status is not None and status != SUCCESS_STATUS:
            return response if body is None else body

        collection: ResultCollection[object] = ResultCollection(_as_records(body))
        return self._attach_metadata(collection, body, response)

    def paginate(
        self,
        per_page: int | None = None,
        columns: Columns = None,
        page_name: str = "page",
        page: int | None = None,
    ) -> LengthAwarePaginator[T] | object:
        """
        Fetch one page and wrap it in a length-aware paginator.

        The total comes from the response's pagination block when present,
        otherwise from the number of records returned. The fallback
        under-counts when the API paginates server-side.

        Parameters
        ----------
        per_page:
            Records per page; required.
        columns:
            Projection for this call.
        page_name:
            Query parameter holding the page in the bound request context.
        page:
            Explicit page; resolved from the request context when omitted.

        Returns
        -------
        LengthAwarePaginator[T] | object
            Paginator on success, otherwise the non-success body or envelope.

        Raises
        ------
        MissingArgumentError
            When ``per_page`` is not supplied.
        """
        if per_page is None:
            message = "Pass the number of records per page to paginate"
            raise missing_argument(message)
        current_page = page or resolve_current_page(page_name)

        results = self.for_page(current_page, per_page).get(columns)
        if not isinstance(results, ResultCollection):
            return results

        pagination = self.pagination_data
        total = pagination.total if pagination is not None else len(results)
        return LengthAwarePaginator(
            items=results.to_list(),
            total=total,
            per_page=per_page,
            current_page=current_page,
            path=resolve_current_path(),
            page_name=page_name,
        )

    def _run(self, columns: Columns, endpoint: str | None, verb: str) -> object:
        method = verb.upper()
        if method not in SUPPORTED_VERBS:
            message = f"Verb not supported: {verb}. Use only GET and POST"
            raise unsupported_operation(message, verb=verb)
        path = endpoint or self.default_endpoint
        if not path:
            message = "No endpoint given and the builder has no default endpoint"
            raise missing_argument(message)

        original = self.state.columns
        if original is None:
            self.state.columns = self._normalize_columns(columns)
        try:
            return self.connection.execute(
                method, path, self.compile_parameters(), ttl=self.state.ttl
            )
        finally:
            self.state.columns = original

    @staticmethod
    def _normalize_columns(columns: Columns) -> tuple[str, ...]:
        if not columns:
            return ALL_COLUMNS
        if isinstance(columns, str):
            return (columns,)
        return tuple(columns)

    def _hydrate(self, records: list[object]) -> list[T]:
        factory = self.entity_factory
        if factory is None:
            return records  # type: ignore[return-value]
        return [factory(record) for record in records]

    def _attach_metadata[C: ResultCollection](
        self, collection: C, body: object, response: object
    ) -> C:
        block = body if isinstance(body, Mapping) else {}
        self.pagination_data = PaginationData.from_payload(block.get("pagination"))
        collection.set_metadata(
            {
                "pagination": block.get("pagination"),
                "aggregations": block.get("aggregations"),
                "suggestions": block.get("suggest"),
                "response": response,
            }
        )
        return collection
