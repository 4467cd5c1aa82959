"""Query building, state accumulation and pagination."""

from __future__ import annotations

from remotequery.query.builder import PaginationData, QueryBuilder
from remotequery.query.merge import merge_recursive
from remotequery.query.pagination import (
    LengthAwarePaginator,
    request_context,
    resolve_current_page,
    resolve_current_path,
)
from remotequery.query.state import ALL_COLUMNS, QueryState

__all__ = [
    "ALL_COLUMNS",
    "LengthAwarePaginator",
    "PaginationData",
    "QueryBuilder",
    "QueryState",
    "merge_recursive",
    "request_context",
    "resolve_current_page",
    "resolve_current_path",
]
