"""Grammar capability interface and shared compilation helpers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from remotequery.query.state import Direction, QueryState

WireParameters = dict[str, object]


class Grammar(Protocol):
    """Pure compiler from accumulated query intent to wire parameters."""

    def compile_parameters(self, state: QueryState) -> WireParameters:
        """Return the flat parameter mapping the remote API expects."""
        ...


def compile_orders(orders: Iterable[tuple[str, Direction]]) -> list[dict[str, dict[str, str]]]:
    """
    Render orderings as single-key direction objects.

    Returns
    -------
    list[dict[str, dict[str, str]]]
        ``[{"title": {"order": "asc"}}, ...]`` in call order.
    """
    return [{column: {"order": direction}} for column, direction in orders]


def join_values(values: Iterable[object]) -> str:
    """Comma-join identifiers or field names."""
    return ",".join(str(value) for value in values)
