"""Accumulated query intent owned by a single QueryBuilder."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Direction = Literal["asc", "desc"]
Identifier = int | str

ALL_COLUMNS: tuple[str, ...] = ("*",)


def normalize_direction(direction: str) -> Direction:
    """
    Normalize an ordering direction.

    Anything other than a case-insensitive ``asc`` is treated as ``desc``;
    typos are not rejected.

    Returns
    -------
    Direction
        ``"asc"`` or ``"desc"``.
    """
    return "asc" if str(direction).strip().lower() == "asc" else "desc"


def clamp_offset(value: int) -> int:
    """
    Clamp an offset to a non-negative value.

    Returns
    -------
    int
        ``max(0, value)``.
    """
    return max(0, int(value))


@dataclass
class QueryState:
    """Query intent accumulated through the fluent builder methods."""

    orders: list[tuple[str, Direction]] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    page: int | None = None
    ids: list[Identifier] = field(default_factory=list)
    include: list[str] = field(default_factory=list)
    search_text: str | None = None
    raw_query: dict[str, object] = field(default_factory=dict)
    aggregations: dict[str, object] = field(default_factory=dict)
    columns: tuple[str, ...] | None = None
    ttl: int | None = None

    def wants_all_columns(self) -> bool:
        """Return True when no explicit projection was requested."""
        return not self.columns or tuple(self.columns) == ALL_COLUMNS
