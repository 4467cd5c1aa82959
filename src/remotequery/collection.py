"""Ordered records plus out-of-band response metadata."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import overload

METADATA_KEYS = ("pagination", "aggregations", "suggestions", "response")


class ResultCollection[T](Sequence[T]):
    """
    Immutable sequence of records with pagination/aggregation/suggestion metadata.

    Metadata is query context only: equality compares the records alone.
    """

    __slots__ = ("_items", "_metadata")

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: tuple[T, ...] = tuple(items)
        self._metadata: dict[str, object] = {}

    def __repr__(self) -> str:
        return f"ResultCollection({list(self._items)!r}, metadata={sorted(self._metadata)!r})"

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        if isinstance(index, slice):
            return list(self._items[index])
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ResultCollection):
            return self._items == other._items
        if isinstance(other, list | tuple):
            return list(self._items) == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def set_metadata(self, metadata: Mapping[str, object]) -> ResultCollection[T]:
        """
        Attach side-channel metadata; ``None`` values are skipped.

        Returns
        -------
        ResultCollection[T]
            This collection, for chaining.
        """
        for key, value in metadata.items():
            if value is not None:
                self._metadata[key] = value
        return self

    @property
    def metadata(self) -> dict[str, object]:
        """Copy of the attached metadata."""
        return dict(self._metadata)

    @property
    def pagination(self) -> object | None:
        """Pagination block of the response, if any."""
        return self._metadata.get("pagination")

    @property
    def aggregations(self) -> object | None:
        """Aggregation block of the response, if any."""
        return self._metadata.get("aggregations")

    @property
    def suggestions(self) -> object | None:
        """Suggestion block of the response, if any."""
        return self._metadata.get("suggestions")

    @property
    def response(self) -> object | None:
        """Raw response the collection was built from."""
        return self._metadata.get("response")

    def count(self, value: object = None) -> int:  # type: ignore[override]
        """Return the number of records, or occurrences of ``value`` when given."""
        if value is None:
            return len(self._items)
        return self._items.count(value)  # type: ignore[arg-type]

    def first(self) -> T | None:
        """Return the first record or None."""
        return self._items[0] if self._items else None

    def to_list(self) -> list[T]:
        """Return the records as a new list."""
        return list(self._items)

    def pluck(self, key: str) -> list[object]:
        """Return ``key`` from every record (mapping key or attribute)."""
        values: list[object] = []
        for item in self._items:
            if isinstance(item, Mapping):
                values.append(item.get(key))
            else:
                values.append(getattr(item, key, None))
        return values
