"""Length-aware pagination and request-context page resolution."""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from urllib.parse import urlencode


@dataclass(frozen=True)
class RequestContext:
    """Query parameters and path of the request being served."""

    query: Mapping[str, object] = field(default_factory=dict)
    path: str = "/"


_REQUEST_CONTEXT: ContextVar[RequestContext | None] = ContextVar(
    "remotequery_request_context", default=None
)


@contextmanager
def request_context(
    query: Mapping[str, object] | None = None, path: str = "/"
) -> Iterator[RequestContext]:
    """
    Bind the current request's query parameters and path for page resolution.

    Yields
    ------
    RequestContext
        The bound context; restored on exit.
    """
    context = RequestContext(query=dict(query or {}), path=path)
    token = _REQUEST_CONTEXT.set(context)
    try:
        yield context
    finally:
        _REQUEST_CONTEXT.reset(token)


def resolve_current_page(page_name: str = "page") -> int:
    """
    Return the current page from the bound request, defaulting to 1.

    Values that are not integers >= 1 resolve to 1.

    Returns
    -------
    int
        Current page number.
    """
    context = _REQUEST_CONTEXT.get()
    if context is None:
        return 1
    raw = context.query.get(page_name)
    try:
        page = int(str(raw))
    except ValueError:
        return 1
    return page if page >= 1 else 1


def resolve_current_path() -> str:
    """Return the bound request path, or ``/``."""
    context = _REQUEST_CONTEXT.get()
    return "/" if context is None else context.path


@dataclass(frozen=True)
class LengthAwarePaginator[T]:
    """One page of records plus the total used to derive page links."""

    items: Sequence[T]
    total: int
    per_page: int
    current_page: int
    path: str = "/"
    page_name: str = "page"

    @property
    def last_page(self) -> int:
        """Highest page number, at least 1."""
        if self.per_page <= 0:
            return 1
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        """True when pages follow the current one."""
        return self.current_page < self.last_page

    @property
    def on_first_page(self) -> bool:
        """True on page 1."""
        return self.current_page <= 1

    @property
    def first_item(self) -> int | None:
        """1-based position of the first record on this page."""
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        """1-based position of the last record on this page."""
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    def url(self, page: int) -> str:
        """Return the URL for ``page`` on the paginator path."""
        page = max(page, 1)
        separator = "&" if "?" in self.path else "?"
        return f"{self.path}{separator}{urlencode({self.page_name: page})}"

    @property
    def next_page_url(self) -> str | None:
        """URL of the next page, if any."""
        return self.url(self.current_page + 1) if self.has_more_pages else None

    @property
    def previous_page_url(self) -> str | None:
        """URL of the previous page, if any."""
        return None if self.on_first_page else self.url(self.current_page - 1)

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def to_dict(self) -> dict[str, object]:
        """
        Serialize the page and its links.

        Returns
        -------
        dict[str, object]
            JSON-friendly pagination payload.
        """
        return {
            "data": list(self.items),
            "total": self.total,
            "per_page": self.per_page,
            "current_page": self.current_page,
            "last_page": self.last_page,
            "from": self.first_item,
            "to": self.last_item,
            "path": self.path,
            "next_page_url": self.next_page_url,
            "prev_page_url": self.previous_page_url,
        }
