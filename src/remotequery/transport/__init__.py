"""Transport consumers performing the actual network calls."""

from __future__ import annotations

from remotequery.transport.httpx_consumer import HttpxConsumer, flatten_query
from remotequery.transport.protocols import SUCCESS_STATUS, ApiResponse, TransportConsumer

__all__ = [
    "SUCCESS_STATUS",
    "ApiResponse",
    "HttpxConsumer",
    "TransportConsumer",
    "flatten_query",
]
