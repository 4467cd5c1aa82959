"""Default transport consumer backed by HTTPX."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Literal, Self

import anyio
import httpx

from remotequery.errors import log_problem, transport_failure
from remotequery.transport.protocols import ApiResponse

ParameterLocation = Literal["json", "query"]
LOG = logging.getLogger("remotequery.transport")


async def _aclose_client(client: httpx.AsyncClient) -> None:
    """Close an async HTTPX client."""
    await client.aclose()


async def _request_async(
    client: httpx.AsyncClient, method: str, uri: str, options: dict[str, object]
) -> httpx.Response:
    """
    Perform an async request with prepared options.

    Returns
    -------
    httpx.Response
        Response from the remote server.
    """
    return await client.request(method, uri, **options)  # type: ignore[arg-type]


def _flatten_into(pairs: list[tuple[str, str]], key: str, value: object) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for child_key, child in value.items():
            _flatten_into(pairs, f"{key}[{child_key}]", child)
    elif isinstance(value, list | tuple):
        for index, child in enumerate(value):
            _flatten_into(pairs, f"{key}[{index}]", child)
    elif isinstance(value, bool):
        pairs.append((key, "true" if value else "false"))
    else:
        pairs.append((key, str(value)))


def flatten_query(params: Mapping[str, object]) -> list[tuple[str, str]]:
    """
    Flatten nested parameters into bracketed query-string pairs.

    ``{"sort": [{"title": {"order": "asc"}}]}`` becomes
    ``[("sort[0][title][order]", "asc")]``. ``None`` values are dropped.

    Returns
    -------
    list[tuple[str, str]]
        Ordered key/value pairs suitable for ``httpx`` ``params``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        _flatten_into(pairs, str(key), value)
    return pairs


def _decode_body(response: httpx.Response) -> object:
    if not response.content:
        return None
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            return response.text
    return response.text


class HttpxConsumer:
    """
    Transport consumer sending requests through an HTTPX client.

    Parameters go in the JSON body by default; ``parameter_location="query"``
    flattens them into the query string instead.
    """

    def __init__(
        self,
        base_uri: str,
        *,
        timeout: float = 10.0,
        client: httpx.Client | httpx.AsyncClient | None = None,
        parameter_location: ParameterLocation = "json",
        default_headers: Mapping[str, str] | None = None,
    ) -> None:
        self.base_uri = base_uri
        self.parameter_location = parameter_location
        self.default_headers = dict(default_headers or {})
        if client is None:
            self.client: httpx.Client | httpx.AsyncClient = httpx.Client(
                base_url=base_uri, timeout=timeout
            )
            self._owns_client = True
        else:
            self.client = client
            self._owns_client = False

    def adapt_parameters(self, params: Mapping[str, object]) -> dict[str, object]:
        """
        Place wire parameters in the JSON body or the query string.

        Returns
        -------
        dict[str, object]
            ``{"json": ...}`` or ``{"params": ...}`` request options.
        """
        if self.parameter_location == "query":
            return {"params": flatten_query(params)}
        return {"json": dict(params)}

    def adapt_headers(self, params: Mapping[str, object]) -> dict[str, object]:  # noqa: ARG002
        """
        Build header options; the default ignores the parameters.

        Returns
        -------
        dict[str, object]
            ``{"headers": ...}`` request options.
        """
        return {"headers": {"Accept": "application/json", **self.default_headers}}

    def send(self, method: str, uri: str, options: Mapping[str, object]) -> ApiResponse:
        """
        Send one request and normalize the response.

        Non-success statuses are returned, not raised.

        Returns
        -------
        ApiResponse
            Status, headers and decoded body.

        Raises
        ------
        TransportError
            When HTTPX fails before a response is received.
        """
        request_options = dict(options)
        client = self.client
        try:
            if isinstance(client, httpx.AsyncClient):
                response = anyio.run(_request_async, client, method, uri, request_options)
            else:
                response = client.request(method, uri, **request_options)  # type: ignore[arg-type]
        except httpx.HTTPError as exc:
            error = transport_failure(
                f"{method} {uri} failed: {exc}",
                method=method,
                uri=uri,
            )
            log_problem(LOG, error.problem_detail)
            raise error from exc
        return ApiResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=_decode_body(response),
        )

    def close(self) -> None:
        """Close the underlying HTTP client when this consumer created it."""
        if not self._owns_client:
            return
        client = self.client
        if isinstance(client, httpx.AsyncClient):
            anyio.run(_aclose_client, client)
            return
        client.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
