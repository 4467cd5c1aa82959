"""Typed fakes for transport and clock dependencies."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from remotequery.transport.protocols import ApiResponse


@dataclass(frozen=True)
class SentRequest:
    """One request observed by the recording consumer."""

    method: str
    uri: str
    options: dict[str, object]

    @property
    def params(self) -> dict[str, object]:
        """JSON parameters the connection adapted for this request."""
        payload = self.options.get("json", {})
        return dict(payload) if isinstance(payload, Mapping) else {}


@dataclass
class RecordingConsumer:
    """
    Transport consumer replaying queued responses and recording requests.

    The last queued response is repeated once the queue is exhausted.
    """

    responses: list[ApiResponse] = field(
        default_factory=lambda: [ApiResponse(status=200, body={"data": []})]
    )
    calls: list[SentRequest] = field(default_factory=list)

    def queue(self, *responses: ApiResponse) -> None:
        """Replace the queued responses."""
        self.responses = list(responses)

    def send(self, method: str, uri: str, options: Mapping[str, object]) -> ApiResponse:
        self.calls.append(SentRequest(method=method, uri=uri, options=dict(options)))
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]

    def adapt_parameters(self, params: Mapping[str, object]) -> dict[str, object]:
        return {"json": dict(params)}

    def adapt_headers(self, params: Mapping[str, object]) -> dict[str, object]:  # noqa: ARG002
        return {"headers": {"Accept": "application/json"}}

    @property
    def last(self) -> SentRequest:
        """Most recent request."""
        return self.calls[-1]


@dataclass
class FakeClock:
    """Manually advanced clock for TTL tests."""

    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        """Move the clock forward."""
        self.now += seconds


def ok(body: object, *, headers: dict[str, str] | None = None) -> ApiResponse:
    """Build a 200 envelope."""
    return ApiResponse(status=200, headers=headers or {}, body=body)


def failure(status: int, body: object = None) -> ApiResponse:
    """Build a non-success envelope."""
    return ApiResponse(status=status, body=body)
