"""Transport consumer contract and the normalized response envelope."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Protocol

SUCCESS_STATUS = 200


@dataclass(frozen=True)
class ApiResponse:
    """Status, headers and decoded body of one remote call."""

    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: object = None

    @property
    def is_success(self) -> bool:
        """Only a 200 status counts as success."""
        return self.status == SUCCESS_STATUS

    def with_body(self, body: object) -> ApiResponse:
        """
        Return a copy carrying a different body.

        Returns
        -------
        ApiResponse
            New envelope with the same status and headers.
        """
        return dataclasses.replace(self, body=body)


class TransportConsumer(Protocol):
    """Opaque capability that performs the actual network call."""

    def send(self, method: str, uri: str, options: Mapping[str, object]) -> ApiResponse:
        """Send one request and return the normalized envelope."""
        ...

    def adapt_parameters(self, params: Mapping[str, object]) -> dict[str, object]:
        """Shape wire parameters into transport request options."""
        ...

    def adapt_headers(self, params: Mapping[str, object]) -> dict[str, object]:
        """Derive header options from the same wire parameters."""
        ...
