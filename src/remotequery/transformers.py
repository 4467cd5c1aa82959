"""Response transformers normalizing remote envelopes before the builder reads them."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from remotequery.transport.protocols import ApiResponse


class Transformer(Protocol):
    """Reshape a raw response envelope."""

    def transform(self, response: ApiResponse) -> object:
        """Return the reshaped response."""
        ...


class IdentityTransformer:
    """Return the envelope unchanged."""

    def transform(self, response: ApiResponse) -> object:
        return response


class WrapDataTransformer:
    """
    Wrap bare successful bodies as ``{"data": body}``.

    For APIs that return records directly instead of inside a ``data``
    envelope. Bodies that already carry ``data`` and non-200 responses pass
    through untouched.
    """

    def transform(self, response: ApiResponse) -> object:
        """
        Wrap the body of a successful response.

        Returns
        -------
        object
            Envelope whose body holds a ``data`` key.
        """
        if not response.is_success:
            return response
        body = response.body
        if isinstance(body, Mapping) and "data" in body:
            return response
        return response.with_body({"data": body})
