"""Error taxonomy and Problem Details helpers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

PROBLEM_TYPE_BASE = "https://problems.remotequery.dev"


def generate_correlation_id() -> str:
    """
    Return a new correlation identifier for tracing errors.

    Returns
    -------
    str
        UUID4 correlation identifier.
    """
    return str(uuid4())


@dataclass(frozen=True)
class ProblemDetail:
    """
    RFC 9457 Problem Details payload.

    Fields mirror the standard shape with optional extras for diagnostics.
    """

    type: str
    title: str
    detail: str
    status: int | None = None
    instance: str = field(default_factory=generate_correlation_id)
    code: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to a JSON-friendly dict.

        Returns
        -------
        dict[str, Any]
            Problem detail payload as a plain dictionary.
        """
        payload: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "detail": self.detail,
            "instance": self.instance,
        }
        if self.status is not None:
            payload["status"] = self.status
        if self.code is not None:
            payload["code"] = self.code
        if self.extras:
            payload["extras"] = self.extras
        return payload


def problem(  # noqa: PLR0913
    code: str,
    title: str,
    detail: str,
    *,
    status: int | None = None,
    instance: str | None = None,
    extras: dict[str, Any] | None = None,
) -> ProblemDetail:
    """
    Create a ProblemDetail whose type URI is derived from ``code``.

    Parameters
    ----------
    code
        Stable problem code (e.g., 'config.missing').
    title
        Human-readable error summary.
    detail
        Detailed description of the error.
    status
        Optional HTTP-style status code.
    instance
        Correlation/trace identifier; defaults to a UUID4.
    extras
        Optional structured context for diagnostics.

    Returns
    -------
    ProblemDetail
        Structured problem payload.
    """
    resolved_instance = instance or generate_correlation_id()
    return ProblemDetail(
        type=f"{PROBLEM_TYPE_BASE}/{code}",
        title=title,
        detail=detail,
        status=status,
        instance=resolved_instance,
        code=code,
        extras=extras or {},
    )


def log_problem(logger: logging.Logger | logging.LoggerAdapter, detail: ProblemDetail) -> None:
    """Emit a Problem Detail as a structured error log."""
    logger.error(json.dumps(detail.to_dict(), default=str))


class ProblemError(Exception):
    """Base exception carrying a ProblemDetail payload."""

    def __init__(self, detail: ProblemDetail) -> None:
        super().__init__(detail.detail)
        self.problem_detail = detail


class ConfigurationMissingError(ProblemError):
    """Base URI, grammar, connection or endpoint could not be resolved."""


class UnsupportedOperationError(ProblemError):
    """Operation the remote API cannot express (non-id whereIn, unknown verb)."""


class MissingArgumentError(ProblemError):
    """A required argument or placeholder value was not supplied."""


class TransportError(ProblemError):
    """The transport consumer could not complete the request."""


def configuration_missing(message: str, **extras: Any) -> ConfigurationMissingError:
    """Construct a configuration-missing error."""
    return ConfigurationMissingError(
        problem("config.missing", "Configuration missing", message, status=500, extras=extras)
    )


def unsupported_operation(message: str, **extras: Any) -> UnsupportedOperationError:
    """Construct an unsupported-operation error."""
    return UnsupportedOperationError(
        problem("query.unsupported", "Unsupported operation", message, status=400, extras=extras)
    )


def missing_argument(message: str, **extras: Any) -> MissingArgumentError:
    """Construct a missing-argument error."""
    return MissingArgumentError(
        problem(
            "query.missing_argument", "Missing argument", message, status=400, extras=extras
        )
    )


def transport_failure(message: str, **extras: Any) -> TransportError:
    """Construct a transport-failure error."""
    return TransportError(
        problem("transport.failure", "Transport failure", message, status=502, extras=extras)
    )


__all__ = [
    "ConfigurationMissingError",
    "MissingArgumentError",
    "ProblemDetail",
    "ProblemError",
    "TransportError",
    "UnsupportedOperationError",
    "configuration_missing",
    "generate_correlation_id",
    "log_problem",
    "missing_argument",
    "problem",
    "transport_failure",
    "unsupported_operation",
]
