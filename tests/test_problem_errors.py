"""Problem Details error taxonomy."""

from __future__ import annotations

import json
import logging

import pytest

from remotequery.errors import (
    ConfigurationMissingError,
    MissingArgumentError,
    ProblemError,
    TransportError,
    UnsupportedOperationError,
    configuration_missing,
    log_problem,
    missing_argument,
    problem,
    transport_failure,
    unsupported_operation,
)
from tests._helpers.expect import expect_equal, expect_true


@pytest.mark.parametrize(
    ("factory", "error_type", "code", "status"),
    [
        (configuration_missing, ConfigurationMissingError, "config.missing", 500),
        (unsupported_operation, UnsupportedOperationError, "query.unsupported", 400),
        (missing_argument, MissingArgumentError, "query.missing_argument", 400),
        (transport_failure, TransportError, "transport.failure", 502),
    ],
)
def test_helpers_build_typed_problems(
    factory: object, error_type: type[ProblemError], code: str, status: int
) -> None:
    error = factory("something went wrong", field="x")  # type: ignore[operator]
    expect_true(isinstance(error, error_type), message=f"{code} error type")
    expect_true(isinstance(error, ProblemError), message="all errors share the base")
    detail = error.problem_detail
    expect_equal(detail.code, code)
    expect_equal(detail.status, status)
    expect_equal(detail.type, f"https://problems.remotequery.dev/{code}")
    expect_equal(detail.extras, {"field": "x"})
    expect_equal(str(error), "something went wrong")


def test_problem_to_dict_omits_empty_fields() -> None:
    detail = problem("x.y", "Title", "Detail", instance="trace-1")
    expect_equal(
        detail.to_dict(),
        {
            "type": "https://problems.remotequery.dev/x.y",
            "title": "Title",
            "detail": "Detail",
            "instance": "trace-1",
            "code": "x.y",
        },
    )


def test_problem_instances_are_unique() -> None:
    expect_true(
        problem("a", "A", "a").instance != problem("a", "A", "a").instance,
        message="correlation ids differ",
    )


def test_log_problem_emits_json(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("remotequery.tests")
    caplog.set_level(logging.ERROR, logger="remotequery.tests")
    log_problem(logger, problem("cache.down", "Cache down", "no store", status=503))
    payload = json.loads(caplog.records[-1].getMessage())
    expect_equal(payload["code"], "cache.down")
    expect_equal(payload["status"], 503)
