"""Recursive fragment merging."""

from __future__ import annotations

from remotequery.query.merge import merge_recursive
from tests._helpers.expect import expect_equal


def test_disjoint_keys_are_unioned() -> None:
    expect_equal(merge_recursive({"a": 1}, {"b": 2}), {"a": 1, "b": 2})


def test_colliding_scalars_become_a_list() -> None:
    expect_equal(merge_recursive({"a": 1}, {"a": 2}), {"a": [1, 2]})


def test_colliding_lists_concatenate() -> None:
    expect_equal(merge_recursive({"a": [1, 2]}, {"a": [3]}), {"a": [1, 2, 3]})


def test_scalar_and_list_combine() -> None:
    expect_equal(merge_recursive({"a": [1]}, {"a": 2}), {"a": [1, 2]})
    expect_equal(merge_recursive({"a": 1}, {"a": [2, 3]}), {"a": [1, 2, 3]})


def test_nested_mappings_merge_deeply() -> None:
    merged = merge_recursive(
        {"bool": {"must": [{"term": {"a": 1}}]}},
        {"bool": {"must": [{"term": {"b": 2}}], "should": []}},
    )
    expect_equal(
        merged,
        {"bool": {"must": [{"term": {"a": 1}}, {"term": {"b": 2}}], "should": []}},
    )


def test_inputs_are_not_mutated() -> None:
    base = {"a": {"b": [1]}}
    incoming = {"a": {"b": [2]}}
    merged = merge_recursive(base, incoming)
    merged["a"]["b"].append(99)  # type: ignore[index,union-attr]
    expect_equal(base, {"a": {"b": [1]}})
    expect_equal(incoming, {"a": {"b": [2]}})
