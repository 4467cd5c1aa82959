"""Recursive merge used to accumulate raw query and aggregation fragments."""

from __future__ import annotations

import copy
from collections.abc import Mapping


def _as_list(value: object) -> list[object]:
    if isinstance(value, list):
        return list(value)
    return [value]


def _merge_values(existing: object, incoming: object) -> object:
    if isinstance(existing, Mapping) and isinstance(incoming, Mapping):
        return merge_recursive(existing, incoming)
    return _as_list(existing) + _as_list(copy.deepcopy(incoming))


def merge_recursive(
    base: Mapping[str, object], incoming: Mapping[str, object]
) -> dict[str, object]:
    """
    Merge ``incoming`` into ``base`` without losing values from either side.

    Keys present on one side only are kept as-is. Colliding mappings merge
    recursively. Any other collision is combined into a list: lists
    concatenate, and scalars are appended, so ``{"a": 1}`` merged with
    ``{"a": 2}`` yields ``{"a": [1, 2]}``.

    Neither argument is mutated.

    Parameters
    ----------
    base:
        Previously accumulated fragment.
    incoming:
        Fragment supplied by the latest call.

    Returns
    -------
    dict[str, object]
        New merged mapping.
    """
    merged: dict[str, object] = copy.deepcopy(dict(base))
    for key, value in incoming.items():
        if key in merged:
            merged[key] = _merge_values(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
