"""Deterministic cache keys for connection calls."""

from __future__ import annotations

import json
from collections.abc import Mapping


def build_cache_key(
    verb: str,
    endpoint: str,
    options: Mapping[str, object],
    version: str,
    namespace: str,
) -> str:
    """
    Serialize a call identity into a stable string key.

    Mapping keys are sorted so equal options always produce the same key.

    Returns
    -------
    str
        Compact JSON array of ``[verb, endpoint, options, version, namespace]``.
    """
    return json.dumps(
        [verb, endpoint, options, version, namespace],
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
