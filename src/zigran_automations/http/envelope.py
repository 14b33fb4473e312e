"""Response envelope normalization.

Backends wrap list responses in several shapes. These helpers reduce any of
them to a plain list and never raise on an unexpected shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

LIST_KEYS = ("data", "items", "results")

_INTEGRATION_KEYS = ("items", "data", "results", "providers", "integrations", "list")
_INTEGRATION_META_KEYS = frozenset(
    {
        "success",
        "message",
        "error",
        "errors",
        "status",
        "code",
        "meta",
        "pagination",
        "page",
        "limit",
        "total",
        *_INTEGRATION_KEYS,
    }
)


def normalize_list(payload: Any) -> list[Any]:
    """Bare list, ``{data}``, ``{items}`` or ``{results}`` -> list; else ``[]``."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        for key in LIST_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []


def normalize_integration_list(payload: Any) -> list[Any]:
    """Looser normalizer for the integrations listing.

    Besides the usual wrapper keys this accepts ``providers``,
    ``integrations`` and ``list``, the same keys nested under ``data``, a
    nested ``data``/``result``/``payload`` envelope, and finally a mapping of
    provider key -> provider object, which becomes ``[{"key": ..., ...}]``.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping):
        return []

    for key in _INTEGRATION_KEYS:
        if isinstance(payload.get(key), list):
            return payload[key]

    data = payload.get("data")
    if isinstance(data, Mapping):
        for key in _INTEGRATION_KEYS:
            if isinstance(data.get(key), list):
                return data[key]

    inner = next(
        (payload[k] for k in ("data", "result", "payload") if payload.get(k) is not None),
        None,
    )
    if inner is not None and inner is not payload:
        nested = normalize_integration_list(inner)
        if nested:
            return nested

    entries: list[dict[str, Any]] = []
    for key, value in payload.items():
        if key in _INTEGRATION_META_KEYS or value is None:
            continue
        if isinstance(value, Mapping):
            entries.append({"key": key, **value})
        else:
            entries.append({"key": key, "value": value})
    return entries
