"""Query-string normalisation steps and structured-query serialisation."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote, unquote

from url_canon.models import QueryPolicy

# A pair keeps its raw (still percent-encoded) key and value; ``None`` marks
# a bare key with no ``=``.
QueryPair = tuple[str, Optional[str]]

_NUMERIC_INDEX = re.compile(r"(\[|%5B)\d+(\]|%5D)", re.IGNORECASE)


def param_name(key: str) -> str:
    """Percent-decode a raw query key for comparisons."""
    return unquote(key)


def split_query(query: str) -> list[QueryPair]:
    """Split a raw query string on ``&`` into ``(key, value)`` pairs."""
    pairs: list[QueryPair] = []
    for chunk in query.split("&"):
        key, sep, value = chunk.partition("=")
        pairs.append((key, value if sep else None))
    return pairs


def join_query(pairs: list[QueryPair]) -> str:
    """Inverse of :func:`split_query`."""
    return "&".join(key if value is None else f"{key}={value}" for key, value in pairs)


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def remove_duplicates(pairs: list[QueryPair], collapse_indices: bool = False) -> list[QueryPair]:
    """Keep only the first occurrence of each key.

    List-style keys (``a[]``, ``a[][b]``) repeat by design, so for them only
    identical ``key=value`` pairs count as duplicates. With
    *collapse_indices* the keys are compared as :func:`remove_numeric_indices`
    will rewrite them, so ``a[0]=x&a[1]=x`` keeps a single ``x`` just like
    ``a[]=x&a[]=x`` does.
    """
    seen: set[object] = set()
    unique: list[QueryPair] = []
    for key, value in pairs:
        name = param_name(key)
        if collapse_indices:
            name = _NUMERIC_INDEX.sub(r"\1\2", name)
        marker: object = (name, value) if "[]" in name else name
        if marker in seen:
            continue
        seen.add(marker)
        unique.append((key, value))
    return unique


def remove_empty_pairs(pairs: list[QueryPair]) -> list[QueryPair]:
    """Drop pairs whose value is empty or missing (``a=``, ``a``, ``&&``)."""
    return [(key, value) for key, value in pairs if value]


def sort_params(pairs: list[QueryPair]) -> list[QueryPair]:
    """Stable ascending sort on the UTF-8 bytes of each decoded key."""
    return sorted(pairs, key=lambda pair: param_name(pair[0]).encode("utf-8"))


def remove_numeric_indices(pairs: list[QueryPair]) -> list[QueryPair]:
    """Rewrite list-style keys so ``a[0]=x&a[1]=y`` becomes ``a[]=x&a[]=y``.

    Both literal and percent-encoded brackets are recognised; the base key
    and the brackets themselves are kept.
    """
    return [(_NUMERIC_INDEX.sub(r"\1\2", key), value) for key, value in pairs]


def remove_tracking_params(pairs: list[QueryPair], tracking_params: tuple[str, ...]) -> list[QueryPair]:
    """Drop every pair whose decoded key is listed in *tracking_params* (case-sensitive)."""
    blocked = frozenset(tracking_params)
    return [(key, value) for key, value in pairs if param_name(key) not in blocked]


def normalize_query(query: str, policy: QueryPolicy) -> str:
    """Run the enabled query steps over *query* in their fixed order.

    Order: duplicates → empty pairs → sort → numeric indices → tracking
    parameters. Disabled steps are skipped, never reordered.

    Args:
        query:  Raw query string (without the leading ``?``).
        policy: Which steps to run and which parameters count as tracking.

    Returns:
        The re-serialised query; empty when nothing is left.
    """
    pairs = split_query(query)
    if policy.without_duplicates:
        pairs = remove_duplicates(pairs, collapse_indices=policy.without_numeric_indices)
    if policy.without_empty_pairs:
        pairs = remove_empty_pairs(pairs)
    if policy.with_sorted_params:
        pairs = sort_params(pairs)
    if policy.without_numeric_indices:
        pairs = remove_numeric_indices(pairs)
    if policy.without_tracking_params:
        pairs = remove_tracking_params(pairs, policy.tracking_params_list)
    return join_query(pairs)


# ---------------------------------------------------------------------------
# Structured queries
# ---------------------------------------------------------------------------


def _flatten(prefix: str, value: Any, out: list[tuple[str, str]]) -> None:  # noqa: ANN401
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}[{key}]", item, out)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten(f"{prefix}[{index}]", item, out)
    elif isinstance(value, bool):
        out.append((prefix, "1" if value else "0"))
    else:
        out.append((prefix, str(value)))


def build_query(params: Mapping[str, Any]) -> str:
    """Serialise a (possibly nested) mapping into a query string.

    Nested mappings and sequences use bracket notation::

        >>> build_query({"filter": {"type": "image", "size": "large"}, "page": 2})
        'filter[type]=image&filter[size]=large&page=2'

    Keys and values are percent-encoded, except for the brackets in keys.
    ``None`` values are skipped and booleans render as ``1`` / ``0``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        _flatten(str(key), value, pairs)
    return "&".join(f"{quote(key, safe='[]')}={quote(value, safe='')}" for key, value in pairs)
