"""Conversion between Filter snapshots and their query-string form.

The same encoding is used for the address bar (``/?list=...``) and for the
results endpoint (``/list.json?list=...``), so a filter can be bookmarked or
shared and decoded back into an equivalent filter.

Encoding is lossy on purpose: unset fields (0, "") are left out, and decoding
a missing field yields the unset value again.
"""
from __future__ import annotations
import math
import re
import logging
from typing import Dict, Tuple
from urllib.parse import parse_qsl, quote

from .models import Filter, Origin

logger = logging.getLogger(__name__)

# (filter attribute, wire key) in serialization order
WIRE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("list_id", "list"),
    ("year", "year"),
    ("min_rating", "rating"),
    ("min_votes", "votes"),
    ("max_items", "max"),
)

# Characters encodeURIComponent leaves alone besides alphanumerics
_URI_COMPONENT_SAFE = "-_.!~*'()"

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
_LIST_NAME = re.compile(r"popular|top|ls\d+|")


def _parse_int(raw: str | None) -> int:
    """Parse the leading integer of ``raw``; 0 when there is none."""
    if not raw:
        return 0
    match = _INT_PREFIX.match(raw)
    if not match:
        return 0
    return int(match.group(1))


def _parse_float(raw: str | None) -> float:
    """Parse the leading decimal literal of ``raw``; 0.0 when there is none."""
    if not raw:
        return 0.0
    match = _FLOAT_PREFIX.match(raw)
    if not match:
        return 0.0
    value = float(match.group(1))
    if math.isinf(value):
        return 0.0
    return value


def _is_set(value) -> bool:
    """Whether a field value is serialized (non-zero, non-empty, not NaN)."""
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def _format_value(value) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def decode(query: str | None) -> Filter:
    """Decode a query string into a navigation-origin Filter.

    Never raises: missing or unparsable fields fall back to their unset value.

    Args:
        query: Query string with or without the leading ``?``

    Returns:
        Filter tagged with ``Origin.NAVIGATION``
    """
    text = (query or "").lstrip("?")
    params: Dict[str, str] = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        # First occurrence wins
        params.setdefault(key, value)

    decoded = Filter(
        list_id=params.get("list", ""),
        year=_parse_int(params.get("year")),
        min_rating=_parse_float(params.get("rating")),
        min_votes=_parse_int(params.get("votes")),
        max_items=_parse_int(params.get("max")),
        origin=Origin.NAVIGATION,
    )
    logger.debug(f"Decoded query {text!r} -> {decoded}")
    return decoded


def encode(filter: Filter) -> str:
    """Encode a Filter into its canonical query string (without ``?``).

    Fields are emitted in a fixed order and only when set. ``origin`` is
    internal and never emitted.
    """
    encoded = []
    for attr, key in WIRE_FIELDS:
        value = getattr(filter, attr)
        if _is_set(value):
            encoded.append(
                quote(key, safe=_URI_COMPONENT_SAFE) + "=" + quote(_format_value(value), safe=_URI_COMPONENT_SAFE)
            )
    return "&".join(encoded)


def address_path(filter: Filter) -> str:
    """Address-bar path for a filter (``/?list=...``)."""
    return "/?" + encode(filter)


def results_path(filter: Filter) -> str:
    """Results endpoint path for a filter (``/list.json?list=...``)."""
    return "/list.json?" + encode(filter)


def share_url(base_url: str, filter: Filter) -> str:
    """Absolute, shareable endpoint URL for a filter."""
    return base_url.rstrip("/") + results_path(filter)


def is_list_name_valid(list_id: str | None) -> bool:
    """Advisory check of the list identifier shape.

    Empty is valid (the endpoint picks its default list). A ``False`` result
    is only meant for highlighting input; requests are still issued.
    """
    return _LIST_NAME.fullmatch(list_id or "") is not None


__all__ = [
    "WIRE_FIELDS",
    "decode",
    "encode",
    "address_path",
    "results_path",
    "share_url",
    "is_list_name_valid",
]
