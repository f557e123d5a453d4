"""Cache lifetime and capacity rules.

- ``choose_search_ttl``: results that contain recent releases are cached for
  an hour, everything else is treated as stable and never expires.
- ``oldest_keys``: which entries to evict when a durable domain is over its
  capacity, oldest creation timestamp first.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

DEFAULT_FRESH_TTL = 3600

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_year(value: Any) -> int | None:
    """Read the leading integer of a release year field.

    Upstream sites send years as ints or strings such as ``"2024"`` or
    ``"2024年"``; anything without a leading number yields None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if match:
            return int(match.group(1))
    return None


def has_recent_release(items: Iterable[Mapping[str, Any]], current_year: int) -> bool:
    """True if any item was released this year or last year (or later)."""
    for item in items:
        year = parse_year(item.get("vod_year"))
        if year is not None and year >= current_year - 1:
            return True
    return False


def choose_search_ttl(
    items: Iterable[Mapping[str, Any]],
    current_year: int | None = None,
    fresh_ttl: int = DEFAULT_FRESH_TTL,
) -> int:
    """TTL in seconds for a merged search result."""
    if current_year is None:
        current_year = date.today().year
    return fresh_ttl if has_recent_release(items, current_year) else 0


def entry_timestamp(value: Any) -> int:
    """Creation timestamp of a stored entry, 0 when it has none."""
    if isinstance(value, Mapping):
        try:
            return int(value.get("ts") or 0)
        except (TypeError, ValueError):
            return 0
    return 0


def oldest_keys(entries: Mapping[str, Any], max_entries: int) -> list[str]:
    """Keys to evict so that ``entries`` fits within ``max_entries``."""
    excess = len(entries) - max_entries
    if excess <= 0:
        return []
    ranked = sorted(entries, key=lambda key: entry_timestamp(entries[key]))
    return ranked[:excess]
