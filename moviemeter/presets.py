"""Named filter shortcuts offered next to the query form."""
from __future__ import annotations
from typing import Tuple

from .models import Filter, NamedFilter

PRESETS: Tuple[NamedFilter, ...] = (
    NamedFilter(
        name="Popular",
        filter=Filter(list_id="popular", year=-1, min_rating=6.0, min_votes=50000, max_items=20),
    ),
    NamedFilter(
        name="Top 10",
        filter=Filter(list_id="top", max_items=10),
    ),
    NamedFilter(
        name="Marvel Movies Since 2019",
        filter=Filter(list_id="ls027181777", year=2019),
    ),
)


def find_preset(name: str) -> NamedFilter:
    """Look up a preset by name (case-insensitive).

    Raises:
        KeyError: If no preset has that name
    """
    wanted = name.strip().lower()
    for preset in PRESETS:
        if preset.name.lower() == wanted:
            return preset
    raise KeyError(name)


__all__ = ["PRESETS", "find_preset"]
