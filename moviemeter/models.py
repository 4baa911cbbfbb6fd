"""Domain model types for filters and endpoint results.

These dataclasses make the data contracts between the query codec, the filter
store and the fetch orchestrator explicit. All of them are immutable: every
change produces a new snapshot.
"""
from __future__ import annotations
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Any, Mapping


class Origin(Enum):
    """Provenance of a filter snapshot.

    USER snapshots are pushed to the navigation history once they settle,
    NAVIGATION snapshots (decoded from the address bar) are not.
    """
    USER = "user"
    NAVIGATION = "navigation"


@dataclass(frozen=True)
class Filter:
    """Query parameters describing which results to fetch.

    Zero / empty values mean "unset" and are never serialized.

    Attributes:
        list_id: List identifier (``popular``, ``top``, ``ls<digits>`` or empty)
        year: Year threshold (0 = unset, negative values are endpoint sentinels)
        min_rating: Minimum rating in [0, 10] (0 = unset)
        min_votes: Minimum vote count (0 = unset)
        max_items: Maximum result count (0 = unlimited)
        origin: Provenance tag, not serialized
    """

    list_id: str = ""
    year: int = 0
    min_rating: float = 0.0
    min_votes: int = 0
    max_items: int = 0
    origin: Origin = Origin.USER

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (origin included)."""
        return asdict(self)


@dataclass(frozen=True)
class NamedFilter:
    """A filter with a display name, used for preset shortcuts."""
    name: str
    filter: Filter


@dataclass(frozen=True)
class ResultItem:
    """One row returned by the results endpoint."""
    imdb_id: str
    title: str
    year: int
    rating: float
    votes: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary using the endpoint's JSON keys."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResultItem:
        """Build a ResultItem from one decoded JSON object.

        ``year`` may be omitted by the endpoint when unknown.

        Raises:
            KeyError: If ``imdb_id`` or ``title`` is missing
            ValueError: If ``imdb_id`` or ``title`` is null or empty
            TypeError, ValueError: If a numeric field has the wrong type
        """
        for key in ("imdb_id", "title"):
            if data[key] is None or data[key] == "":
                raise ValueError(f"'{key}' is empty")
        return cls(
            imdb_id=str(data["imdb_id"]),
            title=str(data["title"]),
            year=int(data.get("year") or 0),
            rating=float(data.get("rating") or 0.0),
            votes=int(data.get("votes") or 0),
        )


__all__ = ["Origin", "Filter", "NamedFilter", "ResultItem"]
