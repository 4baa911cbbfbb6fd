"""Formatting utilities for displaying results.

ResultFormatter is passed to whoever renders results (CLI table, browse
session) instead of being a module-level singleton.
"""
from __future__ import annotations
from typing import Iterable, List, Sequence

from .models import ResultItem

IMDB_TITLE_URL = "https://www.imdb.com/title/{imdb_id}/"

HEADERS = ("Title", "Year", "Rating", "Votes", "IMDb")

# Columns rendered right-aligned in tables
_NUMERIC_COLUMNS = frozenset({1, 2, 3})


class ResultFormatter:
    """Formats result rows for display.

    Numbers use digit grouping and at most ``max_fraction_digits`` fraction
    digits with trailing zeros removed (``1234567`` → ``1,234,567``,
    ``7.25`` → ``7.25``, ``8.0`` → ``8``).
    """

    def __init__(self, thousands_separator: str = ",", max_fraction_digits: int = 3):
        self.thousands_separator = thousands_separator
        self.max_fraction_digits = max_fraction_digits

    def format_number(self, value: float | int) -> str:
        """Format a number with grouping.

        Args:
            value: Integer or float

        Returns:
            Grouped number text
        """
        if isinstance(value, int):
            text = f"{value:,}"
        else:
            text = f"{value:,.{self.max_fraction_digits}f}"
            if "." in text:
                text = text.rstrip("0").rstrip(".")
            if text in ("-0", ""):
                text = "0"
        if self.thousands_separator != ",":
            text = text.replace(",", self.thousands_separator)
        return text

    def title_url(self, item: ResultItem) -> str:
        """IMDb page of a result."""
        return IMDB_TITLE_URL.format(imdb_id=item.imdb_id)

    def format_row(self, item: ResultItem) -> List[str]:
        """Display cells for one result, in HEADERS order."""
        return [
            item.title,
            str(item.year) if item.year else "",
            self.format_number(item.rating),
            self.format_number(item.votes),
            self.title_url(item),
        ]

    def format_table(self, items: Iterable[ResultItem]) -> str:
        """Render results as a plain-text table with a header row."""
        rows: List[Sequence[str]] = [HEADERS]
        rows.extend(self.format_row(item) for item in items)
        widths = [max(len(row[col]) for row in rows) for col in range(len(HEADERS))]

        lines = []
        for i, row in enumerate(rows):
            cells = [
                cell.rjust(widths[col]) if col in _NUMERIC_COLUMNS else cell.ljust(widths[col])
                for col, cell in enumerate(row)
            ]
            lines.append("  ".join(cells).rstrip())
            if i == 0:
                lines.append("  ".join("-" * w for w in widths))
        return "\n".join(lines)


__all__ = ["ResultFormatter", "HEADERS", "IMDB_TITLE_URL"]
