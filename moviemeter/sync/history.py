"""In-process navigation history.

Models the browser's session history as an explicit object: a stack of
locations with a pointer. It is created once at application start and passed
to whoever needs it, instead of living in a module-level global.
"""
from __future__ import annotations
from typing import List, Optional
from urllib.parse import urlsplit
from PySide6.QtCore import QObject, Signal
import logging

logger = logging.getLogger(__name__)


class NavigationHistory(QObject):
    """Stack of visited locations (``/?list=top``) with back/forward navigation.

    push() adds an entry silently (like pushState). Moving the pointer with
    back(), forward() or go() emits popped with the new location's query
    string (like a popstate event).

    Signals:
        popped: Emitted after back/forward navigation (search: str, with leading '?' or empty)
    """

    popped = Signal(str)

    def __init__(self, initial_location: str = "/", parent: Optional[QObject] = None):
        """Initialize history with a single entry.

        Args:
            initial_location: Location of the first entry (path plus optional query)
            parent: Parent QObject
        """
        super().__init__(parent)
        self._entries: List[str] = [initial_location or "/"]
        self._index = 0

    @property
    def location(self) -> str:
        """Current location (path and query)."""
        return self._entries[self._index]

    @property
    def search(self) -> str:
        """Query part of the current location, with its leading '?' (or empty)."""
        query = urlsplit(self.location).query
        return "?" + query if query else ""

    @property
    def entries(self) -> List[str]:
        """Copy of all entries, oldest first."""
        return list(self._entries)

    @property
    def index(self) -> int:
        return self._index

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def push(self, location: str):
        """Add a new entry after the current one, dropping forward entries.

        Does not emit popped.
        """
        del self._entries[self._index + 1:]
        self._entries.append(location)
        self._index = len(self._entries) - 1
        logger.debug(f"History push: {location} ({len(self._entries)} entries)")

    def go(self, delta: int) -> bool:
        """Move the pointer by ``delta`` entries.

        Returns:
            True if the pointer moved (and popped was emitted)
        """
        target = self._index + delta
        if delta == 0 or target < 0 or target >= len(self._entries):
            return False
        self._index = target
        logger.debug(f"History pop: {self.location}")
        self.popped.emit(self.search)
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)


__all__ = ["NavigationHistory"]
