"""Bridge between the filter store and the navigation history.

Two directions:
- back/forward navigation → decode the location → dispatch as NAVIGATION
- settled USER filter → encode → push a new history entry

NAVIGATION snapshots are never pushed, which keeps the two from feeding
each other in a loop.
"""
from __future__ import annotations
from typing import TYPE_CHECKING, Optional
from PySide6.QtCore import QObject
import logging

from ..models import Filter, Origin
from .. import query_codec

if TYPE_CHECKING:
    from ..state import FilterStore
    from .history import NavigationHistory

logger = logging.getLogger(__name__)


class HistorySynchronizer(QObject):
    """Keeps the address-bar location and the filter store eventually consistent.

    Owns its subscription to the history's popped signal and releases it in
    close().

    Example:
        sync = HistorySynchronizer(history, store)
        debouncer.settled.connect(sync.on_settled)
        ...
        sync.close()
    """

    def __init__(self, history: NavigationHistory, store: FilterStore, parent: Optional[QObject] = None):
        """Initialize synchronizer and subscribe to navigation events.

        Args:
            history: Navigation history context
            store: Filter store to dispatch navigation snapshots into
            parent: Parent QObject
        """
        super().__init__(parent)
        self.history = history
        self.store = store
        self.history.popped.connect(self.on_pop)
        self._subscribed = True

    def on_pop(self, search: str):
        """Handle back/forward navigation.

        Args:
            search: Query string of the location navigated to
        """
        decoded = query_codec.decode(search)
        logger.debug(f"Navigation to '{search}', dispatching decoded filter")
        self.store.dispatch(decoded)

    def on_settled(self, filter: Filter):
        """Push a history entry for a settled USER filter.

        Args:
            filter: Debounced filter snapshot
        """
        if filter.origin is Origin.NAVIGATION:
            logger.debug("Settled filter came from navigation, not pushing")
            return
        location = query_codec.address_path(filter)
        self.history.push(location)
        logger.info(f"Address bar updated: {location}")

    def close(self):
        """Release the navigation subscription (idempotent)."""
        if not self._subscribed:
            return
        self.history.popped.disconnect(self.on_pop)
        self._subscribed = False
        logger.debug("HistorySynchronizer closed")


__all__ = ["HistorySynchronizer"]
