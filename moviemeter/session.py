"""Filter session coordinating store, debouncer, history and fetching.

The session's job is wiring: build the collaborators, connect them in the
right order and expose a small API for whatever front end drives it.

    store.filterChanged → debouncer.reschedule
    debouncer.settled   → history_sync.on_settled → orchestrator.on_settled
    history.popped      → history_sync.on_pop → store.dispatch(NAVIGATION)
"""
from __future__ import annotations
from typing import Any, Optional
from PySide6.QtCore import QObject
import logging

from .models import Filter, NamedFilter
from . import query_codec
from .state import FilterStore
from .sync import Debouncer, FetchOrchestrator, HistorySynchronizer, NavigationHistory
from .sync.fetch import LoaderFactory
from .client import ResultsAPIClient

logger = logging.getLogger(__name__)


class FilterSession(QObject):
    """One query-composition session.

    The initial filter is decoded from the history's current location. It is
    settled immediately by start() (one fetch cycle, no history push since it
    came from the address bar).

    Example:
        history = NavigationHistory("/?list=top&max=10")
        session = FilterSession(history, ResultsAPIClient(cfg.endpoint.base_url))
        session.orchestrator.resultsChanged.connect(render)
        session.start()
        session.update(year=2019)
        ...
        session.close()
    """

    def __init__(
        self,
        history: NavigationHistory,
        client: ResultsAPIClient,
        delay_ms: int = 500,
        loader_factory: Optional[LoaderFactory] = None,
        parent: Optional[QObject] = None,
    ):
        """Initialize session and wire all collaborators.

        Args:
            history: Navigation history context (owned by the caller)
            client: Results endpoint client
            delay_ms: Debounce delay in milliseconds
            loader_factory: Optional loader factory forwarded to FetchOrchestrator
            parent: Parent QObject
        """
        super().__init__(parent)
        self.history = history
        self.client = client

        self.store = FilterStore(query_codec.decode(history.search), parent=self)
        self.debouncer = Debouncer(delay_ms, parent=self)
        self.history_sync = HistorySynchronizer(history, self.store, parent=self)
        self.orchestrator = FetchOrchestrator(client, loader_factory=loader_factory, parent=self)

        self.store.filterChanged.connect(self.debouncer.reschedule)
        self.debouncer.settled.connect(self._on_settled)

        self._settled: Optional[Filter] = None
        self._closed = False

    @property
    def filter(self) -> Filter:
        """Current (not yet debounced) filter."""
        return self.store.state

    @property
    def settled_filter(self) -> Optional[Filter]:
        """Last settled filter, None before start()."""
        return self._settled

    @property
    def list_name_valid(self) -> bool:
        """Advisory list-name check of the settled filter."""
        current = self._settled if self._settled is not None else self.store.state
        return query_codec.is_list_name_valid(current.list_id)

    def start(self):
        """Settle the initial filter right away."""
        if self._closed:
            raise RuntimeError("FilterSession is closed")
        logger.debug("Session started")
        self.debouncer.flush(self.store.state)

    def update(self, **fields: Any) -> Filter:
        """Apply a user edit (partial update by Filter attribute name)."""
        return self.store.dispatch(fields)

    def apply_preset(self, preset: NamedFilter) -> Filter:
        """Replace the whole filter with a preset's values."""
        logger.info(f"Applying preset '{preset.name}'")
        return self.store.dispatch(preset.filter)

    def share_url(self, base_url: Optional[str] = None) -> str:
        """Shareable endpoint URL for the current filter."""
        return query_codec.share_url(base_url or self.client.base_url, self.store.state)

    def close(self):
        """Tear down timer, navigation subscription and in-flight request."""
        if self._closed:
            return
        self._closed = True
        self.store.filterChanged.disconnect(self.debouncer.reschedule)
        self.debouncer.settled.disconnect(self._on_settled)
        self.debouncer.cancel()
        self.history_sync.close()
        self.orchestrator.shutdown()
        logger.debug("Session closed")

    def _on_settled(self, filter: Filter):
        if self._closed:
            return
        self._settled = filter
        # Address bar first, then the request
        self.history_sync.on_settled(filter)
        self.orchestrator.on_settled(filter)


__all__ = ["FilterSession"]
