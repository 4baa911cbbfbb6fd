"""Fetch orchestration for settled filters.

Each settled filter starts one request cycle:

    IDLE → FETCHING → {SUCCEEDED, FAILED} → IDLE

Requests run on a worker thread (ResultsLoader). A monotonically increasing
generation number is attached to every request; an outcome is only applied
when its generation is still the current one. Starting a new cycle (or
shutting down) bumps the generation, which cancels whatever was in flight.
"""
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple
from PySide6.QtCore import QObject, QThread, Signal
import logging

from ..models import Filter, ResultItem
from .. import query_codec

if TYPE_CHECKING:
    from ..client import ResultsAPIClient

logger = logging.getLogger(__name__)


class FetchPhase(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ResultsLoader(QThread):
    """Worker thread running one results request.

    Signals:
        loaded: Emitted when the request succeeds (generation: int, items: list)
        failed: Emitted when the request raises (generation: int, error_msg: str)
    """

    loaded = Signal(int, object)
    failed = Signal(int, str)

    def __init__(self, load_func: Callable[[], Any], generation: int, parent: Optional[QObject] = None):
        """Initialize loader.

        Args:
            load_func: Function to call in the background thread (returns the items)
            generation: Request generation carried back with the outcome
            parent: Parent QObject
        """
        super().__init__(parent)
        self.load_func = load_func
        self.generation = generation
        self._should_stop = False

    def run(self):
        """Execute the request in the background thread."""
        try:
            if self._should_stop:
                logger.debug(f"ResultsLoader #{self.generation} cancelled before start")
                return

            result = self.load_func()

            if self._should_stop:
                logger.debug(f"ResultsLoader #{self.generation} cancelled before finish")
                return

            self.loaded.emit(self.generation, result)

        except Exception as e:
            if self._should_stop:
                return
            logger.debug(f"ResultsLoader #{self.generation} error: {e}", exc_info=True)
            self.failed.emit(self.generation, str(e) or e.__class__.__name__)

    def stop(self):
        """Request the loader to drop its outcome."""
        self._should_stop = True


LoaderFactory = Callable[[Callable[[], Any], int, QObject], Any]

# Workers still blocked in a request when their orchestrator shut down.
# Referenced here until they finish so the thread object outlives the thread.
_detached: List[ResultsLoader] = []


class FetchOrchestrator(QObject):
    """Owns the single authoritative in-flight request and the published state.

    Published state: results (kept on failure), error message, loading flag.
    Outcomes of superseded requests are dropped, even when they arrive after
    the newer request's outcome.

    Signals:
        resultsChanged: New result tuple (tuple of ResultItem)
        errorChanged: New error message, or None when cleared
        loadingChanged: Loading indicator (bool)

    Example:
        orchestrator = FetchOrchestrator(ResultsAPIClient(base_url))
        debouncer.settled.connect(orchestrator.on_settled)
        orchestrator.resultsChanged.connect(render_table)
    """

    resultsChanged = Signal(object)
    errorChanged = Signal(object)
    loadingChanged = Signal(bool)

    def __init__(
        self,
        client: ResultsAPIClient,
        loader_factory: Optional[LoaderFactory] = None,
        parent: Optional[QObject] = None,
    ):
        """Initialize orchestrator.

        Args:
            client: Results endpoint client (called from worker threads)
            loader_factory: Callable(load_func, generation, parent) returning a
                            loader with loaded/failed/finished signals and
                            start()/stop()/wait(); defaults to ResultsLoader
            parent: Parent QObject
        """
        super().__init__(parent)
        self.client = client
        self.loader_factory: LoaderFactory = loader_factory or ResultsLoader

        self._generation = 0
        self._loader = None
        self._running: List[Any] = []
        self._results: Tuple[ResultItem, ...] = ()
        self._error: Optional[str] = None
        self._is_fetching = False
        self._phase = FetchPhase.IDLE
        self._last_outcome: Optional[FetchPhase] = None

    @property
    def results(self) -> Tuple[ResultItem, ...]:
        return self._results

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_fetching(self) -> bool:
        return self._is_fetching

    @property
    def phase(self) -> FetchPhase:
        return self._phase

    @property
    def last_outcome(self) -> Optional[FetchPhase]:
        """SUCCEEDED or FAILED for the last applied cycle, None before any."""
        return self._last_outcome

    @property
    def generation(self) -> int:
        return self._generation

    def on_settled(self, filter: Filter):
        """Start a request cycle for a settled filter, cancelling the previous one.

        Args:
            filter: Debounced filter snapshot
        """
        self._cancel_current()
        self._generation += 1
        generation = self._generation

        query = query_codec.encode(filter)
        client = self.client

        def load() -> List[ResultItem]:
            return client.fetch_results(query)

        loader = self.loader_factory(load, generation, self)
        loader.loaded.connect(self._on_loaded)
        loader.failed.connect(self._on_failed)
        loader.finished.connect(self._on_loader_finished)
        self._loader = loader
        self._running.append(loader)

        self._phase = FetchPhase.FETCHING
        self._set_fetching(True)
        logger.debug(f"Request #{generation} issued: '{query}'")
        loader.start()

    def shutdown(self, wait_ms: int = 2000) -> List[Any]:
        """Invalidate the current request and stop publishing.

        A worker blocked in a hung request cannot be interrupted, so each one
        gets at most ``wait_ms`` to finish. Workers still running after that
        are detached: their outcome is already stale and they end on their
        own once the client timeout expires.

        Args:
            wait_ms: Upper bound per worker in milliseconds

        Returns:
            Loaders that were still running and got detached
        """
        _detached[:] = [loader for loader in _detached if not loader.isFinished()]

        self._generation += 1
        self._cancel_current()

        lingering = []
        for loader in list(self._running):
            if loader.wait(wait_ms):
                continue
            self._running.remove(loader)
            loader.finished.disconnect(self._on_loader_finished)
            loader.setParent(None)
            _detached.append(loader)
            lingering.append(loader)
        if lingering:
            logger.warning(f"{len(lingering)} request(s) still running after shutdown, detached")

        self._phase = FetchPhase.IDLE
        self._set_fetching(False)
        logger.debug("FetchOrchestrator shut down")
        return lingering

    def _cancel_current(self):
        if self._loader is None:
            return
        self._loader.stop()
        self._loader = None
        logger.debug(f"Request #{self._generation} cancelled")

    def _on_loader_finished(self):
        loader = self.sender()
        if loader is None:
            return
        if loader in self._running:
            self._running.remove(loader)
        loader.deleteLater()

    def _is_current(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug(f"Discarding stale outcome of request #{generation} (current #{self._generation})")
            return False
        return True

    def _on_loaded(self, generation: int, items):
        if not self._is_current(generation):
            return
        self._loader = None
        self._phase = FetchPhase.SUCCEEDED
        self._last_outcome = FetchPhase.SUCCEEDED

        self._results = tuple(items)
        logger.info(f"Loaded {len(self._results)} results")
        self.resultsChanged.emit(self._results)
        if self._error is not None:
            self._error = None
            self.errorChanged.emit(None)

        self._set_fetching(False)
        self._phase = FetchPhase.IDLE

    def _on_failed(self, generation: int, error_msg: str):
        if not self._is_current(generation):
            return
        self._loader = None
        self._phase = FetchPhase.FAILED
        self._last_outcome = FetchPhase.FAILED

        # Previous results stay published next to the error
        self._error = error_msg
        logger.warning(f"Request #{generation} failed: {error_msg}")
        self.errorChanged.emit(error_msg)

        self._set_fetching(False)
        self._phase = FetchPhase.IDLE

    def _set_fetching(self, value: bool):
        if value == self._is_fetching:
            return
        self._is_fetching = value
        self.loadingChanged.emit(value)


__all__ = ["FetchOrchestrator", "FetchPhase", "ResultsLoader", "LoaderFactory"]
