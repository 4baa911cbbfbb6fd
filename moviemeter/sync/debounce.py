"""Debounce scheduler.

Coalesces a rapid stream of values into the last one, emitted once the
stream has been quiet for the configured delay.
"""
from __future__ import annotations
from typing import Any, Optional
from PySide6.QtCore import QObject, QTimer, Qt, Signal
import logging

logger = logging.getLogger(__name__)

_NOTHING = object()


class Debouncer(QObject):
    """Owned single-shot timer that emits the latest value after a quiet period.

    Every reschedule() replaces the pending value and restarts the timer, so a
    burst of values arriving closer together than the delay produces exactly
    one settled emission, carrying the last value, one delay after it arrived.

    Signals:
        settled: Emitted with the latest value after the delay elapses

    Example:
        debouncer = Debouncer(delay_ms=500)
        store.filterChanged.connect(debouncer.reschedule)
        debouncer.settled.connect(orchestrator.on_settled)
    """

    # Signal emitted after the debounce delay
    settled = Signal(object)

    def __init__(self, delay_ms: int = 500, parent: Optional[QObject] = None):
        """Initialize debouncer.

        Args:
            delay_ms: Quiet period in milliseconds before emitting
            parent: Parent QObject
        """
        super().__init__(parent)

        self._delay_ms = delay_ms
        self._pending: Any = _NOTHING

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_timeout)

    def reschedule(self, value: Any):
        """Replace the pending value and restart the delay.

        Args:
            value: Value to emit if nothing newer arrives in time
        """
        self._pending = value
        self._timer.start(self._delay_ms)
        logger.debug(f"Debounce rescheduled ({self._delay_ms} ms)")

    def cancel(self):
        """Drop the pending value without emitting it."""
        if self._timer.isActive():
            logger.debug("Debounce cancelled")
        self._timer.stop()
        self._pending = _NOTHING

    def flush(self, value: Any = _NOTHING):
        """Emit immediately, skipping the remaining delay.

        Args:
            value: Value to emit; defaults to the pending one. Nothing is
                   emitted when neither is available.
        """
        if value is _NOTHING:
            value = self._pending
        self._timer.stop()
        self._pending = _NOTHING
        if value is not _NOTHING:
            self.settled.emit(value)

    @property
    def is_pending(self) -> bool:
        """Whether an emission is scheduled."""
        return self._timer.isActive()

    def _on_timeout(self):
        value = self._pending
        self._pending = _NOTHING
        if value is _NOTHING:
            return
        logger.debug("Debounce settled")
        self.settled.emit(value)


__all__ = ["Debouncer"]
