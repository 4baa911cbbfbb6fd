"""FilterStore - Single source of truth for filter state.

This module implements a small reducer/store pair for the query filter.
Data flows one way:

    User edit / preset / back-forward → FilterStore.dispatch() → filterChanged → Debouncer

Architecture:
    ┌─────────────┐
    │ FilterStore │  (owns the current Filter, emits filterChanged)
    └──────┬──────┘
           │ filterChanged(Filter)
           ▼
    ┌─────────────┐   settled(Filter)   ┌─────────────────────┐
    │  Debouncer  │ ──────────────────► │ HistorySynchronizer │
    └─────────────┘          │          └─────────────────────┘
                             │          ┌─────────────────────┐
                             └────────► │  FetchOrchestrator  │
                                        └─────────────────────┘

State Policy:
- Snapshots are immutable; every dispatch builds a new Filter
- A partial update keeps every field it does not mention
- Every dispatch is USER-origin unless the update explicitly carries
  ``origin=Origin.NAVIGATION`` (only the history synchronizer does that)

Loop Prevention:
- State deduplication: filterChanged is only emitted if the new snapshot differs
- NAVIGATION snapshots are never pushed back to the history
"""

from __future__ import annotations
import math
from dataclasses import fields, replace
from typing import Any, Dict, Mapping, Union
from PySide6.QtCore import QObject, Signal
import logging

from ..models import Filter, Origin
from ..query_codec import WIRE_FIELDS

logger = logging.getLogger(__name__)

_FILTER_FIELDS = tuple(f.name for f in fields(Filter))
_WIRE_TO_ATTR = {key: attr for attr, key in WIRE_FIELDS}

FilterUpdate = Union[Filter, Mapping[str, Any]]


def apply_update(current: Filter, update: FilterUpdate) -> Filter:
    """Merge a partial update onto the current filter.

    Args:
        current: Current filter snapshot
        update: Mapping of Filter field names to new values, or a whole Filter
                (e.g. a preset or a decoded address-bar query)

    Returns:
        New Filter snapshot. Its origin is NAVIGATION only when the update
        explicitly says so, USER otherwise.

    Raises:
        TypeError: If the update names a field Filter does not have
    """
    if isinstance(update, Filter):
        changes: Dict[str, Any] = {name: getattr(update, name) for name in _FILTER_FIELDS}
    else:
        changes = dict(update)

    unknown = set(changes) - set(_FILTER_FIELDS)
    if unknown:
        raise TypeError(f"Unknown filter field(s): {', '.join(sorted(unknown))}")

    origin = changes.pop("origin", None)
    changes["origin"] = Origin.NAVIGATION if origin is Origin.NAVIGATION else Origin.USER
    return replace(current, **changes)


def parse_field_edit(field: str, text: str) -> Dict[str, Any]:
    """Turn raw user text for one form field into a partial update.

    Blank numeric input means "unset" (0). Numeric fields reject text that is
    not a number, so the filter never holds NaN.

    Args:
        field: Wire key (``list``, ``year``, ``rating``, ``votes``, ``max``)
               or Filter attribute name
        text: Raw text as typed

    Returns:
        Single-entry update dict keyed by Filter attribute name

    Raises:
        ValueError: On unknown field, non-numeric or out-of-range input
    """
    attr = _WIRE_TO_ATTR.get(field, field)
    if attr not in _WIRE_TO_ATTR.values():
        raise ValueError(f"Unknown field '{field}'")

    raw = text.strip()
    if attr == "list_id":
        return {attr: raw}
    if not raw:
        return {attr: 0.0 if attr == "min_rating" else 0}

    if attr == "min_rating":
        try:
            value = float(raw)
        except ValueError:
            raise ValueError(f"Rating must be a number, got '{raw}'") from None
        if math.isnan(value) or not 0.0 <= value <= 10.0:
            raise ValueError(f"Rating must be between 0 and 10, got '{raw}'")
        return {attr: value}

    try:
        number = int(raw)
    except ValueError:
        raise ValueError(f"{field} must be a whole number, got '{raw}'") from None
    if attr in ("min_votes", "max_items") and number < 0:
        raise ValueError(f"{field} must not be negative, got {number}")
    return {attr: number}


class FilterStore(QObject):
    """Single source of truth for the query filter.

    The debouncer subscribes to filterChanged; user actions, presets and the
    history synchronizer call dispatch().

    Example usage:
        store = FilterStore(decode(history.search))
        store.filterChanged.connect(debouncer.reschedule)

        # User edits the year field
        store.dispatch({"year": 2019})

        # User clicks a preset
        store.dispatch(find_preset("Top 10").filter)
    """

    # Signal emitted when the filter snapshot changes
    filterChanged = Signal(object)

    def __init__(self, initial: Filter | None = None, parent: QObject | None = None):
        """Initialize store.

        Args:
            initial: Starting snapshot (defaults to an all-unset filter)
            parent: Parent QObject
        """
        super().__init__(parent)
        self._state = initial if initial is not None else Filter()
        logger.debug(f"FilterStore initialized with {self._state}")

    @property
    def state(self) -> Filter:
        """Get current filter snapshot (immutable)."""
        return self._state

    def dispatch(self, update: FilterUpdate) -> Filter:
        """Merge an update into the current snapshot.

        Only emits filterChanged if the snapshot actually changed.

        Args:
            update: Partial mapping or whole Filter, see apply_update()

        Returns:
            The current snapshot after the dispatch
        """
        new_state = apply_update(self._state, update)
        if new_state == self._state:
            logger.debug("Filter unchanged, skipping emission")
            return self._state

        self._state = new_state
        logger.info(
            f"Filter changed ({new_state.origin.value}): "
            f"list={new_state.list_id!r}, year={new_state.year}, rating={new_state.min_rating}, "
            f"votes={new_state.min_votes}, max={new_state.max_items}"
        )
        self.filterChanged.emit(self._state)
        return self._state

    def clear(self) -> Filter:
        """Reset every field to unset."""
        return self.dispatch(Filter())


__all__ = ["FilterStore", "apply_update", "parse_field_edit", "FilterUpdate"]
