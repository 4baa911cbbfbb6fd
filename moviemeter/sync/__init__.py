"""Synchronization engine: debouncing, history bridging and result fetching."""
from .debounce import Debouncer
from .history import NavigationHistory
from .history_sync import HistorySynchronizer
from .fetch import FetchOrchestrator, FetchPhase, ResultsLoader

__all__ = [
    "Debouncer",
    "NavigationHistory",
    "HistorySynchronizer",
    "FetchOrchestrator",
    "FetchPhase",
    "ResultsLoader",
]
