"""Filter state management.

FilterStore is the single mutation point for the current Filter snapshot.
"""
from .filter_store import FilterStore, apply_update, parse_field_edit

__all__ = ["FilterStore", "apply_update", "parse_field_edit"]
