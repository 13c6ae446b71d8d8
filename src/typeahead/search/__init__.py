"""Debounced, cached typeahead search."""

from .debounce import Debouncer
from .service import SearchBox, filter_suggestions

__all__ = ["Debouncer", "SearchBox", "filter_suggestions"]
