"""Typeahead search backed by an async memoization cache with request coalescing."""

from typeahead.core.cache import AsyncMemoCache, KeyState, Result
from typeahead.core.errors import EncodingError, ProducerError, TypeaheadError
from typeahead.core.keys import encode

__all__ = [
    "AsyncMemoCache",
    "KeyState",
    "Result",
    "EncodingError",
    "ProducerError",
    "TypeaheadError",
    "encode",
]
