"""Core — the search-sync component and one-shot helpers."""

from searchsync.core.sync import SearchSync, aggregate, index, search, unindex

__all__ = ["SearchSync", "aggregate", "index", "search", "unindex"]
