"""Data models — connection options, option sets and results."""

from searchsync.models.connection import ConnectionOptions, Credentials
from searchsync.models.options import AggOptionSet, SearchOptionSet, merge_agg_options, merge_search_options
from searchsync.models.result import AggResult, SearchResult

__all__ = [
    "AggOptionSet",
    "AggResult",
    "ConnectionOptions",
    "Credentials",
    "SearchOptionSet",
    "SearchResult",
    "merge_agg_options",
    "merge_search_options",
]
