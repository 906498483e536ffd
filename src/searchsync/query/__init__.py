"""Query construction — option sets to search engine request bodies."""

from searchsync.query.aggregation import build_agg_body
from searchsync.query.builder import build_search_body

__all__ = ["build_agg_body", "build_search_body"]
