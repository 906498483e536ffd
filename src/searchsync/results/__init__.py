"""Result normalization — raw engine replies to stable result shapes."""

from searchsync.results.normalizer import normalize_agg_reply, normalize_search_reply, reply_ok

__all__ = ["normalize_agg_reply", "normalize_search_reply", "reply_ok"]
