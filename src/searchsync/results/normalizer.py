"""Search engine reply normalization."""

from __future__ import annotations

from typing import Any

from searchsync.exceptions import UnexpectedReplyError
from searchsync.models.result import AggResult, SearchResult


def _require_hits(reply: Any) -> dict[str, Any]:
    hits = reply.get("hits") if isinstance(reply, dict) else None
    if not isinstance(hits, dict):
        raise UnexpectedReplyError(f"Unexpected search engine reply, missing hits: {reply!r}", reply=reply)
    return hits


def _total(hits: dict[str, Any]) -> int:
    total = hits.get("total", 0)
    # Newer engines report {"value": n, "relation": "eq"}
    if isinstance(total, dict):
        total = total.get("value", 0)
    return int(total or 0)


def normalize_search_reply(reply: Any) -> SearchResult:
    """Reshape a raw search reply into ``{total, hits}``.

    Raises:
        UnexpectedReplyError: If the reply has no ``hits`` section.
    """
    hits = _require_hits(reply)
    return SearchResult(total=_total(hits), hits=list(hits.get("hits") or []))


def normalize_agg_reply(reply: Any) -> AggResult:
    """Reshape a raw aggregation reply into ``{total, hits, aggregation}``.

    Raises:
        UnexpectedReplyError: If the reply has no ``hits`` section.
    """
    hits = _require_hits(reply)
    return AggResult(
        total=_total(hits),
        hits=list(hits.get("hits") or []),
        aggregation=reply.get("aggregations"),
    )


def reply_ok(body: Any) -> bool:
    """Whether a mutating call's reply reports success.

    ``ok`` (old engines), ``acknowledged``, or matching ``total`` and
    ``successful`` counts.  Both counts being absent counts as a match.
    """
    if not isinstance(body, dict):
        return False
    return bool(body.get("ok") or body.get("acknowledged") or body.get("total") == body.get("successful"))
