"""Aggregation (group-by count) request body construction.

Without filters the terms aggregation is emitted bare::

    {"from": 0, "size": 25, "aggs": {"GroupBy": {"terms": {...}}}}

With must/should term filters it is wrapped in a filter aggregation, which
changes the reply envelope: buckets then sit under ``aggregations.GroupByWrapper``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from searchsync.models.options import AggOptionSet, merge_agg_options
from searchsync.query.builder import Clauses, build_bool
from searchsync.query.fragments import build_term_filters

logger = logging.getLogger(__name__)

AGG_NAME = "GroupBy"
AGG_WRAPPER_NAME = "GroupByWrapper"
# 0 asks the engine for every bucket
UNLIMITED_BUCKETS = 0


def build_agg_body(options: Mapping[str, Any] | AggOptionSet | None = None) -> dict[str, Any]:
    """Build an aggregation request body grouping by ``group_by``."""
    opts = merge_agg_options(options)
    must: Clauses = []
    should: Clauses = []

    if opts.must_match:
        must.extend(build_term_filters(opts.must_match))
    if opts.should_match:
        should.extend(build_term_filters(opts.should_match))
    # Fuzzy and range options are accepted but do not filter the buckets

    agg = {AGG_NAME: {"terms": {"field": opts.group_by, "size": UNLIMITED_BUCKETS}}}

    body: dict[str, Any] = {"from": opts.offset, "size": opts.page_size}
    if must or should:
        body["aggs"] = {
            AGG_WRAPPER_NAME: {
                "filter": {"bool": build_bool(must, should)},
                "aggs": agg,
            }
        }
    else:
        body["aggs"] = agg

    logger.debug("Aggregation body: %s", body)
    return body
