"""Search request body construction.

Turns a :class:`SearchOptionSet` into one boolean query::

    {"query": {"bool": {"must": [...], "should": [...]}}, "from": 0, "size": 25, "sort": ...}

Clause order follows the category order below; it changes only the shape
of the document, never what it matches.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from searchsync.models.options import SearchOptionSet, merge_search_options
from searchsync.query.fragments import (
    build_all_matching_query,
    build_array_filters,
    build_fuzzy_matching_query,
    build_match_all_query,
    build_match_phrase_query,
    build_not_matching_query,
    build_range_filters,
    build_term_filters,
)

logger = logging.getLogger(__name__)

MUST = "must"
SHOULD = "should"

Clauses = list[dict[str, Any]]


def _categories(options: SearchOptionSet) -> list[tuple[str, Any, Callable[[Any], Clauses]]]:
    fuzzy = options.fuzziness
    return [
        (MUST, options.must_not_match, build_not_matching_query),
        (SHOULD, options.should_not_match, build_not_matching_query),
        (MUST, options.must_fuzzy_match, lambda opts: build_fuzzy_matching_query(opts, fuzzy)),
        (SHOULD, options.should_fuzzy_match, lambda opts: build_fuzzy_matching_query(opts, fuzzy)),
        (MUST, options.must_all_match, build_all_matching_query),
        (SHOULD, options.should_all_match, build_all_matching_query),
        (MUST, options.must_match, build_term_filters),
        (MUST, options.must_match_phrase, build_match_phrase_query),
        (SHOULD, options.should_match, build_term_filters),
        (MUST, options.must_array, build_array_filters),
        (SHOULD, options.should_array, build_array_filters),
        (MUST, options.must_range, build_range_filters),
        (SHOULD, options.should_range, build_range_filters),
    ]


def build_bool(must: Clauses, should: Clauses) -> dict[str, Any]:
    """Boolean clause holding only the non-empty groups."""
    bool_query: dict[str, Any] = {}
    if must:
        bool_query[MUST] = must
    if should:
        bool_query[SHOULD] = should
    return bool_query


def build_search_body(options: Mapping[str, Any] | SearchOptionSet | None = None) -> dict[str, Any]:
    """Build a search request body.

    Args:
        options: Search option set, or a sparse mapping of options
            (camelCase or snake_case keys) merged with the defaults.

    Returns:
        The request body.

    Raises:
        ConfigurationError: If an array category holds a non-list value.
    """
    opts = merge_search_options(options)
    groups: dict[str, Clauses] = {MUST: [], SHOULD: []}

    for group, value, build in _categories(opts):
        if value:
            groups[group].extend(build(value))

    if opts.match_all:
        groups[MUST].extend(build_match_all_query())

    body: dict[str, Any] = {
        "query": {"bool": build_bool(groups[MUST], groups[SHOULD])},
        "from": opts.offset,
        "size": opts.page_size,
    }
    if opts.sort:
        body["sort"] = opts.sort

    logger.debug("Search body: %s", body)
    return body
