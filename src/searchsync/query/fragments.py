"""Query fragments — leaf clauses of the search engine query DSL.

Each builder takes one option category and returns a list of clauses, in
the order the fields (and, for list values, the elements) were given.
Builders never modify their input.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from searchsync.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Catch-all field searched by the "all match" categories
ALL_FIELD = "_all"
EXACT_BOOST = 3
FUZZY_BOOST = 1


def _values(value: Any) -> Iterable[Any]:
    return value if isinstance(value, (list, tuple)) else (value,)


def _multi_match(query: Any, field: str, boost: int, fuzziness: Any = None) -> dict[str, Any]:
    clause: dict[str, Any] = {
        "query": query,
        "fields": field,
        # an analyzer that strips every term still matches all documents
        "zero_terms_query": "all",
    }
    if fuzziness is not None:
        clause["fuzziness"] = fuzziness
    clause["boost"] = boost
    return {"multi_match": clause}


def build_term_filters(term_opts: Mapping[str, Any]) -> list[dict[str, Any]]:
    """Exact ``term`` filters.

    A list value explodes into one filter per element, elements unchanged.
    A single string value is lower-cased; other scalars pass through.
    """
    filters: list[dict[str, Any]] = []
    for field, value in term_opts.items():
        if isinstance(value, (list, tuple)):
            filters.extend({"term": {field: item}} for item in value)
            continue
        if isinstance(value, str):
            value = value.lower()
        filters.append({"term": {field: value}})
    return filters


def build_array_filters(array_opts: Mapping[str, Any]) -> list[dict[str, Any]]:
    """``terms`` filters; every value must be a list."""
    filters: list[dict[str, Any]] = []
    for field, value in array_opts.items():
        if not isinstance(value, (list, tuple)):
            raise ConfigurationError(f"Value is not an array: {field} {value!r}")
        filters.append({"terms": {field: list(value)}})
    return filters


def build_not_matching_query(not_opts: Mapping[str, Any]) -> list[dict[str, Any]]:
    """One negated ``multi_match`` wrapper per value."""
    queries: list[dict[str, Any]] = []
    for field, value in not_opts.items():
        for item in _values(value):
            queries.append(
                {
                    "query": {
                        "bool": {
                            "must_not": [_multi_match(item, field, EXACT_BOOST)],
                            "minimum_should_match": 1,
                        }
                    }
                }
            )
    return queries


def build_fuzzy_matching_query(fuzzy_opts: Mapping[str, Any], fuzziness: Any) -> list[dict[str, Any]]:
    """An exact and a fuzzy ``multi_match`` per value, exact boosted higher.

    A single string value is lower-cased; list elements are used as given.
    """
    queries: list[dict[str, Any]] = []
    for field, value in fuzzy_opts.items():
        if isinstance(value, str):
            value = value.lower()
        for item in _values(value):
            queries.append(
                {
                    "query": {
                        "bool": {
                            "should": [
                                _multi_match(item, field, EXACT_BOOST),
                                _multi_match(item, field, FUZZY_BOOST, fuzziness=fuzziness),
                            ],
                            "minimum_should_match": 1,
                        }
                    }
                }
            )
    return queries


def build_all_matching_query(all_opts: Any) -> list[dict[str, Any]]:
    """One ``match`` on the catch-all field per value."""
    return [{"query": {"match": {ALL_FIELD: value}}} for value in _values(all_opts)]


def build_match_all_query() -> list[dict[str, Any]]:
    return [{"match_all": {}}]


def build_match_phrase_query(phrase_opts: Mapping[str, Any] | list[Any]) -> list[dict[str, Any]]:
    """``match_phrase`` clauses.

    A mapping yields one clause per field; a list yields one clause per
    entry, each entry used verbatim as the ``match_phrase`` body.
    """
    if isinstance(phrase_opts, Mapping):
        entries: Iterable[Any] = ({field: value} for field, value in phrase_opts.items())
    else:
        entries = phrase_opts
    return [{"query": {"match_phrase": entry}} for entry in entries]


def build_range_filters(range_opts: Mapping[str, Any]) -> list[dict[str, Any]]:
    """``range`` filters keyed by field.

    The range expression is opaque and copied as given.  A value that is
    not a mapping is skipped with a warning.
    """
    filters: list[dict[str, Any]] = []
    for field, expression in range_opts.items():
        if not isinstance(expression, Mapping):
            logger.warning("Range given is not an object, skipping: %s=%r", field, expression)
            continue
        filters.append({"range": {field: dict(expression)}})
    return filters
