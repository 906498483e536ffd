"""Search and aggregation option sets.

Every recognized option is enumerated with a fixed default.  Field names are
snake_case; the camelCase names used on the wire (``mustMatch``,
``pageSize``, ...) are accepted as aliases so callers can pass option
mappings verbatim.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from searchsync.exceptions import ConfigurationError

DEFAULT_PAGE_SIZE = 25
DEFAULT_PAGE = 1
DEFAULT_FUZZINESS = 0.0


class _OptionSet(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, ge=1, description="Maximum hits per page")
    page: int = Field(default=DEFAULT_PAGE, ge=1, description="1-based page number")

    @field_validator("page_size", mode="before")
    @classmethod
    def _default_page_size(cls, v: Any) -> Any:
        return v or DEFAULT_PAGE_SIZE

    @field_validator("page", mode="before")
    @classmethod
    def _default_page(cls, v: Any) -> Any:
        return v or DEFAULT_PAGE

    @property
    def offset(self) -> int:
        """Index of the first hit on the requested page."""
        return (self.page - 1) * self.page_size


class SearchOptionSet(_OptionSet):
    """Options accepted by :func:`searchsync.query.builder.build_search_body`."""

    must_match: dict[str, Any] | None = Field(default=None, description="Exact term filters, all required")
    should_match: dict[str, Any] | None = Field(default=None, description="Exact term filters, any may match")
    must_match_phrase: dict[str, Any] | list[Any] | None = Field(default=None, description="Phrase matches")
    must_fuzzy_match: dict[str, Any] | None = Field(default=None, description="Fuzzy matches, all required")
    should_fuzzy_match: dict[str, Any] | None = Field(default=None, description="Fuzzy matches, any may match")
    must_not_match: dict[str, Any] | None = Field(default=None, description="Negated matches, all required")
    should_not_match: dict[str, Any] | None = Field(default=None, description="Negated matches, any may match")
    must_all_match: list[Any] | None = Field(default=None, description="Catch-all field matches, all required")
    should_all_match: list[Any] | None = Field(default=None, description="Catch-all field matches, any may match")
    must_range: dict[str, Any] | None = Field(default=None, description="Range filters, all required")
    should_range: dict[str, Any] | None = Field(default=None, description="Range filters, any may match")
    must_array: dict[str, Any] | None = Field(default=None, description="Array membership filters, all required")
    should_array: dict[str, Any] | None = Field(default=None, description="Array membership filters, any may match")
    match_all: Any = Field(default=None, description="Add a match_all clause when truthy")
    sort: Any = Field(default=None, description="Sort specification, passed through verbatim")
    fuzziness: float | int | str = Field(default=DEFAULT_FUZZINESS, description="Fuzziness for fuzzy matches")

    @field_validator("must_all_match", "should_all_match", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        if v is None or isinstance(v, list):
            return v
        if isinstance(v, tuple):
            return list(v)
        return [v]

    @field_validator("fuzziness", mode="before")
    @classmethod
    def _default_fuzziness(cls, v: Any) -> Any:
        return v or DEFAULT_FUZZINESS


class AggOptionSet(_OptionSet):
    """Options accepted by :func:`searchsync.query.aggregation.build_agg_body`."""

    must_match: dict[str, Any] | None = Field(default=None, description="Exact term filters, all required")
    should_match: dict[str, Any] | None = Field(default=None, description="Exact term filters, any may match")
    must_fuzzy_match: dict[str, Any] | None = Field(default=None, description="Fuzzy matches, all required")
    should_fuzzy_match: dict[str, Any] | None = Field(default=None, description="Fuzzy matches, any may match")
    must_range: dict[str, Any] | None = Field(default=None, description="Range filters, all required")
    should_range: dict[str, Any] | None = Field(default=None, description="Range filters, any may match")
    group_by: str | None = Field(default=None, description="Field to bucket documents by")
    fuzziness: float | int | str = Field(default=DEFAULT_FUZZINESS, description="Fuzziness for fuzzy matches")

    @field_validator("fuzziness", mode="before")
    @classmethod
    def _default_fuzziness(cls, v: Any) -> Any:
        return v or DEFAULT_FUZZINESS


def merge_search_options(options: Mapping[str, Any] | SearchOptionSet | None = None) -> SearchOptionSet:
    """Overlay sparse caller options on the search defaults."""
    if isinstance(options, SearchOptionSet):
        return options
    try:
        return SearchOptionSet.model_validate(dict(options or {}))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid search options: {e}") from e


def merge_agg_options(options: Mapping[str, Any] | AggOptionSet | None = None) -> AggOptionSet:
    """Overlay sparse caller options on the aggregation defaults."""
    if isinstance(options, AggOptionSet):
        return options
    try:
        return AggOptionSet.model_validate(dict(options or {}))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid aggregation options: {e}") from e
