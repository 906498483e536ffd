"""Normalized search and aggregation results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """Search reply reshaped into a stable form."""

    total: int = Field(default=0, ge=0, description="Total number of matching documents")
    hits: list[dict[str, Any]] = Field(default_factory=list, description="Raw hit records, in engine order")


class AggResult(SearchResult):
    """Aggregation reply: a search result plus the engine's bucket structure."""

    aggregation: dict[str, Any] | None = Field(default=None, description="Aggregations as reported by the engine")
