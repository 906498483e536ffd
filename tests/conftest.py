"""Shared test fixtures and configuration."""

from __future__ import annotations

import json
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from searchsync.config.connection import merge_options
from searchsync.config.settings import Settings
from searchsync.models.connection import ConnectionOptions

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with no backoff delay."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        connection={"url": "http://localhost:9200", "prefix": "test"},
        retry={"max_attempts": 3, "base_delay": 0.0},
    )


@pytest.fixture
def connection() -> ConnectionOptions:
    """Connection options bound to the ``cats`` collection."""
    return merge_options({"host": "localhost", "port": 9200, "prefix": "test", "type": "cats"})


@pytest.fixture
def cat_id() -> uuid.UUID:
    return uuid.UUID("5f1d7a3c-2b4e-4c6d-8e9f-0a1b2c3d4e5f")


@pytest.fixture
def sample_cat(cat_id: uuid.UUID) -> dict[str, Any]:
    """A cat record as the document layer hands it over."""
    return {
        "_id": cat_id,
        "name": "Puffy",
        "breed": "siamese",
        "age": 10,
        "createdAt": datetime(2024, 3, 10, 12, 30, tzinfo=UTC),
        "owner": {"_id": uuid.UUID("00000000-0000-4000-8000-000000000001"), "name": "Alice"},
    }


@pytest.fixture
def sample_search_reply() -> dict[str, Any]:
    """Search engine reply with two hits."""
    return {
        "took": 3,
        "timed_out": False,
        "hits": {
            "total": 2,
            "max_score": 1.0,
            "hits": [
                {"_index": "test-cats", "_id": "a", "_score": 1.0, "_source": {"name": "Puffy", "breed": "siamese"}},
                {"_index": "test-cats", "_id": "b", "_score": 0.5, "_source": {"name": "Mango", "breed": "siamese"}},
            ],
        },
    }


class RecordingTransport(httpx.MockTransport):
    """``MockTransport`` that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for a recording mock transport.

    Pass either a handler or a JSON payload to answer every request with.
    """

    def _make(payload: Any = None, *, handler: Handler | None = None, status_code: int = 200) -> RecordingTransport:
        if handler is None:

            def handler(request: httpx.Request) -> httpx.Response:
                return httpx.Response(status_code, json=payload)

        return RecordingTransport(handler)

    return _make
