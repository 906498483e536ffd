"""Integration test fixtures — a live search engine speaking the legacy DSL.

Expects an engine on ``localhost:9200`` (override with ``SEARCHSYNC_TEST_URL``)
whose major version is below 5: typed document addresses, ``_all`` and
``search_type=count`` were removed after that.
"""

from __future__ import annotations

import os
import time
import uuid

import httpx
import pytest

from searchsync.config.settings import Settings

ENGINE_URL = os.environ.get("SEARCHSYNC_TEST_URL", "http://localhost:9200")


def _wait_for_service(url: str, timeout: float = 30.0) -> dict | None:
    """Block until *url* answers with HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=5)
            if r.status_code == 200:
                return r.json()
        except (httpx.HTTPError, ValueError):
            pass
        time.sleep(2)
    return None


@pytest.fixture(scope="session")
def engine_ready() -> str:
    """Ensure a legacy search engine is running."""
    info = _wait_for_service(ENGINE_URL)
    if info is None:
        pytest.skip(f"Search engine not available at {ENGINE_URL}")
    version = str(info.get("version", {}).get("number", "0"))
    if int(version.split(".")[0]) >= 5:
        pytest.skip(f"Search engine {version} does not speak the legacy DSL")
    return ENGINE_URL


@pytest.fixture
def prefix(engine_ready: str):
    """Unique index prefix, dropped after the test."""
    value = f"it{uuid.uuid4().hex[:8]}"
    yield value
    httpx.delete(f"{engine_ready}/{value}-*", timeout=10)


@pytest.fixture
def live_settings(engine_ready: str, prefix: str) -> Settings:
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        connection={"url": engine_ready, "prefix": prefix},
        retry={"max_attempts": 3, "base_delay": 0.2},
    )


@pytest.fixture
def refresh(engine_ready: str, prefix: str):
    """Make freshly indexed documents searchable."""

    def _refresh() -> None:
        httpx.post(f"{engine_ready}/{prefix}-*/_refresh", timeout=10)

    return _refresh
