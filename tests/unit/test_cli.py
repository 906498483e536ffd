"""Tests for the command-line entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from searchsync.cli import _load_options, main
from searchsync.exceptions import UpstreamError
from searchsync.models.result import AggResult, SearchResult


@pytest.fixture
def fake_sync():
    """Patch ``SearchSync`` so the CLI never reaches the network."""
    instance = MagicMock()
    bound = MagicMock()
    instance.for_collection.return_value = bound
    bound.search = AsyncMock(return_value=SearchResult(total=1, hits=[{"_id": "a"}]))
    bound.aggregate = AsyncMock(return_value=AggResult(total=4, hits=[], aggregation={"GroupBy": {"buckets": []}}))
    instance.search_collections = AsyncMock(return_value=SearchResult(total=0, hits=[]))
    with patch("searchsync.core.sync.SearchSync", return_value=instance) as cls:
        cls.instance = instance
        cls.bound = bound
        yield cls


class TestLoadOptions:
    def test_empty(self) -> None:
        assert _load_options(None) == {}

    def test_inline(self) -> None:
        assert _load_options('{"pageSize": 5}') == {"pageSize": 5}

    def test_from_file(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text('{"mustMatch": {"breed": "siamese"}}', encoding="utf-8")
        assert _load_options(f"@{path}") == {"mustMatch": {"breed": "siamese"}}

    def test_not_an_object(self) -> None:
        with pytest.raises(ValueError, match="JSON object"):
            _load_options("[1, 2]")


class TestMain:
    def test_search(self, fake_sync: Any, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--url", "http://localhost:9200", "search", "--collection", "Cats", "-o", '{"page": 2}'])

        fake_sync.instance.for_collection.assert_called_once_with("Cats")
        fake_sync.bound.search.assert_awaited_once_with({"page": 2})
        settings = fake_sync.call_args.kwargs["settings"]
        assert settings.connection["url"] == "http://localhost:9200"
        assert json.loads(capsys.readouterr().out) == {"total": 1, "hits": [{"_id": "a"}]}

    def test_aggregate(self, fake_sync: Any, capsys: pytest.CaptureFixture[str]) -> None:
        main(["aggregate", "--collection", "cats", "-o", '{"groupBy": "breed"}'])
        assert json.loads(capsys.readouterr().out)["aggregation"] == {"GroupBy": {"buckets": []}}

    def test_search_all(self, fake_sync: Any) -> None:
        main(["--prefix", "app", "search-all", "--collections", "cats, dogs"])
        fake_sync.instance.search_collections.assert_awaited_once_with({}, ["cats", "dogs"])
        assert fake_sync.call_args.kwargs["settings"].connection["prefix"] == "app"

    def test_search_all_collections(self, fake_sync: Any) -> None:
        main(["search-all"])
        fake_sync.instance.search_collections.assert_awaited_once_with({}, None)

    def test_error_exits_nonzero(self, fake_sync: Any, capsys: pytest.CaptureFixture[str]) -> None:
        fake_sync.bound.search.side_effect = UpstreamError("Search engine search error: boom")
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "--collection", "cats"])
        assert exc_info.value.code == 1
        assert "boom" in capsys.readouterr().err

    def test_bad_options(self, fake_sync: Any, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main(["search", "--collection", "cats", "-o", "{not json"])
        assert capsys.readouterr().err.startswith("Error:")
        fake_sync.assert_not_called()

    def test_missing_config(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            main(["--config", str(tmp_path / "nope.yaml"), "search", "--collection", "cats"])
        assert "Config file not found" in capsys.readouterr().err
