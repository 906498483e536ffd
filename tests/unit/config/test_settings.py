"""Tests for settings loading and option-set defaults."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from searchsync.config.settings import Settings
from searchsync.exceptions import ConfigurationError
from searchsync.models.options import AggOptionSet, SearchOptionSet, merge_agg_options, merge_search_options


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.retry.max_attempts == 3
        assert settings.retry.base_delay == 0.5
        assert settings.http.timeout == 30.0
        assert settings.observability.log_format == "json"

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCHSYNC_RETRY__MAX_ATTEMPTS", "5")
        monkeypatch.setenv("SEARCHSYNC_HTTP__TIMEOUT", "2.5")
        settings = Settings(_env_file=None)  # type: ignore[call-arg]
        assert settings.retry.max_attempts == 5
        assert settings.http.timeout == 2.5

    def test_from_yaml(self, tmp_path: Path) -> None:
        config = tmp_path / "searchsync.yaml"
        config.write_text(
            "connection:\n  url: http://search.internal:9200\n  prefix: staging\nretry:\n  base_delay: 0.1\n",
            encoding="utf-8",
        )
        settings = Settings.from_yaml(config)
        assert settings.connection == {"url": "http://search.internal:9200", "prefix": "staging"}
        assert settings.retry.base_delay == 0.1
        assert settings.retry.max_attempts == 3

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_yaml(tmp_path / "missing.yaml")


class TestOptionSets:
    def test_search_defaults(self) -> None:
        options = merge_search_options()
        assert options.page == 1
        assert options.page_size == 25
        assert options.fuzziness == 0.0
        assert options.must_match is None
        assert options.offset == 0

    def test_camel_case_aliases(self) -> None:
        options = merge_search_options({"mustNotMatch": {"status": "archived"}, "pageSize": 5, "page": 3})
        assert options.must_not_match == {"status": "archived"}
        assert options.offset == 10

    def test_unknown_keys_ignored(self) -> None:
        assert merge_search_options({"collections": ["cats"]}) == SearchOptionSet()

    def test_all_match_scalar_is_listified(self) -> None:
        assert merge_search_options({"mustAllMatch": "siamese"}).must_all_match == ["siamese"]

    def test_negative_page_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid search options"):
            merge_search_options({"page": -1})

    def test_wrongly_typed_category_rejected(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            merge_search_options({"mustMatch": "siamese"})
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_wrongly_typed_agg_option_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Invalid aggregation options"):
            merge_agg_options({"groupBy": ["breed", "age"]})

    def test_option_sets_are_frozen(self) -> None:
        options = merge_search_options({"page": 2})
        with pytest.raises(ValidationError):
            options.page = 3  # type: ignore[misc]

    def test_agg_defaults(self) -> None:
        options = merge_agg_options({"groupBy": "breed"})
        assert options == AggOptionSet(group_by="breed")
        assert options.page_size == 25
