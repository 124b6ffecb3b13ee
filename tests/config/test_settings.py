"""Tests for the settings models and the settings loader."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest
from pydantic import ValidationError

from reelmatch.config import get_config, load_settings, reload_config
from reelmatch.config.models import LoggingSettings, MatchingSettings, QueueSettings, Settings
from reelmatch.shared.constants import EventChannelDefaults, FileSystem, FuzzyMatchingDefaults, QueueDefaults
from reelmatch.shared.errors import ApplicationError, ErrorCode


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    """Create temporary config file."""
    config_file = tmp_path / "custom.toml"
    config_file.write_text(
        """
[logging]
level = "DEBUG"

[matching]
fuzzy_threshold = 0.75
fuzzy_margin = 0.2

[queue]
concurrency = 2

[events]
replay_limit = 50
grace_period_seconds = 5.0

[storage]
database_path = "library.db"
""",
        encoding="utf-8",
    )
    return config_file


class TestSettingsModel:
    """Defaults, validation and TOML round trip."""

    def test_defaults(self, settings: Settings) -> None:
        assert settings.matching.fuzzy_threshold == FuzzyMatchingDefaults.SIMILARITY_THRESHOLD
        assert settings.matching.fuzzy_margin == FuzzyMatchingDefaults.MIN_MARGIN
        assert settings.queue.concurrency == QueueDefaults.CONCURRENCY
        assert settings.events.replay_limit == EventChannelDefaults.REPLAY_LIMIT
        assert settings.storage.database_path == FileSystem.DEFAULT_DATABASE_PATH
        assert settings.logging.file is None

    def test_environment_overrides_nested_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Given
        monkeypatch.setenv("REELMATCH_QUEUE__CONCURRENCY", "8")
        monkeypatch.setenv("REELMATCH_MATCHING__FUZZY_MARGIN", "0.05")

        # When
        settings = Settings()

        # Then
        assert settings.queue.concurrency == 8
        assert settings.matching.fuzzy_margin == 0.05

    @pytest.mark.parametrize(
        ("model", "kwargs"),
        [
            (MatchingSettings, {"fuzzy_threshold": 1.5}),
            (MatchingSettings, {"fuzzy_margin": -0.1}),
            (QueueSettings, {"concurrency": 0}),
        ],
    )
    def test_out_of_range_values_rejected(self, model: type, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            model(**kwargs)

    def test_logging_level_is_normalized(self) -> None:
        assert LoggingSettings(level=" debug ").level == "DEBUG"

    def test_unknown_logging_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            LoggingSettings(level="LOUD")

    def test_app_debug_defaults_off(self, settings: Settings) -> None:
        assert settings.app.debug is False

    def test_from_toml_file(self, temp_config: Path) -> None:
        settings = Settings.from_toml_file(temp_config)

        assert settings.logging.level == "DEBUG"
        assert settings.matching.fuzzy_threshold == 0.75
        assert settings.queue.concurrency == 2
        assert settings.events.grace_period_seconds == 5.0
        assert settings.storage.database_path == "library.db"

    def test_from_missing_toml_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Settings.from_toml_file(tmp_path / "missing.toml")

    def test_toml_round_trip(self, temp_config: Path, tmp_path: Path) -> None:
        # Given
        original = Settings.from_toml_file(temp_config)
        target = tmp_path / "out" / "saved.toml"

        # When
        original.to_toml_file(target)
        restored = Settings.from_toml_file(target)

        # Then
        assert restored.matching == original.matching
        assert restored.queue == original.queue
        assert restored.events == original.events


class TestLoader:
    """load_settings and the global loader."""

    def test_load_settings_without_files_uses_defaults(self) -> None:
        assert load_settings().queue.concurrency == QueueDefaults.CONCURRENCY

    def test_load_settings_finds_config_in_working_directory(self, tmp_path: Path) -> None:
        (tmp_path / FileSystem.CONFIG_FILE).write_text("[queue]\nconcurrency = 3\n", encoding="utf-8")

        assert load_settings().queue.concurrency == 3

    def test_load_settings_prefers_config_directory(self, tmp_path: Path) -> None:
        (tmp_path / FileSystem.CONFIG_FILE).write_text("[queue]\nconcurrency = 3\n", encoding="utf-8")
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / FileSystem.CONFIG_FILE).write_text("[queue]\nconcurrency = 6\n", encoding="utf-8")

        assert load_settings().queue.concurrency == 6

    def test_load_settings_explicit_path(self, temp_config: Path) -> None:
        assert load_settings(temp_config).queue.concurrency == 2

    def test_load_settings_explicit_missing_path(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.toml")

    def test_invalid_config_raises_application_error(self, tmp_path: Path) -> None:
        # Given
        bad_config = tmp_path / "bad.toml"
        bad_config.write_text("[queue]\nconcurrency = 0\n", encoding="utf-8")

        # When & Then
        with pytest.raises(ApplicationError) as exc_info:
            load_settings(bad_config)
        assert exc_info.value.code is ErrorCode.INVALID_CONFIG

    def test_env_file_is_loaded_without_overriding_environment(self, tmp_path: Path, mocker) -> None:
        # Given
        mocker.patch.dict(os.environ)
        (tmp_path / FileSystem.ENV_FILE).write_text(
            "REELMATCH_QUEUE__CONCURRENCY=5\nREELMATCH_MATCHING__FUZZY_MARGIN=0.3\n",
            encoding="utf-8",
        )
        os.environ["REELMATCH_MATCHING__FUZZY_MARGIN"] = "0.15"

        # When
        settings = load_settings()

        # Then
        assert settings.queue.concurrency == 5
        assert settings.matching.fuzzy_margin == 0.15

    def test_get_config_is_cached(self) -> None:
        assert get_config() is get_config()

    def test_concurrent_get_config_returns_single_instance(self) -> None:
        barrier = threading.Barrier(8)

        def fetch() -> Settings:
            barrier.wait()
            return get_config()

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: fetch(), range(8)))

        assert all(result is results[0] for result in results)

    def test_reload_config_replaces_instance(self, temp_config: Path) -> None:
        first = get_config()

        reloaded = reload_config(temp_config)

        assert reloaded is not first
        assert get_config() is reloaded
        assert get_config().queue.concurrency == 2
