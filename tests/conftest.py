"""
Pytest configuration and shared fixtures for reelmatch tests.

Provides catalog fixtures, in-memory collaborators for the queue runner,
and isolation for the global settings loader and package logger.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Generator
from pathlib import Path

import pytest

from reelmatch.cli.common.context import clear_cli_context
from reelmatch.config import loader as config_loader
from reelmatch.config.models import Settings
from reelmatch.core.disambiguation.models import CatalogEntry, MatchResult
from reelmatch.core.events.channel import ChannelEvent, EventChannel
from reelmatch.shared.constants import Application


class InMemoryCatalog:
    """Catalog provider backed by a list."""

    def __init__(self, entries: list[CatalogEntry]) -> None:
        self.entries = list(entries)
        self.load_calls = 0

    def load_catalog_snapshot(self) -> list[CatalogEntry]:
        self.load_calls += 1
        return list(self.entries)


class BrokenCatalog:
    """Catalog provider whose snapshot load always fails."""

    def load_catalog_snapshot(self) -> list[CatalogEntry]:
        raise RuntimeError("catalog unavailable")


class RecordingSink:
    """Outcome sink that keeps every recorded outcome."""

    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.records: list[tuple[MatchResult, str, str, int | None]] = []
        self.fail_for = fail_for or set()
        self._lock = threading.Lock()

    def record_match_outcome(
        self,
        result: MatchResult,
        batch_id: str,
        request_title: str,
        request_year: int | None,
    ) -> None:
        if result.request_id in self.fail_for:
            raise OSError("disk full")
        with self._lock:
            self.records.append((result, batch_id, request_title, request_year))


class EventRecorder:
    """Subscriber that collects channel events."""

    def __init__(self) -> None:
        self.events: list[ChannelEvent] = []
        self._lock = threading.Lock()

    def __call__(self, event: ChannelEvent) -> None:
        with self._lock:
            self.events.append(event)

    @property
    def names(self) -> list[str]:
        return [event.event for event in self.events]

    def of(self, name: str) -> list[ChannelEvent]:
        return [event for event in self.events if event.event == name]


@pytest.fixture(autouse=True)
def _isolate_global_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Keep tests independent of the caller's config files, env and logger state."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("REELMATCH_"):
            monkeypatch.delenv(key, raising=False)
    config_loader._loader.reset()  # noqa: SLF001
    clear_cli_context()

    yield

    package_logger = logging.getLogger(Application.NAME)
    package_logger.handlers.clear()
    package_logger.propagate = True
    package_logger.setLevel(logging.NOTSET)
    config_loader._loader.reset()  # noqa: SLF001
    clear_cli_context()


@pytest.fixture
def settings() -> Settings:
    """Default settings, independent of the environment."""
    return Settings()


@pytest.fixture
def movie_catalog() -> list[CatalogEntry]:
    """A small catalog with a few deliberate collisions."""
    return [
        CatalogEntry(
            id=1,
            folder_path="/movies/Inception (2010)",
            parsed_title="Inception",
            parsed_year=2010,
            external_id="tt1375666",
        ),
        CatalogEntry(id=2, folder_path="/movies/Halloween (1978)", parsed_title="Halloween", parsed_year=1978),
        CatalogEntry(id=3, folder_path="/movies/Halloween (2018)", parsed_title="Halloween", parsed_year=2018),
        CatalogEntry(
            id=4,
            folder_path="/movies/The Matrix (1999)",
            parsed_title="The Matrix",
            parsed_year=1999,
            external_id="tt0133093",
        ),
        CatalogEntry(id=5, folder_path="/movies/Heat (1995)", parsed_title="Heat", parsed_year=1995),
    ]


@pytest.fixture
def in_memory_catalog(movie_catalog: list[CatalogEntry]) -> InMemoryCatalog:
    return InMemoryCatalog(movie_catalog)


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def channel() -> Generator[EventChannel, None, None]:
    """Isolated event channel with a short grace period."""
    event_channel = EventChannel("test", grace_period=60.0)
    yield event_channel
    event_channel.close()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def broken_catalog() -> BrokenCatalog:
    return BrokenCatalog()


@pytest.fixture
def failing_sink() -> RecordingSink:
    """Sink that fails for request ids "r2" and "r4"."""
    return RecordingSink(fail_for={"r2", "r4"})
