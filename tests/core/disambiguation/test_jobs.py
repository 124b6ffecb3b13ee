"""Tests for DisambiguationJobManager."""

from __future__ import annotations

import threading

import pytest

from reelmatch.config.models import Settings
from reelmatch.core.disambiguation.jobs import DisambiguationJobManager
from reelmatch.core.disambiguation.models import MatchRequest
from reelmatch.core.events.channel import EventChannel
from reelmatch.shared.constants import EventNames
from reelmatch.shared.errors import ApplicationError, DomainError, ErrorCode, InfrastructureError


def _requests(count: int) -> list[MatchRequest]:
    return [MatchRequest(id=f"r{i}", title="Heat") for i in range(count)]


class BlockingSink:
    """Sink that holds every worker until released."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.entered = threading.Event()

    def record_match_outcome(self, result, batch_id, request_title, request_year) -> None:
        self.entered.set()
        self.release.wait(5)


def test_submit_runs_batch_in_background(
    channel: EventChannel,
    in_memory_catalog,
    recording_sink,
    recorder,
    settings: Settings,
) -> None:
    # Given
    manager = DisambiguationJobManager(channel, in_memory_catalog, recording_sink, settings=settings)
    channel.subscribe(recorder)

    # When
    job_id = manager.submit(_requests(5), concurrency=2)
    summary = manager.wait(timeout=5)

    # Then
    assert summary is not None
    assert summary.batch_id == job_id
    assert summary.total == 5
    assert not manager.running
    assert not channel.running
    assert recorder.names[-1] == EventNames.COMPLETE
    assert {record[1] for record in recording_sink.records} == {job_id}


def test_submit_uses_given_batch_id(channel, in_memory_catalog, recording_sink, settings) -> None:
    manager = DisambiguationJobManager(channel, in_memory_catalog, recording_sink, settings=settings)

    job_id = manager.submit(_requests(1), batch_id="nightly")

    assert job_id == "nightly"
    assert manager.wait(timeout=5).batch_id == "nightly"


def test_empty_submission_is_rejected(channel, in_memory_catalog, recording_sink, settings) -> None:
    manager = DisambiguationJobManager(channel, in_memory_catalog, recording_sink, settings=settings)

    with pytest.raises(DomainError) as exc_info:
        manager.submit([])

    assert exc_info.value.code is ErrorCode.VALIDATION_ERROR
    assert not channel.running


def test_second_submission_while_running_is_rejected(channel, in_memory_catalog, settings) -> None:
    # Given a batch held inside the sink
    sink = BlockingSink()
    manager = DisambiguationJobManager(channel, in_memory_catalog, sink, settings=settings)
    manager.submit(_requests(2), concurrency=1)
    assert sink.entered.wait(5)

    # When & Then
    with pytest.raises(ApplicationError) as exc_info:
        manager.submit(_requests(1))
    assert exc_info.value.code is ErrorCode.JOB_ALREADY_RUNNING

    sink.release.set()
    assert manager.wait(timeout=5) is not None


def test_cancel_ends_with_cancelled_event(channel, in_memory_catalog, recorder, settings) -> None:
    # Given
    sink = BlockingSink()
    manager = DisambiguationJobManager(channel, in_memory_catalog, sink, settings=settings)
    channel.subscribe(recorder)
    manager.submit(_requests(20), concurrency=1)
    assert sink.entered.wait(5)

    # When
    assert manager.cancel("user") is True
    sink.release.set()
    summary = manager.wait(timeout=5)

    # Then
    assert summary is not None
    assert summary.cancelled
    assert summary.total < 20
    assert recorder.names[-1] == EventNames.CANCELLED
    assert manager.cancel() is False


def test_catalog_failure_publishes_error_and_finishes(
    channel,
    broken_catalog,
    recording_sink,
    recorder,
    settings,
) -> None:
    # Given
    manager = DisambiguationJobManager(channel, broken_catalog, recording_sink, settings=settings)
    channel.subscribe(recorder)

    # When
    manager.submit(_requests(3))
    summary = manager.wait(timeout=5)

    # Then
    assert summary is None
    assert isinstance(manager.last_error, InfrastructureError)
    assert manager.last_error.code is ErrorCode.CATALOG_LOAD_FAILED
    assert recorder.names == [EventNames.ERROR]
    assert "catalog" in recorder.events[0].data["message"].lower()
    assert not channel.running


def test_manager_can_run_consecutive_batches(channel, in_memory_catalog, recording_sink, settings) -> None:
    manager = DisambiguationJobManager(channel, in_memory_catalog, recording_sink, settings=settings)

    manager.submit(_requests(2))
    first = manager.wait(timeout=5)
    manager.submit(_requests(3))
    second = manager.wait(timeout=5)

    assert first is not None and first.total == 2
    assert second is not None and second.total == 3
    assert len(recording_sink.records) == 5
