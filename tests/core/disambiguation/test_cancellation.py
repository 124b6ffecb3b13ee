"""Tests for CancellationToken."""

from __future__ import annotations

import threading

from reelmatch.core.disambiguation.cancellation import CancellationToken
from reelmatch.shared.constants import EventChannelDefaults


def test_new_token_is_not_cancelled() -> None:
    token = CancellationToken()
    assert not token.is_cancelled
    assert token.reason is None
    assert token.wait(0.01) is False


def test_cancel_keeps_first_reason() -> None:
    token = CancellationToken()

    token.cancel("first")
    token.cancel("second")

    assert token.is_cancelled
    assert token.reason == "first"


def test_default_reason() -> None:
    token = CancellationToken()
    token.cancel()
    assert token.reason == EventChannelDefaults.CANCEL_REASON


def test_wait_returns_when_cancelled_from_another_thread() -> None:
    # Given
    token = CancellationToken()
    timer = threading.Timer(0.05, token.cancel)

    # When
    timer.start()
    cancelled = token.wait(5)

    # Then
    assert cancelled is True
