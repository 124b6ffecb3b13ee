"""Disambiguation configuration models.

Fuzzy matching tunables, worker pool width and event channel behavior.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from reelmatch.shared.constants import (
    EventChannelDefaults,
    FuzzyMatchingDefaults,
    QueueDefaults,
)


class MatchingSettings(BaseModel):
    """Matching configuration.

    Attributes:
        fuzzy_threshold: Minimum title similarity for a fuzzy candidate
        fuzzy_margin: Lead over the runner-up needed to commit a fuzzy match
    """

    fuzzy_threshold: float = Field(
        default=FuzzyMatchingDefaults.SIMILARITY_THRESHOLD,
        ge=0.0,
        le=1.0,
        description="Minimum similarity for a fuzzy title candidate",
    )
    fuzzy_margin: float = Field(
        default=FuzzyMatchingDefaults.MIN_MARGIN,
        ge=0.0,
        le=1.0,
        description="Required lead of the best fuzzy candidate over the runner-up",
    )


class QueueSettings(BaseModel):
    """Queue runner configuration."""

    concurrency: int = Field(
        default=QueueDefaults.CONCURRENCY,
        ge=1,
        description="Number of worker threads per batch",
    )


class EventSettings(BaseModel):
    """Event channel configuration."""

    replay_limit: int = Field(
        default=EventChannelDefaults.REPLAY_LIMIT,
        ge=1,
        description="Events kept for late subscribers",
    )
    grace_period_seconds: float = Field(
        default=EventChannelDefaults.GRACE_PERIOD_SECONDS,
        ge=0.0,
        description="Seconds the replay buffer survives after a batch finishes",
    )


__all__ = [
    "EventSettings",
    "MatchingSettings",
    "QueueSettings",
]
