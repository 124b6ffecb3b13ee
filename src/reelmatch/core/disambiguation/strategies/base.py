"""Base strategy protocol for disambiguation.

This module defines the MatchStrategy protocol that every strategy in the
chain implements, plus small helpers for building outcomes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from reelmatch.core.disambiguation.models import (
    AmbiguityReason,
    CatalogEntry,
    Matched,
    MatchedEntry,
    MatchMethod,
    MatchRequest,
    MatchResult,
    StrategyOutcome,
)


@runtime_checkable
class MatchStrategy(Protocol):
    """Protocol for disambiguation strategies.

    A strategy compares one request against the catalog snapshot and either
    commits to a result (possibly an ambiguous one) or declines so the
    engine can try the next strategy.

    Attributes:
        name: The MatchMethod reported on results this strategy produces

    Note:
        - Must be pure: no I/O and no mutable state
        - Must NOT modify the catalog sequence
    """

    name: MatchMethod

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        """Compare a request against the catalog.

        Args:
            request: Request to resolve
            catalog: Immutable catalog snapshot

        Returns:
            Matched with a MatchResult, or DECLINED
        """
        ...


def committed(
    request: MatchRequest,
    method: MatchMethod,
    entry: CatalogEntry,
    confidence: float,
) -> Matched:
    """Outcome for a strategy that picked exactly one entry."""
    return Matched(
        MatchResult(
            request_id=request.id,
            match=MatchedEntry.from_entry(entry),
            confidence=confidence,
            method=method,
        ),
    )


def ambiguous(
    request: MatchRequest,
    method: MatchMethod,
    reason: AmbiguityReason,
    confidence: float,
    best_guess: CatalogEntry | None = None,
) -> Matched:
    """Outcome for a strategy that found candidates but could not pick one."""
    return Matched(
        MatchResult(
            request_id=request.id,
            match=MatchedEntry.from_entry(best_guess) if best_guess else None,
            confidence=confidence,
            method=method,
            ambiguous=True,
            ambiguous_reason=reason,
        ),
    )
