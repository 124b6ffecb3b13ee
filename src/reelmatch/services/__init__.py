"""Service implementations for reelmatch."""

from __future__ import annotations

from .library_store import (
    MatchOutcomeRecord,
    OutcomeCounts,
    ReviewDecision,
    SQLiteLibraryStore,
)

__all__ = [
    "MatchOutcomeRecord",
    "OutcomeCounts",
    "ReviewDecision",
    "SQLiteLibraryStore",
]
