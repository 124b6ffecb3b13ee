"""Service protocols for dependency inversion.

The queue runner depends on these interfaces only; the SQLite library
store is one implementation, tests use in-memory fakes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from reelmatch.core.disambiguation.models import CatalogEntry, MatchResult


@runtime_checkable
class CatalogSnapshotProvider(Protocol):
    """Source of the catalog snapshot a batch matches against.

    Example:
        >>> provider: CatalogSnapshotProvider = SQLiteLibraryStore("data/reelmatch.db")
        >>> entries = provider.load_catalog_snapshot()
    """

    def load_catalog_snapshot(self) -> list[CatalogEntry]:
        """Return every catalog entry.

        Called once per batch, before any worker starts.
        """


@runtime_checkable
class MatchOutcomeSink(Protocol):
    """Destination for per-request match outcomes.

    Implementations must be safe to call from several worker threads.
    """

    def record_match_outcome(
        self,
        result: MatchResult,
        batch_id: str,
        request_title: str,
        request_year: int | None,
    ) -> None:
        """Persist one outcome.

        Args:
            result: Result produced by the engine
            batch_id: Batch the request belongs to
            request_title: Title as submitted
            request_year: Year as submitted
        """
