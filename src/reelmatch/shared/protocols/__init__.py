"""Protocol interfaces shared across layers."""

from __future__ import annotations

from .services import CatalogSnapshotProvider, MatchOutcomeSink

__all__ = ["CatalogSnapshotProvider", "MatchOutcomeSink"]
