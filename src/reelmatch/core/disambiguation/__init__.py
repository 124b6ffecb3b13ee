"""Disambiguation core.

Models, normalization, the strategy chain and the engine. The queue runner
(``reelmatch.core.disambiguation.queue``) and job manager
(``reelmatch.core.disambiguation.jobs``) are imported from their modules.
"""

from __future__ import annotations

from .cancellation import CancellationToken
from .engine import DisambiguationEngine, default_strategies
from .models import (
    DECLINED,
    AmbiguityReason,
    BatchSummary,
    CatalogEntry,
    Declined,
    Matched,
    MatchedEntry,
    MatchMethod,
    MatchRequest,
    MatchResult,
    StrategyOutcome,
)
from .normalization import normalize_title, title_similarity

__all__ = [
    "DECLINED",
    "AmbiguityReason",
    "BatchSummary",
    "CancellationToken",
    "CatalogEntry",
    "Declined",
    "DisambiguationEngine",
    "MatchMethod",
    "MatchRequest",
    "MatchResult",
    "Matched",
    "MatchedEntry",
    "StrategyOutcome",
    "default_strategies",
    "normalize_title",
    "title_similarity",
]
