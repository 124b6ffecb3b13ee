"""Fuzzy title strategy.

Last resort of the chain: scores every catalog title against the request
title with a normalized edit-distance similarity and commits only when a
single candidate clears the threshold with a clear lead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from reelmatch.core.disambiguation.models import (
    DECLINED,
    AmbiguityReason,
    CatalogEntry,
    MatchMethod,
    MatchRequest,
    StrategyOutcome,
)
from reelmatch.core.disambiguation.normalization import normalize_title, title_similarity
from reelmatch.core.disambiguation.strategies.base import ambiguous, committed
from reelmatch.shared.constants import FuzzyMatchingDefaults

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FuzzyTitleStrategy:
    """Match on title similarity.

    Attributes:
        threshold: Minimum similarity for an entry to be a candidate
        margin: Lead over the runner-up required to commit
        name: Reported method (fuzzy)

    Example:
        >>> strategy = FuzzyTitleStrategy(threshold=0.8, margin=0.1)
        >>> outcome = strategy.evaluate(request, catalog)
    """

    threshold: float = FuzzyMatchingDefaults.SIMILARITY_THRESHOLD
    margin: float = FuzzyMatchingDefaults.MIN_MARGIN
    name: MatchMethod = MatchMethod.FUZZY

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"threshold must be between 0.0 and 1.0, got {self.threshold}"
            raise ValueError(msg)
        if not 0.0 <= self.margin <= 1.0:
            msg = f"margin must be between 0.0 and 1.0, got {self.margin}"
            raise ValueError(msg)

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        if not normalize_title(request.title):
            return DECLINED

        scored = [
            (title_similarity(request.title, entry.match_title or ""), entry)
            for entry in catalog
            if entry.match_title
        ]
        if not scored:
            return DECLINED

        # Highest score first, lowest id first among equal scores
        scored.sort(key=lambda item: (-item[0], item[1].id))
        top_score, top_entry = scored[0]
        if top_score < self.threshold:
            return DECLINED

        runner_up = scored[1][0] if len(scored) > 1 else 0.0
        above_threshold = sum(1 for score, _ in scored if score >= self.threshold)
        lead = round(top_score - runner_up, FuzzyMatchingDefaults.MARGIN_PRECISION)

        logger.debug(
            "Fuzzy candidates for '%s': top=%.3f (entry %d), runner-up=%.3f, above threshold=%d",
            request.title,
            top_score,
            top_entry.id,
            runner_up,
            above_threshold,
        )

        if above_threshold == 1 and lead >= self.margin:
            return committed(request, self.name, top_entry, top_score)

        return ambiguous(
            request,
            self.name,
            AmbiguityReason.TITLE_FUZZY,
            top_score,
            best_guess=top_entry,
        )
