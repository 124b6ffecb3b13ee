"""Disambiguation engine.

This module resolves match requests against an in-memory catalog snapshot
by running a fixed-priority chain of strategies. The first strategy that
does not decline produces the result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from reelmatch.config.models import MatchingSettings
from reelmatch.core.disambiguation.models import (
    CatalogEntry,
    Matched,
    MatchRequest,
    MatchResult,
)
from reelmatch.core.disambiguation.strategies import (
    ExternalIdStrategy,
    FuzzyTitleStrategy,
    MatchStrategy,
    PathStrategy,
    TitleOnlyStrategy,
    TitleYearStrategy,
)

logger = logging.getLogger(__name__)


def default_strategies(settings: MatchingSettings | None = None) -> tuple[MatchStrategy, ...]:
    """Build the standard strategy chain in priority order.

    Args:
        settings: Matching settings providing the fuzzy threshold and margin

    Returns:
        Path, external id, title+year, title only and fuzzy strategies
    """
    settings = settings or MatchingSettings()
    return (
        PathStrategy(),
        ExternalIdStrategy(),
        TitleYearStrategy(),
        TitleOnlyStrategy(),
        FuzzyTitleStrategy(
            threshold=settings.fuzzy_threshold,
            margin=settings.fuzzy_margin,
        ),
    )


class DisambiguationEngine:
    """Resolve match requests against a fixed catalog snapshot.

    The engine copies the snapshot on construction and holds no mutable
    state afterwards, so a single instance can serve every worker thread
    of a batch without locking.

    Args:
        entries: Catalog snapshot
        strategies: Strategy chain override, defaults to default_strategies()
        settings: Matching settings used to build the default chain

    Example:
        >>> engine = DisambiguationEngine(store.load_catalog_snapshot())
        >>> result = engine.resolve(MatchRequest(id="r1", title="Inception", year=2010))
        >>> result.method
        <MatchMethod.TITLE_YEAR: 'titleYear'>
    """

    def __init__(
        self,
        entries: Iterable[CatalogEntry],
        *,
        strategies: Sequence[MatchStrategy] | None = None,
        settings: MatchingSettings | None = None,
    ) -> None:
        self._catalog: tuple[CatalogEntry, ...] = tuple(entries)
        self._strategies: tuple[MatchStrategy, ...] = (
            tuple(strategies) if strategies is not None else default_strategies(settings)
        )
        logger.debug(
            "Disambiguation engine ready: %d entries, strategies=%s",
            len(self._catalog),
            [strategy.name.value for strategy in self._strategies],
        )

    @property
    def snapshot_size(self) -> int:
        """Number of catalog entries in the snapshot."""
        return len(self._catalog)

    @property
    def strategies(self) -> tuple[MatchStrategy, ...]:
        return self._strategies

    def resolve(self, request: MatchRequest) -> MatchResult:
        """Resolve a single request.

        Never raises for malformed input: a request without a title yields
        a ``none`` result.

        Args:
            request: Request to resolve

        Returns:
            Result from the first strategy that did not decline, or a
            ``none`` result when every strategy declined
        """
        if not request.is_valid:
            logger.warning("Match request %s has no title, skipping strategies", request.id)
            return MatchResult.no_match(request.id)

        for strategy in self._strategies:
            outcome = strategy.evaluate(request, self._catalog)
            if isinstance(outcome, Matched):
                logger.debug(
                    "Request %s resolved by %s (confidence=%.3f, ambiguous=%s)",
                    request.id,
                    strategy.name.value,
                    outcome.result.confidence,
                    outcome.result.ambiguous,
                )
                return outcome.result

        logger.debug("Request %s: every strategy declined", request.id)
        return MatchResult.no_match(request.id)

    def resolve_batch(self, requests: Iterable[MatchRequest]) -> list[MatchResult]:
        """Resolve requests sequentially, preserving input order."""
        return [self.resolve(request) for request in requests]
