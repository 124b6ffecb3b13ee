"""Exact normalized title strategies.

TitleYearStrategy requires the declared year to equal the parsed year;
TitleOnlyStrategy ignores the year and runs after it in the chain.
"""

from __future__ import annotations

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
from reelmatch.core.disambiguation.normalization import normalize_title
from reelmatch.core.disambiguation.strategies.base import ambiguous, committed
from reelmatch.shared.constants import StrategyConfidence


def title_matches(request: MatchRequest, catalog: Sequence[CatalogEntry]) -> list[CatalogEntry]:
    """Entries whose normalized title equals the request's normalized title."""
    wanted = normalize_title(request.title)
    if not wanted:
        return []
    return [entry for entry in catalog if normalize_title(entry.match_title) == wanted]


@dataclass(frozen=True)
class TitleYearStrategy:
    """Match on normalized title plus exact year."""

    name: MatchMethod = MatchMethod.TITLE_YEAR

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        if request.year is None:
            return DECLINED

        hits = [entry for entry in title_matches(request, catalog) if entry.parsed_year == request.year]
        if not hits:
            return DECLINED

        if len(hits) == 1:
            return committed(request, self.name, hits[0], StrategyConfidence.TITLE_YEAR)

        return ambiguous(
            request,
            self.name,
            AmbiguityReason.TITLE_YEAR_MULTIPLE,
            StrategyConfidence.TITLE_YEAR_MULTIPLE,
        )


@dataclass(frozen=True)
class TitleOnlyStrategy:
    """Match on normalized title alone.

    When several entries share the title, the result is ambiguous. The
    reason depends on whether the request declared a year: a declared year
    that matched none of them (TitleYearStrategy already ran) is a year
    mismatch, otherwise the title alone is not enough.
    """

    name: MatchMethod = MatchMethod.TITLE_ONLY

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        hits = title_matches(request, catalog)
        if not hits:
            return DECLINED

        if len(hits) == 1:
            return committed(request, self.name, hits[0], StrategyConfidence.TITLE_ONLY)

        if request.year is not None:
            return ambiguous(
                request,
                self.name,
                AmbiguityReason.YEAR_MISMATCH,
                StrategyConfidence.YEAR_MISMATCH,
            )

        return ambiguous(
            request,
            self.name,
            AmbiguityReason.TITLE_FUZZY,
            StrategyConfidence.TITLE_MULTIPLE,
        )
