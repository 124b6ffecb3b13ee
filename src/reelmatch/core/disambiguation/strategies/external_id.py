"""External identifier strategy."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from reelmatch.core.disambiguation.models import (
    DECLINED,
    CatalogEntry,
    MatchMethod,
    MatchRequest,
    StrategyOutcome,
)
from reelmatch.core.disambiguation.strategies.base import committed
from reelmatch.shared.constants import StrategyConfidence


def _normalize_identifier(value: str | None) -> str:
    return (value or "").strip().casefold()


@dataclass(frozen=True)
class ExternalIdStrategy:
    """Match on an external identifier such as "tt1375666".

    Identifiers are compared trimmed and case-insensitively. Only a single
    hit commits; anything else declines.
    """

    name: MatchMethod = MatchMethod.EXTERNAL_ID

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        wanted = _normalize_identifier(request.external_id)
        if not wanted:
            return DECLINED

        hits = [entry for entry in catalog if _normalize_identifier(entry.external_id) == wanted]
        if len(hits) != 1:
            return DECLINED

        return committed(request, self.name, hits[0], StrategyConfidence.EXTERNAL_ID)
