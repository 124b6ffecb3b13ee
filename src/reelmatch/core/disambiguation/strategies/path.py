"""Folder path strategy.

Exact, case-sensitive comparison of the request's folder path hint with
each entry's folder path.
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
from reelmatch.core.disambiguation.strategies.base import ambiguous, committed
from reelmatch.shared.constants import StrategyConfidence


@dataclass(frozen=True)
class PathStrategy:
    """Match on the folder path hint.

    One entry with the path commits at full confidence. Several entries with
    the same path is a data-integrity problem and is reported as ambiguous.
    """

    name: MatchMethod = MatchMethod.PATH

    def evaluate(
        self,
        request: MatchRequest,
        catalog: Sequence[CatalogEntry],
    ) -> StrategyOutcome:
        hint = request.folder_path_hint
        if not hint:
            return DECLINED

        hits = [entry for entry in catalog if entry.folder_path == hint]
        if not hits:
            return DECLINED

        if len(hits) == 1:
            return committed(request, self.name, hits[0], StrategyConfidence.PATH)

        return ambiguous(
            request,
            self.name,
            AmbiguityReason.PATH_CONFLICT,
            StrategyConfidence.PATH_CONFLICT,
        )
