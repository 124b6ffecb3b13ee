"""Disambiguation strategies.

Five pure comparison strategies, tried by the engine in priority order:
path, external identifier, title+year, title only, fuzzy title.
"""

from __future__ import annotations

from .base import MatchStrategy
from .external_id import ExternalIdStrategy
from .fuzzy import FuzzyTitleStrategy
from .path import PathStrategy
from .title import TitleOnlyStrategy, TitleYearStrategy

__all__ = [
    "ExternalIdStrategy",
    "FuzzyTitleStrategy",
    "MatchStrategy",
    "PathStrategy",
    "TitleOnlyStrategy",
    "TitleYearStrategy",
]
