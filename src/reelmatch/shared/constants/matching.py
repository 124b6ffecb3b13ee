"""
Disambiguation Constants

This module contains the confidence levels assigned by each matching
strategy and the default tuning values for fuzzy title comparison.
"""

from typing import ClassVar


class StrategyConfidence:
    """Confidence assigned by each strategy outcome."""

    # Committed matches
    PATH = 1.0  # Exact folder path
    EXTERNAL_ID = 1.0  # Exact external identifier
    TITLE_YEAR = 0.9  # Normalized title and year both equal
    TITLE_ONLY = 0.7  # Normalized title equal, year ignored

    # Ambiguous outcomes
    PATH_CONFLICT = 0.5  # Several entries share one folder path
    TITLE_YEAR_MULTIPLE = 0.3  # Title and year match several entries
    YEAR_MISMATCH = 0.4  # Title matches several entries, declared year matches none
    TITLE_MULTIPLE = 0.3  # Title matches several entries, no year declared

    NONE = 0.0


class FuzzyMatchingDefaults:
    """Default tuning for the fuzzy title strategy."""

    SIMILARITY_THRESHOLD = 0.8  # Minimum normalized similarity to be a candidate
    MIN_MARGIN = 0.1  # Required lead over the runner-up to commit
    MARGIN_PRECISION = 6  # Decimal places used when comparing margins


class ValidationConstants:
    """Validation constants for disambiguation domain models."""

    MIN_CONFIDENCE_SCORE = 0.0
    MAX_CONFIDENCE_SCORE = 1.0


class TitleNormalization:
    """Patterns used by title normalization."""

    TRAILING_YEAR_PATTERN = r"\s*\(\d{4}\)\s*$"
    LEADING_ARTICLE_PATTERN = r"^the\s+"
    PUNCTUATION_PATTERN = r"[^\w\s]"
    WHITESPACE_PATTERN = r"\s+"
    UNICODE_FORM = "NFKC"


class RequestFieldAliases:
    """Accepted keys when building a MatchRequest from a mapping."""

    ID: ClassVar[tuple[str, ...]] = ("id", "request_id", "requestId")
    TITLE: ClassVar[tuple[str, ...]] = ("title",)
    YEAR: ClassVar[tuple[str, ...]] = ("year",)
    EXTERNAL_ID: ClassVar[tuple[str, ...]] = ("external_id", "externalId", "imdb_id", "imdbId")
    FOLDER_PATH_HINT: ClassVar[tuple[str, ...]] = (
        "folder_path_hint",
        "folderPathHint",
        "folder_path",
        "folderPath",
    )
