"""Disambiguation Domain Models.

This module defines immutable domain models for the disambiguation engine:
catalog snapshot rows, match requests, match results and the tagged
outcome returned by each strategy. Frozen dataclasses are used for
immutability, so a snapshot can be shared between worker threads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Any, Union

from reelmatch.shared.constants import RequestFieldAliases, ValidationConstants


class MatchMethod(str, Enum):
    """Strategy that produced a result."""

    PATH = "path"
    EXTERNAL_ID = "externalId"
    TITLE_YEAR = "titleYear"
    TITLE_ONLY = "titleOnly"
    FUZZY = "fuzzy"
    NONE = "none"


class AmbiguityReason(str, Enum):
    """Why a strategy found candidates but could not pick one."""

    PATH_CONFLICT = "path_conflict"
    TITLE_YEAR_MULTIPLE = "title_year_multiple"
    YEAR_MISMATCH = "year_mismatch"
    TITLE_FUZZY = "title_fuzzy"

    @property
    def description(self) -> str:
        """Human readable explanation."""
        return _REASON_DESCRIPTIONS[self]


_REASON_DESCRIPTIONS = {
    AmbiguityReason.PATH_CONFLICT: "multiple entries share the same folder path",
    AmbiguityReason.TITLE_YEAR_MULTIPLE: "year and title both match multiple entries",
    AmbiguityReason.YEAR_MISMATCH: "title matched but the declared year did not",
    AmbiguityReason.TITLE_FUZZY: "too many similar titles to pick one",
}


@dataclass(frozen=True)
class CatalogEntry:
    """Read-only row of a catalog snapshot.

    Attributes:
        id: Stable primary key, unique within a snapshot
        folder_path: Filesystem location (may be empty)
        parsed_title: Title extracted from the folder or file name
        parsed_year: Year extracted from the folder or file name
        external_id: External identifier such as an IMDb id
    """

    id: int
    folder_path: str = ""
    parsed_title: str | None = None
    parsed_year: int | None = None
    external_id: str | None = None

    @property
    def match_title(self) -> str | None:
        """Title used for comparison.

        Falls back to the folder name when no title was parsed.
        """
        if self.parsed_title and self.parsed_title.strip():
            return self.parsed_title
        if self.folder_path:
            name = PurePath(self.folder_path).name
            return name or None
        return None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CatalogEntry:
        """Build an entry from a mapping with snake_case or camelCase keys."""
        return cls(
            id=int(_first(data, ("id", "entry_id", "entryId"))),
            folder_path=_optional_str(_first(data, ("folder_path", "folderPath"))) or "",
            parsed_title=_optional_str(_first(data, ("parsed_title", "parsedTitle"))),
            parsed_year=_optional_int(_first(data, ("parsed_year", "parsedYear"))),
            external_id=_optional_str(_first(data, ("external_id", "externalId", "imdb_id", "imdbId"))),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "folder_path": self.folder_path,
            "parsed_title": self.parsed_title,
            "parsed_year": self.parsed_year,
            "external_id": self.external_id,
        }


@dataclass(frozen=True)
class MatchRequest:
    """Loosely identified reference that needs resolving.

    Attributes:
        id: Caller-supplied correlation key
        title: Title to resolve (required for any strategy to run)
        year: Optional release year
        external_id: Optional external identifier
        folder_path_hint: Optional folder path
    """

    id: str
    title: str
    year: int | None = None
    external_id: str | None = None
    folder_path_hint: str | None = None

    @property
    def is_valid(self) -> bool:
        """True when the request carries a non-empty title."""
        return bool(self.title and self.title.strip())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MatchRequest:
        """Build a request from a mapping.

        Accepts snake_case and camelCase keys, e.g. ``folderPathHint`` or
        ``imdbId``.

        Raises:
            ValueError: If the id is missing or the year is not an integer
        """
        request_id = _first(data, RequestFieldAliases.ID)
        if request_id is None:
            raise ValueError("Match request is missing an id")

        return cls(
            id=str(request_id),
            title=str(_first(data, RequestFieldAliases.TITLE) or ""),
            year=_optional_int(_first(data, RequestFieldAliases.YEAR)),
            external_id=_optional_str(_first(data, RequestFieldAliases.EXTERNAL_ID)),
            folder_path_hint=_optional_str(_first(data, RequestFieldAliases.FOLDER_PATH_HINT)),
        )


@dataclass(frozen=True)
class MatchedEntry:
    """The catalog entry a result committed to."""

    entry_id: int
    folder_path: str
    parsed_title: str | None
    parsed_year: int | None

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> MatchedEntry:
        return cls(
            entry_id=entry.id,
            folder_path=entry.folder_path,
            parsed_title=entry.parsed_title,
            parsed_year=entry.parsed_year,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            "folder_path": self.folder_path,
            "parsed_title": self.parsed_title,
            "parsed_year": self.parsed_year,
        }


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving one request.

    Attributes:
        request_id: Echo of MatchRequest.id
        match: Entry the strategy committed to, or a best guess
        confidence: Confidence in [0, 1]
        method: Strategy that produced the result
        ambiguous: Candidates were found but not uniquely determined
        ambiguous_reason: Why the result is ambiguous
        persist_error: Set by the queue runner when persisting failed

    Raises:
        ValueError: If confidence is out of range, or ambiguity and
            method are inconsistent
    """

    request_id: str
    confidence: float
    method: MatchMethod
    match: MatchedEntry | None = None
    ambiguous: bool = False
    ambiguous_reason: AmbiguityReason | None = None
    persist_error: str | None = None

    def __post_init__(self) -> None:
        if not (
            ValidationConstants.MIN_CONFIDENCE_SCORE
            <= self.confidence
            <= ValidationConstants.MAX_CONFIDENCE_SCORE
        ):
            msg = (
                f"Confidence {self.confidence} must be between "
                f"{ValidationConstants.MIN_CONFIDENCE_SCORE} and "
                f"{ValidationConstants.MAX_CONFIDENCE_SCORE}"
            )
            raise ValueError(msg)

        if self.ambiguous:
            if self.method is MatchMethod.NONE:
                raise ValueError("An ambiguous result must name the strategy that produced it")
            if self.ambiguous_reason is None:
                raise ValueError("An ambiguous result requires a reason")
        elif self.ambiguous_reason is not None:
            raise ValueError("ambiguous_reason is only valid on ambiguous results")

        if self.method is MatchMethod.NONE and (self.match is not None or self.confidence):
            raise ValueError("A 'none' result carries no match and zero confidence")

    @classmethod
    def no_match(cls, request_id: str) -> MatchResult:
        """Result used when every strategy declined."""
        return cls(request_id=request_id, confidence=0.0, method=MatchMethod.NONE)

    @property
    def persisted(self) -> bool:
        return self.persist_error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "request_id": self.request_id,
            "match": self.match.to_dict() if self.match else None,
            "confidence": self.confidence,
            "method": self.method.value,
            "ambiguous": self.ambiguous,
            "ambiguous_reason": self.ambiguous_reason.value if self.ambiguous_reason else None,
        }
        if self.persist_error is not None:
            data["persist_error"] = self.persist_error
        return data


@dataclass(frozen=True)
class Matched:
    """Strategy outcome carrying a result."""

    result: MatchResult


@dataclass(frozen=True)
class Declined:
    """Strategy outcome meaning "try the next strategy"."""


DECLINED = Declined()

StrategyOutcome = Union[Matched, Declined]


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate counts for one batch."""

    batch_id: str
    total: int
    ambiguous: int
    persist_failures: int = 0
    cancelled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "total": self.total,
            "ambiguous": self.ambiguous,
            "persist_failures": self.persist_failures,
            "cancelled": self.cancelled,
        }


def _first(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _optional_int(value: Any) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid year: {value!r}")
    return int(value)
