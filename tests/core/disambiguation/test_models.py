"""Tests for disambiguation domain models."""

from __future__ import annotations

import dataclasses

import pytest

from reelmatch.core.disambiguation.engine import DisambiguationEngine
from reelmatch.core.disambiguation.models import (
    DECLINED,
    AmbiguityReason,
    BatchSummary,
    CatalogEntry,
    Declined,
    MatchedEntry,
    MatchMethod,
    MatchRequest,
    MatchResult,
)


class TestCatalogEntry:
    """Test cases for CatalogEntry."""

    def test_match_title_prefers_parsed_title(self) -> None:
        # Given
        entry = CatalogEntry(id=1, folder_path="/movies/Alien (1979)", parsed_title="Alien")

        # When & Then
        assert entry.match_title == "Alien"

    def test_match_title_falls_back_to_folder_name(self) -> None:
        # Given
        entry = CatalogEntry(id=1, folder_path="/movies/Alien (1979)")

        # When & Then
        assert entry.match_title == "Alien (1979)"

    def test_match_title_none_without_title_or_path(self) -> None:
        assert CatalogEntry(id=1).match_title is None

    def test_from_dict_accepts_camel_case(self) -> None:
        # Given
        data = {
            "id": "7",
            "folderPath": "/movies/Heat (1995)",
            "parsedTitle": "Heat",
            "parsedYear": "1995",
            "imdbId": "tt0113277",
        }

        # When
        entry = CatalogEntry.from_dict(data)

        # Then
        assert entry == CatalogEntry(
            id=7,
            folder_path="/movies/Heat (1995)",
            parsed_title="Heat",
            parsed_year=1995,
            external_id="tt0113277",
        )

    def test_from_dict_converts_numeric_text_fields(self) -> None:
        # Given
        data = {"id": 9, "folderPath": 1984, "parsedTitle": 1984, "imdbId": 87803}

        # When
        entry = CatalogEntry.from_dict(data)

        # Then
        assert entry.folder_path == "1984"
        assert entry.parsed_title == "1984"
        assert entry.external_id == "87803"
        assert entry.match_title == "1984"

    def test_entries_are_frozen(self) -> None:
        entry = CatalogEntry(id=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.id = 2  # type: ignore[misc]


class TestMatchRequest:
    """Test cases for MatchRequest."""

    @pytest.mark.parametrize("title", ["", "   ", "\t"])
    def test_blank_title_is_invalid(self, title: str) -> None:
        assert not MatchRequest(id="r1", title=title).is_valid

    def test_from_dict_reads_aliases(self) -> None:
        # Given
        data = {"id": 3, "title": "Heat", "year": 1995, "externalId": "tt0113277", "folderPathHint": "/m/Heat"}

        # When
        request = MatchRequest.from_dict(data)

        # Then
        assert request.id == "3"
        assert request.year == 1995
        assert request.external_id == "tt0113277"
        assert request.folder_path_hint == "/m/Heat"

    def test_from_dict_converts_numeric_hints(self) -> None:
        request = MatchRequest.from_dict({"id": "r1", "title": "Inception", "imdbId": 1375666, "folderPathHint": 2010})

        assert request.external_id == "1375666"
        assert request.folder_path_hint == "2010"

    def test_numeric_external_ids_resolve(self) -> None:
        # Given
        catalog = [CatalogEntry.from_dict({"id": 1, "parsedTitle": "Inception", "imdbId": 1375666})]
        request = MatchRequest.from_dict({"id": "r1", "title": "Something Else", "imdbId": 1375666})

        # When
        result = DisambiguationEngine(catalog).resolve(request)

        # Then
        assert result.method is MatchMethod.EXTERNAL_ID
        assert result.match is not None
        assert result.match.entry_id == 1

    def test_from_dict_requires_id(self) -> None:
        with pytest.raises(ValueError, match="missing an id"):
            MatchRequest.from_dict({"title": "Heat"})

    def test_from_dict_rejects_non_numeric_year(self) -> None:
        with pytest.raises(ValueError):
            MatchRequest.from_dict({"id": "r1", "title": "Heat", "year": "nineteen"})


class TestMatchResult:
    """Test cases for MatchResult invariants."""

    def test_no_match_result(self) -> None:
        # When
        result = MatchResult.no_match("r1")

        # Then
        assert result.method is MatchMethod.NONE
        assert result.confidence == 0.0
        assert result.match is None
        assert result.ambiguous is False

    @pytest.mark.parametrize("confidence", [-0.1, 1.1])
    def test_confidence_out_of_range_raises(self, confidence: float) -> None:
        with pytest.raises(ValueError, match="Confidence"):
            MatchResult(request_id="r1", confidence=confidence, method=MatchMethod.FUZZY)

    def test_ambiguous_none_result_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="ambiguous"):
            MatchResult(
                request_id="r1",
                confidence=0.0,
                method=MatchMethod.NONE,
                ambiguous=True,
                ambiguous_reason=AmbiguityReason.TITLE_FUZZY,
            )

    def test_ambiguous_requires_reason(self) -> None:
        with pytest.raises(ValueError, match="reason"):
            MatchResult(request_id="r1", confidence=0.3, method=MatchMethod.TITLE_ONLY, ambiguous=True)

    def test_reason_without_ambiguity_is_rejected(self) -> None:
        with pytest.raises(ValueError, match="only valid"):
            MatchResult(
                request_id="r1",
                confidence=0.9,
                method=MatchMethod.TITLE_YEAR,
                ambiguous_reason=AmbiguityReason.TITLE_YEAR_MULTIPLE,
            )

    def test_to_dict(self) -> None:
        # Given
        entry = CatalogEntry(id=1, folder_path="/movies/Inception (2010)", parsed_title="Inception", parsed_year=2010)
        result = MatchResult(
            request_id="r1",
            confidence=0.9,
            method=MatchMethod.TITLE_YEAR,
            match=MatchedEntry.from_entry(entry),
        )

        # When
        data = result.to_dict()

        # Then
        assert data == {
            "request_id": "r1",
            "match": {
                "entry_id": 1,
                "folder_path": "/movies/Inception (2010)",
                "parsed_title": "Inception",
                "parsed_year": 2010,
            },
            "confidence": 0.9,
            "method": "titleYear",
            "ambiguous": False,
            "ambiguous_reason": None,
        }

    def test_persist_error_marks_result_not_persisted(self) -> None:
        # Given
        result = MatchResult.no_match("r1")

        # When
        failed = dataclasses.replace(result, persist_error="disk full")

        # Then
        assert result.persisted
        assert not failed.persisted
        assert failed.to_dict()["persist_error"] == "disk full"


def test_declined_is_a_singleton_value() -> None:
    assert DECLINED == Declined()


def test_ambiguity_reasons_have_descriptions() -> None:
    for reason in AmbiguityReason:
        assert reason.description


def test_batch_summary_to_dict() -> None:
    summary = BatchSummary(batch_id="b1", total=3, ambiguous=1)
    assert summary.to_dict() == {
        "batch_id": "b1",
        "total": 3,
        "ambiguous": 1,
        "persist_failures": 0,
        "cancelled": False,
    }
