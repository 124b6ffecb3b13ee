"""Tests for title normalization and similarity."""

from __future__ import annotations

import pytest

from reelmatch.core.disambiguation.normalization import normalize_title, title_similarity


class TestNormalizeTitle:
    """Test cases for normalize_title."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Inception", "inception"),
            ("  The Matrix  ", "matrix"),
            ("Halloween (2018)", "halloween"),
            ("Spider-Man: No Way Home", "spiderman no way home"),
            ("THE   LORD of the Rings", "lord of the rings"),
            ("Ｉｎｃｅｐｔｉｏｎ", "inception"),
            ("Amélie", "amélie"),
        ],
    )
    def test_normalization_steps(self, raw: str, expected: str) -> None:
        assert normalize_title(raw) == expected

    def test_article_only_kept_at_start(self) -> None:
        assert normalize_title("Enter the Dragon") == "enter the dragon"

    @pytest.mark.parametrize("raw", ["", "   ", "!!!"])
    def test_blank_titles_normalize_to_empty(self, raw: str) -> None:
        assert normalize_title(raw) == ""


class TestTitleSimilarity:
    """Test cases for title_similarity."""

    def test_identical_after_normalization(self) -> None:
        assert title_similarity("The Matrix", "matrix") == 1.0

    def test_empty_title_scores_zero(self) -> None:
        assert title_similarity("", "Heat") == 0.0

    def test_similar_titles_score_high(self) -> None:
        # Given / When
        score = title_similarity("Incepton", "Inception")

        # Then
        assert 0.8 <= score < 1.0

    def test_unrelated_titles_score_low(self) -> None:
        assert title_similarity("Heat", "Inception") < 0.5

    def test_similarity_is_symmetric(self) -> None:
        assert title_similarity("Halloween", "Haloween") == title_similarity("Haloween", "Halloween")
