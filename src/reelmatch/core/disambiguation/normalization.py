"""Title normalization and similarity for disambiguation.

Both request titles and catalog titles go through ``normalize_title`` before
any comparison, so strategies compare like with like:

1. Unicode NFKC normalization and case folding
2. Removal of a trailing "(YYYY)" year suffix and a leading "the"
3. Removal of punctuation
4. Whitespace collapsing and trimming
"""

from __future__ import annotations

import functools
import re
import unicodedata

from rapidfuzz.distance import Levenshtein

from reelmatch.shared.constants import TitleNormalization

_TRAILING_YEAR_PATTERN = re.compile(TitleNormalization.TRAILING_YEAR_PATTERN)
_LEADING_ARTICLE_PATTERN = re.compile(TitleNormalization.LEADING_ARTICLE_PATTERN)
_PUNCTUATION_PATTERN = re.compile(TitleNormalization.PUNCTUATION_PATTERN)
_WHITESPACE_PATTERN = re.compile(TitleNormalization.WHITESPACE_PATTERN)


@functools.lru_cache(maxsize=4096)
def normalize_title(title: str | None) -> str:
    """Normalize a title for comparison.

    Args:
        title: Raw title, may be None

    Returns:
        Normalized title, empty string when nothing is left

    Examples:
        >>> normalize_title("  The Lord of the Rings: The Two Towers (2002) ")
        'lord of the rings the two towers'
        >>> normalize_title("Spider-Man")
        'spiderman'
    """
    if not title:
        return ""

    text = unicodedata.normalize(TitleNormalization.UNICODE_FORM, title).casefold()
    text = _TRAILING_YEAR_PATTERN.sub("", text)
    text = _WHITESPACE_PATTERN.sub(" ", text).strip()
    text = _LEADING_ARTICLE_PATTERN.sub("", text)
    text = _PUNCTUATION_PATTERN.sub("", text)
    return _WHITESPACE_PATTERN.sub(" ", text).strip()


def title_similarity(left: str, right: str) -> float:
    """Return the normalized edit-distance similarity of two titles.

    Both inputs are normalized first. Identical titles score 1.0, and two
    empty titles score 0.0 since they carry no information.

    Args:
        left: First title
        right: Second title

    Returns:
        Similarity in [0.0, 1.0]
    """
    left_norm = normalize_title(left)
    right_norm = normalize_title(right)
    if not left_norm or not right_norm:
        return 0.0
    if left_norm == right_norm:
        return 1.0
    return float(Levenshtein.normalized_similarity(left_norm, right_norm))
