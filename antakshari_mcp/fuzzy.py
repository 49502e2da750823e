"""Devanagari verse normalization and edit-distance similarity."""

import re

from rapidfuzz.distance import Levenshtein

# Danda, double danda, ASCII pipes, abbreviation sign, citation dots,
# Devanagari and ASCII digits
_STRIP_RE = re.compile(r"[।॥|॰.०-९0-9]")
_SPACE_RE = re.compile(r"\s+")


def normalize_verse(text: str) -> str:
    """Normalize verse text for comparison.

    Steps: strip verse punctuation and numbering → collapse spaces → trim → lowercase.
    Idempotent, so normalized text can safely be normalized again.
    """
    text = _STRIP_RE.sub("", text)
    text = _SPACE_RE.sub(" ", text).strip()
    return text.lower()


def tokenize(text: str, min_length: int = 1) -> list[str]:
    """Split normalized text into words, dropping tokens shorter than min_length."""
    return [w for w in normalize_verse(text).split(" ") if len(w) >= max(1, min_length)]


def first_char(text: str) -> str:
    """First character of the trimmed text, or "" for blank input."""
    text = text.strip()
    return text[0] if text else ""


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1].

    Score = 1 - levenshtein(a, b) / max(len(a), len(b))
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = Levenshtein.distance(a, b)
    return 1.0 - distance / max(len(a), len(b))
