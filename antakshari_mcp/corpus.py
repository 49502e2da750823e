"""Static verse corpus: loading, next-letter derivation, and lookups."""

import json
import logging
import random
import re
from collections import Counter
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from antakshari_mcp.config import corpus_path
from antakshari_mcp.fuzzy import first_char, normalize_verse

logger = logging.getLogger(__name__)

# A verse ends at its first double danda; anything after it is a citation
_VERSE_END_RE = re.compile(r"॥|\|\|")

# Sign that looks like a letter but never carries a sound of its own
_AVAGRAHA = "ऽ"

# Shared prefix length that identifies the same verse for audio lookup
_AUDIO_PREFIX_LEN = 50


def derive_next_char(text: str, strip_citation: bool = True) -> str:
    """Letter a continuation verse must start with.

    Takes the last letter of the verse, skipping trailing punctuation,
    digits, vowel signs, anusvara, visarga, and virama. A final "म्" or
    "मि" therefore yields "म"; a verse ending in an independent vowel
    yields that vowel.

    With strip_citation, text from the first double danda onward is
    ignored, so "... ददर्श॥ मेघदूतम् २॥" yields "श".

    Returns "" when the text holds no letter at all.
    """
    if strip_citation:
        head = _VERSE_END_RE.split(text, maxsplit=1)[0]
        if head.strip():
            text = head

    for ch in reversed(text):
        if ch.isalpha() and ch != _AVAGRAHA:
            return ch
    return ""


@dataclass(frozen=True)
class Verse:
    """A known verse. start_char is derived from the text."""

    text: str
    next_char: str
    translation: str = ""
    audio_url: str | None = None
    start_char: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "start_char", first_char(self.text))

    @property
    def key(self) -> str:
        """Normalized text used for repeat detection."""
        return normalize_verse(self.text)

    @classmethod
    def from_record(cls, record: dict) -> "Verse":
        """Build a Verse from a corpus record {"text", "nextChar", ...}.

        nextChar is derived from the text when the record omits it.
        Raises ValueError for records with no text or no derivable nextChar.
        """
        text = record.get("text") or ""
        if not isinstance(text, str) or not text.strip():
            raise ValueError(f"Verse record has no text: {record!r}")
        text = text.strip()

        next_char = record.get("nextChar") or derive_next_char(text)
        if not isinstance(next_char, str):
            raise ValueError(f"nextChar must be a string: {next_char!r}")
        next_char = next_char.strip()
        if not next_char:
            raise ValueError(f"Cannot determine nextChar for verse: {text[:40]!r}")

        return cls(
            text=text,
            next_char=next_char,
            translation=record.get("translation") or "",
            audio_url=record.get("audioUrl"),
        )


OPENING_VERSES = [
    Verse(
        text="धर्मक्षेत्रे कुरुक्षेत्रे समवेता युयुत्सवः ।\nमामकाः पाण्डवाश्चैव किमकुर्वत सञ्जय ॥",
        next_char="य",
    ),
    Verse(
        text="वक्रतुण्ड महाकाय सूर्यकोटिसमप्रभ ।\nनिर्विघ्नं कुरु मे देव सर्वकार्येषु सर्वदा ॥",
        next_char="द",
    ),
    Verse(
        text="गुरुर्ब्रह्मा गुरुर्विष्णुः गुरुर्देवो महेश्वरः ।\nगुरुः साक्षात् परब्रह्म तस्मै श्रीगुरवे नमः ॥",
        next_char="म",
    ),
]


class CorpusIndex:
    """Read-only verse collection indexed by starting letter."""

    def __init__(self, verses: list[Verse]):
        self._verses = list(verses)
        self._by_start: dict[str, list[Verse]] = {}
        for verse in self._verses:
            self._by_start.setdefault(verse.start_char, []).append(verse)

    def __len__(self) -> int:
        return len(self._verses)

    def __iter__(self):
        return iter(self._verses)

    def find_by_start_char(self, char: str) -> list[Verse]:
        """All verses starting with char (possibly empty)."""
        return list(self._by_start.get(char, []))

    def random_starting_with(
        self,
        char: str,
        exclude: set[str] | frozenset[str] = frozenset(),
        rng: random.Random | None = None,
    ) -> Verse | None:
        """Uniform random verse starting with char whose key is not in exclude."""
        candidates = [v for v in self._by_start.get(char, []) if v.key not in exclude]
        if not candidates:
            return None
        return (rng or random).choice(candidates)

    def stats(self) -> dict[str, int]:
        """Number of verses per starting letter."""
        return dict(Counter(v.start_char for v in self._verses))

    def audio_url_for(self, text: str) -> str | None:
        """Find a recitation URL for a verse text.

        Tries an exact text match, then the same first pada, then a shared
        50-character prefix in either direction.
        """
        text = text.strip()
        if not text:
            return None

        with_audio = [v for v in self._verses if v.audio_url]
        for verse in with_audio:
            if verse.text == text:
                return verse.audio_url

        first_pada = _first_pada(text)
        for verse in with_audio:
            if (
                _first_pada(verse.text) == first_pada
                or text.startswith(verse.text[:_AUDIO_PREFIX_LEN])
                or verse.text.startswith(text[:_AUDIO_PREFIX_LEN])
            ):
                return verse.audio_url
        return None


def _first_pada(text: str) -> str:
    return text.split("\n")[0].split("।")[0].strip()


def load_corpus(path: str | Path | None = None) -> CorpusIndex:
    """Load a corpus JSON file: a list of {"text", "nextChar", ...} records."""
    path = Path(path) if path else corpus_path()
    with open(path, encoding="utf-8") as f:
        records = json.load(f)
    if not isinstance(records, list):
        raise ValueError(f"Corpus file {path} must contain a JSON list")

    verses = [Verse.from_record(r) for r in records]
    corpus = CorpusIndex(verses)

    dead_ends = sorted({v.next_char for v in verses} - set(corpus.stats()))
    if dead_ends:
        logger.info("Corpus has no verses starting with: %s", " ".join(dead_ends))
    logger.info("Loaded %d verses from %s", len(corpus), path)
    return corpus


@lru_cache(maxsize=1)
def default_corpus() -> CorpusIndex:
    """Process-wide corpus, loaded on first use."""
    return load_corpus()
