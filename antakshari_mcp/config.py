"""Runtime settings: environment lookups and matcher thresholds."""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_CORPUS_PATH = Path(__file__).parent / "data" / "verses.json"
DEFAULT_ORACLE_TIMEOUT = 60.0
DEFAULT_POINTS_PER_TURN = 10

# Number of trailing transcript entries sent to the remote oracle
HISTORY_WINDOW = 6

RULES = [
    "Only authentic Sanskrit shlokas are valid.",
    "Your shloka must start with the letter shown as the challenge letter.",
    "The challenge letter is derived from the last sound (akshara) of the previous shloka.",
    "A shloka that has already been recited in this game cannot be used again.",
    "Provide the shloka in Devanagari or in phonetic Roman script.",
]


def corpus_path() -> Path:
    return Path(os.environ.get("ANTAKSHARI_CORPUS_PATH", DEFAULT_CORPUS_PATH))


def oracle_url() -> str | None:
    """Remote oracle endpoint, or None when remote fallback is disabled."""
    return os.environ.get("ANTAKSHARI_ORACLE_URL") or None


def oracle_api_key() -> str:
    return os.environ.get("ANTAKSHARI_ORACLE_API_KEY", "")


def oracle_timeout() -> float:
    return float(os.environ.get("ANTAKSHARI_ORACLE_TIMEOUT", DEFAULT_ORACLE_TIMEOUT))


def points_per_turn() -> int:
    return int(os.environ.get("ANTAKSHARI_POINTS_PER_TURN", DEFAULT_POINTS_PER_TURN))


@dataclass(frozen=True)
class MatcherConfig:
    """Thresholds for resolving free-form input to a corpus verse."""

    # First user word vs first verse word; below this the candidate is skipped
    first_word_threshold: float = 0.7
    # Per-word similarity needed for a user word to count as matched
    word_threshold: float = 0.75
    # Inputs with fewer words are never matched locally
    min_words: int = 2
    min_match_fraction: float = 0.5
    # Capped by the number of user words
    min_matched_words: int = 3
    # firstWordSimilarity + matchFraction must exceed this
    min_combined_score: float = 1.4
    # Use 2 for the stricter tokenizer that drops single-letter tokens
    min_token_length: int = 1
