"""Resolve free-form verse input to a corpus entry."""

import logging

from antakshari_mcp.config import MatcherConfig
from antakshari_mcp.corpus import CorpusIndex, Verse
from antakshari_mcp.fuzzy import first_char, similarity, tokenize

logger = logging.getLogger(__name__)


def score_candidate(
    user_words: list[str],
    verse: Verse,
    config: MatcherConfig = MatcherConfig(),
) -> float | None:
    """Combined score of user words against one verse, or None if it is no candidate.

    Score = first_word_similarity + match_fraction
    """
    verse_words = tokenize(verse.text, config.min_token_length)
    if not user_words or not verse_words:
        return None

    # First words must agree: this is a starting-letter game
    first_sim = similarity(user_words[0], verse_words[0])
    if first_sim <= config.first_word_threshold:
        return None

    match_count = 1
    for word in user_words[1:]:
        if any(similarity(word, vw) > config.word_threshold for vw in verse_words):
            match_count += 1

    match_fraction = match_count / len(user_words)
    if match_fraction < config.min_match_fraction:
        return None
    if match_count < min(config.min_matched_words, len(user_words)):
        return None
    return first_sim + match_fraction


def match_verse(
    user_input: str,
    required_char: str,
    corpus: CorpusIndex,
    config: MatcherConfig = MatcherConfig(),
) -> Verse | None:
    """Find the corpus verse the user is reciting.

    Input that does not start with required_char is rejected before any
    fuzzy work. Returns None when no candidate clears the combined score
    floor; the caller then falls back to the remote oracle.
    """
    if first_char(user_input) != required_char:
        return None

    user_words = tokenize(user_input, config.min_token_length)
    if len(user_words) < config.min_words:
        return None

    best: Verse | None = None
    best_score = 0.0
    for verse in corpus.find_by_start_char(required_char):
        score = score_candidate(user_words, verse, config)
        if score is None:
            continue
        logger.debug("Candidate %r scored %.3f", verse.text[:30], score)
        if score > best_score:
            best, best_score = verse, score

    if best is None or best_score <= config.min_combined_score:
        return None

    logger.info("Matched verse locally (score %.2f): %s", best_score, best.text[:40])
    return best
