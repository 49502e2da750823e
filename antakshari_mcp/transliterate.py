"""Phonetic Roman input → Devanagari.

Casual phonetic typing ("shloka", "moksha", "krishna") is first rewritten
into ITRANS by an ordered list of regex rules, then converted to Devanagari
with indic_transliteration's sanscript tables.

Rule order matters: a rule may re-match text produced by an earlier rule,
so PHONETIC_RULES is applied strictly top to bottom, one rule at a time.
Longer and more specific patterns come before shorter ones.
"""

import logging
import re

from indic_transliteration import sanscript

logger = logging.getLogger(__name__)

_DEVANAGARI_RE = re.compile(r"[\u0900-\u097F]")
_LATIN_RE = re.compile(r"[A-Za-z]")


def _rule(pattern: str, replacement: str) -> tuple[re.Pattern, str]:
    return re.compile(pattern), replacement


PHONETIC_RULES: list[tuple[re.Pattern, str]] = [
    # Aspirated sibilant and palatal digraphs
    _rule(r"shh", "Sh"),
    _rule(r"chh", "Ch"),
    # श्री, before the vocalic r rules can split it
    _rule(r"shri", "shrI"),
    # Vocalic r (ऋ) at word start, or before a consonant / end of text
    _rule(r"\bri", "RRi"),
    _rule(r"ri(?=[^aeiou]|$)", "RRi"),
    # Nasal before a velar or palatal stop
    _rule(r"n(?=[kg])", "~N"),
    _rule(r"n(?=[cj])", "~n"),
    # Anusvara
    _rule(r"m(?=[pbm])", "M"),
    _rule(r"(\w)m\b", r"\1M"),
    _rule(r"am(?=[^aeiou])", "aM"),
    _rule(r"um(?=[^aeiou])", "uM"),
    _rule(r"im(?=[^aeiou])", "iM"),
    # Visarga: word-final h after a vowel
    _rule(r"([aeiou])h\b", r"\1H"),
    # Long vowels, digraph spellings
    _rule(r"aa", "A"),
    _rule(r"ee", "I"),
    _rule(r"ii", "I"),
    _rule(r"oo", "U"),
    _rule(r"uu", "U"),
    # Nasal before a consonant with no homorganic stop
    _rule(r"(\w)n([^aeioughjkcdtpbmnrlvsy])", r"\1M\2"),
    # Conjuncts
    _rule(r"moksh", "mokSh"),
    _rule(r"ksh", "kSh"),
    _rule(r"gya", "j~na"),
    _rule(r"jna", "j~na"),
    _rule(r"jn", "j~n"),
]


def is_devanagari(text: str) -> bool:
    """True if text contains any character from the Devanagari block (U+0900–U+097F)."""
    return bool(_DEVANAGARI_RE.search(text))


def is_roman(text: str) -> bool:
    """True if text has Latin letters and no Devanagari."""
    return bool(_LATIN_RE.search(text)) and not is_devanagari(text)


def to_itrans(text: str, rules: list[tuple[re.Pattern, str]] = PHONETIC_RULES) -> str:
    """Rewrite casual phonetic input into ITRANS using the ordered rules."""
    text = text.lower()
    for pattern, replacement in rules:
        text = pattern.sub(replacement, text)
    return text


def transliterate(text: str) -> str:
    """Convert phonetic Roman text to Devanagari.

    Returns the input unchanged when it is blank, already Devanagari, not
    Roman script, or when conversion fails for any reason.
    """
    if not text or not text.strip():
        return text
    if is_devanagari(text) or not is_roman(text):
        return text

    try:
        itrans = to_itrans(text)
        devanagari = sanscript.transliterate(itrans, sanscript.ITRANS, sanscript.DEVANAGARI)
    except Exception as e:
        logger.warning("Transliteration failed for %r: %s", text, e)
        return text

    logger.debug("Transliterated %r → %r (itrans %r)", text, devanagari, itrans)
    return devanagari


def process_input(text: str) -> str:
    """Trim user input and return it in Devanagari."""
    trimmed = text.strip()
    if not trimmed or is_devanagari(trimmed):
        return trimmed
    return transliterate(trimmed)


def preview(text: str) -> dict:
    """Live preview for an input box.

    Returns {"original", "devanagari", "is_transliterated"}.
    """
    trimmed = text.strip()
    if not trimmed or is_devanagari(trimmed):
        return {"original": trimmed, "devanagari": trimmed, "is_transliterated": False}

    devanagari = transliterate(trimmed)
    return {
        "original": trimmed,
        "devanagari": devanagari,
        "is_transliterated": devanagari != trimmed,
    }
