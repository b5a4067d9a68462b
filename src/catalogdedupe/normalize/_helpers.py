"""Compiled regex patterns and small helpers for title normalization."""

import re

from catalogdedupe.utils.text import clean_text

LEADING_ARTICLE_RE = re.compile(r"^(?:the|a|an)\s+")
TRAILING_PAREN_RE = re.compile(r"\s*\([^()]*\)\s*$")
YEAR_RE = re.compile(r"(?<![\w#])(?:1[5-9]|20)\d{2}(?!\w)")
LAST_FIRST_RE = re.compile(r"^([^,]+),\s*([^,]+)$")

# Edition and noise markers removed from comparison titles
EDITION_NOISE_RES: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\d+\s*(?:st|nd|rd|th)\s+(?:edition|edn|ed)\b\.?"),
    re.compile(
        r"\b(?:first|second|third|fourth|fifth|sixth|seventh|eighth|ninth|tenth)"
        r"\s+(?:edition|edn|ed)\b\.?"
    ),
    re.compile(r"\bnew\s+edition\b"),
    re.compile(r"\b(?:revised|updated|expanded|abridged|unabridged)(?:\s+edition)?\b"),
    re.compile(r"\bedition\b"),
)


def remove_edition_noise(text: str) -> str:
    """Blank out edition markers and standalone years in folded text.

    A title made only of such tokens ("1984", "Revised Edition") keeps
    them, so it still has something to compare.
    """
    stripped = text
    for pattern in EDITION_NOISE_RES:
        stripped = pattern.sub(" ", stripped)
    without_years = YEAR_RE.sub(" ", stripped)

    for candidate in (without_years, stripped, text):
        if clean_text(candidate):
            return " ".join(candidate.split())
    return " ".join(text.split())


def strip_trailing_parenthetical(text: str) -> str:
    """Remove one trailing '(...)' group, e.g. a publisher imprint."""
    return TRAILING_PAREN_RE.sub("", text).strip()


def strip_leading_article(text: str) -> str:
    """Drop a leading 'the'/'a'/'an' if other words remain."""
    stripped = LEADING_ARTICLE_RE.sub("", text, count=1)
    return stripped if stripped else text
