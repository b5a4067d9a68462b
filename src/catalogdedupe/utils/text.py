"""Text folding utilities shared by normalization and similarity.

All functions are pure, deterministic and locale-independent.
"""

import re
import unicodedata

__all__ = [
    "STOPWORDS",
    "strip_accents",
    "fold_text",
    "clean_text",
    "significant_words",
]

PUNCT_RE = re.compile(r"[^\w\s]+")
UNDERSCORE_RE = re.compile(r"_+")

# Words skipped when looking for the first significant title word
STOPWORDS: frozenset[str] = frozenset(
    {
        "the",
        "a",
        "an",
        "of",
        "and",
        "in",
        "on",
        "to",
        "for",
        "with",
        "la",
        "le",
        "el",
        "der",
        "die",
        "das",
    }
)


def strip_accents(text: str) -> str:
    """Remove diacritical marks for cross-locale matching.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def fold_text(text: str) -> str:
    """Apply NFKC, casefold and accent stripping, keeping punctuation.

    Parameters
    ----------
    text : str
        Raw text.

    Returns
    -------
    str
        Folded text with whitespace collapsed.
    """
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", text)
    text = text.casefold()
    text = strip_accents(text)
    return " ".join(text.split())


def clean_text(text: str) -> str:
    """Replace punctuation with spaces and collapse whitespace.

    Parameters
    ----------
    text : str
        Folded text.

    Returns
    -------
    str
        Text containing only word characters separated by single spaces.
    """
    if not text:
        return ""
    text = PUNCT_RE.sub(" ", text)
    text = UNDERSCORE_RE.sub(" ", text)
    return " ".join(text.split())


def significant_words(text: str) -> list[str]:
    """Return the words of a cleaned title that are not stopwords.

    Falls back to all words when every word is a stopword.

    Parameters
    ----------
    text : str
        Cleaned title.

    Returns
    -------
    list[str]
        Significant words in order.
    """
    words = text.split()
    significant = [w for w in words if w not in STOPWORDS]
    return significant if significant else words
