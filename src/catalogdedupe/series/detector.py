"""Volume/part marker extraction and the series guard.

Consecutive volumes of a series ("Mystery Series Book 1" / "Book 2") are
textually near-identical and are the main source of false positives in
title matching. The guard fires when two items carry different volume
numbers over near-identical base titles.
"""

import re

from catalogdedupe.models.records import NormalizedItem, SeriesToken
from catalogdedupe.similarity.metrics import edit_ratio

DEFAULT_BASE_THRESHOLD = 0.85

_NUMBER_WORDS: dict[str, int] = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
}

_ORDINAL_WORDS: dict[str, int] = {
    "first": 1,
    "second": 2,
    "third": 3,
    "fourth": 4,
    "fifth": 5,
    "sixth": 6,
    "seventh": 7,
    "eighth": 8,
    "ninth": 9,
    "tenth": 10,
}

_ROMAN_VALUES: dict[str, int] = {"i": 1, "v": 5, "x": 10, "l": 50, "c": 100}

_ROMAN_RE = re.compile(r"^c{0,3}(?:xc|xl|l?x{0,3})(?:ix|iv|v?i{0,3})$")

_NUM = r"\d{1,3}|[ivxlc]{1,7}|" + "|".join(_NUMBER_WORDS)
_ORD = "|".join(_ORDINAL_WORDS)

# (kind, pattern) in priority order; the first pattern yielding a valid
# number wins
SERIES_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("book", re.compile(rf"\b(?:book|bk)\b\.?\s*(?P<num>{_NUM})\b")),
    ("volume", re.compile(rf"\b(?:volume|vol)\b\.?\s*(?P<num>{_NUM})\b")),
    ("part", re.compile(rf"\b(?:part|pt)\b\.?\s*(?P<num>{_NUM})\b")),
    ("number", re.compile(r"#\s*(?P<num>\d{1,3})\b")),
    ("chapter", re.compile(rf"\b(?:chapter|ch)\b\.?\s*(?P<num>{_NUM})\b")),
    ("episode", re.compile(rf"\b(?:episode|ep)\b\.?\s*(?P<num>{_NUM})\b")),
    ("issue", re.compile(r"\bissue\b\.?\s*(?P<num>\d{1,3})\b")),
    # digits only: "no one", "number nine" are words, not markers
    ("number", re.compile(r"\b(?:number|no)\b\.?\s*(?P<num>\d{1,3})\b")),
    ("volume", re.compile(rf"\b(?P<num>{_ORD})\s+(?:volume|part|book|chapter)\b")),
    ("number", re.compile(r"\b(?P<num>\d{1,3})\s*(?:of|/)\s*\d{1,3}\b")),
    ("number", re.compile(r"^\s*(?P<num>\d{1,2})\s*[:\-]\s*(?=[^\W\d_])")),
    ("numeral", re.compile(r"\b(?P<num>[ivxlc]{2,7})\W*$")),
    # a lone i/v/x only after another word ("henry v", not "v")
    ("numeral", re.compile(r"(?<=[\w,:])\s+(?P<num>[ivx])\W*$")),
    ("numeral", re.compile(r"(?<![\d.,:/])\b(?P<num>\d{1,2})\W*$")),
)


def roman_to_int(text: str) -> int | None:
    """Convert a lowercase roman numeral to an integer.

    Parameters
    ----------
    text : str
        Candidate numeral (e.g., 'xiv').

    Returns
    -------
    int | None
        Value, or None if *text* is not a well-formed numeral below 400.
    """
    if not text or not _ROMAN_RE.match(text):
        return None

    total = 0
    for i, char in enumerate(text):
        value = _ROMAN_VALUES[char]
        if i + 1 < len(text) and _ROMAN_VALUES[text[i + 1]] > value:
            total -= value
        else:
            total += value
    return total


def parse_volume_number(text: str) -> int | None:
    """Parse digits, roman numerals, number words or ordinal words.

    Parameters
    ----------
    text : str
        Folded marker number.

    Returns
    -------
    int | None
        Volume number, or None if unrecognized.
    """
    if text.isdigit():
        return int(text)
    if text in _NUMBER_WORDS:
        return _NUMBER_WORDS[text]
    if text in _ORDINAL_WORDS:
        return _ORDINAL_WORDS[text]
    return roman_to_int(text)


def extract_series_token(text: str) -> tuple[SeriesToken | None, tuple[int, int] | None]:
    """Find the volume/part marker in a folded title.

    Parameters
    ----------
    text : str
        Folded title (lowercase, punctuation preserved).

    Returns
    -------
    tuple[SeriesToken | None, tuple[int, int] | None]
        The token and the (start, end) span of the whole marker in *text*,
        or (None, None) if no marker is recognized.
    """
    if not text:
        return None, None

    for kind, pattern in SERIES_PATTERNS:
        for match in pattern.finditer(text):
            number = parse_volume_number(match.group("num"))
            if number is None:
                continue
            marker = match.group(0).strip()
            token = SeriesToken(kind=kind, number=number, text=marker)
            return token, (match.start(), match.end())

    return None, None


def detect_series_conflict(
    item_a: NormalizedItem,
    item_b: NormalizedItem,
    base_threshold: float = DEFAULT_BASE_THRESHOLD,
) -> bool:
    """Decide whether two items are different volumes of one series.

    Parameters
    ----------
    item_a : NormalizedItem
        First item.
    item_b : NormalizedItem
        Second item.
    base_threshold : float, optional
        Minimum edit ratio between the series bases, by default 0.85.

    Returns
    -------
    bool
        True only if both items carry a volume marker, the volume numbers
        differ, and the base titles are near-identical.
    """
    token_a = item_a.series_token
    token_b = item_b.series_token
    if token_a is None or token_b is None:
        return False

    if token_a.number == token_b.number:
        return False

    return edit_ratio(item_a.series_base, item_b.series_base) >= base_threshold
