"""Soundex phonetic encoding.

Keys are coarse sound-alike codes used for bucketing and as a weak
similarity signal; they never decide a match on their own.
"""

from catalogdedupe.utils.text import significant_words

SOUNDEX_LENGTH = 4

_SOUNDEX_CODES: dict[str, str] = {
    **dict.fromkeys("bfpv", "1"),
    **dict.fromkeys("cgjkqsxz", "2"),
    **dict.fromkeys("dt", "3"),
    "l": "4",
    **dict.fromkeys("mn", "5"),
    "r": "6",
}


def soundex(word: str) -> str:
    """Encode a word with American Soundex.

    Parameters
    ----------
    word : str
        Folded word; non ASCII letters are ignored.

    Returns
    -------
    str
        Four-character code (e.g., 'R163'), or '' if the word has no letters.

    Notes
    -----
    'h' and 'w' do not separate consonants with the same code; vowels do.
    """
    letters = [c for c in word.lower() if "a" <= c <= "z"]
    if not letters:
        return ""

    first = letters[0]
    code = [first.upper()]
    last = _SOUNDEX_CODES.get(first, "")

    for char in letters[1:]:
        if char in "hw":
            continue
        digit = _SOUNDEX_CODES.get(char, "")
        if digit and digit != last:
            code.append(digit)
            if len(code) == SOUNDEX_LENGTH:
                break
        last = digit

    return "".join(code).ljust(SOUNDEX_LENGTH, "0")


def word_key(word: str) -> str:
    """Soundex of a word, or the word itself prefixed with '#' if it has no letters."""
    key = soundex(word)
    return key if key else f"#{word}"


def phonetic_keys(title: str, limit: int = 2) -> list[str]:
    """Phonetic keys of the first *limit* significant words of a cleaned title."""
    return [word_key(w) for w in significant_words(title)[:limit]]


def phonetic_key(title: str) -> str:
    """Phonetic key of the first significant word, '' for an empty title."""
    keys = phonetic_keys(title, limit=1)
    return keys[0] if keys else ""
