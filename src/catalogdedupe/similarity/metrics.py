"""String similarity metrics for normalized titles and authors.

This module provides pure, deterministic functions comparing two
normalized strings. Every metric returns a value in [0, 1] and treats
degenerate input (an empty string on either side) as no similarity
rather than raising.

Edit distance and Jaro/Jaro-Winkler are computed with ``rapidfuzz``;
n-gram and phonetic agreement are computed here.
"""

from rapidfuzz import distance

from catalogdedupe.similarity.phonetic import phonetic_keys

METRIC_EDIT_RATIO = "edit_ratio"
METRIC_JARO_WINKLER = "jaro_winkler"
METRIC_NGRAM = "ngram"
METRIC_PHONETIC = "phonetic"

# Ordered for deterministic iteration and serialization
METRIC_NAMES: tuple[str, ...] = (
    METRIC_EDIT_RATIO,
    METRIC_JARO_WINKLER,
    METRIC_NGRAM,
    METRIC_PHONETIC,
)

JW_PREFIX_SCALE = 0.1
NGRAM_SIZES = (2, 3)


def levenshtein_distance(a: str, b: str) -> int:
    """Minimum number of single-character edits turning *a* into *b*.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    int
        Edit distance (insertions, deletions, substitutions).
    """
    return int(distance.Levenshtein.distance(a, b))


def edit_ratio(a: str, b: str) -> float:
    """Edit-distance ratio ``1 - levenshtein(a, b) / max(len(a), len(b))``.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    float
        1.0 for identical non-empty strings, 0.0 if either side is empty.
    """
    if not a or not b:
        return 0.0
    return float(distance.Levenshtein.normalized_similarity(a, b))


def jaro_similarity(a: str, b: str) -> float:
    """Jaro similarity based on matching characters and transpositions.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.

    Returns
    -------
    float
        Jaro similarity (0.0-1.0).
    """
    if not a or not b:
        return 0.0

    # Greedy matching depends on argument order; fix it
    if b < a:
        a, b = b, a
    return float(distance.Jaro.similarity(a, b))


def jaro_winkler_similarity(a: str, b: str, prefix_scale: float = JW_PREFIX_SCALE) -> float:
    """Jaro similarity boosted by the length of the common prefix.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.
    prefix_scale : float, optional
        Boost per shared prefix character (at most four), by default 0.1.

    Returns
    -------
    float
        Jaro-Winkler similarity (0.0-1.0).

    Notes
    -----
    Truncated or abbreviated titles share prefixes more often than
    suffixes, which is what the prefix boost rewards. As in Winkler's
    definition, the boost only applies once the Jaro score exceeds 0.7.
    """
    if not a or not b:
        return 0.0

    if b < a:
        a, b = b, a
    return float(distance.JaroWinkler.similarity(a, b, prefix_weight=prefix_scale))


def char_ngrams(text: str, n: int) -> set[str]:
    """Set of character n-grams of *text* (empty if shorter than *n*)."""
    return {text[i : i + n] for i in range(len(text) - n + 1)}


def ngram_jaccard(a: str, b: str, n: int) -> float:
    """Jaccard similarity of the character n-gram sets of *a* and *b*.

    Parameters
    ----------
    a : str
        First string.
    b : str
        Second string.
    n : int
        Gram length.

    Returns
    -------
    float
        |A ∩ B| / |A ∪ B| (0.0-1.0).

    Notes
    -----
    Strings too short to yield any n-gram compare as 1.0 when equal and
    0.0 otherwise.
    """
    if not a or not b:
        return 0.0

    grams_a = char_ngrams(a, n)
    grams_b = char_ngrams(b, n)
    if not grams_a or not grams_b:
        return 1.0 if a == b else 0.0

    return len(grams_a & grams_b) / len(grams_a | grams_b)


def ngram_similarity(a: str, b: str) -> float:
    """Mean of the 2-gram and 3-gram Jaccard similarities."""
    return sum(ngram_jaccard(a, b, n) for n in NGRAM_SIZES) / len(NGRAM_SIZES)


def phonetic_agreement(a: str, b: str) -> float:
    """Agreement of the Soundex keys of the first two significant words.

    Parameters
    ----------
    a : str
        First normalized title.
    b : str
        Second normalized title.

    Returns
    -------
    float
        1.0 if every compared position matches, 0.5 if one of two does,
        0.0 otherwise.

    Notes
    -----
    Positions compared = the longer key list (at most two), so two
    identical one-word titles agree fully.
    """
    keys_a = phonetic_keys(a)
    keys_b = phonetic_keys(b)
    if not keys_a or not keys_b:
        return 0.0

    positions = max(len(keys_a), len(keys_b))
    agreeing = sum(1 for x, y in zip(keys_a, keys_b, strict=False) if x == y)
    return agreeing / positions


def compute_metrics(a: str, b: str) -> dict[str, float]:
    """Compute every similarity metric for a pair of normalized strings.

    All metrics are computed even when one is saturated, so disagreement
    between them stays auditable.

    Parameters
    ----------
    a : str
        First normalized string.
    b : str
        Second normalized string.

    Returns
    -------
    dict[str, float]
        Metric name → score, in METRIC_NAMES order.
    """
    return {
        METRIC_EDIT_RATIO: edit_ratio(a, b),
        METRIC_JARO_WINKLER: jaro_winkler_similarity(a, b),
        METRIC_NGRAM: ngram_similarity(a, b),
        METRIC_PHONETIC: phonetic_agreement(a, b),
    }
