"""Similarity metrics between normalized strings.

Pure functions only: edit-distance ratio, Jaro-Winkler, character n-gram
overlap and Soundex phonetic agreement.
"""

from catalogdedupe.similarity.metrics import (
    METRIC_EDIT_RATIO,
    METRIC_JARO_WINKLER,
    METRIC_NAMES,
    METRIC_NGRAM,
    METRIC_PHONETIC,
    char_ngrams,
    compute_metrics,
    edit_ratio,
    jaro_similarity,
    jaro_winkler_similarity,
    levenshtein_distance,
    ngram_jaccard,
    ngram_similarity,
    phonetic_agreement,
)
from catalogdedupe.similarity.phonetic import phonetic_key, phonetic_keys, soundex

__all__ = [
    # Metric names
    "METRIC_EDIT_RATIO",
    "METRIC_JARO_WINKLER",
    "METRIC_NGRAM",
    "METRIC_PHONETIC",
    "METRIC_NAMES",
    # Metrics
    "levenshtein_distance",
    "edit_ratio",
    "jaro_similarity",
    "jaro_winkler_similarity",
    "char_ngrams",
    "ngram_jaccard",
    "ngram_similarity",
    "phonetic_agreement",
    "compute_metrics",
    # Phonetic encoding
    "soundex",
    "phonetic_key",
    "phonetic_keys",
]
