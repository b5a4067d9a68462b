"""Common utility functions for catalogdedupe.

Text folding, hashing and timestamps shared across the package.
"""

from catalogdedupe.utils.hashing import (
    calculate_file_sha256,
    calculate_string_sha256,
    format_sha256,
)
from catalogdedupe.utils.text import (
    STOPWORDS,
    clean_text,
    fold_text,
    significant_words,
    strip_accents,
)
from catalogdedupe.utils.timestamps import get_iso_timestamp

__all__ = [
    "STOPWORDS",
    "calculate_file_sha256",
    "calculate_string_sha256",
    "clean_text",
    "fold_text",
    "format_sha256",
    "get_iso_timestamp",
    "significant_words",
    "strip_accents",
]
