"""Normalization of catalog items into comparable form."""

from catalogdedupe.normalize.normalizer import (
    TitleResult,
    normalize_author,
    normalize_category,
    normalize_item,
    normalize_title,
)

__all__ = [
    "TitleResult",
    "normalize_item",
    "normalize_title",
    "normalize_author",
    "normalize_category",
]
