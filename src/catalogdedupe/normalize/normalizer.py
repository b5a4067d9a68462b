"""Deterministic normalization of catalog items.

This module turns a raw CatalogItem into the NormalizedItem consumed by
bucketing and scoring. All functions are pure, deterministic, and
locale-independent.
"""

from dataclasses import dataclass

from catalogdedupe.models.records import CatalogItem, NormalizedItem, SeriesToken
from catalogdedupe.series.detector import extract_series_token
from catalogdedupe.similarity.phonetic import phonetic_key
from catalogdedupe.utils.text import clean_text, fold_text, significant_words

from ._helpers import (
    LAST_FIRST_RE,
    TRAILING_PAREN_RE,
    remove_edition_noise,
    strip_leading_article,
    strip_trailing_parenthetical,
)


@dataclass(frozen=True)
class TitleResult:
    """Intermediate result of title normalization.

    Attributes
    ----------
    normalized : str
        Comparison title, volume marker included.
    series_base : str
        Comparison title with the volume marker removed.
    series_token : SeriesToken | None
        Recognized volume marker.
    """

    normalized: str
    series_base: str
    series_token: SeriesToken | None


def _finish(text: str) -> str:
    """Strip punctuation, collapse whitespace and drop a leading article."""
    return strip_leading_article(clean_text(text))


def _strip_paren_outside_marker(text: str, span: tuple[int, int] | None) -> str:
    """Remove a trailing parenthetical unless it holds the volume marker."""
    match = TRAILING_PAREN_RE.search(text)
    if match is None:
        return text
    if span is not None and span[0] >= match.start() and span[1] <= match.end():
        return text
    return text[: match.start()].strip() or text


def normalize_title(title: str | None) -> TitleResult:
    """Normalize a raw title and split off its volume marker.

    Parameters
    ----------
    title : str | None
        Raw title.

    Returns
    -------
    TitleResult
        Normalized title, series base, and series token. Both strings are
        empty when nothing comparable remains.

    Notes
    -----
    Steps: fold (NFKC, casefold, strip accents), remove edition noise and
    standalone years, extract the volume marker, drop a trailing
    parenthetical, strip punctuation and collapse whitespace, drop a
    leading article.
    """
    if not title or not title.strip():
        return TitleResult("", "", None)

    folded = remove_edition_noise(fold_text(title))
    token, span = extract_series_token(folded)

    normalized = _finish(_strip_paren_outside_marker(folded, span))

    if span is None:
        return TitleResult(normalized, normalized, None)

    base_text = f"{folded[: span[0]]} {folded[span[1] :]}"
    series_base = _finish(strip_trailing_parenthetical(base_text))
    return TitleResult(normalized, series_base, token)


def normalize_author(author: str | None) -> str | None:
    """Normalize an author string for comparison.

    A single 'Last, First' name is reordered to 'first last' so both
    spellings compare equal.

    Parameters
    ----------
    author : str | None
        Raw author.

    Returns
    -------
    str | None
        Normalized author, or None if nothing remains.
    """
    if not author:
        return None

    folded = fold_text(author)
    match = LAST_FIRST_RE.match(folded)
    if match:
        folded = f"{match.group(2)} {match.group(1)}"

    return clean_text(folded) or None


def normalize_category(category: str | None) -> str | None:
    """Fold and clean a category label."""
    if not category:
        return None
    return clean_text(fold_text(category)) or None


def normalize_item(item: CatalogItem) -> NormalizedItem | None:
    """Derive the comparison form of a catalog item.

    This is the main entry point for normalization.

    Parameters
    ----------
    item : CatalogItem
        Input item (never mutated).

    Returns
    -------
    NormalizedItem | None
        Normalized item, or None if the title is missing or normalizes to
        nothing. Callers report such items as warnings.

    Notes
    -----
    This function is idempotent: running it twice on the same item
    produces identical output.
    """
    title = normalize_title(item.title)
    if not title.normalized:
        return None

    words = significant_words(title.normalized)
    description = item.description.strip() if item.description else ""

    return NormalizedItem(
        item_id=item.item_id,
        normalized_title=title.normalized,
        normalized_author=normalize_author(item.author),
        normalized_category=normalize_category(item.category),
        series_base=title.series_base,
        series_token=title.series_token,
        phonetic_key=phonetic_key(title.normalized),
        first_word=words[0] if words else "",
        description_length=len(description),
        source_ref=item.source_ref,
    )
