"""Catalog record data models for catalogdedupe.

This module defines the input record supplied by the caller and the
normalized form the engine derives from it for the duration of a run.
"""

from dataclasses import asdict, dataclass
from typing import Any

SourceRef = str | int | None

_TEXT_FIELDS = ("title", "author", "description", "category")

# Input key aliases accepted by CatalogItem.from_dict, in priority order
_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "item_id": ("item_id", "id", "itemId"),
    "title": ("title",),
    "author": ("author", "authors"),
    "description": ("description",),
    "category": ("category",),
    "source_ref": ("source_ref", "sourceRef", "created_at"),
}


@dataclass(frozen=True)
class CatalogItem:
    """A raw catalog entry as supplied by the caller.

    Attributes
    ----------
    item_id : str
        Opaque identifier, unique within a run.
    title : str | None
        Title as entered (may be missing or blank).
    author : str | None
        Author as entered.
    description : str | None
        Free-text description.
    category : str | None
        Catalog category.
    source_ref : str | int | None
        Opaque reference back to the origin record. Used only for ordering
        when choosing a cluster representative.
    """

    item_id: str
    title: str | None = None
    author: str | None = None
    description: str | None = None
    category: str | None = None
    source_ref: SourceRef = None

    def __post_init__(self) -> None:
        """Validate field types."""
        if not isinstance(self.item_id, str) or not self.item_id.strip():
            raise ValueError(f"item_id must be a non-empty string, got {self.item_id!r}")

        for name in _TEXT_FIELDS:
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be str or None, got {type(value).__name__}")

        if self.source_ref is not None and (
            isinstance(self.source_ref, bool) or not isinstance(self.source_ref, str | int)
        ):
            raise TypeError(
                f"source_ref must be str, int or None, got {type(self.source_ref).__name__}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogItem":
        """Build an item from a loosely keyed mapping.

        Accepts snake_case and camelCase keys. Integer ids and numeric text
        values are coerced to strings; blank text values become None.

        Parameters
        ----------
        data : dict[str, Any]
            Raw mapping (e.g., one JSONL line or CSV row).

        Returns
        -------
        CatalogItem
            Validated item.

        Raises
        ------
        ValueError
            If no usable id is present.
        """
        values: dict[str, Any] = {}
        for field_name, aliases in _KEY_ALIASES.items():
            for alias in aliases:
                if alias in data and data[alias] is not None:
                    values[field_name] = data[alias]
                    break

        item_id = values.get("item_id")
        if isinstance(item_id, int) and not isinstance(item_id, bool):
            values["item_id"] = str(item_id)
        elif item_id is None:
            raise ValueError(f"Record has no id: {sorted(data)}")

        author = values.get("author")
        if isinstance(author, list):
            values["author"] = "; ".join(str(a) for a in author) if author else None

        for name in _TEXT_FIELDS:
            value = values.get(name)
            # Spreadsheet exports turn titles like 1984 into numbers
            if isinstance(value, int | float) and not isinstance(value, bool):
                value = values[name] = str(value)
            if isinstance(value, str) and not value.strip():
                values[name] = None

        source_ref = values.get("source_ref")
        if isinstance(source_ref, str) and not source_ref.strip():
            values["source_ref"] = None

        return cls(**values)


@dataclass(frozen=True)
class SeriesToken:
    """A recognized volume/part marker.

    Attributes
    ----------
    kind : str
        Marker family ('book', 'volume', 'part', 'chapter', 'episode',
        'issue', 'number', 'numeral').
    number : int
        Canonical volume number.
    text : str
        The marker as matched in the folded title.
    """

    kind: str
    number: int
    text: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


@dataclass(frozen=True)
class NormalizedItem:
    """Comparison-ready form of a CatalogItem, owned by a single run.

    Attributes
    ----------
    item_id : str
        Identifier of the source CatalogItem.
    normalized_title : str
        Folded, de-noised title including any volume marker.
    normalized_author : str | None
        Folded author, 'first last' order.
    normalized_category : str | None
        Folded category.
    series_base : str
        Normalized title with the volume marker removed.
    series_token : SeriesToken | None
        Volume/part marker if one was recognized.
    phonetic_key : str
        Soundex of the first significant title word (bucketing only).
    first_word : str
        First significant title word (bucketing only).
    description_length : int
        Length of the stripped description, 0 when absent.
    source_ref : str | int | None
        Copied from the CatalogItem for representative ordering.
    """

    item_id: str
    normalized_title: str
    normalized_author: str | None
    normalized_category: str | None
    series_base: str
    series_token: SeriesToken | None
    phonetic_key: str
    first_word: str
    description_length: int = 0
    source_ref: SourceRef = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)
