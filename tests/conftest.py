"""Pytest configuration and fixtures for test suite."""

import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

# Add src directory to path for imports
SRC_PATH = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_PATH))

from catalogdedupe.models import CatalogItem, NormalizedItem, SourceRef  # noqa: E402
from catalogdedupe.normalize import normalize_item  # noqa: E402


@pytest.fixture
def make_item() -> Callable[..., CatalogItem]:
    """Factory for catalog items with minimal boilerplate."""

    def _factory(
        item_id: str = "item_001",
        title: str | None = "The Great Gatsby",
        *,
        author: str | None = None,
        description: str | None = None,
        category: str | None = None,
        source_ref: SourceRef = None,
    ) -> CatalogItem:
        return CatalogItem(
            item_id=item_id,
            title=title,
            author=author,
            description=description,
            category=category,
            source_ref=source_ref,
        )

    return _factory


@pytest.fixture
def make_normalized(
    make_item: Callable[..., CatalogItem],
) -> Callable[..., NormalizedItem]:
    """Factory running the real normalizer over a freshly built item."""

    def _factory(
        item_id: str = "item_001", title: str = "The Great Gatsby", **kwargs: Any
    ) -> NormalizedItem:
        normalized = normalize_item(make_item(item_id, title, **kwargs))
        assert normalized is not None, f"title {title!r} did not normalize"
        return normalized

    return _factory


@pytest.fixture
def sample_catalog(make_item: Callable[..., CatalogItem]) -> list[CatalogItem]:
    """Small catalog with one true duplicate, one series pair and bad rows."""
    return [
        make_item(
            "g1",
            "The Great Gatsby",
            author="F. Scott Fitzgerald",
            description="A novel of the Jazz Age on Long Island.",
            category="Fiction",
            source_ref=3,
        ),
        make_item(
            "g2",
            "Great Gatsby (Penguin Classics)",
            author="Fitzgerald, F. Scott",
            description="Jazz Age novel.",
            category="fiction",
            source_ref=1,
        ),
        make_item("m1", "Mystery Series Book 1", author="Jane Doe", category="Mystery"),
        make_item("m2", "Mystery Series Book 2", author="Jane Doe", category="Mystery"),
        make_item("w1", "Moby Dick", author="Herman Melville", category="Fiction"),
        make_item("x1", "   ", author="Nobody"),
        make_item("x2", "!!!", author="Nobody"),
        make_item("g1", "Duplicate id row", author="Someone"),
    ]
