"""Public API for loading catalogs and running detection on files.

This module provides the main public API for catalogdedupe, enabling:
- Loading catalog files (JSONL, JSON, CSV) into CatalogItem objects
- Exporting normalized items to JSONL
- Running duplicate detection on a catalog file
"""

from __future__ import annotations

import csv
import json
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Any

from catalogdedupe.models import CatalogItem

if TYPE_CHECKING:
    from catalogdedupe.audit.logger import AuditLogger
    from catalogdedupe.engine.config import DetectionConfig
    from catalogdedupe.engine.runner import CancelToken
    from catalogdedupe.models import NormalizedItem
    from catalogdedupe.report.models import DetectionReport

__all__ = [
    "CatalogLoadError",
    "SUPPORTED_SUFFIXES",
    "detect_file",
    "load_catalog",
    "write_jsonl",
]

SUPPORTED_SUFFIXES = (".jsonl", ".ndjson", ".json", ".csv")


class CatalogLoadError(Exception):
    """Raised when a catalog file cannot be read into items."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
        line: int | None = None,
    ) -> None:
        """Initialize load error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        line : int | None, optional
            1-based line (or row) of the offending record.
        """
        super().__init__(message)
        self.file = file
        self.line = line


def _item_from_row(row: dict[str, Any], file_path: Path, line: int) -> CatalogItem:
    try:
        return CatalogItem.from_dict(row)
    except (TypeError, ValueError) as e:
        raise CatalogLoadError(
            f"{file_path.name}:{line}: invalid record: {e}",
            file=str(file_path),
            line=line,
        ) from e


def _load_jsonl(file_path: Path) -> list[CatalogItem]:
    items: list[CatalogItem] = []
    with file_path.open("r", encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError as e:
                raise CatalogLoadError(
                    f"{file_path.name}:{line_no}: invalid JSON: {e.msg}",
                    file=str(file_path),
                    line=line_no,
                ) from e
            if not isinstance(row, dict):
                raise CatalogLoadError(
                    f"{file_path.name}:{line_no}: expected a JSON object",
                    file=str(file_path),
                    line=line_no,
                )
            items.append(_item_from_row(row, file_path, line_no))
    return items


def _load_json(file_path: Path) -> list[CatalogItem]:
    with file_path.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise CatalogLoadError(
                f"{file_path.name}: invalid JSON: {e.msg}",
                file=str(file_path),
                line=e.lineno,
            ) from e

    if isinstance(data, dict) and isinstance(data.get("items"), list):
        data = data["items"]
    if not isinstance(data, list):
        raise CatalogLoadError(
            f"{file_path.name}: expected a JSON array or an object with 'items'",
            file=str(file_path),
        )

    items: list[CatalogItem] = []
    for index, row in enumerate(data, start=1):
        if not isinstance(row, dict):
            raise CatalogLoadError(
                f"{file_path.name}: element {index} is not an object",
                file=str(file_path),
                line=index,
            )
        items.append(_item_from_row(row, file_path, index))
    return items


def _load_csv(file_path: Path) -> list[CatalogItem]:
    items: list[CatalogItem] = []
    with file_path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        # Header is line 1
        for line_no, row in enumerate(reader, start=2):
            cleaned: dict[str, Any] = {k.strip(): v for k, v in row.items() if k is not None}
            for key in ("source_ref", "sourceRef"):
                value = cleaned.get(key)
                if isinstance(value, str) and value.strip().isdigit():
                    cleaned[key] = int(value.strip())
            items.append(_item_from_row(cleaned, file_path, line_no))
    return items


def load_catalog(path: str | Path) -> list[CatalogItem]:
    """Load a catalog file into items.

    Format is chosen by suffix: ``.jsonl``/``.ndjson`` (one object per
    line), ``.json`` (array, or object with an ``items`` array), ``.csv``
    (header row required).

    Parameters
    ----------
    path : str | Path
        Catalog file.

    Returns
    -------
    list[CatalogItem]
        Items in file order.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    CatalogLoadError
        If the format is unsupported or a record is malformed.

    Examples
    --------
        >>> from catalogdedupe import load_catalog
        >>> items = load_catalog("catalog.jsonl")
    """
    file_path = Path(path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = file_path.suffix.lower()
    if suffix in (".jsonl", ".ndjson"):
        return _load_jsonl(file_path)
    if suffix == ".json":
        return _load_json(file_path)
    if suffix == ".csv":
        return _load_csv(file_path)

    raise CatalogLoadError(
        f"Unsupported catalog format {suffix!r}; expected one of {', '.join(SUPPORTED_SUFFIXES)}",
        file=str(file_path),
    )


def write_jsonl(
    records: Iterable[CatalogItem | NormalizedItem],
    path: str | Path,
    *,
    sort_keys: bool = True,
) -> int:
    """Write items to a JSONL file (one JSON object per line).

    Parameters
    ----------
    records : Iterable[CatalogItem | NormalizedItem]
        Items to write.
    path : str | Path
        Output file path.
    sort_keys : bool, optional
        Whether to sort dictionary keys, by default True.

    Returns
    -------
    int
        Number of lines written.
    """
    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with file_path.open("w", encoding="utf-8", newline="\n") as f:
        for record in records:
            f.write(json.dumps(record.to_dict(), ensure_ascii=False, sort_keys=sort_keys) + "\n")
            count += 1
    return count


def detect_file(
    input_path: str | Path,
    config: DetectionConfig | None = None,
    *,
    logger: AuditLogger | None = None,
    cancel: CancelToken | None = None,
) -> DetectionReport:
    """Load a catalog file and run duplicate detection on it.

    Parameters
    ----------
    input_path : str | Path
        Catalog file (see :func:`load_catalog`).
    config : DetectionConfig | None, optional
        Detection configuration; defaults when None.
    logger : AuditLogger | None, optional
        Audit logger for stage events.
    cancel : CancelToken | None, optional
        Cooperative cancellation token.

    Returns
    -------
    DetectionReport
        Detection report.

    Raises
    ------
    FileNotFoundError
        If input path does not exist.
    CatalogLoadError
        If the catalog cannot be read.

    Examples
    --------
        >>> from catalogdedupe import detect_file
        >>> report = detect_file("catalog.csv")
        >>> print(len(report.clusters))
    """
    from catalogdedupe.engine import detect_duplicates

    items = load_catalog(input_path)
    return detect_duplicates(items, config, logger=logger, cancel=cancel)
