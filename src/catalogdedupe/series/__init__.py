"""Series detection: volume markers and the series guard."""

from catalogdedupe.series.detector import (
    DEFAULT_BASE_THRESHOLD,
    SERIES_PATTERNS,
    detect_series_conflict,
    extract_series_token,
    parse_volume_number,
    roman_to_int,
)

__all__ = [
    "DEFAULT_BASE_THRESHOLD",
    "SERIES_PATTERNS",
    "detect_series_conflict",
    "extract_series_token",
    "parse_volume_number",
    "roman_to_int",
]
