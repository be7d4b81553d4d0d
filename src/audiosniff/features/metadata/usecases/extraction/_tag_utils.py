"""Tag utility helpers.

Where: src/audiosniff/features/metadata/usecases/extraction/_tag_utils.py
What: Provide pure helper routines for parsing tag values into typed fields.
Why: The ID3 parser and the mutagen fallback extractors share the same value conventions.
"""

from __future__ import annotations

__all__ = [
    "first_value",
    "parse_int",
    "parse_slash_separated",
    "parse_tuple_numbers",
    "parse_year",
    "safe_get_first",
]


def safe_get_first(data: list[str] | None, default: str = "") -> str:
    """Safely get the first element from a list or return the default."""
    return str(data[0]) if data else default


def first_value(text: str) -> str | None:
    """Return the first non-empty null-separated value, trimmed."""

    for part in text.split("\x00"):
        stripped = part.replace("\ufeff", "").strip()
        if stripped:
            return stripped
    return None


def parse_int(value: str | None) -> int | None:
    """Parse a whole number, tolerating surrounding whitespace."""

    if not value:
        return None
    stripped = value.strip()
    return int(stripped) if stripped.isdecimal() else None


def parse_slash_separated(value: str) -> tuple[int | None, int | None]:
    """Parse a string in 'number/total' format.

    Returns a tuple (number, total) or (None, None) if conversion fails.
    """
    parts: list[str] = value.split(sep="/", maxsplit=1) if value else []
    num: int | None = parse_int(parts[0]) if parts else None
    total: int | None = parse_int(parts[1]) if len(parts) > 1 else None
    return num, total


def parse_tuple_numbers(data: list[tuple[int, int]] | None) -> tuple[int | None, int | None]:
    """Parse a list of numeric tuples and return the first tuple with zeros converted to None."""
    if data:
        first: tuple[int, int] = data[0]
        num: int | None = first[0] if first[0] != 0 else None
        total: int | None = first[1] if first[1] != 0 else None
        return num, total
    return None, None


def parse_year(date_str: str) -> int | None:
    """Parse a year from a string (expects the first 4 characters to be digits)."""
    date_str = date_str.strip() if date_str else ""
    return int(date_str[:4]) if len(date_str) >= 4 and date_str[:4].isdecimal() else None
