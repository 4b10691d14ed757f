"""Text processing utilities.

Common cell/string helpers shared by the record mappers and link handling.
"""

from __future__ import annotations

import re
from typing import Any, Iterable
from urllib.parse import unquote, urlsplit

# Delimiters accepted in list-valued spreadsheet cells
GRADE_DELIMITERS = re.compile(r"[,;\n]")
LINK_DELIMITERS = re.compile(r"[,\n]")


def cell_text(value: Any) -> str:
    """Coerce a raw spreadsheet cell to a string.

    ``None`` becomes ``""``; numbers and booleans are stringified.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def split_delimited(value: str, pattern: re.Pattern[str] = GRADE_DELIMITERS) -> list[str]:
    """Split a delimited cell into trimmed, non-empty segments."""
    return [part.strip() for part in pattern.split(value) if part.strip()]


def unique_ordered(values: Iterable[str]) -> list[str]:
    """Drop duplicates, keeping the first occurrence of each value."""
    seen: set[str] = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def capitalize_words(text: str) -> str:
    """Upper-case the first character of every word, leaving the rest alone."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


def display_name_from_url(url: str) -> str:
    """Derive a human-readable title from a URL.

    Uses the last path segment (query dropped, percent-decoded, ``-`` and
    ``_`` replaced by spaces, words capitalized). URLs without a path
    segment fall back to the URL itself.

    Examples:
        "https://example.com/c-major_scale.pdf" -> "C Major Scale.pdf"
        "https://a.com" -> "https://a.com"
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return url

    segments = [s for s in path.split("/") if s]
    if not segments:
        return url

    name = unquote(segments[-1])
    name = re.sub(r"[-_]+", " ", name).strip()
    if not name:
        return url
    return capitalize_words(name)


def normalize_label_list(raw: Any) -> list[str]:
    """Normalize a list-valued cell into clean, unique labels.

    Accepts a delimited string (comma, semicolon or newline), a list or
    tuple of values, or nothing. Output is trimmed, non-empty and
    de-duplicated in first-occurrence order.

    Examples:
        "Grade 5; Grade 4\\nGrade 5" -> ["Grade 5", "Grade 4"]
        ["  Grade 3 ", "", "Grade 3"] -> ["Grade 3"]
        "" -> []
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        parts = split_delimited(raw, GRADE_DELIMITERS)
    elif isinstance(raw, (list, tuple)):
        parts = [cell_text(v).strip() for v in raw]
    else:
        parts = split_delimited(cell_text(raw), GRADE_DELIMITERS)
    return unique_ordered(p for p in parts if p)
