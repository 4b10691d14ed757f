"""Spreadsheet row mapping.

Turns a 2-D grid of cells (header row + data rows) into typed Student and
ProgressItem records.

Mapping never raises on bad spreadsheet data: missing columns, short rows
and unexpected cell types all degrade to defaults (empty string, empty list
or ``Not Started``) so the dashboard can always render something.

Header lookup is case-insensitive and ignores surrounding whitespace and
``-``/``_``/space differences, so "Student ID", "student_id" and
" STUDENT-ID " all resolve to the same field.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from tuition.core.records import ItemStatus, ProgressItem, ResourceLink, Student
from tuition.utils.text_utils import (
    LINK_DELIMITERS,
    cell_text,
    display_name_from_url,
    normalize_label_list,
    split_delimited,
)

logger = structlog.get_logger(__name__)

# =============================================================================
# HEADER ALIASES
# =============================================================================

# Canonical field -> accepted header spellings (compared after _header_key)
STUDENT_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "student_id": ("student_id", "id"),
    "student_name": ("student_name", "name"),
    "current_grade": ("current_grade", "grade"),
    "previous_grades": ("previous_grades", "past_grades"),
    "comments": ("comments", "comment", "notes"),
    "share_link": ("share_link", "shared_folder"),
    "student_email": ("student_email", "email"),
    "next_lesson_date": ("next_lesson_date",),
    "next_lesson_time": ("next_lesson_time",),
    "next_lesson_length": ("next_lesson_length", "lesson_length"),
    "password_hash": ("password_hash", "student_password_hash"),
}

PROGRESS_HEADER_ALIASES: dict[str, tuple[str, ...]] = {
    "student_id": ("student_id", "id"),
    "grade": ("grade",),
    "category": ("category",),
    "detail": ("detail", "details", "task"),
    "item_status": ("item_status", "status"),
    "resource_links": ("resource_links", "resources", "links"),
}


def _header_key(name: Any) -> str:
    """Canonical form of a header name."""
    text = cell_text(name).strip().lower()
    return "_".join(text.replace("-", " ").replace("_", " ").split())


def header_index(headers: Sequence[Any]) -> dict[str, int]:
    """Map canonical header names to column positions.

    The first occurrence wins when a header is repeated.
    """
    index: dict[str, int] = {}
    for position, name in enumerate(headers or []):
        key = _header_key(name)
        if key and key not in index:
            index[key] = position
    return index


def _resolve_columns(
    index: Mapping[str, int], aliases: Mapping[str, tuple[str, ...]]
) -> dict[str, int]:
    """Resolve each canonical field to a column position, if present."""
    columns: dict[str, int] = {}
    for field_name, spellings in aliases.items():
        for spelling in spellings:
            if spelling in index:
                columns[field_name] = index[spelling]
                break
    return columns


def _cell(row: Sequence[Any], columns: Mapping[str, int], field_name: str) -> Any:
    """Raw cell for a field, or None when the column or cell is missing."""
    position = columns.get(field_name)
    if position is None or row is None or position >= len(row):
        return None
    return row[position]


def _text(row: Sequence[Any], columns: Mapping[str, int], field_name: str) -> str:
    return cell_text(_cell(row, columns, field_name))


# =============================================================================
# NORMALIZATION
# =============================================================================


def normalize_grade_list(raw: Any) -> list[str]:
    """Normalize a previous-grades cell to a clean list of labels.

    Accepts a comma/semicolon/newline delimited string, a native list, or
    nothing; returns trimmed, non-empty labels without duplicates, in
    first-occurrence order. ``""`` yields ``[]``.
    """
    return normalize_label_list(raw)


def _link_from_value(value: Any) -> ResourceLink | None:
    """Build a link from a structured value (mapping or ResourceLink)."""
    if isinstance(value, ResourceLink):
        url, title = value.url, value.title
    elif isinstance(value, Mapping):
        url = cell_text(value.get("url")).strip()
        title = cell_text(value.get("title")).strip()
    else:
        return None

    url = url.strip()
    if not url:
        return None
    return ResourceLink(url=url, title=title.strip() or display_name_from_url(url))


def normalize_resource_links(raw_cell: Any) -> list[ResourceLink]:
    """Normalize any accepted encoding of resource links to ResourceLink records.

    Accepted encodings:
    - a delimited string: "https://a.com, https://b.com" (comma or newline)
    - a list of bare URL strings
    - a list of {"url", "title"} mappings or ResourceLink objects

    Empty segments are dropped. When no title is supplied it is derived
    from the URL (see display_name_from_url).

    Args:
        raw_cell: Cell value in any of the accepted encodings

    Returns:
        List of ResourceLink records, in input order
    """
    if raw_cell is None:
        return []

    if isinstance(raw_cell, (str, ResourceLink, Mapping)):
        values: list[Any] = [raw_cell]
    elif isinstance(raw_cell, (list, tuple)):
        values = list(raw_cell)
    else:
        values = [cell_text(raw_cell)]

    links: list[ResourceLink] = []
    for value in values:
        if isinstance(value, str):
            for url in split_delimited(value, LINK_DELIMITERS):
                links.append(ResourceLink(url=url, title=display_name_from_url(url)))
            continue

        link = _link_from_value(value)
        if link is not None:
            links.append(link)

    return links


# =============================================================================
# ROW MAPPERS
# =============================================================================


def map_student_row(headers: Sequence[Any], row: Sequence[Any]) -> Student:
    """Map one students-tab row to a Student.

    Args:
        headers: Header row of the students tab
        row: Data row (may be shorter than headers)

    Returns:
        Student with every field defined (possibly empty)
    """
    columns = _resolve_columns(header_index(headers), STUDENT_HEADER_ALIASES)
    row = row or []

    return Student(
        student_id=_text(row, columns, "student_id").strip(),
        student_name=_text(row, columns, "student_name").strip(),
        current_grade=_text(row, columns, "current_grade").strip(),
        previous_grades=normalize_grade_list(_cell(row, columns, "previous_grades")),
        comments=_text(row, columns, "comments"),
        share_link=_text(row, columns, "share_link").strip(),
        student_email=_text(row, columns, "student_email").strip(),
        next_lesson_date=_text(row, columns, "next_lesson_date").strip(),
        next_lesson_time=_text(row, columns, "next_lesson_time").strip(),
        next_lesson_length=_text(row, columns, "next_lesson_length").strip(),
        password_hash=_text(row, columns, "password_hash").strip(),
    )


def map_student_rows(headers: Sequence[Any], rows: Sequence[Sequence[Any]]) -> list[Student]:
    """Map every students-tab row, skipping rows without a student_id."""
    students = []
    for row in rows or []:
        student = map_student_row(headers, row)
        if student.student_id:
            students.append(student)
    return students


def map_progress_row(
    row: Sequence[Any], columns: Mapping[str, int]
) -> ProgressItem:
    """Map one progress-tab row using pre-resolved columns."""
    return ProgressItem(
        student_id=_text(row, columns, "student_id").strip(),
        grade=_text(row, columns, "grade").strip(),
        category=_text(row, columns, "category"),
        detail=_text(row, columns, "detail"),
        item_status=ItemStatus.parse(_cell(row, columns, "item_status")),
        resource_links=normalize_resource_links(_cell(row, columns, "resource_links")),
    )


def map_progress_rows(
    headers: Sequence[Any],
    rows: Sequence[Sequence[Any]],
    filter_student_id: str | None = None,
) -> list[ProgressItem]:
    """Map progress-tab rows to ProgressItems.

    Args:
        headers: Header row of the progress tab
        rows: Data rows
        filter_student_id: If given, keep only rows for this student

    Returns:
        ProgressItems in row order. Rows whose category and detail are both
        empty are dropped as incomplete.
    """
    columns = _resolve_columns(header_index(headers), PROGRESS_HEADER_ALIASES)
    wanted = filter_student_id.strip() if filter_student_id is not None else None

    items: list[ProgressItem] = []
    skipped = 0
    for row in rows or []:
        item = map_progress_row(row or [], columns)
        if wanted is not None and item.student_id != wanted:
            continue
        if not item.category.strip() and not item.detail.strip():
            skipped += 1
            continue
        items.append(item)

    if skipped:
        logger.debug("progress_rows_incomplete", skipped=skipped)
    return items
