"""Typed records for students and progress items.

Records are read-only snapshots of spreadsheet rows: they are fetched fresh
on login and held in memory for the session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tuition.utils.text_utils import normalize_label_list, unique_ordered

# =============================================================================
# ITEM STATUS
# =============================================================================


class ItemStatus(str, Enum):
    """Completion state of a progress item."""

    COMPLETED = "Completed"
    IN_PROGRESS = "In Progress"
    NOT_STARTED = "Not Started"

    @classmethod
    def parse(cls, value: Any) -> ItemStatus:
        """Parse a raw cell into a status, defaulting to NOT_STARTED.

        Matching is case-insensitive and ignores surrounding whitespace and
        ``-``/``_`` separators ("in-progress", " COMPLETED ").
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.NOT_STARTED
        key = " ".join(value.replace("-", " ").replace("_", " ").split()).lower()
        for status in cls:
            if status.value.lower() == key:
                return status
        return cls.NOT_STARTED


# =============================================================================
# DATA CLASSES
# =============================================================================


@dataclass(frozen=True)
class ResourceLink:
    """A URL plus the title shown to the learner."""

    url: str
    title: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"url": self.url, "title": self.title}


@dataclass
class Student:
    """A student row from the students tab."""

    student_id: str = ""
    student_name: str = ""
    current_grade: str = ""
    previous_grades: list[str] = field(default_factory=list)
    comments: str = ""
    share_link: str = ""
    student_email: str = ""
    next_lesson_date: str = ""
    next_lesson_time: str = ""
    next_lesson_length: str = ""
    password_hash: str = field(default="", repr=False)

    def __post_init__(self):
        self.previous_grades = normalize_label_list(self.previous_grades)

    @property
    def grades(self) -> list[str]:
        """Current grade followed by previous grades, blanks and repeats removed."""
        ordered = [self.current_grade, *self.previous_grades]
        return unique_ordered(grade for grade in ordered if grade)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        The password hash is never included.
        """
        return {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "current_grade": self.current_grade,
            "previous_grades": list(self.previous_grades),
            "comments": self.comments,
            "share_link": self.share_link,
            "student_email": self.student_email,
            "next_lesson_date": self.next_lesson_date,
            "next_lesson_time": self.next_lesson_time,
            "next_lesson_length": self.next_lesson_length,
        }


@dataclass
class ProgressItem:
    """One checklist task for a student at a given grade."""

    student_id: str = ""
    grade: str = ""
    category: str = ""
    detail: str = ""
    item_status: ItemStatus = ItemStatus.NOT_STARTED
    resource_links: list[ResourceLink] = field(default_factory=list)

    def __post_init__(self):
        self.item_status = ItemStatus.parse(self.item_status)

    @property
    def is_completed(self) -> bool:
        return self.item_status == ItemStatus.COMPLETED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "student_id": self.student_id,
            "grade": self.grade,
            "category": self.category,
            "detail": self.detail,
            "item_status": self.item_status.value,
            "resource_links": [link.to_dict() for link in self.resource_links],
        }
