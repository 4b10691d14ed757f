"""Repository for students and progress rows.

Reads the students and progress tabs through a RowSource and maps them to
typed records. Records are fetched fresh on every call; nothing is cached
or written back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import structlog

from tuition.config.app_config import SheetsConfig
from tuition.core.credentials import authenticate
from tuition.core.record_mapper import map_progress_rows, map_student_rows
from tuition.core.records import ProgressItem, Student
from tuition.db.sheets import RowSource, SheetsClient

logger = structlog.get_logger(__name__)

DEFAULT_STUDENTS_RANGE = "students"
DEFAULT_PROGRESS_RANGE = "progress"


@dataclass
class LoginResult:
    """A logged-in student with their progress snapshot."""

    student: Student
    progress: list[ProgressItem] = field(default_factory=list)


def split_grid(values: list[list[Any]]) -> tuple[list[Any], list[list[Any]]]:
    """Split a cell grid into (header row, data rows)."""
    if not values:
        return [], []
    return list(values[0] or []), [list(row or []) for row in values[1:]]


class ProgressRepository:
    """Loads Student and ProgressItem records from a spreadsheet."""

    def __init__(
        self,
        source: RowSource,
        students_range: str = DEFAULT_STUDENTS_RANGE,
        progress_range: str = DEFAULT_PROGRESS_RANGE,
    ):
        self._source = source
        self.students_range = students_range
        self.progress_range = progress_range

    @classmethod
    def from_config(cls, config: SheetsConfig) -> ProgressRepository:
        """Build a repository backed by Google Sheets.

        Raises:
            DataUnavailable: If the spreadsheet ID or credentials are missing
        """
        return cls(
            SheetsClient.from_config(config),
            students_range=config.students_range,
            progress_range=config.progress_range,
        )

    def load_students(self) -> list[Student]:
        """Load every student with a student_id.

        Raises:
            DataUnavailable: If the spreadsheet cannot be read
        """
        headers, rows = split_grid(self._source.get_values(self.students_range))
        students = map_student_rows(headers, rows)
        logger.debug("students_loaded", count=len(students))
        return students

    def load_progress(self, student_id: str | None = None) -> list[ProgressItem]:
        """Load progress items, optionally for a single student.

        Raises:
            DataUnavailable: If the spreadsheet cannot be read
        """
        headers, rows = split_grid(self._source.get_values(self.progress_range))
        items = map_progress_rows(headers, rows, filter_student_id=student_id)
        logger.debug("progress_loaded", student_id=student_id, count=len(items))
        return items

    def login(self, email: str, password: str) -> LoginResult:
        """Authenticate a student and load their progress.

        Raises:
            InvalidCredentials: If no student matches
            DataUnavailable: If the spreadsheet cannot be read
        """
        student = authenticate(self.load_students(), email, password)
        progress = self.load_progress(student.student_id)
        return LoginResult(student=student, progress=progress)

    def refresh(self, student_id: str) -> LoginResult | None:
        """Reload a logged-in student and their progress in one request.

        Returns:
            Fresh LoginResult, or None if the student row no longer exists

        Raises:
            DataUnavailable: If the spreadsheet cannot be read
        """
        students_grid, progress_grid = self._source.batch_get(
            [self.students_range, self.progress_range]
        )
        wanted = student_id.strip()
        student = next(
            (s for s in map_student_rows(*split_grid(students_grid)) if s.student_id == wanted),
            None,
        )
        if student is None:
            logger.info("student_missing_on_refresh", student_id=wanted)
            return None

        progress = map_progress_rows(*split_grid(progress_grid), filter_student_id=wanted)
        logger.debug("student_refreshed", student_id=wanted, count=len(progress))
        return LoginResult(student=student, progress=progress)
