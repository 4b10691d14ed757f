"""Grade-sectioned progress report.

Builds the dashboard's per-grade view from a student and their flat list of
progress items:

1. Items are grouped by grade, keeping input order within each group.
2. Grades are ordered current grade first, then previous grades, then any
   other grade found in the items (first-encountered order), so no task
   set is ever hidden.
3. Each section carries completed/total counts and a rounded percentage.

Everything here is pure; statuses must already be normalized by the
record mapper.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from tuition.core.records import ProgressItem, Student
from tuition.utils.text_utils import unique_ordered


@dataclass
class GradeReport:
    """One grade section of the dashboard."""

    grade: str
    tasks: list[ProgressItem] = field(default_factory=list)
    is_current: bool = False
    completed: int = 0
    total: int = 0
    percentage: int = 0

    @property
    def remaining(self) -> int:
        """Tasks not yet completed."""
        return self.total - self.completed

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "grade": self.grade,
            "tasks": [task.to_dict() for task in self.tasks],
            "is_current": self.is_current,
            "completed": self.completed,
            "total": self.total,
            "percentage": self.percentage,
        }


@dataclass
class ReportSummary:
    """Totals across every section of a report."""

    completed: int = 0
    total: int = 0
    percentage: int = 0
    grades: int = 0


def completion_percentage(completed: int, total: int) -> int:
    """Completion percentage rounded half up; 0 when there are no tasks.

    1 of 8 is 12.5% and shows as 13.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def group_by_grade(items: Iterable[ProgressItem]) -> dict[str, list[ProgressItem]]:
    """Group items by grade.

    Keys appear in first-encountered order and items keep input order
    within each group.
    """
    groups: dict[str, list[ProgressItem]] = {}
    for item in items:
        groups.setdefault(item.grade, []).append(item)
    return groups


def grade_order(student: Student, grades_in_items: Iterable[str]) -> list[str]:
    """Display order of grade sections.

    Current grade (if non-empty), then previous grades in given order, then
    remaining grades from the items. No duplicates.
    """
    head = [student.current_grade, *student.previous_grades]
    head = [grade for grade in head if grade]
    return unique_ordered([*head, *grades_in_items])


def build_report(student: Student, items: list[ProgressItem]) -> list[GradeReport]:
    """Build the grade-sectioned report for a student.

    Args:
        student: The logged-in student (current/previous grades drive order)
        items: The student's progress items

    Returns:
        One GradeReport per grade in display order, or an empty list when
        there are no items.
    """
    if not items:
        return []

    groups = group_by_grade(items)
    report = []
    for grade in grade_order(student, groups.keys()):
        tasks = groups.get(grade, [])
        completed = sum(1 for task in tasks if task.is_completed)
        total = len(tasks)
        report.append(
            GradeReport(
                grade=grade,
                tasks=list(tasks),
                is_current=bool(grade) and grade == student.current_grade,
                completed=completed,
                total=total,
                percentage=completion_percentage(completed, total),
            )
        )
    return report


def summarize(report: Iterable[GradeReport]) -> ReportSummary:
    """Overall totals across all grade sections."""
    sections = list(report)
    completed = sum(section.completed for section in sections)
    total = sum(section.total for section in sections)
    return ReportSummary(
        completed=completed,
        total=total,
        percentage=completion_percentage(completed, total),
        grades=len(sections),
    )
