"""Pydantic schemas for the Web API.

Serialization models for login, dashboard sections, tasks and tools.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from tuition.core.chords import parse_text_with_chords
from tuition.core.lessons import format_next_lesson
from tuition.core.progress_report import GradeReport, ReportSummary
from tuition.core.records import ProgressItem, Student


# =============================================================================
# STUDENT / TASK SCHEMAS
# =============================================================================


class ResourceLinkResponse(BaseModel):
    """A resource link with its display title."""

    url: str
    title: str


class StudentResponse(BaseModel):
    """Public view of a student (no credentials)."""

    student_id: str
    student_name: str
    current_grade: str = ""
    previous_grades: list[str] = Field(default_factory=list)
    comments: str = ""
    share_link: str = ""
    student_email: str = ""
    next_lesson_date: str = ""
    next_lesson_time: str = ""
    next_lesson_length: str = ""

    @classmethod
    def from_student(cls, student: Student) -> StudentResponse:
        return cls(**student.to_dict())


class DetailPart(BaseModel):
    """A text run or inline chord within a task detail."""

    type: Literal["text", "chord"]
    content: str = ""
    fingering: str = ""
    name: str = ""


class TaskResponse(BaseModel):
    """One progress item."""

    student_id: str
    grade: str
    category: str
    detail: str
    item_status: str
    resource_links: list[ResourceLinkResponse] = Field(default_factory=list)
    detail_parts: list[DetailPart] = Field(default_factory=list)

    @classmethod
    def from_item(cls, item: ProgressItem) -> TaskResponse:
        data = item.to_dict()
        data["detail_parts"] = [part.to_dict() for part in parse_text_with_chords(item.detail)]
        return cls(**data)


class GradeSectionResponse(BaseModel):
    """One grade section of the dashboard."""

    grade: str
    is_current: bool
    completed: int
    total: int
    percentage: int
    tasks: list[TaskResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, section: GradeReport) -> GradeSectionResponse:
        return cls(
            grade=section.grade,
            is_current=section.is_current,
            completed=section.completed,
            total=section.total,
            percentage=section.percentage,
            tasks=[TaskResponse.from_item(task) for task in section.tasks],
        )


class SummaryResponse(BaseModel):
    """Totals across all grade sections."""

    completed: int = 0
    total: int = 0
    percentage: int = 0
    grades: int = 0

    @classmethod
    def from_summary(cls, summary: ReportSummary) -> SummaryResponse:
        return cls(
            completed=summary.completed,
            total=summary.total,
            percentage=summary.percentage,
            grades=summary.grades,
        )


# =============================================================================
# LOGIN / DASHBOARD SCHEMAS
# =============================================================================


class LoginRequest(BaseModel):
    """Request body for logging in."""

    email: str = Field(..., min_length=1, max_length=200)
    password: str = Field(..., min_length=1, max_length=200)


class LoginResponse(BaseModel):
    """Response for a successful login."""

    success: bool = True
    session_id: str
    student: StudentResponse
    progress: list[TaskResponse]
    report: list[GradeSectionResponse]


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders."""

    session_id: str
    student: StudentResponse
    next_lesson: str = ""
    report: list[GradeSectionResponse]
    summary: SummaryResponse

    @classmethod
    def build(
        cls,
        session_id: str,
        student: Student,
        report: list[GradeReport],
        summary: ReportSummary,
    ) -> DashboardResponse:
        return cls(
            session_id=session_id,
            student=StudentResponse.from_student(student),
            next_lesson=format_next_lesson(
                student.next_lesson_date,
                student.next_lesson_time,
                student.next_lesson_length,
            ),
            report=[GradeSectionResponse.from_report(section) for section in report],
            summary=SummaryResponse.from_summary(summary),
        )


# =============================================================================
# TOOL SCHEMAS
# =============================================================================


class NoteResponse(BaseModel):
    """Nearest note to a frequency."""

    frequency: float
    note: str
    octave: int
    midi: int
    cents: int
    label: str


class ChordTextRequest(BaseModel):
    """Text that may contain inline chord markup."""

    text: str = Field(..., max_length=5000)


class ChordTextResponse(BaseModel):
    """Parsed chord markup."""

    parts: list[DetailPart]
    chord_count: int


# =============================================================================
# HEALTH SCHEMAS
# =============================================================================


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: str
    spreadsheet_configured: bool = False
    active_sessions: int = 0
