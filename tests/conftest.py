"""Shared fixtures for the tuition test suite."""

import pytest

from tuition.config.app_config import clear_config_cache
from tuition.core.credentials import hash_password
from tuition.core.link_titles import LinkTitleResolver
from tuition.db.progress_repository import ProgressRepository
from tuition.db.sheets import DataUnavailable
from tuition.web.sessions import reset_session_store

# Low iteration count keeps hashing fast in tests
TEST_ROUNDS = 1000
TEST_PASSWORD = "open-sesame"

STUDENT_HEADERS = [
    "student_id",
    "student_name",
    "current_grade",
    "previous_grades",
    "comments",
    "share_link",
    "student_email",
    "next_lesson_date",
    "next_lesson_time",
    "next_lesson_length",
    "password_hash",
]

PROGRESS_HEADERS = [
    "student_id",
    "grade",
    "category",
    "detail",
    "item_status",
    "resource_links",
]


class FakeRowSource:
    """In-memory stand-in for SheetsClient."""

    def __init__(self, grids: dict[str, list[list[str]]], fail: bool = False):
        self.grids = grids
        self.fail = fail
        self.calls: list[str] = []

    def get_values(self, range_name: str) -> list[list[str]]:
        self.calls.append(range_name)
        if self.fail:
            raise DataUnavailable(f"Failed to load range '{range_name}'")
        return self.grids.get(range_name, [])

    def batch_get(self, ranges: list[str]) -> list[list[list[str]]]:
        self.calls.append(",".join(ranges))
        if self.fail:
            raise DataUnavailable(f"Failed to load ranges {ranges}")
        return [self.grids.get(name, []) for name in ranges]


@pytest.fixture(autouse=True)
def _reset_globals():
    """Fresh config cache and session store for every test."""
    clear_config_cache()
    reset_session_store()
    yield
    clear_config_cache()
    reset_session_store()


@pytest.fixture
def password_hash() -> str:
    return hash_password(TEST_PASSWORD, rounds=TEST_ROUNDS)


@pytest.fixture
def students_grid(password_hash) -> list[list[str]]:
    """Students tab with two students (one without progress)."""
    return [
        STUDENT_HEADERS,
        [
            "S1",
            "Alice Smith",
            "Grade 6",
            "Grade 5, Grade 4",
            "Great progress on scales",
            "https://drive.google.com/drive/folders/abc",
            "Alice@Example.com",
            "2025-03-03",
            "16:30",
            "30 mins",
            password_hash,
        ],
        ["S2", "Bob Jones", "Grade 2", "", "", "", "bob@example.com", "", "", "", password_hash],
    ]


@pytest.fixture
def progress_grid() -> list[list[str]]:
    """Progress tab with tasks for S1 across three grades and one row for S2."""
    return [
        PROGRESS_HEADERS,
        ["S1", "Grade 6", "Scales", "C major, two octaves", "Completed", ""],
        ["S1", "Grade 6", "Pieces", "Minuet in G", "In Progress", "https://example.com/minuet_in-g.pdf"],
        ["S1", "Grade 5", "Chords", "Play (x32010) C then (320003) G", "completed", ""],
        ["S2", "Grade 2", "Scales", "G major", "Not Started", ""],
        ["S1", "Grade 3", "Theory", "Intervals", "done", ""],
        ["S1", "Grade 6", "", "", "Completed", ""],
    ]


@pytest.fixture
def row_source(students_grid, progress_grid) -> FakeRowSource:
    return FakeRowSource({"students": students_grid, "progress": progress_grid})


@pytest.fixture
def repository(row_source) -> ProgressRepository:
    return ProgressRepository(row_source)


@pytest.fixture
def offline_resolver() -> LinkTitleResolver:
    """Resolver that never makes network requests."""
    return LinkTitleResolver(enabled=False)
