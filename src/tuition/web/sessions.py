"""Session cache for the Web API.

Holds the logged-in snapshot (student + progress) per browser session so
the dashboard can be re-rendered without hitting the spreadsheet again.
Nothing is persisted; logging out or restarting drops the snapshot.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from tuition.core.progress_report import GradeReport, build_report
from tuition.core.records import ProgressItem, Student

logger = structlog.get_logger(__name__)


@dataclass
class DashboardSession:
    """A logged-in student and their progress snapshot."""

    session_id: str
    student: Student
    progress: list[ProgressItem] = field(default_factory=list)
    created_at: str = ""

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    @property
    def report(self) -> list[GradeReport]:
        return build_report(self.student, self.progress)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "session_id": self.session_id,
            "student_id": self.student.student_id,
            "created_at": self.created_at,
            "items": len(self.progress),
        }


class SessionStore:
    """In-memory store of dashboard sessions, guarded by an asyncio lock."""

    def __init__(self):
        self._sessions: dict[str, DashboardSession] = {}
        self._lock = asyncio.Lock()

    async def create_session(
        self,
        student: Student,
        progress: list[ProgressItem],
    ) -> DashboardSession:
        """Store a snapshot and return its session.

        Args:
            student: The authenticated student
            progress: Their (already enriched) progress items

        Returns:
            The created DashboardSession
        """
        session_id = uuid.uuid4().hex[:12]
        session = DashboardSession(
            session_id=session_id,
            student=student,
            progress=list(progress),
        )

        async with self._lock:
            self._sessions[session_id] = session

        logger.info(
            "session_created",
            session_id=session_id,
            student_id=student.student_id,
            items=len(session.progress),
        )
        return session

    async def get_session(self, session_id: str) -> DashboardSession | None:
        """Get a session by ID."""
        async with self._lock:
            return self._sessions.get(session_id)

    async def update_session(
        self,
        session_id: str,
        student: Student,
        progress: list[ProgressItem],
    ) -> DashboardSession | None:
        """Replace a session's snapshot, keeping its ID and creation time.

        Returns:
            The updated session, or None if not found
        """
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.student = student
            session.progress = list(progress)

        logger.info("session_refreshed", session_id=session_id, items=len(progress))
        return session

    async def end_session(self, session_id: str) -> bool:
        """Drop a session.

        Returns:
            True if the session existed, False if not found
        """
        async with self._lock:
            session = self._sessions.pop(session_id, None)

        if session is None:
            return False

        logger.info("session_ended", session_id=session_id)
        return True

    async def get_session_count(self) -> int:
        async with self._lock:
            return len(self._sessions)


# Global session store instance
_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """Get the global session store instance."""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store


def reset_session_store() -> None:
    """Reset the session store (for testing)."""
    global _session_store
    _session_store = None
