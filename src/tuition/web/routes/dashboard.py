"""Dashboard session endpoints."""

import asyncio

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from tuition.core.progress_report import summarize
from tuition.db.sheets import DataUnavailable
from tuition.web.deps import get_repository, get_resolver
from tuition.web.schemas import DashboardResponse
from tuition.web.sessions import DashboardSession, get_session_store

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["dashboard"])


def _not_found(session_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Session '{session_id}' not found",
    )


def _dashboard(session: DashboardSession) -> DashboardResponse:
    report = session.report
    return DashboardResponse.build(
        session_id=session.session_id,
        student=session.student,
        report=report,
        summary=summarize(report),
    )


@router.get("/{session_id}/dashboard", response_model=DashboardResponse)
async def get_dashboard(session_id: str) -> DashboardResponse:
    """Render the grade-sectioned dashboard for a session."""
    session = await get_session_store().get_session(session_id)

    if session is None:
        raise _not_found(session_id)

    return _dashboard(session)


@router.post("/{session_id}/refresh", response_model=DashboardResponse)
async def refresh_dashboard(session_id: str, request: Request) -> DashboardResponse:
    """Reload the session's student and progress from the spreadsheet.

    A student whose row has been removed is logged out (404).
    """
    store = get_session_store()
    session = await store.get_session(session_id)

    if session is None:
        raise _not_found(session_id)

    try:
        repository = get_repository(request)
        result = await asyncio.to_thread(repository.refresh, session.student.student_id)
    except DataUnavailable as e:
        logger.warning("refresh_data_unavailable", session_id=session_id, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Progress data is currently unavailable",
        )

    if result is None:
        await store.end_session(session_id)
        raise _not_found(session_id)

    progress = await get_resolver(request).enrich_items(result.progress)
    session = await store.update_session(session_id, result.student, progress)

    if session is None:
        raise _not_found(session_id)

    return _dashboard(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def logout(session_id: str) -> None:
    """End a dashboard session."""
    if not await get_session_store().end_session(session_id):
        raise _not_found(session_id)
