"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

from tuition.config.app_config import load_app_config
from tuition.web.schemas import HealthResponse
from tuition.web.sessions import get_session_store

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Report API status, whether a data source is wired, and open sessions."""
    has_repository = getattr(request.app.state, "repository", None) is not None
    return HealthResponse(
        status="ok",
        version=request.app.version,
        timestamp=datetime.now(timezone.utc).isoformat(),
        spreadsheet_configured=has_repository
        or load_app_config().sheets.get_spreadsheet_id() is not None,
        active_sessions=await get_session_store().get_session_count(),
    )
