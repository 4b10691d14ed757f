"""Login endpoint."""

import asyncio

import structlog
from fastapi import APIRouter, HTTPException, Request, status

from tuition.core.credentials import InvalidCredentials
from tuition.db.sheets import DataUnavailable
from tuition.web.deps import get_repository, get_resolver
from tuition.web.schemas import (
    GradeSectionResponse,
    LoginRequest,
    LoginResponse,
    StudentResponse,
    TaskResponse,
)
from tuition.web.sessions import get_session_store

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, request: Request) -> LoginResponse:
    """Log a student in and open a dashboard session.

    Unknown email and wrong password both answer 401 with the same message.
    """
    try:
        repository = get_repository(request)
        # Sheets client is blocking
        result = await asyncio.to_thread(repository.login, payload.email, payload.password)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )
    except DataUnavailable as e:
        logger.warning("login_data_unavailable", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Progress data is currently unavailable",
        )

    progress = await get_resolver(request).enrich_items(result.progress)
    session = await get_session_store().create_session(result.student, progress)

    return LoginResponse(
        success=True,
        session_id=session.session_id,
        student=StudentResponse.from_student(session.student),
        progress=[TaskResponse.from_item(item) for item in session.progress],
        report=[GradeSectionResponse.from_report(section) for section in session.report],
    )
