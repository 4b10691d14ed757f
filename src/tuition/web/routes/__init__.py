"""Route handlers for Web API."""

from tuition.web.routes.health import router as health_router
from tuition.web.routes.auth import router as auth_router
from tuition.web.routes.dashboard import router as dashboard_router
from tuition.web.routes.tools import router as tools_router

__all__ = [
    "health_router",
    "auth_router",
    "dashboard_router",
    "tools_router",
]
