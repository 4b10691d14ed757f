"""Request-scoped access to the shared repository and link resolver.

Both live on ``app.state`` (set by ``create_app``). When the app was built
without a repository, one is created from the application config on first
use.
"""

from __future__ import annotations

from fastapi import Request

from tuition.config.app_config import load_app_config
from tuition.core.link_titles import LinkTitleResolver
from tuition.db.progress_repository import ProgressRepository


def get_repository(request: Request) -> ProgressRepository:
    """Get the progress repository for this app.

    Raises:
        DataUnavailable: If no repository was injected and the spreadsheet
            is not configured
    """
    state = request.app.state
    if getattr(state, "repository", None) is None:
        state.repository = ProgressRepository.from_config(load_app_config().sheets)
    return state.repository


def get_resolver(request: Request) -> LinkTitleResolver:
    """Get the link title resolver for this app."""
    state = request.app.state
    if getattr(state, "resolver", None) is None:
        links = load_app_config().links
        state.resolver = LinkTitleResolver(timeout=links.timeout, enabled=links.enrich_titles)
    return state.resolver
