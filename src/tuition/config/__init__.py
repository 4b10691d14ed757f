"""Configuration package for the tuition dashboard."""

from tuition.config.app_config import (
    AppConfig,
    AuthConfig,
    LinksConfig,
    SheetsConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "AuthConfig",
    "LinksConfig",
    "SheetsConfig",
    "clear_config_cache",
    "load_app_config",
]
