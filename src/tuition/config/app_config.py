"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml,
falling back to built-in defaults when the file is missing.

Secrets never live in the YAML file: it only names the environment
variables that hold them.

Usage:
    from tuition.config.app_config import load_app_config

    config = load_app_config()
    spreadsheet_id = config.sheets.get_spreadsheet_id()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")


@dataclass
class SheetsConfig:
    """Where student and progress rows are read from."""

    spreadsheet_id_env: str = "SPREADSHEET_ID"
    service_account_env: str = "SERVICE_ACCOUNT_JSON_B64"
    service_account_file_env: str = "SERVICE_ACCOUNT_FILE"
    students_range: str = "students"
    progress_range: str = "progress"

    def get_spreadsheet_id(self) -> str | None:
        """Get spreadsheet ID from environment variable."""
        return os.environ.get(self.spreadsheet_id_env) or None

    def get_service_account_b64(self) -> str | None:
        """Get base64-encoded service account JSON from environment variable."""
        return os.environ.get(self.service_account_env) or None

    def get_service_account_file(self) -> str | None:
        """Get service account key file path from environment variable."""
        return os.environ.get(self.service_account_file_env) or None


@dataclass
class LinksConfig:
    """Resource link title lookup settings."""

    enrich_titles: bool = True
    timeout: float = 5.0


@dataclass
class AuthConfig:
    """Password hashing settings."""

    hash_rounds: int = 260000


@dataclass
class AppConfig:
    """Application-wide configuration."""

    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    links: LinksConfig = field(default_factory=LinksConfig)
    auth: AuthConfig = field(default_factory=AuthConfig)


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "sheets": {
            "spreadsheet_id_env": "SPREADSHEET_ID",
            "service_account_env": "SERVICE_ACCOUNT_JSON_B64",
            "service_account_file_env": "SERVICE_ACCOUNT_FILE",
            "students_range": "students",
            "progress_range": "progress",
        },
        "links": {
            "enrich_titles": True,
            "timeout": 5.0,
        },
        "auth": {
            "hash_rounds": 260000,
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    sheets_data = {**defaults["sheets"], **(data.get("sheets") or {})}
    sheets = SheetsConfig(
        spreadsheet_id_env=sheets_data["spreadsheet_id_env"],
        service_account_env=sheets_data["service_account_env"],
        service_account_file_env=sheets_data["service_account_file_env"],
        students_range=sheets_data["students_range"],
        progress_range=sheets_data["progress_range"],
    )

    links_data = {**defaults["links"], **(data.get("links") or {})}
    links = LinksConfig(
        enrich_titles=bool(links_data["enrich_titles"]),
        timeout=float(links_data["timeout"]),
    )

    auth_data = {**defaults["auth"], **(data.get("auth") or {})}
    auth = AuthConfig(hash_rounds=int(auth_data["hash_rounds"]))

    return AppConfig(sheets=sheets, links=links, auth=auth)


def load_app_config(force_reload: bool = False, config_file: Path | None = None) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.
        config_file: Override the config file location.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    path = config_file or CONFIG_FILE

    if path.exists():
        logger.debug("loading_app_config", source=str(path))
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
