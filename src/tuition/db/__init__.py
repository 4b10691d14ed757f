"""Spreadsheet data access.

Provides:
- SheetsClient: Google Sheets values API wrapper
- ProgressRepository: students/progress tabs -> typed records
"""

from tuition.db.progress_repository import LoginResult, ProgressRepository
from tuition.db.sheets import DataUnavailable, SheetsClient

__all__ = ["DataUnavailable", "LoginResult", "ProgressRepository", "SheetsClient"]
