"""Core business logic module.

Modules:
- records: Student / ProgressItem / ResourceLink data classes
- record_mapper: Spreadsheet rows -> typed records
- progress_report: Grade-sectioned completion report
- credentials: Password hashing and login checks
- link_titles: Best-effort resource title lookup
- lessons: Next lesson display text
- chords: Inline chord markup parsing
- tuner: Frequency -> note naming
"""

__all__ = [
    "records",
    "record_mapper",
    "progress_report",
    "credentials",
    "link_titles",
    "lessons",
    "chords",
    "tuner",
]
