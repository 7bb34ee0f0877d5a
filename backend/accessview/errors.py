from __future__ import annotations


class AccessViewError(Exception):
    """Base error for report ingestion failures surfaced to the user."""


class ReportFetchError(AccessViewError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ReportFileError(AccessViewError):
    pass
