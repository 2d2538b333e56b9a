from typing import Optional


class JobBoardError(Exception):
    """Base error carrying the HTTP status it is reported with."""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class Unauthenticated(JobBoardError):
    status_code = 401


class Forbidden(JobBoardError):
    status_code = 403


class NotFound(JobBoardError):
    status_code = 404


class InvalidRequest(JobBoardError):
    status_code = 400


class InvalidTransitionError(InvalidRequest):
    """Raised when a job status change is not allowed from its current status"""


class Internal(JobBoardError):
    status_code = 500
