"""
Domain exceptions raised by the catalog, scoring and reporting services.

Each carries the HTTP status it maps to; the handler registered in
app.main turns them into `{"detail": message}` responses.
"""


class GradingError(Exception):
    """Base exception for grading workflow failures."""

    def __init__(self, message: str = "Internal server error", status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(GradingError):
    """A referenced assessment, user or result does not exist."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message, status_code=404)


class ForbiddenError(GradingError):
    """The caller is neither the owner nor an instructor."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


class ConflictError(GradingError):
    """The row changed underneath a replace."""

    def __init__(self, message: str = "Conflict"):
        super().__init__(message, status_code=409)
