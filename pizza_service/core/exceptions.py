"""
Application Exceptions

Errors raised by repositories and routes that carry the HTTP status
they should be reported with. The handlers in main.py render them as
{"message": ...} bodies.
"""


class StatusCodeError(Exception):
    """An error with an attached HTTP status code."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self):
        return f"<StatusCodeError {self.status_code} - {self.message}>"


class UnauthorizedError(StatusCodeError):
    """Caller is not authenticated."""

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, 401)


class ForbiddenError(StatusCodeError):
    """Caller is authenticated but lacks the required role."""

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message, 403)


class NotFoundError(StatusCodeError):
    def __init__(self, message: str):
        super().__init__(message, 404)
