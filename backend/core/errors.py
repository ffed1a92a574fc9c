"""
Application Errors

Operational errors raised by services and mapped to HTTP responses by the
exception handlers in backend/api/main.py.
"""


class AppError(Exception):
    """Error with an HTTP status and a message safe to show to clients."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConflictError(AppError):
    status_code = 409
