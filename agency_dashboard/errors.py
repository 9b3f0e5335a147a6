"""
Error taxonomy shared by the gate, the services and the routers.

Each error knows the HTTP status it maps to; `main.py` registers the
handlers that turn them into `{"error": message}` bodies.
"""


class ConfigurationError(RuntimeError):
    """Raised while loading settings when the process must not start."""


class AppError(Exception):
    status_code = 500
    message = "Operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    message = "Authentication failed."


class InvalidToken(Unauthenticated):
    message = "Invalid token."


class ExpiredToken(Unauthenticated):
    message = "Token expired. Please login again."


class UnknownPrincipal(Unauthenticated):
    message = "User not found. Token is not valid."


class InvalidCredentials(Unauthenticated):
    message = "Invalid credentials"


class Forbidden(AppError):
    status_code = 403
    message = "Access denied. Admin rights required."


class NotFound(AppError):
    status_code = 404
    message = "Not found"


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class Conflict(AppError):
    status_code = 409
    message = "The record was modified by another request. Reload and try again."


class OperationFailed(AppError):
    status_code = 500
    message = "Something went wrong!"
