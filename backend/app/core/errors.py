"""
Application error taxonomy.

Every error carries the HTTP status it maps to and a client-safe message.
The handlers registered in ``app.main`` render them as ``{"error": message}``.
"""
from typing import Optional
from fastapi import status


class AppError(Exception):
    """Base class for errors that are turned into JSON responses."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Client input is malformed."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class Unauthorized(AppError):
    """No live session for a protected route."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class AuthFailure(AppError):
    """Bad credentials. Same response whether or not the user exists."""
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class DuplicateKey(AppError):
    """A unique constraint rejected the write."""
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class DuplicateUsername(DuplicateKey):
    default_message = "Username already exists"


class TooManyRequests(AppError):
    """Rate limit exceeded for the current window."""
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_message = "Too many requests, please try again later"

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = retry_after


class InternalError(AppError):
    """Persistence or hashing failure. Details stay in the server log."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"
