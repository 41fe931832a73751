from typing import Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class ConflictError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Record already exists"


class AuthError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid credentials"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class StorageError(AppError):
    message = "File upload failed"


class DatabaseError(AppError):
    message = "Database error"


class TokenExpiredError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Token has expired."

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class TokenInvalidError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Token is invalid."

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}
