"""
Custom exceptions for the Football Predictions API.
"""

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception with status code and detail message."""

    def __init__(self, status_code: int, detail: str, headers: dict = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class BadRequestException(APIException):
    """Exception raised when the request is invalid."""

    def __init__(self, detail: str = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InternalServerException(APIException):
    """Generic server failure. The detail never carries internal diagnostics."""

    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class InvalidDateError(ValueError):
    """Raised when a match date is missing or not a real YYYY-MM-DD calendar date."""


class CacheStoreError(Exception):
    """Raised by cache stores when the backing store cannot be read or written."""
