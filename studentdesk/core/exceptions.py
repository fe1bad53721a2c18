from typing import Any, Dict, Optional
from fastapi import status


class BaseAPIException(Exception):
    """
    Base class for every custom error raised by the service.
    Keeps the error body returned to the browser client in one shape.
    """
    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

# =========================================================
# 1. CLIENT ERRORS
# =========================================================

class BadRequestException(BaseAPIException):
    """400: missing or invalid input"""
    def __init__(self, message: str = "Bad Request", details: dict = None):
        super().__init__(
            message=message,
            code="BAD_REQUEST",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class InvalidStudentIdException(BaseAPIException):
    """400: the path id does not have the shape the record store uses"""
    def __init__(self, message: str = "Invalid student ID"):
        super().__init__(
            message=message,
            code="INVALID_ID",
            status_code=status.HTTP_400_BAD_REQUEST
        )


class NotFoundException(BaseAPIException):
    """404: well-formed id, no matching record"""
    def __init__(self, message: str = "Resource not found"):
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=status.HTTP_404_NOT_FOUND
        )

# =========================================================
# 2. RECORD STORE ERRORS
# =========================================================

class InvalidStudentIdError(ValueError):
    """Raised by a record store for an id it could never have issued."""


class StoreError(BaseAPIException):
    """
    500: the record store failed (connection lost, query error...).
    The message is generic; the cause goes to the server log only.
    """
    def __init__(self, message: str = "Record store error"):
        super().__init__(
            message=message,
            code="STORE_ERROR",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
