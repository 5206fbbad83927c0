"""
Domain exceptions.

Every error raised by the services is an HTTPException subclass with a
stable ``error_code``, so routes can let them propagate unchanged.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class APIException(HTTPException):
    """Base API exception with consistent structure."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code


class NotFoundError(APIException):
    """Unknown id or handle."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND"
        )
        self.resource = resource
        self.identifier = identifier


class ForbiddenError(APIException):
    """Token mismatch, or a trainer acting on someone else's data."""

    def __init__(self, detail: str = "Access denied"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            error_code="FORBIDDEN"
        )


class UnauthorizedError(APIException):
    def __init__(self, detail: str = "Authentication required"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code="UNAUTHORIZED",
            headers={"WWW-Authenticate": "Bearer"}
        )


class ValidationError(APIException):
    """Malformed attributes or an ownership rule violated on input."""

    def __init__(self, detail: str, field: Optional[str] = None):
        error_code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(
            status_code=422,
            detail=detail,
            error_code=error_code
        )
        self.field = field


class DuplicateDayError(APIException):
    """Two sessions of one training plan on the same day of week."""

    def __init__(self, day_of_week: int):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"More than one session scheduled for day_of_week={day_of_week}",
            error_code="DUPLICATE_DAY"
        )
        self.day_of_week = day_of_week


class QuotaExceededError(APIException):
    """The trainer already has as many active clients as the tier allows."""

    def __init__(self, limit: int, current: int):
        super().__init__(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=f"Client limit reached ({current}/{limit}). Upgrade the subscription to add more clients.",
            error_code="QUOTA_EXCEEDED"
        )
        self.limit = limit
        self.current = current


class InvalidLinkError(APIException):
    """
    The only error a client-facing link ever produces. Whether the handle was
    unknown or the token wrong is kept in ``__cause__`` and the logs.
    """

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Invalid or expired link",
            error_code="INVALID_LINK"
        )
