from enum import Enum
from typing import Any, Optional
from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned next to the error message."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    INVALID_STATE = "INVALID_STATE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class BaseAPIException(HTTPException):
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(
        self,
        status_code: int,
        message: str,
        detail: Optional[Any] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=detail)
        # starlette substitutes the status phrase for a missing detail
        self.detail = detail
        self.message = message

    def __str__(self) -> str:
        return self.message


class ValidationError(BaseAPIException):
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str = "Validation error", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            detail=detail,
        )


class NotFoundError(BaseAPIException):
    code = ErrorCode.NOT_FOUND

    def __init__(self, message: str = "Resource not found", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            message=message,
            detail=detail,
        )


class ConflictError(BaseAPIException):
    code = ErrorCode.CONFLICT

    def __init__(self, message: str = "Resource already exists", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            message=message,
            detail=detail,
        )


class UnauthorizedError(BaseAPIException):
    code = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message=message,
            detail=detail,
        )


class ForbiddenError(BaseAPIException):
    code = ErrorCode.FORBIDDEN

    def __init__(self, message: str = "Forbidden", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            message=message,
            detail=detail,
        )


class InvalidStateError(BaseAPIException):
    """Request is well-formed but the login cycle is not in the expected state."""
    code = ErrorCode.INVALID_STATE

    def __init__(self, message: str = "Invalid state", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            message=message,
            detail=detail,
        )


class InternalError(BaseAPIException):
    code = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str = "Internal server error", detail: Optional[Any] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message=message,
            detail=detail,
        )
