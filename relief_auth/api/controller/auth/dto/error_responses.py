"""
Error response DTOs, used to document failure bodies in OpenAPI.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional

from relief_auth.core.exceptions.base import ErrorCode


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Human-readable error message")
    code: ErrorCode = Field(..., description="Error code")
    details: Optional[Any] = Field(None, description="Additional error details")


class ValidationIssue(BaseModel):
    path: List[str] = Field(default_factory=list, description="Location of the invalid field")
    field: str = Field(..., description="Dotted field name")
    message: str = Field(..., description="What is wrong with the field")
    type: Optional[str] = Field(None, description="Validator error type")


class ValidationErrorResponse(ErrorResponse):
    """Validation error response with field-level issues."""

    issues: List[ValidationIssue] = Field(default_factory=list)


def error_responses(*status_codes: int) -> Dict[int, Dict[str, Any]]:
    """OpenAPI `responses` mapping for the given failure status codes."""
    return {
        code: {"model": ValidationErrorResponse if code == 400 else ErrorResponse}
        for code in status_codes
    }
