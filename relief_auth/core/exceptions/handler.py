"""
Centralized error handling.
Every failure leaves the service as {"error": <message>, "code": <code>, ...};
stack traces are only exposed when DEBUG is enabled.
"""

import traceback
from typing import Any, Dict, List, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from relief_auth.core.exceptions.base import BaseAPIException, ErrorCode
from relief_auth.core.logger.logger import get_logger
from relief_auth.infra.config.settings import get_settings

logger = get_logger(__name__)
settings = get_settings()


class ErrorResponseBuilder:
    """Builds standardized error responses"""

    @staticmethod
    def build_error_response(
        error_code: str,
        message: str,
        details: Optional[Any] = None,
        issues: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "error": message,
            "code": error_code
        }

        if details:
            response["details"] = details

        if issues is not None:
            response["issues"] = issues

        return response

    @staticmethod
    def issues_from_validation_errors(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Flatten pydantic errors into field-level issues."""
        issues = []
        for error in errors:
            path = [str(loc) for loc in error.get("loc", ()) if loc != "body"]
            issues.append({
                "path": path,
                "field": ".".join(path),
                "message": error.get("msg", "Invalid value"),
                "type": error.get("type")
            })
        return issues


class GlobalErrorHandler:
    """Global error handler for all application errors"""

    @staticmethod
    async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
        """Handle the service's own exception taxonomy"""

        request_id = request.headers.get("X-Request-ID", "unknown")

        log_extra = {
            "error_code": exc.code.value,
            "error_message": exc.message,
            "status_code": exc.status_code,
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method
        }
        if exc.status_code >= 500:
            logger.error(f"API error: {exc.code.value}", extra=log_extra)
        else:
            logger.warning(f"API error: {exc.code.value}", extra=log_extra)

        response = ErrorResponseBuilder.build_error_response(
            error_code=exc.code.value,
            message=exc.message,
            details=exc.detail
        )

        return JSONResponse(
            status_code=exc.status_code,
            content=response,
            headers=getattr(exc, "headers", None)
        )

    @staticmethod
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Handle request body validation errors as 400 with field-level issues"""

        request_id = request.headers.get("X-Request-ID", "unknown")
        issues = ErrorResponseBuilder.issues_from_validation_errors(exc.errors())

        logger.warning(
            f"Validation error: {len(issues)} issues",
            extra={
                "issues": issues,
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method
            }
        )

        response = ErrorResponseBuilder.build_error_response(
            error_code=ErrorCode.VALIDATION_ERROR.value,
            message="Validation failed",
            issues=issues
        )

        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=response
        )

    @staticmethod
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions"""

        request_id = request.headers.get("X-Request-ID", "unknown")

        logger.error(
            f"Unexpected error: {type(exc).__name__}",
            extra={
                "error_type": type(exc).__name__,
                "error_message": str(exc),
                "request_id": request_id,
                "path": request.url.path,
                "method": request.method
            },
            exc_info=True
        )

        if settings.DEBUG:
            message = f"Internal error: {str(exc)}"
            details = {"traceback": traceback.format_exc()}
        else:
            message = "Internal server error"
            details = None

        response = ErrorResponseBuilder.build_error_response(
            error_code=ErrorCode.INTERNAL_ERROR.value,
            message=message,
            details=details
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=response
        )
