import time
import json
import traceback
from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from relief_auth.core.logger.logger import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """One JSON access-log line per request, correlated by X-Request-ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        entry: Dict[str, Any] = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        try:
            response = await call_next(request)
        except Exception as e:
            entry.update({
                "duration_ms": _elapsed_ms(started),
                "error": str(e),
                "error_type": type(e).__name__,
                "stack_trace": traceback.format_exc()
            })
            logger.error(json.dumps(entry))
            raise

        entry["status_code"] = response.status_code
        entry["duration_ms"] = _elapsed_ms(started)

        # set by the bearer dependency on authenticated routes
        claims = getattr(request.state, "user_claims", None)
        if claims is not None:
            entry["user_id"] = claims.user_id
            entry["role"] = claims.role.value

        response.headers[REQUEST_ID_HEADER] = request_id

        if response.status_code >= 500:
            logger.error(json.dumps(entry))
        elif response.status_code >= 400:
            logger.warning(json.dumps(entry))
        else:
            logger.info(json.dumps(entry))

        return response
