"""Request correlation and access logging middleware."""

import time
import uuid
from typing import Any

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint


logger = structlog.get_logger()

QUIET_PATHS = ("/health/live", "/health/ready", "/docs", "/redoc", "/openapi.json")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID.

    A client supplied ``X-Request-ID`` is reused, otherwise a UUID is
    generated. The ID is bound into the structlog context, stored on
    ``request.state`` (as ``trace_id`` for problem documents) and echoed
    back in the response header.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.trace_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            # principal_id and company_id are bound by the identity dependency
            structlog.contextvars.unbind_contextvars(
                "request_id", "principal_id", "company_id"
            )

        response.headers["X-Request-ID"] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one ``request_completed`` line per request.

    The level follows the status: error for 5xx, warning for 4xx. The
    resolved principal and company are included when the request was
    authenticated.
    """

    def __init__(self, app: Any, exclude_paths: tuple[str, ...] = QUIET_PATHS) -> None:
        super().__init__(app)
        self.exclude_paths = exclude_paths

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if path.startswith(self.exclude_paths):
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request_failed",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise

        log_data: dict[str, Any] = {
            "method": request.method,
            "path": path,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            "client_ip": get_client_ip(request),
        }
        for attr in ("principal_id", "company_id"):
            value = getattr(request.state, attr, None)
            if value is not None:
                log_data[attr] = value

        if response.status_code >= 500:
            logger.error("request_completed", **log_data)
        elif response.status_code >= 400:
            logger.warning("request_completed", **log_data)
        else:
            logger.info("request_completed", **log_data)

        return response


def get_client_ip(request: Request) -> str | None:
    """Client address, honouring ``X-Forwarded-For`` from a proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()

    if request.client:
        return request.client.host

    return None
