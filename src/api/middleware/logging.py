"""Request logging middleware."""

import time
from typing import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

# Query parameters that carry confirmation or reset tokens
REDACTED_QUERY_PARAMS = frozenset({"tkey", "token"})
QUIET_PATHS = frozenset({"/health"})


def redact_query(request: Request) -> str | None:
    """Render the query string with token values masked."""
    if not request.query_params:
        return None
    return "&".join(
        f"{key}={'***' if key in REDACTED_QUERY_PARAMS else value}"
        for key, value in request.query_params.multi_items()
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
            query=redact_query(request),
            client_ip=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error=str(e),
                duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            raise

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        log(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return response
