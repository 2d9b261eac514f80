"""
Request Context Middleware.

Gives every Notely request a correlation id and one access log line.

The id comes from the caller's X-Request-ID when it is a short token of
safe characters, otherwise a fresh uuid4 is used. It is exposed as
request.state.request_id (error bodies are logged with it) and echoed
back with the elapsed time in X-Response-Time.

The access line carries status, duration, client host and whether a
bearer credential was sent. 5xx responses log at error, 4xx at warning,
everything else at info. The auth dependency adds user_id to the same
context once the token resolves.
"""

import re
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from notely.core.logging import get_logger
from notely.core.utils import utc_now

logger = get_logger(__name__)

_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,64}")


def resolve_request_id(header_value: str | None) -> str:
    """Accept a caller-supplied id only if it is safe to echo and log."""
    if header_value and _REQUEST_ID_PATTERN.fullmatch(header_value):
        return header_value
    return str(uuid.uuid4())


def _elapsed_ms(start) -> int:
    return int((utc_now() - start).total_seconds() * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Correlation id, timing header and access log for every request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = resolve_request_id(request.headers.get("X-Request-ID"))
        start_time = utc_now()
        request.state.request_id = request_id
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start_time), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start_time)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400:
                log = logger.warning
            else:
                log = logger.info
            log(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                    "client_host": request.client.host if request.client else None,
                    "has_auth": "authorization" in request.headers,
                },
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
