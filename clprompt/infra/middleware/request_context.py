"""
Request context middleware for structured logging.
"""

from __future__ import annotations

from typing import Callable
from uuid import uuid4

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from clprompt.infra.config.logging_config import (
    bind_context,
    clear_context,
    get_logger,
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Adds a request_id and the route to the structlog context.

    Logs request start/end and echoes the X-Request-ID header.
    """

    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:  # type: ignore[override]
        request_id = request.headers.get("x-request-id") or uuid4().hex
        bind_context(
            request_id=request_id, path=str(request.url.path), method=request.method
        )
        logger = get_logger("http")

        logger.info("request.start")
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            logger.info("request.end", status_code=response.status_code)
            return response
        except Exception as exc:  # pragma: no cover
            logger.exception("request.error", error=str(exc))
            raise
        finally:
            clear_context()
