"""
Request logging middleware for applications served through create_asgi_app()
"""

import time
import uuid
from typing import Any, Callable, Dict

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from virtualcomponents.core.logging import get_logger

logger = get_logger(__name__)


def application_context(request: Request) -> Dict[str, Any]:
    """Name and namespace of the application class serving ``request``."""
    application = getattr(request.app.state, "application", None)
    if application is None:
        return {}
    return {
        "application": application.__name__,
        "namespace": application.app_namespace(),
    }


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request with the serving application's name and namespace.

    The same values are bound as structlog context variables while the
    request is handled, so log lines written by controller actions carry
    them as well.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())
        context = application_context(request)
        log = logger.bind(request_id=request_id, **context)
        start_time = time.time()

        log.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )

        with structlog.contextvars.bound_contextvars(request_id=request_id, **context):
            response = await call_next(request)

        log.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=f"{time.time() - start_time:.3f}s",
        )

        response.headers["X-Request-ID"] = request_id
        return response
