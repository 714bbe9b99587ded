"""Custom middleware for the application."""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.config import settings

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests and response times."""

    def __init__(self, app, slow_threshold: float | None = None):
        super().__init__(app)
        self.slow_threshold = (
            slow_threshold if slow_threshold is not None else settings.slow_request_threshold_seconds
        )

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request details and timing.

        Args:
            request: Incoming request
            call_next: Next middleware/route handler

        Returns:
            Response: Route response
        """
        start_time = time.perf_counter()

        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        request.state.request_id = request_id

        response = await call_next(request)

        duration = time.perf_counter() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"

        if duration > self.slow_threshold:
            logger.warning(
                "Slow request: %s %s took %.3fs (request_id=%s)",
                request.method,
                request.url.path,
                duration,
                request_id,
            )
        else:
            logger.debug(
                "%s %s -> %s in %.3fs",
                request.method,
                request.url.path,
                response.status_code,
                duration,
            )

        return response
