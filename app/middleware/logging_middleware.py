"""
Logging middleware for TechQuiz Backend
One log line per finished request with status and latency
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.logging import LoggerFactory

logger = LoggerFactory.get_request_logger()

QUIET_PATHS = {"/", f"{settings.API_V1_STR}/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests and their outcome
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"{request.method} {request.url.path} failed",
                extra={
                    "request_id": request_id,
                    "process_time": round(time.perf_counter() - start_time, 4),
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            f"{request.method} {request.url.path} -> {response.status_code}",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "process_time": round(process_time, 4),
                "client": request.client.host if request.client else "unknown",
            },
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
