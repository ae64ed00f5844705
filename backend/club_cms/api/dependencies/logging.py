"""
Request Logging Middleware
===========================
Logs all incoming requests and outgoing responses with timing information.
"""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from club_cms.core.logging_config import get_logger


logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses

    Features:
    - Request ID generation and tracking
    - Request timing
    - Structured logging
    - Response status tracking
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        request_id = str(uuid.uuid4())

        # Available to routes as request.state.request_id
        request.state.request_id = request_id

        start_time = time.time()

        method = request.method
        path = request.url.path
        request_logger = logger.bind(request_id=request_id, method=method, path=path)

        request_logger.bind(
            client_host=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent", "unknown"),
        ).info("Incoming request {} {}", method, path)

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            request_logger.bind(process_time=round(process_time, 4)).error(
                "Request failed: {}", e
            )
            raise

        process_time = time.time() - start_time

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(round(process_time, 4))

        request_logger.bind(
            status_code=response.status_code,
            process_time=round(process_time, 4),
        ).info("Request completed {} {} -> {}", method, path, response.status_code)

        return response
