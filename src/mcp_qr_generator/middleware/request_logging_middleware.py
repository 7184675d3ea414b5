# -*- coding: utf-8 -*-
"""Location: ./src/mcp_qr_generator/middleware/request_logging_middleware.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: MCP QR Generator Contributors

Request Logging Middleware.
Logs one line per HTTP exchange with method, path, status and duration, and
the (truncated) request body at debug level.
"""

# Standard
import logging
import time
from typing import Callable

# Third-Party
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# First-Party
from mcp_qr_generator.services.logging_service import LoggingService

logging_service = LoggingService()
logger = logging_service.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each HTTP request and its outcome."""

    def __init__(self, app, max_body_size: int = 4096):
        super().__init__(app)
        self.max_body_size = max_body_size  # bytes

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start = time.perf_counter()

        if logger.isEnabledFor(logging.DEBUG):
            body = await request.body()
            truncated = len(body) > self.max_body_size
            payload = body[: self.max_body_size].decode("utf-8", errors="ignore").strip() or "<empty>"
            logger.debug("Incoming request: %s %s body=%s%s", request.method, request.url.path, payload, "... [truncated]" if truncated else "")

        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - start) * 1000
            logger.exception("%s %s failed after %.1fms", request.method, request.url.path, elapsed_ms)
            raise

        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info("%s %s %d %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
