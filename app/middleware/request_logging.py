"""
Request logging middleware.
Tags each request with an id, rejects oversized bodies and logs timing.
"""

from typing import Callable
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import logging
import time
import uuid

from app.services.error_handler import ErrorHandlerService
from app.utils.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware assigning request ids and logging every request.

    Sets X-Request-ID and X-Processing-Time on responses and warns about
    requests slower than the configured threshold.
    """

    def __init__(
        self,
        app: ASGIApp,
        max_request_size: int = 30 * 1024 * 1024,
        slow_request_threshold: float = 2.0,
        enable_request_logging: bool = True
    ):
        super().__init__(app)
        self.max_request_size = max_request_size
        self.slow_request_threshold = slow_request_threshold
        self.enable_request_logging = enable_request_logging

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id
        start_time = time.time()

        oversize = self._declared_size(request)
        if oversize is not None:
            return ErrorHandlerService.handle_api_exception(
                PayloadTooLargeError(oversize, self.max_request_size), request
            )

        if self.enable_request_logging:
            logger.info(
                f"Request [{request_id}]: {request.method} {request.url.path}",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "client_ip": self._get_client_ip(request),
                }
            )

        response = await call_next(request)

        processing_time = time.time() - start_time
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Processing-Time"] = f"{processing_time:.4f}"

        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request [{request_id}]: {request.method} {request.url.path} "
                f"took {processing_time:.3f}s"
            )
        elif self.enable_request_logging:
            logger.info(f"Response [{request_id}]: {response.status_code} - {processing_time:.3f}s")

        return response

    def _declared_size(self, request: Request):
        """Return the Content-Length if it exceeds the limit, otherwise None."""
        content_length = request.headers.get("content-length")
        if not content_length:
            return None
        try:
            size = int(content_length)
        except ValueError:
            return None
        return size if size > self.max_request_size else None

    def _get_client_ip(self, request: Request) -> str:
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"
