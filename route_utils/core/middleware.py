"""
Starlette middleware that seeds the logging context for each request
"""
import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from route_utils.core.config import get_settings
from route_utils.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Add request id, method and path to every log record of the request"""

    def __init__(self, app, request_id_header: Optional[str] = None):
        super().__init__(app)
        self.request_id_header = request_id_header or get_settings().request_id_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        # Reuse an incoming request id so traces line up across services
        request_id = request.headers.get(self.request_id_header) or str(uuid.uuid4())

        LoggingConfig.set_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        start_time = time.time()
        try:
            response = await call_next(request)

            logger.debug(
                "Request completed",
                extra={
                    "status_code": response.status_code,
                    "duration_ms": int((time.time() - start_time) * 1000),
                }
            )

            response.headers[self.request_id_header] = request_id
            return response
        finally:
            LoggingConfig.clear_context()
