"""
HTTP Middleware for the Merchandise Catalog Service.

Provides middleware components for request processing.
"""
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pkg.logger.logger import set_request_id

from .metrics import MetricsMiddleware


REQUEST_ID_HEADER = "X-Request-ID"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Put the caller's request ID (or a fresh one) into the log context.

    The ID is echoed back in the response header.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_request_id(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        return response


__all__ = [
    "MetricsMiddleware",
    "RequestIdMiddleware",
    "REQUEST_ID_HEADER",
]
