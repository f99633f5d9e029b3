"""
Request logging middleware.

Every request gets an ID, taken from an incoming X-Request-ID header or
generated, which is echoed back on the response together with the time
spent handling it. Refused requests (4xx) are logged as warnings so that
booking conflicts stand out from normal traffic.
"""
import time
import logging
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Polled by monitoring; not worth a log line each time
QUIET_PATHS = {"/health"}

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID and log its outcome and duration.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.error(f"[{request_id}] {route} raised {type(e).__name__}: {str(e)} after {elapsed_ms:.1f}ms")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.4f}"

        if request.url.path not in QUIET_PATHS:
            level = logging.WARNING if 400 <= response.status_code < 500 else logging.INFO
            if response.status_code >= 500:
                level = logging.ERROR
            logger.log(level, f"[{request_id}] {route} -> {response.status_code} in {elapsed_ms:.1f}ms")
        return response


def setup_middlewares(app):
    """
    Register the application's own middleware.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(RequestLoggingMiddleware)
