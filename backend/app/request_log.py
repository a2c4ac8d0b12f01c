import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


def format_request_line(method: str, path: str, status_code: int, duration_ms: float,
                        content_length: str, client: str) -> str:
    """One access line: method, path, status, latency, response size, client."""
    return f"{client} {method} {path} {status_code} {duration_ms:.3f} ms - {content_length}"


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        client = request.client.host if request.client else "-"

        line = format_request_line(
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            response.headers.get("content-length", "-"),
            client,
        )
        if response.status_code >= 500:
            logger.warning(line)
        else:
            logger.info(line)

        return response
