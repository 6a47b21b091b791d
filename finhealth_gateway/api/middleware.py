"""FastAPI middleware for request tracing and metrics"""

import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from finhealth_gateway.infrastructure.observability.metrics import request_duration_histogram

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID; a caller-supplied one is propagated unchanged"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _endpoint_label(request: Request) -> str:
    # Route template keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request latency per route, skipping the scrape endpoint"""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration = time.time() - start_time

        endpoint = _endpoint_label(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(duration)
        logger.debug(
            "Request completed",
            extra={
                "request_id": getattr(request.state, "request_id", None),
                "endpoint": endpoint,
                "status": response.status_code,
                "duration_ms": duration * 1000,
            },
        )
        return response
