import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from studentdesk.core.logging import logger
from studentdesk.core.metrics import RequestMetrics


def route_label(request: Request) -> str:
    """Matched route template ("/api/students/{student_id}"), else the raw path."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestObservabilityMiddleware(BaseHTTPMiddleware):
    """Times every request, feeds the Prometheus metrics and logs one line per request."""

    def __init__(self, app, metrics: RequestMetrics):
        super().__init__(app)
        self.metrics = metrics

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            duration = time.perf_counter() - start
            route = route_label(request)
            self.metrics.observe(request.method, route, status_code, duration)
            logger.info(
                "HTTP Request",
                extra={
                    "context": {
                        "method": request.method,
                        "path": route,
                        "statusCode": status_code,
                        "duration": f"{duration:.3f}s",
                        "ip": request.client.host if request.client else None,
                        "userAgent": request.headers.get("user-agent"),
                    }
                },
            )
