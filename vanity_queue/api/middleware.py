"""
Request logging and metrics middleware.
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from vanity_queue.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


def _route_template(request: Request) -> str:
    """Route path template, so job ids do not explode metric labels."""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log every request and record its latency."""
    start = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start

    endpoint = _route_template(request)
    get_metrics().record_api_request(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code,
        duration_seconds=duration,
    )
    logger.info(
        "Request handled",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round(duration * 1000, 2),
        },
    )
    return response


def register_request_logging(app: FastAPI) -> None:
    app.add_middleware(BaseHTTPMiddleware, dispatch=log_requests)
