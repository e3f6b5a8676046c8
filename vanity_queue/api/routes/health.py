"""
Health check routes.
"""

from fastapi import APIRouter
from fastapi.responses import Response

from vanity_queue import __version__
from vanity_queue.api.dependencies import SchedulerDep
from vanity_queue.observability.metrics import get_metrics
from vanity_queue.types.api import HealthResponse
from vanity_queue.types.job import utc_now

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Report queue occupancy and limits.",
)
async def health_check(scheduler: SchedulerDep) -> HealthResponse:
    """
    Perform a health check.

    Returns:
        HealthResponse with running/queued counts and configured limits.
    """
    stats = scheduler.stats()
    return HealthResponse(
        status="ok",
        version=__version__,
        running=stats.running,
        queued=stats.queued,
        max_concurrent=stats.max_concurrent,
        max_queue_depth=stats.max_queue_depth,
        timestamp=utc_now(),
    )


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics() -> Response:
    """
    Expose Prometheus metrics.

    Returns:
        Prometheus-formatted metrics.
    """
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
