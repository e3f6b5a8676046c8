"""
FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from vanity_queue import __version__
from vanity_queue.api.error_handlers import register_error_handlers
from vanity_queue.api.middleware import register_request_logging
from vanity_queue.api.routes import generate_router, health_router, jobs_router
from vanity_queue.config import Settings, get_settings
from vanity_queue.generator import GeneratorAdapter
from vanity_queue.observability.logging import setup_logging
from vanity_queue.observability.metrics import setup_metrics
from vanity_queue.observability.tracing import instrument_fastapi, setup_tracing
from vanity_queue.recovery import Recovery
from vanity_queue.scheduler import Scheduler
from vanity_queue.store import FileJobStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Builds the store, generator and scheduler, then recovers interrupted
    jobs before the server starts accepting requests.
    """
    settings: Settings = app.state.settings

    # Startup
    setup_logging(settings)
    metrics = setup_metrics()
    setup_tracing(settings)

    store = FileJobStore(settings.jobs_dir)
    generator = GeneratorAdapter(settings.generator_argv, metrics=metrics)
    scheduler = Scheduler(
        store=store,
        generator=generator,
        max_concurrent=settings.max_concurrent,
        max_queue_depth=settings.max_queue_depth,
        metrics=metrics,
    )

    app.state.store = store
    app.state.generator = generator
    app.state.scheduler = scheduler

    recovered = await Recovery(store, scheduler, metrics=metrics).run_once()

    logger.info(
        "Application started",
        extra={
            "jobs_dir": settings.jobs_dir,
            "max_suffix_length": settings.max_suffix_length,
            "default_timeout_ms": settings.timeout_ms,
            "max_concurrent": settings.max_concurrent,
            "max_queue_depth": settings.max_queue_depth,
            "recovered_jobs": recovered,
        },
    )

    yield

    # Shutdown
    await scheduler.shutdown()
    logger.info("Application shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use instead of the environment.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title="Vanity Keypair Queue API",
        description="Queued vanity keypair generation backed by solana-vanity",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings or get_settings()

    register_request_logging(app)
    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(jobs_router)
    app.include_router(generate_router)

    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app(settings)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
