"""
API routes module.
"""

from vanity_queue.api.routes.generate import router as generate_router
from vanity_queue.api.routes.health import router as health_router
from vanity_queue.api.routes.jobs import router as jobs_router

__all__ = ["jobs_router", "generate_router", "health_router"]
