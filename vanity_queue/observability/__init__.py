"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from vanity_queue.observability.logging import setup_logging
from vanity_queue.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from vanity_queue.observability.tracing import get_tracer, instrument_fastapi, setup_tracing

__all__ = [
    "setup_logging",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "instrument_fastapi",
    "get_tracer",
]
