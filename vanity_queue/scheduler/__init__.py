"""
Scheduler module.
Contains the concurrency-bounded FIFO job scheduler.
"""

from vanity_queue.scheduler.main import Scheduler, SchedulerStats

__all__ = ["Scheduler", "SchedulerStats"]
