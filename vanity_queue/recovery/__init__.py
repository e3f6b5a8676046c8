"""
Recovery module.
Contains the startup routine that re-queues interrupted jobs.
"""

from vanity_queue.recovery.main import Recovery

__all__ = ["Recovery"]
