"""
Job store module.
Contains the store interface and its file-backed implementation.
"""

from vanity_queue.store.base import JobStore
from vanity_queue.store.file_store import FileJobStore

__all__ = ["JobStore", "FileJobStore"]
