"""Adapters - I/O implementations of ports."""

from .file_kv import FileKeyValueStore
from .memory_kv import InMemoryKeyValueStore
from .apscheduler_reminder import APSchedulerReminder, REMINDER_JOB_ID

__all__ = [
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "APSchedulerReminder",
    "REMINDER_JOB_ID",
]
