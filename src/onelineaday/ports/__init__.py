"""Ports - interfaces/protocols for external dependencies."""

from .kv_store import KeyValueStore
from .reminder_scheduler import ReminderScheduler

__all__ = [
    "KeyValueStore",
    "ReminderScheduler",
]
