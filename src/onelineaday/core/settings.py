"""Reminder settings model - no I/O dependencies."""

import re
from dataclasses import dataclass

DEFAULT_REMINDER_TIME = "20:00"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class AppSettings:
    """User-facing settings."""

    reminder_enabled: bool = False
    reminder_time: str = DEFAULT_REMINDER_TIME

    def to_dict(self) -> dict:
        return {
            "reminderEnabled": self.reminder_enabled,
            "reminderTime": self.reminder_time,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppSettings":
        """
        Shallow-merge stored values over the defaults.

        Fields that are missing or of the wrong type keep their default.
        """
        defaults = cls()
        enabled = data.get("reminderEnabled")
        time_str = data.get("reminderTime")
        return cls(
            reminder_enabled=enabled if isinstance(enabled, bool) else defaults.reminder_enabled,
            reminder_time=time_str if is_valid_time(time_str) else defaults.reminder_time,
        )


def is_valid_time(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_reminder_time(value)
    except ValueError:
        return False
    return True


def parse_reminder_time(value: str) -> tuple[int, int]:
    """Parse 'HH:MM' (24h) into (hour, minute)."""
    match = _TIME_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid reminder time: {value!r} (expected HH:MM)")
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise ValueError(f"Invalid reminder time: {value!r} (expected HH:MM)")
    return hour, minute
