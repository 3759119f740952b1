"""Daily reminder interface."""

from typing import Protocol


class ReminderScheduler(Protocol):
    """Interface for scheduling the daily writing reminder."""

    async def request_permission(self) -> bool:
        """Ask for permission to notify. Returns True if granted."""
        ...

    async def schedule_daily(self, hour: int, minute: int) -> None:
        """Schedule (or reschedule) the reminder at a local time of day."""
        ...

    async def cancel(self) -> None:
        """Cancel the reminder if one is scheduled."""
        ...
