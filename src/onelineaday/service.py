"""Journal service - the single object the CLI (or any UI) talks to.

Owns the entry and settings stores plus the reminder scheduler, tracks the
load lifecycle, and keeps statistics in step with the entries.
"""

import logging
from dataclasses import replace
from datetime import date, datetime
from enum import Enum

from .core import dates
from .core.entries import EntriesMap, Entry, make_entry
from .core.heatmap import Heatmap, build_heatmap
from .core.settings import AppSettings, parse_reminder_time
from .core.stats import Stats, compute_stats
from .ports.reminder_scheduler import ReminderScheduler
from .storage import EntryStore, PersistenceError, SettingsStore

logger = logging.getLogger(__name__)


class LoadState(Enum):
    """Lifecycle of the service's data."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ServiceNotReady(Exception):
    """Raised when the service is used before start() succeeded."""


class JournalService:
    """
    Injectable service holding the user's entries and settings.

    Construct once at startup, call start(), then pass it to consumers.
    """

    def __init__(
        self,
        entry_store: EntryStore,
        settings_store: SettingsStore,
        reminders: ReminderScheduler,
    ):
        self.entry_store = entry_store
        self.settings_store = settings_store
        self.reminders = reminders
        self.state = LoadState.UNINITIALIZED
        self.error: Exception | None = None
        self.settings = AppSettings()
        self._stats = compute_stats({})

    # ============== Lifecycle ==============

    async def start(self, as_of: date | None = None) -> LoadState:
        """Load entries and settings. Ends in READY or FAILED."""
        self.state = LoadState.LOADING
        try:
            await self.entry_store.load()
            self.settings = await self.settings_store.load()
        except Exception as e:
            logger.error(f"Failed to load journal: {e}")
            self.error = e
            self.state = LoadState.FAILED
            return self.state

        self.error = None
        self._refresh(as_of)
        self.state = LoadState.READY
        logger.info(f"Journal ready with {self._stats.total_entries} entries")
        return self.state

    def _require_ready(self) -> None:
        if self.state is not LoadState.READY:
            raise ServiceNotReady(f"Journal is {self.state.value}, not ready")

    def _refresh(self, as_of: date | None = None) -> None:
        self._stats = compute_stats(self.entry_store.entries, as_of)

    # ============== Entries ==============

    @property
    def entries(self) -> EntriesMap:
        return self.entry_store.entries

    @property
    def stats(self) -> Stats:
        return self._stats

    def today_entry(self, as_of: date | None = None) -> Entry | None:
        return self.entry_store.get(dates.today(as_of))

    def history(self) -> list[Entry]:
        """All entries, newest first."""
        return dates.sort_entries_desc(self.entries.values())

    async def save_today_entry(self, text: str, now: datetime | None = None) -> Entry:
        """
        Write today's line.

        Text is trimmed; empty text is saved as-is. Raises PersistenceError
        if the write fails, in which case nothing in memory changes.
        """
        self._require_ready()
        now = now or datetime.now()
        key = dates.to_key(now.date())
        entry = make_entry(key, text, existing=self.entry_store.get(key), now=now)
        await self.entry_store.upsert(entry)
        self._refresh(now.date())
        logger.info(f"Saved entry for {key}")
        return entry

    async def clear_entries(self) -> None:
        """Delete every entry. Raises PersistenceError on failure."""
        self._require_ready()
        await self.entry_store.clear()
        self._refresh()
        logger.info("Cleared all entries")

    def heatmap(self, reference_date: date | None = None) -> Heatmap:
        return build_heatmap(self.entries, reference_date)

    # ============== Reminders ==============

    async def _update_settings(self, **changes) -> None:
        settings = replace(self.settings, **changes)
        await self.settings_store.save(settings)
        self.settings = settings

    async def set_reminder_enabled(self, enabled: bool) -> bool:
        """
        Turn the daily reminder on or off.

        Returns the resulting enabled flag, which is False when permission
        to notify was denied.
        """
        self._require_ready()
        if not enabled:
            await self._update_settings(reminder_enabled=False)
            await self.reminders.cancel()
            return False

        if not await self.reminders.request_permission():
            logger.warning("Notification permission denied, reminder left off")
            await self._update_settings(reminder_enabled=False)
            return False

        hour, minute = parse_reminder_time(self.settings.reminder_time)
        await self.reminders.schedule_daily(hour, minute)
        try:
            await self._update_settings(reminder_enabled=True)
        except PersistenceError:
            # Scheduled job must not outlive settings that say it is off
            await self.reminders.cancel()
            raise
        return True

    async def set_reminder_time(self, time_str: str) -> None:
        """Change the reminder time, rescheduling if the reminder is on."""
        self._require_ready()
        hour, minute = parse_reminder_time(time_str)
        await self._update_settings(reminder_time=f"{hour:02d}:{minute:02d}")
        if self.settings.reminder_enabled:
            await self.reminders.schedule_daily(hour, minute)

    async def restore_reminder(self) -> bool:
        """Re-schedule the reminder saved in settings. Returns True if scheduled."""
        self._require_ready()
        if not self.settings.reminder_enabled:
            return False
        hour, minute = parse_reminder_time(self.settings.reminder_time)
        await self.reminders.schedule_daily(hour, minute)
        return True

    async def reload_entries(self, as_of: date | None = None) -> None:
        """Pick up writes made by another process."""
        self._require_ready()
        await self.entry_store.load()
        self._refresh(as_of)
