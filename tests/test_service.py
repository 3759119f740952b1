"""Tests for the journal service."""

import asyncio
from datetime import date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from onelineaday.adapters.memory_kv import InMemoryKeyValueStore
from onelineaday.core.entries import Entry
from onelineaday.core.settings import AppSettings
from onelineaday.service import JournalService, LoadState, ServiceNotReady
from onelineaday.storage import EntryStore, PersistenceError, SettingsStore


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def reminders():
    mock = AsyncMock()
    mock.request_permission.return_value = True
    return mock


@pytest.fixture
def service(kv, reminders):
    return JournalService(EntryStore(kv), SettingsStore(kv), reminders)


@pytest.fixture
def ready(service):
    asyncio.run(service.start())
    return service


class TestLifecycle:
    def test_starts_uninitialized(self, service):
        assert service.state is LoadState.UNINITIALIZED

    def test_start_reaches_ready(self, service):
        assert asyncio.run(service.start()) is LoadState.READY
        assert service.error is None

    def test_start_failure_reaches_failed(self, reminders):
        entry_store = AsyncMock()
        entry_store.load.side_effect = RuntimeError("boom")
        service = JournalService(entry_store, AsyncMock(), reminders)

        assert asyncio.run(service.start()) is LoadState.FAILED
        assert str(service.error) == "boom"

    def test_operations_require_ready(self, service):
        with pytest.raises(ServiceNotReady):
            asyncio.run(service.save_today_entry("too early"))

    def test_loads_existing_entries(self, kv, reminders):
        asyncio.run(EntryStore(kv).upsert(Entry(date.today().isoformat(), "hello", "", "")))
        service = JournalService(EntryStore(kv), SettingsStore(kv), reminders)
        asyncio.run(service.start())

        assert service.today_entry().text == "hello"
        assert service.stats.total_entries == 1
        assert service.stats.current_streak == 1


class TestSaveTodayEntry:
    def test_trims_and_saves(self, ready):
        entry = asyncio.run(ready.save_today_entry("  a good day  "))
        assert entry.text == "a good day"
        assert entry.date == date.today().isoformat()
        assert ready.today_entry() == entry

    def test_rewrite_preserves_created_at(self, ready):
        morning = datetime.combine(date.today(), datetime.min.time()).replace(hour=8)
        evening = morning.replace(hour=21)

        first = asyncio.run(ready.save_today_entry("draft", now=morning))
        second = asyncio.run(ready.save_today_entry("final", now=evening))

        assert second.created_at == first.created_at == morning.isoformat()
        assert second.updated_at == evening.isoformat()
        assert len(ready.entries) == 1

    def test_empty_text_is_saved(self, ready):
        entry = asyncio.run(ready.save_today_entry("   "))
        assert entry.text == ""
        assert ready.stats.total_entries == 1

    def test_stats_recomputed(self, ready):
        now = datetime.now()
        for days_ago in (2, 1, 0):
            asyncio.run(ready.save_today_entry("x", now=now - timedelta(days=days_ago)))
        assert ready.stats.total_entries == 3
        assert ready.stats.current_streak == 3
        assert ready.stats.best_streak == 3

    def test_round_trip_through_fresh_service(self, ready, kv, reminders):
        saved = asyncio.run(ready.save_today_entry("durable"))
        fresh = JournalService(EntryStore(kv), SettingsStore(kv), reminders)
        asyncio.run(fresh.start())
        assert fresh.entries[saved.date] == saved

    def test_write_failure_leaves_state(self, ready):
        ready.entry_store.kv = AsyncMock()
        ready.entry_store.kv.get.return_value = None
        ready.entry_store.kv.set.side_effect = OSError("nope")

        with pytest.raises(PersistenceError):
            asyncio.run(ready.save_today_entry("lost"))
        assert ready.today_entry() is None
        assert ready.stats.total_entries == 0


class TestClearEntries:
    def test_clear_resets_everything(self, ready, kv, reminders):
        now = datetime.now()
        for days_ago in range(3):
            asyncio.run(ready.save_today_entry("x", now=now - timedelta(days=days_ago)))

        asyncio.run(ready.clear_entries())

        assert dict(ready.entries) == {}
        assert ready.stats.total_entries == 0
        assert ready.stats.entries_this_month == 0
        assert ready.stats.current_streak == 0
        assert ready.stats.best_streak == 0

        fresh = JournalService(EntryStore(kv), SettingsStore(kv), reminders)
        asyncio.run(fresh.start())
        assert dict(fresh.entries) == {}


class TestHistoryAndHeatmap:
    def test_history_newest_first(self, ready):
        now = datetime.now()
        for days_ago in (5, 0, 2):
            asyncio.run(ready.save_today_entry("x", now=now - timedelta(days=days_ago)))
        keys = [e.date for e in ready.history()]
        assert keys == sorted(keys, reverse=True)

    def test_heatmap_marks_today(self, ready):
        asyncio.run(ready.save_today_entry("x"))
        heatmap = ready.heatmap()
        assert heatmap.cells[-1].has_entry is True
        assert heatmap.active_days() == 1


class TestReminders:
    def test_enable_schedules_and_persists(self, ready, reminders, kv):
        assert asyncio.run(ready.set_reminder_enabled(True)) is True
        reminders.schedule_daily.assert_awaited_once_with(20, 0)
        assert asyncio.run(SettingsStore(kv).load()).reminder_enabled is True

    def test_permission_denied_keeps_off(self, ready, reminders, kv):
        reminders.request_permission.return_value = False
        assert asyncio.run(ready.set_reminder_enabled(True)) is False
        reminders.schedule_daily.assert_not_awaited()
        assert ready.settings.reminder_enabled is False
        assert asyncio.run(SettingsStore(kv).load()).reminder_enabled is False

    def test_disable_cancels(self, ready, reminders):
        asyncio.run(ready.set_reminder_enabled(True))
        asyncio.run(ready.set_reminder_enabled(False))
        reminders.cancel.assert_awaited_once()
        assert ready.settings.reminder_enabled is False

    def test_time_change_reschedules_when_enabled(self, ready, reminders):
        asyncio.run(ready.set_reminder_enabled(True))
        asyncio.run(ready.set_reminder_time("7:30"))
        reminders.schedule_daily.assert_awaited_with(7, 30)
        assert ready.settings.reminder_time == "07:30"

    def test_time_change_when_disabled_only_persists(self, ready, reminders, kv):
        asyncio.run(ready.set_reminder_time("06:15"))
        reminders.schedule_daily.assert_not_awaited()
        assert asyncio.run(SettingsStore(kv).load()) == AppSettings(False, "06:15")

    def test_invalid_time_rejected(self, ready):
        with pytest.raises(ValueError):
            asyncio.run(ready.set_reminder_time("late"))
        assert ready.settings.reminder_time == "20:00"

    def test_restore_reminder(self, kv, reminders):
        asyncio.run(SettingsStore(kv).save(AppSettings(True, "21:45")))
        service = JournalService(EntryStore(kv), SettingsStore(kv), reminders)
        asyncio.run(service.start())

        assert asyncio.run(service.restore_reminder()) is True
        reminders.schedule_daily.assert_awaited_once_with(21, 45)

    def test_restore_reminder_when_off(self, ready, reminders):
        assert asyncio.run(ready.restore_reminder()) is False
        reminders.schedule_daily.assert_not_awaited()

    def test_settings_save_failure_propagates(self, ready):
        ready.settings_store.kv = AsyncMock()
        ready.settings_store.kv.set.side_effect = OSError("nope")
        with pytest.raises(PersistenceError):
            asyncio.run(ready.set_reminder_time("09:00"))
        assert ready.settings.reminder_time == "20:00"

    def test_enable_save_failure_cancels_job(self, ready, reminders):
        ready.settings_store.kv = AsyncMock()
        ready.settings_store.kv.set.side_effect = OSError("nope")

        with pytest.raises(PersistenceError):
            asyncio.run(ready.set_reminder_enabled(True))
        reminders.schedule_daily.assert_awaited_once_with(20, 0)
        reminders.cancel.assert_awaited_once()
        assert ready.settings.reminder_enabled is False

    def test_disable_save_failure_keeps_job(self, ready, reminders):
        asyncio.run(ready.set_reminder_enabled(True))
        ready.settings_store.kv = AsyncMock()
        ready.settings_store.kv.set.side_effect = OSError("nope")

        with pytest.raises(PersistenceError):
            asyncio.run(ready.set_reminder_enabled(False))
        reminders.cancel.assert_not_awaited()
        assert ready.settings.reminder_enabled is True
