"""Functional core - pure business logic with no I/O."""

from .entries import Entry, EntriesMap, make_entry, read_only
from .dates import Ordering, compare, predecessor, successor, today, yesterday
from .stats import (
    Stats,
    best_streak,
    calculate_streaks,
    compute_stats,
    current_streak,
    entries_this_month,
    total_entries,
)
from .heatmap import DayCell, Heatmap, MonthLabel, build_heatmap
from .settings import AppSettings, parse_reminder_time

__all__ = [
    # Entries
    "Entry",
    "EntriesMap",
    "make_entry",
    "read_only",
    # Dates
    "Ordering",
    "compare",
    "predecessor",
    "successor",
    "today",
    "yesterday",
    # Stats
    "Stats",
    "best_streak",
    "calculate_streaks",
    "compute_stats",
    "current_streak",
    "entries_this_month",
    "total_entries",
    # Heatmap
    "DayCell",
    "Heatmap",
    "MonthLabel",
    "build_heatmap",
    # Settings
    "AppSettings",
    "parse_reminder_time",
]
