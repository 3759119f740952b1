"""Streaks and counters - pure functions of the entries map."""

from dataclasses import dataclass
from datetime import date
from typing import Mapping

from . import dates


@dataclass(frozen=True)
class Stats:
    """Statistics computed against a single 'today'."""

    total_entries: int
    entries_this_month: int
    current_streak: int
    best_streak: int


def total_entries(entries: Mapping) -> int:
    return len(entries)


def entries_this_month(entries: Mapping, as_of: date | None = None) -> int:
    """Count entries in today's calendar month (local clock)."""
    as_of = as_of or date.today()
    prefix = f"{as_of.year:04d}-{as_of.month:02d}-"
    return sum(1 for key in entries if key.startswith(prefix))


def _run_back(present: set[str], start: str) -> int:
    """Length of the run ending at start, walking backward."""
    length = 0
    current = start
    while current in present:
        length += 1
        current = dates.predecessor(current)
    return length


def current_streak(entries: Mapping, as_of: date | None = None) -> int:
    """
    Consecutive days with entries ending today.

    If today is still empty, a run ending yesterday counts: the streak only
    breaks once a full day passes without an entry.
    """
    present = set(entries)
    today_key = dates.today(as_of)
    if today_key in present:
        return _run_back(present, today_key)
    yesterday_key = dates.yesterday(as_of)
    if yesterday_key in present:
        return _run_back(present, yesterday_key)
    return 0


def best_streak(entries: Mapping) -> int:
    """
    Longest run of consecutive dates in the map.

    Only run starts (dates whose predecessor is absent) begin a forward walk,
    so each date is visited by at most one walk.
    """
    present = set(entries)
    best = 0
    for key in present:
        if dates.predecessor(key) in present:
            continue
        length = 1
        current = dates.successor(key)
        while current in present:
            length += 1
            current = dates.successor(current)
        best = max(best, length)
    return best


def calculate_streaks(entries: Mapping, as_of: date | None = None) -> tuple[int, int]:
    """Returns: (current_streak, best_streak)"""
    return current_streak(entries, as_of), best_streak(entries)


def compute_stats(entries: Mapping, as_of: date | None = None) -> Stats:
    """All counters, with today read once for the whole pass."""
    as_of = as_of or date.today()
    current, best = calculate_streaks(entries, as_of)
    return Stats(
        total_entries=total_entries(entries),
        entries_this_month=entries_this_month(entries, as_of),
        current_streak=current,
        best_streak=best,
    )
