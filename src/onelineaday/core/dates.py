"""Date key arithmetic - pure functions over YYYY-MM-DD strings."""

from datetime import date, timedelta
from enum import Enum
from typing import Iterable

from .entries import Entry


class Ordering(Enum):
    """Result of comparing two date keys."""

    BEFORE = -1
    EQUAL = 0
    AFTER = 1


def to_key(d: date) -> str:
    """Serialize a date as a zero-padded YYYY-MM-DD key."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def from_key(key: str) -> date:
    """Parse a YYYY-MM-DD key into a date."""
    year, month, day = (int(part) for part in key.split("-"))
    return date(year, month, day)


def today(as_of: date | None = None) -> str:
    """Key for the current local date."""
    return to_key(as_of or date.today())


def yesterday(as_of: date | None = None) -> str:
    """Key for the day before today."""
    return to_key((as_of or date.today()) - timedelta(days=1))


def predecessor(key: str) -> str:
    return to_key(from_key(key) - timedelta(days=1))


def successor(key: str) -> str:
    return to_key(from_key(key) + timedelta(days=1))


def compare(a: str, b: str) -> Ordering:
    """
    Compare two keys chronologically.

    Fixed-width zero-padded keys sort lexicographically in date order.
    """
    if a < b:
        return Ordering.BEFORE
    if a > b:
        return Ordering.AFTER
    return Ordering.EQUAL


def format_entry_date(key: str) -> str:
    """Friendly label for a key, e.g. 'Tue, Dec 9, 2025'."""
    d = from_key(key)
    return f"{d.strftime('%a, %b')} {d.day}, {d.year}"


def sort_entries_desc(entries: Iterable[Entry]) -> list[Entry]:
    """Sort entries newest-first by their date key."""
    return sorted(entries, key=lambda e: e.date, reverse=True)
