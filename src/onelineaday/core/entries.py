"""Entry domain model - no I/O dependencies."""

from dataclasses import dataclass, replace
from datetime import datetime
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Entry:
    """A single day's line of text."""

    date: str
    text: str
    created_at: str
    updated_at: str

    def to_dict(self) -> dict:
        """Serialize using the persisted field names."""
        return {
            "date": self.date,
            "text": self.text,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Entry":
        """
        Create Entry from its persisted form.

        Raises KeyError if date is missing, TypeError if a field is not a string.
        """
        fields = {
            "date": data["date"],
            "text": data.get("text", ""),
            "created_at": data.get("createdAt", ""),
            "updated_at": data.get("updatedAt", ""),
        }
        for name, value in fields.items():
            if not isinstance(value, str):
                raise TypeError(f"{name} must be a string, got {type(value).__name__}")
        return cls(**fields)


EntriesMap = Mapping[str, Entry]


def read_only(entries: dict[str, Entry]) -> EntriesMap:
    """Wrap a mapping so consumers cannot mutate it in place."""
    return MappingProxyType(entries)


def make_entry(
    date_key: str,
    text: str,
    existing: Entry | None = None,
    now: datetime | None = None,
) -> Entry:
    """
    Build the entry to write for a date.

    Text is trimmed. An existing entry keeps its created_at; updated_at
    always moves to now.
    """
    stamp = (now or datetime.now()).isoformat()
    if existing is not None:
        return replace(existing, text=text.strip(), updated_at=stamp)
    return Entry(date=date_key, text=text.strip(), created_at=stamp, updated_at=stamp)
