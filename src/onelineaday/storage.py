"""Entry and settings persistence on top of a key-value store."""

import asyncio
import json
import logging

from .core.entries import EntriesMap, Entry, read_only
from .core.settings import AppSettings
from .ports.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

ENTRIES_KEY = "one-line-a-day-entries"
SETTINGS_KEY = "one-line-a-day-settings"


class PersistenceError(Exception):
    """The underlying store rejected a write."""


class DeserializationError(Exception):
    """Persisted bytes could not be decoded."""


def encode_entries(entries: EntriesMap) -> bytes:
    return json.dumps({key: entry.to_dict() for key, entry in entries.items()}).encode("utf-8")


def decode_entries(raw: bytes) -> dict[str, Entry]:
    """
    Decode the entries blob.

    Raises DeserializationError if the blob is not a JSON object. Individual
    malformed entries are logged and skipped so the rest survive.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DeserializationError(f"Invalid entries JSON: {e}") from e

    if not isinstance(data, dict):
        raise DeserializationError(f"Expected a JSON object, got {type(data).__name__}")

    entries = {}
    for key, value in data.items():
        if not isinstance(value, dict):
            logger.warning(f"Skipping entry {key!r}: not an object")
            continue
        try:
            entries[key] = Entry.from_dict({**value, "date": key})
        except (KeyError, TypeError) as e:
            logger.warning(f"Skipping malformed entry {key!r}: {e}")
    return entries


class EntryStore:
    """
    Owns the date -> entry mapping.

    Every write persists the whole map in one set() call. Writes are
    serialized with a lock so concurrent upserts cannot lose each other.
    """

    def __init__(self, kv: KeyValueStore, key: str = ENTRIES_KEY):
        self.kv = kv
        self.key = key
        self._entries: dict[str, Entry] = {}
        self._lock = asyncio.Lock()

    @property
    def entries(self) -> EntriesMap:
        """Read-only view of the last loaded or committed map."""
        return read_only(self._entries)

    async def _read(self) -> dict[str, Entry]:
        """Read the persisted map. Sink errors propagate; bad data reads as empty."""
        raw = await self.kv.get(self.key)
        if not raw:
            return {}

        try:
            return decode_entries(raw)
        except DeserializationError as e:
            logger.error(f"Discarding corrupt entries: {e}")
            return {}

    async def load(self) -> EntriesMap:
        """Load entries. Missing, unreadable or corrupt data yields an empty map."""
        try:
            self._entries = await self._read()
        except Exception as e:
            logger.error(f"Failed to read entries: {e}")
            self._entries = {}
        logger.debug(f"Loaded {len(self._entries)} entries")
        return self.entries

    def get(self, date_key: str) -> Entry | None:
        """Entry for a date, or None."""
        return self._entries.get(date_key)

    async def upsert(self, entry: Entry) -> None:
        """Merge entry by date and persist. Raises PersistenceError."""
        async with self._lock:
            try:
                current = await self._read()
            except Exception as e:
                logger.error(f"Failed to read entries before saving {entry.date}: {e}")
                raise PersistenceError(f"Failed to save entry for {entry.date}") from e
            updated = {**current, entry.date: entry}
            try:
                await self.kv.set(self.key, encode_entries(updated))
            except Exception as e:
                logger.error(f"Failed to save entry for {entry.date}: {e}")
                raise PersistenceError(f"Failed to save entry for {entry.date}") from e
            self._entries = updated

    async def clear(self) -> None:
        """Remove all entries. Raises PersistenceError, leaving state intact."""
        async with self._lock:
            try:
                await self.kv.delete(self.key)
            except Exception as e:
                logger.error(f"Failed to clear entries: {e}")
                raise PersistenceError("Failed to clear entries") from e
            self._entries = {}


class SettingsStore:
    """Reads and writes AppSettings."""

    def __init__(self, kv: KeyValueStore, key: str = SETTINGS_KEY):
        self.kv = kv
        self.key = key

    async def load(self) -> AppSettings:
        """Load settings, falling back to defaults."""
        try:
            raw = await self.kv.get(self.key)
        except Exception as e:
            logger.warning(f"Failed to read settings: {e}")
            return AppSettings()

        if not raw:
            return AppSettings()

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to load settings: {e}")
            return AppSettings()

        if not isinstance(data, dict):
            logger.warning("Settings blob is not an object, using defaults")
            return AppSettings()

        return AppSettings.from_dict(data)

    async def save(self, settings: AppSettings) -> None:
        """Persist settings. Raises PersistenceError."""
        try:
            await self.kv.set(self.key, json.dumps(settings.to_dict()).encode("utf-8"))
        except Exception as e:
            logger.error(f"Failed to save settings: {e}")
            raise PersistenceError("Failed to save settings") from e
