"""Key-value persistence interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for an opaque asynchronous byte store."""

    async def get(self, key: str) -> bytes | None:
        """Read the value for a key. Returns None if absent."""
        ...

    async def set(self, key: str, value: bytes) -> None:
        """Write/overwrite the value for a key in a single step."""
        ...

    async def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        ...
