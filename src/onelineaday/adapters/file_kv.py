"""File-based key-value storage adapter."""

import asyncio
import os
import tempfile
from pathlib import Path


class FileKeyValueStore:
    """
    File-based key-value storage.

    Implements KeyValueStore protocol. Each key gets a JSON file; writes go
    to a temp file in the same directory and are swapped in with os.replace,
    so readers never see a partial write.
    """

    def __init__(self, data_dir: Path | str):
        self.data_dir = Path(data_dir).expanduser()
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for_key(self, key: str) -> Path:
        """Get the file path for a given key."""
        return self.data_dir / f"{key}.json"

    def _read(self, key: str) -> bytes | None:
        path = self._path_for_key(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def _write(self, key: str, value: bytes) -> None:
        path = self._path_for_key(key)
        fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _delete(self, key: str) -> None:
        self._path_for_key(key).unlink(missing_ok=True)

    async def get(self, key: str) -> bytes | None:
        """Read the value for a key. Returns None if absent."""
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: bytes) -> None:
        """Write/overwrite the value for a key atomically."""
        await asyncio.to_thread(self._write, key, value)

    async def delete(self, key: str) -> None:
        """Remove a key. Removing an absent key is not an error."""
        await asyncio.to_thread(self._delete, key)
