"""In-memory key-value storage adapter."""


class InMemoryKeyValueStore:
    """
    Dict-backed key-value storage.

    Implements KeyValueStore protocol. Nothing survives the process.
    """

    def __init__(self, initial: dict[str, bytes] | None = None):
        self.data: dict[str, bytes] = dict(initial or {})

    async def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
