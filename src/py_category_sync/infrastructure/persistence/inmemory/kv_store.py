from __future__ import annotations


class InMemoryKeyValueStore:
    """Dict-backed KeyValueStore.

    ``fail_reads`` / ``fail_writes`` make the corresponding calls raise OSError,
    mimicking an unavailable device storage.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.fail_reads = False
        self.fail_writes = False

    @property
    def data(self) -> dict[str, str]:
        return dict(self._data)

    async def get_item(self, key: str) -> str | None:  # noqa: D401
        if self.fail_reads:
            raise OSError(f"storage read failed for {key}")
        return self._data.get(key)

    async def set_item(self, key: str, value: str) -> None:  # noqa: D401
        if self.fail_writes:
            raise OSError(f"storage write failed for {key}")
        self._data[key] = value

    async def remove_item(self, key: str) -> None:  # noqa: D401
        if self.fail_writes:
            raise OSError(f"storage write failed for {key}")
        self._data.pop(key, None)
