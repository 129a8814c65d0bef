"""Shared test fixtures."""

import asyncio
import os

# Settings() requires JWT_SECRET; set it before anything imports config.settings
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest  # noqa: E402


class MemorySnapshotStore:
    """Dict-backed SnapshotStoreProtocol; fail_* simulate a storage outage."""

    def __init__(self) -> None:
        self.data: dict[str, dict] = {}
        self.fail_load: Exception | None = None
        self.fail_save: Exception | None = None

    async def load(self, key: str) -> dict | None:
        if self.fail_load is not None:
            raise self.fail_load
        return self.data.get(key)

    async def save(self, key: str, snapshot: dict) -> None:
        if self.fail_save is not None:
            raise self.fail_save
        self.data[key] = snapshot


class YieldingSnapshotStore(MemorySnapshotStore):
    """Yields to the event loop between reading and returning, like a network call."""

    async def load(self, key: str) -> dict | None:
        snapshot = await super().load(key)
        await asyncio.sleep(0.01)
        return snapshot

    async def save(self, key: str, snapshot: dict) -> None:
        await asyncio.sleep(0)
        await super().save(key, snapshot)


@pytest.fixture
def memory_store() -> MemorySnapshotStore:
    return MemorySnapshotStore()


@pytest.fixture
def yielding_store() -> YieldingSnapshotStore:
    return YieldingSnapshotStore()
