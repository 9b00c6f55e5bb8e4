from .clock import FixedClock, SystemClock
from .kv_store import InMemoryKeyValueStore
from .repositories import InMemoryCategoryRepository

__all__ = ["FixedClock", "SystemClock", "InMemoryKeyValueStore", "InMemoryCategoryRepository"]
