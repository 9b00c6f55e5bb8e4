from .kv_store import SqlAlchemyKeyValueStore

__all__ = ["SqlAlchemyKeyValueStore"]
