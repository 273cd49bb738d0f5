"""Local persistence for the snapshot series and instrument metadata."""

from src.data.store.instrument_cache import CacheState, InstrumentCache
from src.data.store.snapshot_store import DEFAULT_RETENTION_DAYS, SnapshotStore
from src.data.store.state_file import StateFile

__all__ = [
    "CacheState",
    "DEFAULT_RETENTION_DAYS",
    "InstrumentCache",
    "SnapshotStore",
    "StateFile",
]
