"""
Primary history store.

Provides:
- HistoryRecord / Context / FilterMode models
- Sharded, append-only HistoryStore (JSONL)
- The Database protocol consumed by shadow sync
"""

from .history_store import Database, HistoryStore
from .models import (
    SHARD_SIZE,
    Context,
    FilterMode,
    HistoryRecord,
    current_context,
    dumps_history_record,
    load_history_record,
)

__all__ = [
    "SHARD_SIZE",
    "Context",
    "Database",
    "FilterMode",
    "HistoryRecord",
    "HistoryStore",
    "current_context",
    "dumps_history_record",
    "load_history_record",
]
