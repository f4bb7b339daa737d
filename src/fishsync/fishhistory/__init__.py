"""
Fish history file projection.

Provides:
- Entry encoding and the two field decoders dedup/trimming need
- Scans for already-synced record ids and the last timestamp
- Locked, fsynced appends
- Retention trimming to the most recent N entries
"""

from .append import append_entries, append_entry
from .codec import (
    ENTRY_MARKER,
    METADATA_PREFIX,
    WHEN_PREFIX,
    decode_record_id,
    decode_when,
    encode_entry,
    encode_entry_bytes,
    escape_command,
    is_valid_record_id,
    unescape_command,
)
from .history_file import read_history_text, split_entries
from .index import count_entries, last_timestamp, scan_synced_ids
from .trim import trim_history

__all__ = [
    "ENTRY_MARKER",
    "METADATA_PREFIX",
    "WHEN_PREFIX",
    "append_entries",
    "append_entry",
    "count_entries",
    "decode_record_id",
    "decode_when",
    "encode_entry",
    "encode_entry_bytes",
    "escape_command",
    "is_valid_record_id",
    "last_timestamp",
    "read_history_text",
    "scan_synced_ids",
    "split_entries",
    "trim_history",
    "unescape_command",
]
