import fcntl
import os
from collections.abc import Iterable
from pathlib import Path

from fishsync.exceptions import ShadowLogError
from fishsync.historystore.models import HistoryRecord
from fishsync.log import get_logger

from .codec import encode_entry_bytes
from .trim import trim_history

logger = get_logger(__name__)


def append_entry(record: HistoryRecord, path: Path, max_entries: int) -> None:
    """
    Appends one record to the fish history file under an exclusive flock, then trims.

    The encoded entry goes out as a single write and is fsynced before the handle
    (and with it the lock) is closed. flock locks belong to the open file
    description, so threads of this process serialize against each other as well
    as against other processes that honor the same lock.

    Raises:
        ShadowLogError: if the record id cannot be encoded, or the directory, open,
            lock, write or sync fails.
    """
    data = encode_entry_bytes(record)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ShadowLogError(f"failed to create fish history directory {path.parent}: {e}") from e

    try:
        f = path.open("ab")
    except OSError as e:
        raise ShadowLogError(f"failed to open fish history file {path}: {e}") from e

    with f:
        try:
            fcntl.flock(f, fcntl.LOCK_EX)
        except OSError as e:
            raise ShadowLogError(f"failed to acquire lock on fish history file {path}: {e}") from e

        try:
            _ = f.write(data)
            f.flush()
            os.fsync(f.fileno())
        except OSError as e:
            raise ShadowLogError(f"failed to write to fish history file {path}: {e}") from e

    logger.debug("synced history to fish", id=record.id, path=str(path))

    _ = trim_history(path, max_entries)


def append_entries(records: Iterable[HistoryRecord], path: Path, max_entries: int) -> int:
    """
    Appends each record in turn; a failing record is logged and skipped.

    Returns the number of records appended.
    """
    synced = 0
    for record in records:
        try:
            append_entry(record, path, max_entries)
        except ShadowLogError as e:
            logger.warning("failed to sync entry to fish", id=record.id, error=e.message)
            continue
        synced += 1
    return synced
