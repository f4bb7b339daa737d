import os
import sys
import time
import uuid

from fishsync.config import FishSyncSettings
from fishsync.exceptions import FishSyncError, InvalidInputError
from fishsync.fishhistory import is_valid_record_id
from fishsync.historystore import HistoryRecord, HistoryStore, current_context
from fishsync.sync import ShadowSync


def record(
    settings: FishSyncSettings,
    command: str,
    timestamp: int | None,
    record_id: str | None,
    exit_code: int,
    duration: int,
    cwd: str | None,
) -> None:
    if record_id is not None and not is_valid_record_id(record_id):
        raise InvalidInputError(f"invalid record id {record_id!r}")

    context = current_context()
    rec = HistoryRecord(
        command=command,
        id=record_id or uuid.uuid4().hex,
        timestamp=timestamp if timestamp is not None else int(time.time()),
        duration=duration,
        exit=exit_code,
        cwd=cwd or os.getcwd(),
        session=context.session,
        hostname=context.hostname,
    )

    store = HistoryStore(settings.store_path)
    _ = store.append(rec)

    # The store write stands even if fish's history cannot be updated.
    try:
        ShadowSync(settings).sync_one(rec)
    except FishSyncError as e:
        print(f"Warning: failed to sync entry to fish history: {e.message}", file=sys.stderr)

    print(rec.id)
