import sys
from pathlib import Path

import msgspec

from fishsync.config import FishSyncSettings
from fishsync.exceptions import FishSyncError, InvalidInputError
from fishsync.fishhistory import is_valid_record_id
from fishsync.historystore import HistoryRecord, HistoryStore, load_history_record
from fishsync.sync import ShadowSync


def _read_records(source: Path) -> list[HistoryRecord]:
    try:
        lines = source.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        raise InvalidInputError(f"Could not read {source}: {e}") from e

    records: list[HistoryRecord] = []
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            rec = load_history_record(line)
        except msgspec.DecodeError as e:
            raise InvalidInputError(f"{source}:{lineno}: not a history record ({e})") from e
        if not is_valid_record_id(rec.id):
            raise InvalidInputError(f"{source}:{lineno}: invalid record id {rec.id!r}")
        records.append(rec)
    return records


def ingest(settings: FishSyncSettings, source: Path, daemon: bool = False) -> None:
    records = _read_records(source)

    store = HistoryStore(settings.store_path)
    known_ids = {rec.id for rec in store.iter_records()}

    downloaded: list[str] = []
    for rec in records:
        if rec.id in known_ids:
            continue
        _ = store.append(rec)
        known_ids.add(rec.id)
        downloaded.append(rec.id)

    print(f"{len(downloaded)}/{len(records)} records added to history store")

    if not settings.enabled:
        return

    shadow = ShadowSync(settings)
    if downloaded:
        print(f"Syncing {len(downloaded)} remote entries to fish history...")
        synced = shadow.sync_downloaded(store, downloaded)
        print(f"{synced}/{len(downloaded)} remote entries synced to fish history")

    sync_all = settings.sync_all_on_daemon if daemon else settings.sync_all_on_cli
    if sync_all:
        print("Syncing all local entries to fish history...")
        try:
            count = shadow.reconcile(store)
        except FishSyncError as e:
            print(f"Failed to sync all local entries to fish history: {e.message}", file=sys.stderr)
            return
        if count > 0:
            print(f"Synced {count} local entries to fish history")
