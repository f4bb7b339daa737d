from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

from fishsync.config import FishSyncSettings
from fishsync.fishhistory import append_entries, append_entry, scan_synced_ids
from fishsync.historystore import Context, Database, HistoryRecord, current_context
from fishsync.log import get_logger
from fishsync.shell import fish_installed

logger = get_logger(__name__)


class ShadowSync:
    """
    Projects primary-store records into the fish history file.

    Every entry point is a no-op while sync is disabled or fish is not installed.
    Single-record calls raise ShadowLogError on I/O failure; batch calls log
    per-record failures, keep going and return how many records were appended.
    """

    settings: FishSyncSettings
    _shell_installed: Callable[[], bool]

    def __init__(
        self,
        settings: FishSyncSettings,
        shell_installed: Callable[[], bool] | None = None,
    ) -> None:
        self.settings = settings
        self._shell_installed = shell_installed or fish_installed

    @property
    def path(self) -> Path:
        return self.settings.shadow_log_path

    def active(self) -> bool:
        if not self.settings.enabled:
            return False
        if not self._shell_installed():
            logger.debug("fish shell not installed, skipping sync")
            return False
        return True

    def should_sync_on_startup(self) -> bool:
        return self.settings.sync_on_startup

    # ---------- Single record ----------

    def sync_one(self, record: HistoryRecord) -> None:
        """
        Appends one freshly recorded command. No id deduplication happens here.
        """
        if not self.active():
            return
        logger.debug("syncing history to fish", id=record.id, path=str(self.path))
        append_entry(record, self.path, self.settings.max_entries)

    def append(self, record: HistoryRecord) -> None:
        self.sync_one(record)

    # ---------- Batches ----------

    def append_many(self, records: Sequence[HistoryRecord]) -> int:
        if not records or not self.active():
            return 0

        logger.info("syncing multiple history entries to fish", count=len(records))
        synced = append_entries(records, self.path, self.settings.max_entries)
        logger.info("synced entries to fish history", synced=synced, total=len(records))
        return synced

    def sync_downloaded(self, store: Database, record_ids: Iterable[str]) -> int:
        """
        Appends records just downloaded from other hosts, looked up by id.

        Ids the store does not know are skipped. The store is read once for the batch.
        """
        if not self.active():
            return 0

        ids = list(record_ids)
        found = store.load_many(ids)
        records: list[HistoryRecord] = []
        for record_id in ids:
            if (record := found.get(record_id)) is None:
                logger.debug("downloaded record not found in store", id=record_id)
                continue
            records.append(record)
        return self.append_many(records)

    def reconcile(self, store: Database, context: Context | None = None) -> int:
        """
        Appends every recent store record whose id is not yet in the fish history.

        Looks at the `max_entries` most recent records (all of them when unbounded)
        and writes the missing ones oldest first. Returns the number appended.
        """
        if not self.active():
            return 0

        synced_ids = scan_synced_ids(self.path)
        logger.debug("found existing synced entries in fish history", synced_count=len(synced_ids))

        limit = self.settings.max_entries or None
        entries = store.list([], context if context is not None else current_context(), limit=limit)

        new_entries: list[HistoryRecord] = []
        seen = set(synced_ids)
        for entry in entries:
            if entry.id not in seen:
                seen.add(entry.id)
                new_entries.append(entry)
        if not new_entries:
            logger.info("no new entries to sync to fish history")
            return 0

        new_entries.reverse()
        new_entries.sort(key=lambda r: r.timestamp)
        logger.info(
            "syncing new entries to fish history",
            count=len(new_entries),
            already_synced=len(synced_ids),
        )

        synced = append_entries(new_entries, self.path, self.settings.max_entries)
        logger.info("synced new entries to fish history", synced=synced, total=len(new_entries))
        return synced
