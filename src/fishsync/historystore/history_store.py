from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path
from typing import ClassVar, Protocol

import msgspec

from fishsync.exceptions import StoreError

from .models import SHARD_SIZE, Context, FilterMode, HistoryRecord, dumps_history_record, load_history_record


class Database(Protocol):
    """The slice of a primary history store that shadow sync consumes."""

    def list(
        self,
        filters: Sequence[FilterMode],
        context: Context,
        limit: int | None = None,
        unique: bool = False,
        include_deleted: bool = False,
    ) -> list[HistoryRecord]: ...

    def load(self, record_id: str) -> HistoryRecord | None: ...

    def load_many(self, record_ids: Iterable[str]) -> dict[str, HistoryRecord]: ...


class HistoryStore:
    """
    Append-only, sharded JSONL store for HistoryRecord objects.

    - Uses global, zero-based indices as storage positions.
    - Physically shards files by SHARD_SIZE lines each: 0.jsonl, 10000.jsonl, ...
    - No meta.json; state is derived from the filesystem.
    """

    _SHARD_RE: ClassVar[re.Pattern[str]] = re.compile(r"^(\d+)\.jsonl$")

    root: Path
    shard_size: int
    _last_shard_base: int | None
    _last_shard_count: int

    def __init__(self, root: Path, shard_size: int = SHARD_SIZE) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)
        self.shard_size = shard_size
        self._last_shard_base = None
        self._last_shard_count = 0

    # ---------- Public API ----------

    def next_index(self) -> int:
        """
        Returns the next global index to be assigned.
        """
        base, count = self._resolve_last_shard_and_count()
        return (base or 0) + count

    def append(self, record: HistoryRecord) -> int:
        """
        Appends a single record as a JSON line, returns assigned global index.
        """
        base, count = self._resolve_last_shard_and_count()
        if base is None:
            base = 0
            count = 0

        # Start a new shard if the current is full
        if count >= self.shard_size:
            base += self.shard_size
            count = 0

        index = base + count
        shard_path = self._shard_path(base)
        self._append_line(shard_path, dumps_history_record(record))

        self._last_shard_base = base
        self._last_shard_count = count + 1
        return index

    def iter_records(self) -> Iterator[HistoryRecord]:
        """
        Yields every stored record in append order.
        """
        for _, shard_path in self._list_shard_files():
            with shard_path.open("r", encoding="utf-8") as f:
                for line in f:
                    if line.strip():
                        yield self._decode(shard_path, line)

    def latest_records(self) -> dict[str, HistoryRecord]:
        """
        Maps each id to its most recently appended version.

        A record appended again under the same id (for example with a deletion mark)
        replaces the earlier line. Iteration order follows the position of the latest version.
        """
        latest: dict[str, HistoryRecord] = {}
        for rec in self.iter_records():
            _ = latest.pop(rec.id, None)
            latest[rec.id] = rec
        return latest

    def list(
        self,
        filters: Sequence[FilterMode],
        context: Context,
        limit: int | None = None,
        unique: bool = False,
        include_deleted: bool = False,
    ) -> list[HistoryRecord]:
        """
        Returns matching records, most recent first.

        Each id appears once, as its latest version. Records sharing a timestamp keep
        reverse append order. `unique` keeps only the most recent record per command.
        `limit=None` returns everything.
        """
        records = [
            r
            for r in self.latest_records().values()
            if (include_deleted or not r.is_deleted) and all(_matches(r, mode, context) for mode in filters)
        ]
        records.reverse()
        records.sort(key=lambda r: r.timestamp, reverse=True)

        if unique:
            seen: set[str] = set()
            deduped: list[HistoryRecord] = []
            for rec in records:
                if rec.command not in seen:
                    seen.add(rec.command)
                    deduped.append(rec)
            records = deduped

        if limit is not None:
            records = records[:limit]
        return records

    def load(self, record_id: str) -> HistoryRecord | None:
        """
        Returns the record with the given id, or None when the store does not know it.
        """
        return self.load_many([record_id]).get(record_id)

    def load_many(self, record_ids: Iterable[str]) -> dict[str, HistoryRecord]:
        """
        Looks up several ids in one pass over the store. Unknown ids are left out.
        """
        wanted = set(record_ids)
        found: dict[str, HistoryRecord] = {}
        for rec in self.iter_records():
            if rec.id in wanted:
                found[rec.id] = rec
        return found

    def history_count(self, include_deleted: bool = False) -> int:
        return sum(1 for r in self.latest_records().values() if include_deleted or not r.is_deleted)

    # ---------- Internal ----------

    def _decode(self, shard_path: Path, line: str) -> HistoryRecord:
        try:
            return load_history_record(line)
        except msgspec.DecodeError as e:
            raise StoreError(f"Corrupt JSON in shard {shard_path}: {e}") from e

    def _append_line(self, path: Path, line: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            _ = f.write(line)
            _ = f.write("\n")
            f.flush()
            os.fsync(f.fileno())

    def _resolve_last_shard_and_count(self) -> tuple[int | None, int]:
        """
        Determines the base offset of the last shard file and its current line count.

        Uses a simple per-instance cache to avoid recounting when appending consecutively.
        """
        shard_files = self._list_shard_files()
        if not shard_files:
            self._last_shard_base = None
            self._last_shard_count = 0
            return None, 0

        last_base, last_path = shard_files[-1]
        if self._last_shard_base == last_base and self._last_shard_count > 0:
            return last_base, self._last_shard_count

        count = self._count_lines(last_path)
        self._last_shard_base = last_base
        self._last_shard_count = count
        return last_base, count

    def _list_shard_files(self) -> list[tuple[int, Path]]:
        files: list[tuple[int, Path]] = []
        for entry in self.root.iterdir():
            if not entry.is_file():
                continue
            m = self._SHARD_RE.match(entry.name)
            if not m:
                continue
            files.append((int(m.group(1)), entry))
        files.sort(key=lambda t: t[0])
        return files

    def _count_lines(self, path: Path) -> int:
        count = 0
        with path.open("rb") as f:
            for chunk in iter(lambda: f.read(1024 * 64), b""):
                count += chunk.count(b"\n")
        return count

    def _shard_path(self, base: int) -> Path:
        return self.root / f"{base}.jsonl"


def _matches(record: HistoryRecord, mode: FilterMode, context: Context) -> bool:
    match mode:
        case FilterMode.GLOBAL:
            return True
        case FilterMode.HOST:
            return record.hostname == context.hostname
        case FilterMode.SESSION:
            return record.session == context.session
        case FilterMode.DIRECTORY:
            return record.cwd == context.cwd
