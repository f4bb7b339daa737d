# pyright: standard

from pathlib import Path

from fishsync.config import FishSyncSettings, save_settings
from fishsync.fishhistory import encode_entry
from fishsync.historystore import HistoryRecord, HistoryStore


def make_record(record_id: str, timestamp: int, command: str, **kwargs: object) -> HistoryRecord:
    return HistoryRecord(command=command, id=record_id, timestamp=timestamp, **kwargs)  # pyright: ignore[reportArgumentType]


def numbered_records(count: int, start_ts: int = 1000) -> list[HistoryRecord]:
    """Records id-01.. with ascending timestamps and commands `cmd N`."""
    return [make_record(f"id-{i:02d}", start_ts + i, f"cmd {i}") for i in range(1, count + 1)]


def write_fish_history(path: Path, records: list[HistoryRecord], preamble: str = "") -> str:
    """Writes records as fishsync-encoded entries and returns the text written."""
    text = preamble + "".join(encode_entry(r) for r in records)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        _ = f.write(text)
    return text


def fish_native_entry(command: str, when: int) -> str:
    """An entry the way fish itself writes it: no metadata line, a space after `when:`."""
    return f"- cmd: {command}\n  when: {when}\n"


def init_settings(tmp_path: Path, **overrides: object) -> tuple[Path, FishSyncSettings]:
    """
    Writes an enabled settings file pointing into tmp_path.

    Returns (config_file, settings).
    """
    values: dict[str, object] = {
        "enabled": True,
        "history_path": str(tmp_path / "fish" / "fish_history"),
        "records_path": str(tmp_path / "store"),
        "max_entries": 100,
    }
    values.update(overrides)
    settings = FishSyncSettings(**values)  # pyright: ignore[reportArgumentType]
    config_file = tmp_path / "config.json"
    _ = save_settings(settings, config_file)
    return config_file, settings


def seed_store(settings: FishSyncSettings, records: list[HistoryRecord]) -> HistoryStore:
    store = HistoryStore(settings.store_path)
    for rec in records:
        _ = store.append(rec)
    return store
