from pathlib import Path

from fishsync.config import FishSyncSettings, save_settings


def init(
    settings: FishSyncSettings,
    enable: bool,
    history_path: str | None,
    max_entries: int | None,
    sync_on_startup: bool | None,
    config_path: Path | None,
) -> None:
    changes: dict[str, object] = {"enabled": enable}
    if history_path is not None:
        changes["history_path"] = history_path
    if max_entries is not None:
        changes["max_entries"] = max_entries
    if sync_on_startup is not None:
        changes["sync_on_startup"] = sync_on_startup

    written = save_settings(settings.with_overrides(**changes), config_path)
    state = "enabled" if enable else "disabled"
    print(f"Wrote settings to {written} (fish history sync {state})")
