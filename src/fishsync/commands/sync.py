import typer

from fishsync.config import FishSyncSettings
from fishsync.historystore import HistoryStore
from fishsync.sync import ShadowSync


def _reconcile(settings: FishSyncSettings) -> None:
    if not settings.enabled:
        print("Fish history sync is disabled.")
        return

    count = ShadowSync(settings).reconcile(HistoryStore(settings.store_path))
    print(f"Synced {count} entries to fish history ({settings.shadow_log_path})")


def sync(settings: FishSyncSettings, should_sync: bool) -> None:
    if should_sync:
        if not settings.sync_on_startup:
            raise typer.Exit(code=1)
        return

    _reconcile(settings)


def bootstrap(settings: FishSyncSettings) -> None:
    if not ShadowSync(settings).should_sync_on_startup():
        print("Startup sync is disabled.")
        return

    _reconcile(settings)
