from fishsync.config import FishSyncSettings
from fishsync.fishhistory import count_entries, trim_history


def trim(settings: FishSyncSettings, max_entries: int | None) -> None:
    bound = settings.max_entries if max_entries is None else max_entries
    path = settings.shadow_log_path

    if trim_history(path, bound):
        print(f"Trimmed {path} to {count_entries(path)} entries")
    elif bound == 0:
        print("No retention bound set; nothing to trim.")
    else:
        print(f"{path} holds {count_entries(path)} entries (limit {bound}); nothing to trim.")
