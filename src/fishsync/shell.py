import subprocess
import threading

_lock = threading.Lock()
_fish_installed: bool | None = None


def _probe_fish() -> bool:
    try:
        result = subprocess.run(["fish", "--version"], capture_output=True, check=False)
    except OSError:
        return False
    return result.returncode == 0


def fish_installed() -> bool:
    """
    Whether the fish shell can be run, checked once per process.

    Concurrent first callers wait for the single probe and then share its result.
    """
    global _fish_installed
    if _fish_installed is None:
        with _lock:
            if _fish_installed is None:
                _fish_installed = _probe_fish()
    return _fish_installed


def reset_cache() -> None:
    global _fish_installed
    with _lock:
        _fish_installed = None
