import os
from dataclasses import replace
from pathlib import Path
from typing import Annotated

from pydantic import Field, TypeAdapter, ValidationError
from pydantic.dataclasses import dataclass as pydantic_dataclass

from fishsync.exceptions import ConfigurationError
from fishsync.lib.atomic_io import atomic_write_text

CONFIG_ENV_VAR = "FISHSYNC_CONFIG"
CONFIG_DIR_NAME = "fishsync"
CONFIG_FILE_NAME = "config.json"

DEFAULT_FISH_HISTORY_PATH = "~/.local/share/fish/fish_history"
DEFAULT_RECORDS_PATH = "~/.local/share/fishsync/history"
DEFAULT_MAX_ENTRIES = 10_000


@pydantic_dataclass(slots=True, frozen=True)
class FishSyncSettings:
    enabled: bool = False
    history_path: str = DEFAULT_FISH_HISTORY_PATH
    # 0 keeps every entry
    max_entries: Annotated[int, Field(ge=0)] = DEFAULT_MAX_ENTRIES
    sync_on_startup: bool = False
    sync_all_on_cli: bool = False
    sync_all_on_daemon: bool = False
    records_path: str = DEFAULT_RECORDS_PATH
    log_level: str = "WARNING"

    @property
    def shadow_log_path(self) -> Path:
        return Path(self.history_path).expanduser()

    @property
    def store_path(self) -> Path:
        return Path(self.records_path).expanduser()

    def with_overrides(self, **changes: object) -> "FishSyncSettings":
        return replace(self, **changes)  # pyright: ignore[reportArgumentType]


def _get_config_dir() -> Path:
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config) if xdg_config else Path.home() / ".config"
    return base / CONFIG_DIR_NAME


def find_config_file() -> Path:
    """
    Locates the settings file via FISHSYNC_CONFIG, falling back to the XDG config dir.
    """
    if env_path := os.environ.get(CONFIG_ENV_VAR):
        path = Path(env_path)
        if not path.is_absolute():
            raise ConfigurationError(f"{CONFIG_ENV_VAR} must be an absolute path")
        return path
    return _get_config_dir() / CONFIG_FILE_NAME


def load_settings(path: Path | None = None) -> FishSyncSettings:
    """
    Loads settings from JSON. A missing file means all defaults.

    Raises:
        ConfigurationError: if the file cannot be read or does not validate.
    """
    config_file = path if path is not None else find_config_file()
    try:
        raw_text = config_file.read_text(encoding="utf-8")
    except FileNotFoundError:
        return FishSyncSettings()
    except OSError as e:
        raise ConfigurationError(f"Could not read config file {config_file}: {e}") from e

    try:
        return TypeAdapter(FishSyncSettings).validate_json(raw_text)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {config_file}: {e}") from e


def save_settings(settings: FishSyncSettings, path: Path | None = None) -> Path:
    config_file = path if path is not None else find_config_file()
    atomic_write_text(config_file, TypeAdapter(FishSyncSettings).dump_json(settings, indent=2))
    return config_file
