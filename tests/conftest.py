# pyright: standard
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from pytest_mock import MockerFixture

from fishsync.config import FishSyncSettings
from fishsync.sync import ShadowSync


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    # The CLI callback configures structlog globally; keep tests independent of it.
    yield
    structlog.reset_defaults()


@pytest.fixture
def fish_history(tmp_path: Path) -> Path:
    """Location of a (not yet existing) fish history file inside a missing directory."""
    return tmp_path / "fish" / "fish_history"


@pytest.fixture
def settings(tmp_path: Path, fish_history: Path) -> FishSyncSettings:
    return FishSyncSettings(
        enabled=True,
        history_path=str(fish_history),
        records_path=str(tmp_path / "store"),
        max_entries=100,
    )


@pytest.fixture
def shadow(settings: FishSyncSettings) -> ShadowSync:
    return ShadowSync(settings, shell_installed=lambda: True)


@pytest.fixture
def fish_present(mocker: MockerFixture) -> None:
    """Make every fish probe report an installed shell."""
    _ = mocker.patch("fishsync.sync.fish_installed", return_value=True)
    _ = mocker.patch("fishsync.commands.status.fish_installed", return_value=True)
