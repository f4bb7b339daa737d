# pyright: standard
from pathlib import Path

from pytest_mock import MockerFixture
from typer.testing import CliRunner

from fishsync.fishhistory import encode_entry, scan_synced_ids
from fishsync.main import app
from tests.helpers import init_settings, make_record, numbered_records, seed_store

runner = CliRunner()


def test_sync_appends_missing_records(tmp_path: Path, fish_present: None) -> None:
    # GIVEN stored records not yet in fish's history
    config, settings = init_settings(tmp_path)
    _ = seed_store(settings, numbered_records(4))

    # WHEN syncing twice
    first = runner.invoke(app, ["--config", str(config), "sync"])
    second = runner.invoke(app, ["--config", str(config), "sync"])

    # THEN the first run appends everything and the second nothing
    assert first.exit_code == 0
    assert f"Synced 4 entries to fish history ({settings.shadow_log_path})" in first.stdout
    assert second.exit_code == 0
    assert "Synced 0 entries" in second.stdout
    assert scan_synced_ids(settings.shadow_log_path) == {f"id-{i:02d}" for i in range(1, 5)}


def test_sync_single_record_layout(tmp_path: Path, fish_present: None) -> None:
    config, settings = init_settings(tmp_path)
    rec = make_record("A", 1000, "git status")
    _ = seed_store(settings, [rec])

    result = runner.invoke(app, ["--config", str(config), "sync"])

    assert result.exit_code == 0
    assert settings.shadow_log_path.read_text(encoding="utf-8") == encode_entry(rec)


def test_sync_disabled(tmp_path: Path, fish_present: None) -> None:
    config, settings = init_settings(tmp_path, enabled=False)
    _ = seed_store(settings, numbered_records(2))

    result = runner.invoke(app, ["--config", str(config), "sync"])

    assert result.exit_code == 0
    assert "Fish history sync is disabled." in result.stdout
    assert not settings.shadow_log_path.exists()


def test_sync_without_fish_is_a_noop(tmp_path: Path, mocker: MockerFixture) -> None:
    _ = mocker.patch("fishsync.sync.fish_installed", return_value=False)
    config, settings = init_settings(tmp_path)
    _ = seed_store(settings, numbered_records(2))

    result = runner.invoke(app, ["--config", str(config), "sync"])

    assert result.exit_code == 0
    assert "Synced 0 entries" in result.stdout
    assert not settings.shadow_log_path.exists()


def test_should_sync_exit_codes(tmp_path: Path) -> None:
    # GIVEN startup sync off
    config, _ = init_settings(tmp_path)

    # THEN --should-sync exits 1 without output
    off = runner.invoke(app, ["--config", str(config), "sync", "--should-sync"])
    assert off.exit_code == 1
    assert off.stdout == ""

    # GIVEN startup sync on
    config, _ = init_settings(tmp_path, sync_on_startup=True)

    # THEN it exits 0
    on = runner.invoke(app, ["--config", str(config), "sync", "--should-sync"])
    assert on.exit_code == 0


def test_bootstrap_respects_sync_on_startup(tmp_path: Path, fish_present: None) -> None:
    # GIVEN startup sync off
    config, settings = init_settings(tmp_path)
    _ = seed_store(settings, numbered_records(3))

    # WHEN bootstrapping
    off = runner.invoke(app, ["--config", str(config), "bootstrap"])

    # THEN nothing happens
    assert off.exit_code == 0
    assert "Startup sync is disabled." in off.stdout
    assert not settings.shadow_log_path.exists()

    # WHEN startup sync is turned on
    config, settings = init_settings(tmp_path, sync_on_startup=True)
    on = runner.invoke(app, ["--config", str(config), "bootstrap"])

    # THEN the store is reconciled into fish's history
    assert on.exit_code == 0
    assert "Synced 3 entries" in on.stdout
    assert len(scan_synced_ids(settings.shadow_log_path)) == 3
