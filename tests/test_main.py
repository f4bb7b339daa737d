# pyright: standard
from pathlib import Path

from pytest_mock import MockerFixture
from typer.testing import CliRunner

from fishsync.main import app
from tests.helpers import init_settings, numbered_records, seed_store

runner = CliRunner()


def test_help_lists_commands() -> None:
    # GIVEN the app
    # WHEN `fishsync --help` is run
    result = runner.invoke(app, ["--help"])

    # THEN every command is listed
    assert result.exit_code == 0
    for name in ["init", "record", "ingest", "sync", "bootstrap", "trim", "status"]:
        assert f" {name} " in result.stdout


def test_invalid_config_is_reported_as_error(tmp_path: Path) -> None:
    # GIVEN a config file with an invalid retention bound
    config = tmp_path / "config.json"
    _ = config.write_text('{"max_entries": -3}', encoding="utf-8")

    # WHEN any command runs
    result = runner.invoke(app, ["--config", str(config), "status"])

    # THEN the error is printed without a traceback and the exit code is 1
    assert result.exit_code == 1
    assert result.stderr.startswith("Error: Invalid config file")
    assert "Traceback" not in result.stderr


def test_relative_config_env_var_is_rejected(monkeypatch) -> None:
    monkeypatch.setenv("FISHSYNC_CONFIG", "config.json")

    result = runner.invoke(app, ["status"])

    assert result.exit_code == 1
    assert "FISHSYNC_CONFIG must be an absolute path" in result.stderr


def test_unexpected_errors_are_reported(tmp_path: Path, mocker: MockerFixture) -> None:
    config, _ = init_settings(tmp_path)
    _ = mocker.patch("fishsync.commands.trim.trim_history", side_effect=RuntimeError("kaboom"))

    result = runner.invoke(app, ["--config", str(config), "trim"])

    assert result.exit_code == 1
    assert "Unexpected Internal Error" in result.stderr
    assert "kaboom" in result.stderr


def test_verbose_enables_debug_logging(tmp_path: Path, fish_present: None) -> None:
    # GIVEN an enabled setup with something to sync
    config, settings = init_settings(tmp_path)
    _ = seed_store(settings, numbered_records(2))

    # WHEN syncing with --verbose
    result = runner.invoke(app, ["--config", str(config), "-v", "sync"])

    # THEN debug events show up on stderr
    assert result.exit_code == 0
    assert "found existing synced entries in fish history" in result.stderr


def test_default_log_level_hides_info(tmp_path: Path, fish_present: None) -> None:
    config, settings = init_settings(tmp_path)
    _ = seed_store(settings, numbered_records(2))

    result = runner.invoke(app, ["--config", str(config), "sync"])

    assert result.exit_code == 0
    assert "syncing new entries to fish history" not in result.stderr


def test_log_level_from_settings(tmp_path: Path, fish_present: None) -> None:
    config, settings = init_settings(tmp_path, log_level="INFO")
    _ = seed_store(settings, numbered_records(2))

    result = runner.invoke(app, ["--config", str(config), "sync"])

    assert result.exit_code == 0
    assert "syncing new entries to fish history" in result.stderr
