from collections.abc import Sequence
from pathlib import Path
from sys import exit
from typing import Annotated, Any, final

from typing_extensions import override

import typer
from typer.core import TyperGroup

from fishsync.config import FishSyncSettings
from fishsync.exceptions import FishSyncError


@final
class ErrorHandlingGroup(TyperGroup):
    @override
    def main(  # pyright: ignore[reportAny]
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        windows_expand_args: bool = True,
        **extra: Any,  # pyright: ignore[reportAny, reportExplicitAny]
    ) -> Any:  # pyright: ignore[reportExplicitAny]
        try:
            return super().main(args, prog_name, complete_var, standalone_mode, windows_expand_args, **extra)  #  pyright: ignore[reportAny]
        except FishSyncError as e:
            typer.secho(f"Error: {e.message}", err=True, fg=typer.colors.RED)
            exit(e.exit_code)
        except Exception as e:
            typer.secho("Unexpected Internal Error", err=True, fg=typer.colors.RED)
            typer.echo(str(e), err=True)
            exit(1)


app = typer.Typer(cls=ErrorHandlingGroup, no_args_is_help=True)


def _settings(ctx: typer.Context) -> FishSyncSettings:
    settings = ctx.obj
    if not isinstance(settings, FishSyncSettings):
        raise RuntimeError("settings were not loaded")
    return settings


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option("--config", help="Path to the settings JSON file (default: $XDG_CONFIG_HOME/fishsync/config.json)."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    """
    Keep fish's history file in step with the fishsync history store.
    """
    from fishsync.config import load_settings
    from fishsync.log import setup_logging

    if ctx.resilient_parsing:
        return

    settings = load_settings(config)
    setup_logging("DEBUG" if verbose else settings.log_level)
    ctx.obj = settings
    ctx.meta["config_path"] = config


@app.command("init")
def init(
    ctx: typer.Context,
    enable: Annotated[bool, typer.Option("--enable/--disable", help="Turn fish history sync on or off.")] = True,
    history_path: Annotated[str | None, typer.Option(help="Location of fish's history file.")] = None,
    max_entries: Annotated[
        int | None, typer.Option(min=0, help="Keep at most this many entries in fish's history (0 = unlimited).")
    ] = None,
    sync_on_startup: Annotated[
        bool | None, typer.Option("--sync-on-startup/--no-sync-on-startup", help="Reconcile when the daemon starts.")
    ] = None,
) -> None:
    """
    Write a settings file.
    """
    from fishsync.commands import init

    config_path: Path | None = ctx.meta.get("config_path")
    init.init(_settings(ctx), enable, history_path, max_entries, sync_on_startup, config_path)


@app.command("record")
def record(
    ctx: typer.Context,
    command: Annotated[str, typer.Argument(help="The command line that was run.")],
    timestamp: Annotated[int | None, typer.Option(help="Seconds since the epoch (default: now).")] = None,
    record_id: Annotated[str | None, typer.Option("--id", help="Record id (default: a new random id).")] = None,
    exit_code: Annotated[int, typer.Option("--exit", help="Exit status of the command.")] = 0,
    duration: Annotated[int, typer.Option(help="Duration in nanoseconds.")] = 0,
    cwd: Annotated[str | None, typer.Option(help="Working directory (default: current directory).")] = None,
) -> None:
    """
    Store a newly run command and append it to fish's history.
    """
    from fishsync.commands import record

    record.record(_settings(ctx), command, timestamp, record_id, exit_code, duration, cwd)


@app.command("ingest")
def ingest(
    ctx: typer.Context,
    source: Annotated[Path, typer.Argument(help="JSON-lines file of records downloaded from other hosts.")],
    daemon: Annotated[
        bool,
        typer.Option(
            "--daemon",
            help="Run as the daemon's post-sync hook (uses sync_all_on_daemon instead of sync_all_on_cli).",
        ),
    ] = False,
) -> None:
    """
    Import downloaded records and append them to fish's history.
    """
    from fishsync.commands import ingest

    ingest.ingest(_settings(ctx), source, daemon)


@app.command("sync")
def sync(
    ctx: typer.Context,
    should_sync: Annotated[
        bool,
        typer.Option(
            "--should-sync",
            help="Only check whether startup sync is enabled (exit 0 if it is, 1 if not).",
        ),
    ] = False,
) -> None:
    """
    Append every stored record missing from fish's history.
    """
    from fishsync.commands import sync

    sync.sync(_settings(ctx), should_sync)


@app.command("bootstrap")
def bootstrap(ctx: typer.Context) -> None:
    """
    Startup hook: reconcile once if sync_on_startup is set.
    """
    from fishsync.commands import sync

    sync.bootstrap(_settings(ctx))


@app.command("trim")
def trim(
    ctx: typer.Context,
    max_entries: Annotated[
        int | None, typer.Option(min=0, help="Override the configured retention bound (0 = unlimited).")
    ] = None,
) -> None:
    """
    Trim fish's history to the most recent entries now.
    """
    from fishsync.commands import trim

    trim.trim(_settings(ctx), max_entries)


@app.command("status")
def status(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output the status as JSON.",
        ),
    ] = False,
) -> None:
    """
    Show sync settings and the state of fish's history file.
    """
    from fishsync.commands import status

    status.status(_settings(ctx), json_output)


if __name__ == "__main__":
    app()
