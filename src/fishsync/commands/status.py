import json
from typing import TypedDict

from rich.console import Console
from rich.table import Table
from rich.text import Text

from fishsync.config import FishSyncSettings
from fishsync.fishhistory import (
    count_entries,
    last_timestamp,
    read_history_text,
    scan_synced_ids,
    split_entries,
    unescape_command,
)
from fishsync.shell import fish_installed


class StatusReport(TypedDict):
    enabled: bool
    fish_installed: bool
    history_path: str
    exists: bool
    entries: int
    synced_ids: int
    max_entries: int
    last_timestamp: int | None
    last_command: str | None
    sync_on_startup: bool


def _last_command(content: str | None) -> str | None:
    if not content:
        return None
    entries = split_entries(content)
    if not entries:
        return None
    cmd_line = entries[-1].split("\n", 1)[0].rstrip("\r")
    return unescape_command(cmd_line)


def build_report(settings: FishSyncSettings) -> StatusReport:
    path = settings.shadow_log_path
    content = read_history_text(path)
    return {
        "enabled": settings.enabled,
        "fish_installed": fish_installed(),
        "history_path": str(path),
        "exists": content is not None,
        "entries": count_entries(path),
        "synced_ids": len(scan_synced_ids(path)),
        "max_entries": settings.max_entries,
        "last_timestamp": last_timestamp(path),
        "last_command": _last_command(content),
        "sync_on_startup": settings.sync_on_startup,
    }


def status(settings: FishSyncSettings, json_output: bool = False) -> None:
    report = build_report(settings)

    if json_output:
        print(json.dumps(report))
        return

    console = Console()
    table = Table(title="Fish History Sync", show_header=False, box=None, padding=(0, 1))
    table.add_column("Key", style="bold")
    table.add_column("Value", overflow="fold")

    table.add_row("Sync", "[green]enabled[/green]" if report["enabled"] else "[yellow]disabled[/yellow]")
    table.add_row("Fish installed", "yes" if report["fish_installed"] else "[red]no[/red]")
    table.add_row("History file", report["history_path"] + ("" if report["exists"] else " [dim](missing)[/dim]"))
    table.add_row("Entries", str(report["entries"]))
    table.add_row("Synced by fishsync", str(report["synced_ids"]))
    table.add_row("Retention", "unlimited" if report["max_entries"] == 0 else f"{report['max_entries']} entries")
    table.add_row("Last timestamp", "-" if report["last_timestamp"] is None else str(report["last_timestamp"]))
    if report["last_command"] is not None:
        table.add_row("Last command", Text(report["last_command"]))
    table.add_row("Sync on startup", "yes" if report["sync_on_startup"] else "no")

    console.print(table)
