# pyright: standard
from __future__ import annotations

import os
import socket
import time
import uuid
from enum import Enum

import msgspec
from msgspec import Struct, field

SHARD_SIZE = 10_000
SESSION_ENV_VAR = "FISHSYNC_SESSION"


class FilterMode(str, Enum):
    GLOBAL = "global"
    HOST = "host"
    SESSION = "session"
    DIRECTORY = "directory"


class HistoryRecord(Struct, frozen=True):
    """
    Immutable representation of a single shell command.

    `id` is globally unique across machines; `timestamp` is seconds since the epoch
    and may be negative or out of order when records arrive from other hosts.
    Serialization guarantees a single JSON line; embedded newlines in `command` are
    escaped by JSON encoding and therefore safe.
    """

    command: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: int = field(default_factory=lambda: int(time.time()))
    duration: int = 0
    exit: int = 0
    cwd: str = ""
    session: str = ""
    hostname: str = ""
    deleted_at: int | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Context(Struct, frozen=True):
    """Where a query is being made from; used by non-global filter modes."""

    cwd: str
    hostname: str
    session: str
    host_id: str = ""


def current_context() -> Context:
    hostname = socket.gethostname()
    return Context(
        cwd=os.getcwd(),
        hostname=hostname,
        session=os.environ.get(SESSION_ENV_VAR, ""),
        host_id=hostname,
    )


def dumps_history_record(record: HistoryRecord) -> str:
    """
    Compact single-line JSON for a HistoryRecord.
    """
    return msgspec.json.encode(record).decode("utf-8")


def load_history_record(line: str | bytes) -> HistoryRecord:
    """
    Parse a JSON line into a HistoryRecord.
    """
    return msgspec.json.decode(line, type=HistoryRecord)
