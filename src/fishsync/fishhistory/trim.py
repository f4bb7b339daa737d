from pathlib import Path

from fishsync.exceptions import ShadowLogError
from fishsync.lib.atomic_io import atomic_write_text
from fishsync.log import get_logger

from .codec import ENTRY_MARKER, FILE_ENCODING, FILE_ERRORS
from .history_file import read_history_text, split_entries

logger = get_logger(__name__)


def trim_history(path: Path, max_entries: int) -> bool:
    """
    Rewrites `path` to hold only its `max_entries` most recent entries.

    `max_entries == 0` means unbounded. The file is left byte-for-byte untouched
    when it is missing or already within the bound. Returns True when it rewrote.

    The read-modify-write is not locked against concurrent appenders.
    """
    if max_entries == 0:
        return False

    content = read_history_text(path)
    if content is None:
        return False

    entries = split_entries(content)
    if len(entries) <= max_entries:
        return False

    logger.warning(
        "trimming fish history file",
        path=str(path),
        current=len(entries),
        max=max_entries,
    )

    to_keep = entries[len(entries) - max_entries :]
    trimmed = "".join(ENTRY_MARKER + body for body in to_keep)

    try:
        atomic_write_text(path, trimmed, encoding=FILE_ENCODING, errors=FILE_ERRORS)
    except OSError as e:
        raise ShadowLogError(f"failed to write trimmed fish history file {path}: {e}") from e

    logger.info(
        "trimmed fish history file",
        path=str(path),
        removed=len(entries) - max_entries,
        remaining=max_entries,
    )
    return True
