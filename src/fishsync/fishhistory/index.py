from pathlib import Path

from fishsync.log import get_logger

from .codec import decode_record_id, decode_when
from .history_file import read_history_text, split_entries

logger = get_logger(__name__)


def scan_synced_ids(path: Path) -> set[str]:
    """
    Collects the record ids of every entry we have already written to `path`.

    Entries without a (well-formed) metadata line are simply not part of the result.
    A missing file yields an empty set.
    """
    content = read_history_text(path)
    if content is None:
        return set()

    ids = {record_id for line in content.split("\n") if (record_id := decode_record_id(line)) is not None}
    logger.debug("found synced ids in fish history", path=str(path), count=len(ids))
    return ids


def last_timestamp(path: Path) -> int | None:
    """
    Returns the `when` value of the last entry that has a parseable one.
    """
    content = read_history_text(path)
    if not content:
        return None

    for line in reversed(content.split("\n")):
        if (ts := decode_when(line)) is not None:
            return ts
    return None


def count_entries(path: Path) -> int:
    content = read_history_text(path)
    if not content:
        return 0
    return len(split_entries(content))
