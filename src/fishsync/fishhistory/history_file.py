import re
from pathlib import Path

from fishsync.exceptions import ShadowLogError

from .codec import ENTRY_MARKER, FILE_ENCODING, FILE_ERRORS

# Commands are written with newlines escaped, so the marker only ever opens a line
# at the start of an entry; a "- cmd:" inside a command never matches.
_ENTRY_START_RE = re.compile(r"^" + re.escape(ENTRY_MARKER), re.MULTILINE)


def read_history_text(path: Path) -> str | None:
    """
    Reads the whole fish history file, returning None when it does not exist.

    Line endings are returned untranslated so a rewrite reproduces them exactly.

    Raises:
        ShadowLogError: on any other read failure.
    """
    try:
        with path.open("r", encoding=FILE_ENCODING, errors=FILE_ERRORS, newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        raise ShadowLogError(f"failed to read fish history file {path}: {e}") from e


def split_entries(content: str) -> list[str]:
    """
    Splits history text into entry bodies (text after each marker), oldest first.

    Anything before the first marker is dropped.
    """
    return _ENTRY_START_RE.split(content)[1:]
