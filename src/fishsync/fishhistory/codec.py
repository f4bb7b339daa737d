"""
Fish history entry encoding.

Fish's history file is a loose YAML-like log:

    - cmd:git status
      when:1737097200

Every entry we write also carries a private comment line with the id of the
record it came from, which fish ignores and which makes re-syncing idempotent:

    - cmd:git status
      when:1737097200
      # fishsync-id:0190c1f2a8e47d0b9c3f6a1e2d4b5c6a

Only the two fields dedup and trimming need are ever decoded.
"""

from fishsync.exceptions import ShadowLogError
from fishsync.historystore.models import HistoryRecord

ENTRY_MARKER = "- cmd:"
WHEN_PREFIX = "  when:"
METADATA_PREFIX = "  # fishsync-id:"

# Read and write the file with surrogateescape so bytes fish (or anyone else)
# wrote that are not valid UTF-8 survive a trim untouched.
FILE_ENCODING = "utf-8"
FILE_ERRORS = "surrogateescape"


def escape_command(command: str) -> str:
    return command.replace("\\", "\\\\").replace("\n", "\\n")


def unescape_command(text: str) -> str:
    """
    Reverses `escape_command`: `\\\\` becomes `\\`, `\\n` becomes a newline.

    Any other backslash sequence is left as written.
    """
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            if nxt == "\\":
                out.append("\\")
                i += 2
                continue
            if nxt == "n":
                out.append("\n")
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def is_valid_record_id(record_id: str) -> bool:
    """
    Whether `record_id` survives a trip through the metadata line.

    It must be non-empty and must not contain line breaks.
    """
    return bool(record_id) and "\n" not in record_id and "\r" not in record_id


def encode_entry(record: HistoryRecord) -> str:
    """
    Raises:
        ShadowLogError: if the record id cannot be read back from the metadata line.
    """
    if not is_valid_record_id(record.id):
        raise ShadowLogError(f"record id {record.id!r} cannot be stored in fish history")
    return (
        f"{ENTRY_MARKER}{escape_command(record.command)}\n"
        f"{WHEN_PREFIX}{record.timestamp}\n"
        f"{METADATA_PREFIX}{record.id}\n"
    )


def encode_entry_bytes(record: HistoryRecord) -> bytes:
    return encode_entry(record).encode(FILE_ENCODING, FILE_ERRORS)


def decode_when(line: str) -> int | None:
    """
    Parses the timestamp out of a `  when:` line.

    Fish itself writes `when: 123`, so whitespace around the integer is accepted.
    Returns None when the prefix is missing or the value is not an integer.
    """
    if not line.startswith(WHEN_PREFIX):
        return None
    try:
        return int(line[len(WHEN_PREFIX) :])
    except ValueError:
        return None


def decode_record_id(line: str) -> str | None:
    """
    Returns the record id carried by a metadata comment line, or None.
    """
    if not line.startswith(METADATA_PREFIX):
        return None
    record_id = line[len(METADATA_PREFIX) :].rstrip("\r\n")
    return record_id or None
