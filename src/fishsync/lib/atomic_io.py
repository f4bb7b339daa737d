import os
from pathlib import Path
from tempfile import mkstemp


def atomic_write_text(
    path: Path,
    text: str | bytes,
    encoding: str = "utf-8",
    errors: str = "strict",
) -> None:
    """
    Replaces `path` with `text` via a temp file in the same directory and os.replace.

    Keeps the permission bits of an existing target.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode: int | None = path.stat().st_mode & 0o7777
    except FileNotFoundError:
        mode = None

    fd, tmp = mkstemp(suffix=path.suffix, prefix=path.name + ".tmp", dir=path.parent)
    tmp_path = Path(tmp)
    try:
        with os.fdopen(fd, "w", encoding=encoding, errors=errors, newline="") as f:
            match text:
                case str():
                    _ = f.write(text)
                case bytes():
                    _ = f.write(text.decode(encoding, errors))
            f.flush()
            os.fsync(f.fileno())

        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
