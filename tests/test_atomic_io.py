# pyright: standard
from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from fishsync.lib.atomic_io import atomic_write_text


def test_atomic_write_creates_parents_and_replaces(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "file.txt"

    atomic_write_text(target, "one")
    atomic_write_text(target, b"two")

    assert target.read_text(encoding="utf-8") == "two"
    assert [p.name for p in target.parent.iterdir()] == ["file.txt"]


def test_atomic_write_keeps_line_endings(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"

    atomic_write_text(target, "a\r\nb\n")

    assert target.read_bytes() == b"a\r\nb\n"


def test_atomic_write_failure_leaves_original_and_no_temp(tmp_path: Path, mocker: MockerFixture) -> None:
    # GIVEN an existing file
    target = tmp_path / "file.txt"
    _ = target.write_text("original", encoding="utf-8")

    # WHEN the final replace fails
    _ = mocker.patch("fishsync.lib.atomic_io.os.replace", side_effect=OSError("boom"))
    with pytest.raises(OSError, match="boom"):
        atomic_write_text(target, "new")

    # THEN the original is intact and the temp file is cleaned up
    assert target.read_text(encoding="utf-8") == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["file.txt"]
