import os
from pathlib import Path

import pytest

from skyalchemy import exceptions
from skyalchemy.utils.fsutils import (find_path_ci, join_path, open_atomic,
                                      read_lines)


def test_join_path():
    assert join_path("a", "b", "c") == os.path.join("a", "b", "c")
    assert join_path("a", "b", as_path_object=True) == Path("a", "b")


def test_find_path_ci(tmp_path):
    strings = tmp_path / "Data" / "Strings"
    strings.mkdir(parents=True)
    target = strings / "Skyrim_English.STRINGS"
    target.write_bytes(b"")

    assert find_path_ci(tmp_path, "data/strings/skyrim_english.strings") \
        == target
    assert find_path_ci(tmp_path, "Data/Strings/Skyrim_English.STRINGS") \
        == target
    assert find_path_ci(tmp_path / "Data", "strings") == strings
    assert find_path_ci(tmp_path, "data/strings/nope.strings") is None
    # can't descend into a file
    assert find_path_ci(tmp_path, "data/strings/skyrim_english.strings/x") \
        is None


def test_read_lines(tmp_path):
    path = tmp_path / "names.txt"
    path.write_text("Salt Pile\n\n  Nightshade \r\nSalt Pile\n",
                    encoding="utf-8")

    assert read_lines(path) == {"Salt Pile", "Nightshade"}

    with pytest.raises(exceptions.FileAccessError):
        read_lines(tmp_path / "nope.txt")


def test_open_atomic(tmp_path):
    dest = tmp_path / "sub" / "file.txt"

    with open_atomic(dest) as f:
        f.write("first")
    assert dest.read_text(encoding="utf-8") == "first"

    with pytest.raises(RuntimeError):
        with open_atomic(str(dest)) as f:
            f.write("second")
            raise RuntimeError("interrupted")
    assert dest.read_text(encoding="utf-8") == "first"
    # the temporary file is gone
    assert [p.name for p in dest.parent.iterdir()] == ["file.txt"]

    with open_atomic(dest, as_bytes=True) as f:
        f.write(b"third")
    assert dest.read_bytes() == b"third"
