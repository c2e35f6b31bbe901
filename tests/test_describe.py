"""Tests for descriptor generation."""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path

import pytest

from ai_file_organize.ingestion import (
    MetadataUnavailable,
    NameUnavailable,
    describe,
    format_size,
    render_tree,
)


@pytest.mark.parametrize(
    ("size_bytes", "expected"),
    [
        (0, "0"),
        (204800, "2"),
        (1024, "0.01"),
        (1536, "0.02"),
        (2560, "0.03"),
        (5_000_000, "48.83"),
    ],
)
def test_format_size_rounds_to_kilobytes_then_divides_by_hundred(
    size_bytes: int, expected: str
) -> None:
    assert format_size(size_bytes) == expected


def test_describe_file_reports_name_size_and_timestamps(tmp_path: Path) -> None:
    path = tmp_path / "Movie.2020.mkv"
    path.write_bytes(b"\0" * 204800)
    modified = datetime(2024, 3, 5, 14, 7, 9).timestamp()
    os.utime(path, (modified, modified))

    descriptor = describe(path)

    assert descriptor.startswith("File name: Movie.2020.mkv, file size: 2 KB, created: ")
    assert descriptor.endswith("modified: 2024-03-05 14:07:09")


def test_describe_directory_lists_only_immediate_children(tmp_path: Path) -> None:
    root = tmp_path / "Show S01"
    (root / "Season" / "Extras").mkdir(parents=True)
    (root / "Season" / "deep.txt").write_text("x", encoding="utf-8")
    (root / "episode1.mkv").write_text("x", encoding="utf-8")

    descriptor = describe(root)
    lines = descriptor.split("\n")

    assert lines[0] == "└── Show S01"
    assert sorted(lines[1:]) == ["    └── Season", "    └── episode1.mkv"]
    assert "deep.txt" not in descriptor
    assert "Extras" not in descriptor


def test_render_tree_of_empty_directory_is_single_line(tmp_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    assert render_tree(empty) == "└── empty"


def test_describe_missing_file_raises_metadata_unavailable(tmp_path: Path) -> None:
    with pytest.raises(MetadataUnavailable):
        describe(tmp_path / "gone.txt")


def test_describe_root_path_raises_name_unavailable() -> None:
    with pytest.raises(NameUnavailable):
        describe(Path("/"))


def test_describe_unreadable_entry_raises_metadata_unavailable(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    locked = tmp_path / "locked"
    locked.mkdir()
    real_stat = Path.stat

    def fake_stat(self: Path, *args, **kwargs):
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return real_stat(self, *args, **kwargs)

    monkeypatch.setattr(Path, "stat", fake_stat)

    with pytest.raises(MetadataUnavailable, match="Permission denied"):
        describe(locked)
