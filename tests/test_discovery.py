from pathlib import Path

import pytest

from kmzpoints.discovery import discover_archives
from kmzpoints.errors import FilesystemError


def test_discover_finds_archives_recursively(tmp_path: Path) -> None:
    (tmp_path / "nested" / "deeper").mkdir(parents=True)
    (tmp_path / "a.kmz").write_bytes(b"")
    (tmp_path / "nested" / "b.kmz").write_bytes(b"")
    (tmp_path / "nested" / "deeper" / "c.kmz").write_bytes(b"")
    (tmp_path / "nested" / "notes.txt").write_text("ignore me")

    paths = discover_archives(str(tmp_path))

    assert sorted(Path(p).name for p in paths) == ["a.kmz", "b.kmz", "c.kmz"]
    assert all(Path(p).is_absolute() for p in paths)


def test_discover_suffix_match_is_exact_and_case_sensitive(tmp_path: Path) -> None:
    (tmp_path / "upper.KMZ").write_bytes(b"")
    (tmp_path / "plain.kml").write_bytes(b"")
    (tmp_path / "archive.kmz.bak").write_bytes(b"")
    (tmp_path / "keep.kmz").write_bytes(b"")

    paths = discover_archives(str(tmp_path))

    assert [Path(p).name for p in paths] == ["keep.kmz"]


def test_discover_accepts_a_single_file_root(tmp_path: Path) -> None:
    archive = tmp_path / "only.kmz"
    archive.write_bytes(b"")

    assert discover_archives(str(archive)) == [str(archive)]
    other = tmp_path / "notes.txt"
    other.write_text("not an archive")
    assert discover_archives(str(other)) == []


def test_discover_returns_empty_list_for_tree_without_archives(tmp_path: Path) -> None:
    (tmp_path / "readme.md").write_text("nothing here")

    assert discover_archives(str(tmp_path)) == []


def test_discover_honours_custom_suffix(tmp_path: Path) -> None:
    (tmp_path / "a.zip").write_bytes(b"")
    (tmp_path / "b.kmz").write_bytes(b"")

    paths = discover_archives(str(tmp_path), suffix=".zip")

    assert [Path(p).name for p in paths] == ["a.zip"]


def test_discover_missing_root_raises_filesystem_error(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        discover_archives(str(tmp_path / "missing"))


def test_discover_unreadable_directory_aborts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "a.kmz").write_bytes(b"")

    def failing_walk(top, onerror=None, **kwargs):
        onerror(PermissionError(13, "Permission denied", str(top)))
        yield from ()

    monkeypatch.setattr("kmzpoints.discovery.os.walk", failing_walk)

    with pytest.raises(FilesystemError):
        discover_archives(str(tmp_path))
