import os
import stat

import pytest

from pd2mm.fileops import (
    copy_file,
    from_cwd,
    get_file_extension,
    get_files,
    get_top_directories,
    normalize,
    to_normalized_slice,
)


def test_normalize_turns_backslashes_into_slashes():
    assert normalize("a\\b\\c.txt") == "a/b/c.txt"
    assert normalize("a/b") == "a/b"


def test_to_normalized_slice_drops_empty_parts():
    assert to_normalized_slice("a\\b//c/") == ["a", "b", "c"]
    assert to_normalized_slice("") == []


def test_from_cwd_joins_onto_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert from_cwd("x", "y") == os.path.join(os.getcwd(), "x", "y")
    assert from_cwd() == os.path.join(os.getcwd())


def test_get_files_is_recursive_and_sorted(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner.txt").write_text("1")
    (tmp_path / "a.txt").write_text("2")
    files = get_files(tmp_path)
    assert files == [str(tmp_path / "a.txt"), str(tmp_path / "b" / "inner.txt")]


def test_get_files_of_missing_directory_is_empty(tmp_path):
    assert get_files(tmp_path / "missing") == []


def test_get_top_directories_lists_only_directories(tmp_path):
    (tmp_path / "zeta").mkdir()
    (tmp_path / "alpha").mkdir()
    (tmp_path / "alpha" / "deep").mkdir()
    (tmp_path / "file.txt").write_text("x")
    assert get_top_directories(tmp_path) == ["alpha", "zeta"]


def test_get_top_directories_of_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        get_top_directories(tmp_path / "missing")


@pytest.mark.parametrize(
    ("path", "expected"),
    [("pd2mm/pd2.json", ".json"), ("dir.d\\file", ""), ("a/b.tar.gz", ".gz"), ("noext", "")],
)
def test_get_file_extension(path, expected):
    assert get_file_extension(path) == expected


def test_copy_file_copies_single_file_and_adds_permissions(tmp_path):
    source = tmp_path / "src.txt"
    source.write_text("content")
    os.chmod(source, 0o444)
    target = tmp_path / "nested" / "dest.txt"

    copy_file(source, target)

    assert target.read_text() == "content"
    assert stat.S_IMODE(target.stat().st_mode) & 0o666 == 0o666


def test_copy_file_merges_directory_trees(tmp_path):
    source = tmp_path / "src"
    (source / "sub").mkdir(parents=True)
    (source / "a.txt").write_text("a")
    (source / "sub" / "b.txt").write_text("b")
    target = tmp_path / "dest"
    target.mkdir()
    (target / "keep.txt").write_text("keep")
    (target / "a.txt").write_text("old")

    copy_file(source, target)

    assert (target / "a.txt").read_text() == "a"
    assert (target / "sub" / "b.txt").read_text() == "b"
    assert (target / "keep.txt").read_text() == "keep"


def test_copy_file_missing_source_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_file(tmp_path / "missing", tmp_path / "dest")