"""Filesystem helpers for locating, naming and copying mod files."""

from __future__ import annotations

import os
import shutil
import stat
from pathlib import Path

_ADDED_PERMISSION = 0o666


def normalize(path: str | os.PathLike[str]) -> str:
    """Return ``path`` with every backslash turned into a forward slash."""
    return os.fspath(path).replace("\\", "/")


def to_normalized_slice(path: str | os.PathLike[str]) -> list[str]:
    """Split a path into its non-empty components after normalising separators."""
    return [part for part in normalize(path).split("/") if part]


def from_cwd(*args: str | os.PathLike[str]) -> str:
    """Join ``args`` onto the current working directory."""
    return os.path.join(os.getcwd(), *(os.fspath(arg) for arg in args))


def get_files(path: str | os.PathLike[str]) -> list[str]:
    """Return every file below ``path``, recursively and in sorted order.

    A missing or non-directory ``path`` gives an empty list.
    """
    root = os.fspath(path)
    if not os.path.isdir(root):
        return []
    found: list[str] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        found.extend(os.path.join(dirpath, name) for name in sorted(filenames))
    return found


def get_top_directories(path: str | os.PathLike[str]) -> list[str]:
    """Return the names of the directories directly inside ``path``, sorted."""
    with os.scandir(os.fspath(path)) as entries:
        return sorted(entry.name for entry in entries if entry.is_dir())


def get_file_extension(path: str | os.PathLike[str]) -> str:
    """Return the extension of the last path component, dot included, or ``""``."""
    name = normalize(path).rpartition("/")[2]
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _copy_one(source: Path, target: Path) -> None:
    shutil.copyfile(source, target)
    os.chmod(target, stat.S_IMODE(source.stat().st_mode) | _ADDED_PERMISSION)


def copy_file(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Copy a file or a whole directory tree from ``src`` to ``dest``.

    Directories are merged into an existing destination and existing files
    are overwritten. Copies are given read and write permission for all.
    """
    source, target = Path(src), Path(dest)
    if not source.exists():
        raise FileNotFoundError(f"no such file or directory: {source}")

    if not source.is_dir():
        target.parent.mkdir(parents=True, exist_ok=True)
        _copy_one(source, target)
        return

    for dirpath, dirnames, filenames in os.walk(source):
        dirnames.sort()
        current = Path(dirpath)
        out = target / current.relative_to(source)
        out.mkdir(parents=True, exist_ok=True)
        os.chmod(out, stat.S_IMODE(current.stat().st_mode) | _ADDED_PERMISSION)
        for name in sorted(filenames):
            _copy_one(current / name, out / name)