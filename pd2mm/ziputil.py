"""Packing directories into zip archives and unpacking them."""

from __future__ import annotations

import logging
import os
import re
import shutil
import zipfile
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote_plus

_log = logging.getLogger(__name__)

_STEP = 1024
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class Messenger:
    """Callbacks reporting progress of a zip or unzip."""

    added_file: Callable[[str], object]


def default_zip_messenger() -> Messenger:
    """Return a messenger that logs each file added to an archive."""
    return Messenger(added_file=lambda path: _log.info("Adding file to zip: %s", path))


def default_unzip_messenger() -> Messenger:
    """Return a messenger that logs each file taken from an archive."""
    return Messenger(added_file=lambda path: _log.info("Unzipping file: %s", path))


def _walk_files(root: str) -> Iterator[str]:
    with os.scandir(root) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_files(entry.path)
        else:
            yield entry.path


def zip_directory(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Pack every file under ``src`` into the zip archive ``dest``."""
    zip_with_messenger(src, dest, default_zip_messenger())


def zip_with_messenger(
    src: str | os.PathLike[str], dest: str | os.PathLike[str], msg: Messenger
) -> None:
    """Pack every file under ``src`` into ``dest``, reporting each to ``msg``.

    Entry names are relative to ``src`` and use forward slashes; the archive
    itself is skipped when it lies inside ``src``.
    """
    root = os.fspath(src)
    if not os.path.exists(root):
        raise FileNotFoundError(f"source directory does not exist: {root}")
    if not os.path.isdir(root):
        raise NotADirectoryError(f"source is not a directory: {root}")

    target = Path(dest)
    target.parent.mkdir(mode=0o700, parents=True, exist_ok=True)

    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        resolved_target = target.resolve()
        for path in _walk_files(root):
            if Path(path).resolve() == resolved_target:
                continue
            name = os.path.relpath(path, root).replace(os.sep, "/")
            msg.added_file(path)
            archive.write(path, arcname=name)


def _query_unescape(name: str) -> str:
    bad = _BAD_ESCAPE.search(name)
    if bad is not None:
        raise ValueError(f"invalid URL escape {name[bad.start():bad.start() + 3]!r} in {name!r}")
    return unquote_plus(name)


def unzip(src: str | os.PathLike[str], dest: str | os.PathLike[str]) -> None:
    """Unpack the whole archive ``src`` into ``dest``."""
    unzip_by_prefix_with_messenger(src, dest, "", default_unzip_messenger())


def unzip_by_prefix_with_messenger(
    src: str | os.PathLike[str],
    dest: str | os.PathLike[str],
    prefix: str,
    msg: Messenger,
) -> None:
    """Unpack the entries of ``src`` that start with ``prefix`` into ``dest``.

    The prefix is removed from each name and the rest is URL-unescaped.
    Raises ValueError for a malformed escape or a name leaving ``dest``.
    """
    root = os.path.abspath(os.fspath(dest))

    with zipfile.ZipFile(src) as archive:
        for info in archive.infolist():
            if prefix and not info.filename.startswith(prefix):
                continue

            name = _query_unescape(info.filename[len(prefix):] if prefix else info.filename)
            path = os.path.normpath(os.path.join(root, name.lstrip("/\\")))
            if os.path.commonpath([root, path]) != root:
                raise ValueError(f"archive entry escapes destination: {info.filename!r}")

            msg.added_file(path)

            if info.is_dir():
                try:
                    os.makedirs(path, exist_ok=True)
                except OSError:
                    continue
                continue

            os.makedirs(os.path.dirname(path), exist_ok=True)
            with archive.open(info) as source, open(path, "wb") as target:
                shutil.copyfileobj(source, target, _STEP)