"""Removing generated files from extract, export and output directories."""

from __future__ import annotations

import enum
import logging
import os
import stat
import threading
from collections.abc import Callable, Iterable

from pd2mm.config import Config, PathInfo, PathSearch
from pd2mm.fileops import from_cwd, normalize, to_normalized_slice
from pd2mm.lang import lang
from pd2mm.sliceutil import contains_subslice

_log = logging.getLogger(__name__)


class Target(enum.IntEnum):
    """Which directory of a mod search to clean."""

    EXTRACT = 1
    EXPORT = 2
    OUTPUT = 3


def _format_sub_slices(search: PathSearch, parts: list[str]) -> list[str]:
    result: list[str] = []
    for item in search.format_slice([normalize(part) for part in parts]):
        result.extend(item.split("/"))
    return result


def should_skip(name: str, search: PathSearch, info: PathInfo) -> bool:
    """Return True if ``name`` lies under one of ``info``'s clean exclusions."""
    parts = normalize(name).split("/")
    return any(
        contains_subslice(parts, _format_sub_slices(search, to_normalized_slice(exclude)))
        for exclude in info.exclude_clean
    )


def _clear_read_only(target: str) -> list[OSError]:
    errors: list[OSError] = []
    if not os.path.exists(target):
        return errors
    for dirpath, _dirnames, filenames in os.walk(target):
        for path in (dirpath, *(os.path.join(dirpath, name) for name in filenames)):
            try:
                mode = stat.S_IMODE(os.stat(path).st_mode)
                if not mode & stat.S_IWUSR:
                    os.chmod(path, mode | stat.S_IWUSR)
            except OSError as err:
                errors.append(err)
    return errors


def _delete_files(target: str, skip: Callable[[str], bool]) -> None:
    if not os.path.isdir(target):
        return

    def fail(err: OSError) -> None:
        raise err

    for dirpath, _dirnames, filenames in os.walk(target, onerror=fail):
        for name in filenames:
            path = os.path.join(dirpath, name)
            if not skip(path):
                os.remove(path)


def _delete_empty_directories(target: str) -> list[OSError]:
    errors: list[OSError] = []
    if not os.path.isdir(target):
        return errors
    for dirpath, _dirnames, _filenames in os.walk(target, topdown=False):
        if os.path.samefile(dirpath, target):
            continue
        try:
            if not os.listdir(dirpath):
                os.rmdir(dirpath)
        except OSError as err:
            errors.append(err)
    return errors


def clean_path(search: PathSearch, info: PathInfo) -> list[OSError]:
    """Delete every file under ``info.path`` that is not excluded, then empty folders.

    Returns the errors that did not stop the clean; raises OSError when the
    files themselves could not be deleted.
    """
    target = from_cwd(info.path)
    _log.info("%s path=%s", lang("deleteNotify"), target)

    errors = _clear_read_only(target)

    try:
        _delete_files(target, lambda name: should_skip(name, search, info))
    except OSError as err:
        raise OSError(f"failed to delete directory: {target}: {err}") from err

    errors.extend(_delete_empty_directories(target))
    return errors


def _call_update(update: Callable[[], object]) -> None:
    try:
        update()
    except Exception as err:  # noqa: BLE001 - update failures are reported, not fatal
        _log.error("%s", err)


class Cleaner:
    """Runs cleans and reports whether one is in progress."""

    def __init__(self, update: Callable[[], object] | None = None) -> None:
        self._lock = threading.Lock()
        self._active = threading.Event()
        self._update: Callable[[], object] = update or (lambda: None)

    def register_update(self, update: Callable[[], object]) -> None:
        """Set the function called after each clean finishes."""
        with self._lock:
            self._update = update

    def is_active(self) -> bool:
        """Return True while a clean is running."""
        return self._active.is_set()

    def clean(self, search: PathSearch, info: PathInfo) -> list[OSError]:
        """Clean one directory, log its errors and return them."""
        self._active.set()
        errors: list[OSError] = []
        try:
            _log.info(lang("startingCleanerNotify"))
            try:
                errors = clean_path(search, info)
            except OSError as err:
                errors = [err]
            for err in errors:
                _log.error("%s %s", lang("errorNotify"), err)
        finally:
            self._active.clear()
            _log.info(lang("doneCleanerNotify"))
            with self._lock:
                update = self._update
            _call_update(update)
        return errors

    def clean_configs(
        self,
        configs: Iterable[Config],
        target: Target | int,
        update: Callable[[], object],
    ) -> None:
        """Clean the ``target`` directory of every search in ``configs``, then call ``update``."""
        which = Target(target)
        for config in configs:
            for search in config.mods:
                info = {
                    Target.EXTRACT: search.extract,
                    Target.EXPORT: search.export,
                    Target.OUTPUT: search.output,
                }[which]
                self.clean(search, info)
        try:
            update()
        except Exception as err:  # noqa: BLE001 - update failures are reported, not fatal
            _log.error("%s %s", lang("errorNotify"), err)


SHARED_CLEANER = Cleaner()