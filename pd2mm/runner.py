"""Running a full extract, clean and process pass over configurations."""

from __future__ import annotations

import logging
import os
import threading
import time
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path

from pd2mm.cleaner import SHARED_CLEANER, Cleaner, Target
from pd2mm.config import Config, PathSearch
from pd2mm.core import process
from pd2mm.fileops import from_cwd, get_files
from pd2mm.flags import Flags
from pd2mm.lang import lang
from pd2mm.ziputil import default_unzip_messenger, unzip_by_prefix_with_messenger

_log = logging.getLogger(__name__)

Extractor = Callable[[Flags, PathSearch], object]


def _extract_archives(flags: Flags, search: PathSearch) -> None:
    """Unpack every archive in the mods directory into its own extract folder."""
    source = from_cwd(search.mods)
    destination = from_cwd(search.extract.path)
    try:
        for archive in get_files(source):
            _log.info("%s source=%s destination=%s", lang("extractNotify"), archive, destination)
            if not zipfile.is_zipfile(archive):
                raise ValueError(f"unsupported archive format: {archive}")
            unzip_by_prefix_with_messenger(
                archive,
                os.path.join(destination, Path(archive).stem),
                "",
                default_unzip_messenger(),
            )
    except (OSError, ValueError, zipfile.BadZipFile) as err:
        raise RuntimeError(f"failed to extract '{source}' to '{destination}': {err}") from err


def _run_extract(flags: Flags, config: Config, extractor: Extractor) -> None:
    for search in config.mods:
        extractor(flags, search)


def _run_process(config: Config) -> None:
    for search in config.mods:
        try:
            process(search)
        except Exception as err:  # noqa: BLE001 - one failing search must not stop the rest
            _log.error("failed to process mods err=%s", err)


def _run_config(flags: Flags, config: Config, cleaner: Cleaner, extractor: Extractor) -> None:
    def after_extract_clean() -> None:
        _log.info(lang("doneExtractCleanerNotify"))
        _run_extract(flags, config, extractor)

    def after_output_clean() -> None:
        _log.info(lang("doneOutputCleanerNotify"))
        _run_process(config)

    cleaner.clean_configs([config], Target.EXTRACT, after_extract_clean)
    cleaner.clean_configs([config], Target.OUTPUT, after_output_clean)


def run_with_error(
    flags: Flags,
    configs: Iterable[Config],
    cleaner: Cleaner | None = None,
    extractor: Extractor | None = None,
) -> list[Exception]:
    """Clean, extract and process each configuration in turn.

    Returns the error that stopped the run, if any, in a list.
    """
    cleaner = SHARED_CLEANER if cleaner is None else cleaner
    extractor = _extract_archives if extractor is None else extractor

    for config in configs:
        started = time.perf_counter()
        try:
            _run_config(flags, config, cleaner, extractor)
        except Exception as err:  # noqa: BLE001 - reported to the caller
            return [err]
        _log.info("%s took %.3fs", "Start", time.perf_counter() - started)
    return []


class Runner:
    """Runs passes and reports whether one is in progress."""

    def __init__(
        self,
        update: Callable[[], object] | None = None,
        *,
        extractor: Extractor | None = None,
        cleaner: Cleaner | None = None,
    ) -> None:
        self._lock = threading.Lock()
        self._active = threading.Event()
        self._update: Callable[[], object] = update or (lambda: None)
        self._extractor = extractor
        self._cleaner = cleaner

    def register_update(self, update: Callable[[], object]) -> None:
        """Set the function called after each run finishes."""
        with self._lock:
            self._update = update

    def is_active(self) -> bool:
        """Return True while a run is in progress."""
        return self._active.is_set()

    def run(self, flags: Flags, configs: Iterable[Config]) -> list[Exception]:
        """Run every configuration, log the errors and return them."""
        self._active.set()
        errors: list[Exception] = []
        try:
            _log.info(lang("startingRunnerNotify"))
            errors = run_with_error(flags, configs, self._cleaner, self._extractor)
            for err in errors:
                _log.error("%s %s", lang("errorNotify"), err)
        finally:
            self._active.clear()
            _log.info(lang("doneRunnerNotify"))
            with self._lock:
                update = self._update
            try:
                update()
            except Exception as err:  # noqa: BLE001 - update failures are reported, not fatal
                _log.error("%s", err)
        return errors


SHARED_RUNNER = Runner()