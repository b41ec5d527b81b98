"""The command-line application: configuration discovery and the console run."""

from __future__ import annotations

import contextlib
import logging
import os
import platform
import sys
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import IO, TextIO

from pd2mm.cleaner import SHARED_CLEANER, Target
from pd2mm.command import is_flag_passed
from pd2mm.config import FILE_TYPES, Config, default, read, write
from pd2mm.fileops import from_cwd, get_file_extension
from pd2mm.flags import Flags, setup_flags
from pd2mm.lang import lang, setup_language
from pd2mm.runner import SHARED_RUNNER, run_with_error
from pd2mm.textutil import draw_watermark

_log = logging.getLogger(__name__)
_PACKAGE_LOGGER = __name__.partition(".")[0]


def setup() -> bool:
    """Write the default configuration if none exists; return True if written."""
    target = lang("defaultConfigPath")
    if os.path.exists(from_cwd(target)):
        return False

    _log.warning("%s does not exist, creating.", target)
    try:
        write(target, default())
    except OSError as err:
        _log.error("failed to write default config err=%s", err)
        return False
    return True


def config_names(flags: Flags) -> list[str]:
    """Return the configuration files to use.

    The ``config`` flag wins; otherwise every JSON or JSONC file directly
    inside the program directory is used.
    """
    if flags.config:
        return [flags.config]

    folder = lang("programName")
    try:
        with os.scandir(from_cwd(folder)) as entries:
            names = sorted(entry.name for entry in entries if entry.is_file())
    except OSError as err:
        _log.error("failed to get files err=%s", err)
        return []

    return [from_cwd(folder, name) for name in names if get_file_extension(name) in FILE_TYPES]


def configs(flags: Flags) -> list[Config]:
    """Read every configuration named by :func:`config_names`, skipping unreadable ones."""
    found: list[Config] = []
    for entry in config_names(flags):
        try:
            found.append(read(entry))
        except (OSError, ValueError) as err:
            _log.debug("skipping config %s: %s", entry, err)
    return found


def start(flags: Flags, configs: Iterable[Config], update: Callable[[], object]) -> list[Exception]:
    """Run the shared runner over ``configs``, calling ``update`` when done."""
    SHARED_RUNNER.register_update(update)
    return SHARED_RUNNER.run(flags, configs)


def open_log_file(flags: Flags) -> IO[str]:
    """Open the log file for appending, creating it if needed."""
    return open(flags.log, "a", encoding="utf-8")


@contextlib.contextmanager
def _logging_to(*streams: TextIO) -> Iterator[None]:
    logger = logging.getLogger(_PACKAGE_LOGGER)
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(message)s")
    handlers = [logging.StreamHandler(stream) for stream in streams]
    previous = logger.level
    logger.setLevel(logging.INFO)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    try:
        yield
    finally:
        for handler in handlers:
            logger.removeHandler(handler)
        logger.setLevel(previous)


def _version() -> None:
    _log.info("version python=%s", platform.python_version())


def start_console_app(
    flags: Flags,
    argv: Sequence[str] | None,
    log_file: TextIO,
    version: Callable[[], object],
) -> int:
    """Run the console application; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    with _logging_to(log_file, sys.stdout):
        draw_watermark(
            [lang("programName"), lang("watermarkPart1"), lang("watermarkPart2")],
            lambda row: _log.info("%s", row),
        )

        if flags.version:
            version()
            return 0

        passed = is_flag_passed(args, "config")
        if passed and not flags.config:
            _log.error("flag 'config' cannot be nil or empty")
            return 1
        if not passed:
            flags.config = ""

        found = configs(flags)

        for enabled, target, key in (
            (flags.clean_extract, Target.EXTRACT, "doneExtractCleanerNotify"),
            (flags.clean_export, Target.EXPORT, "doneExportCleanerNotify"),
            (flags.clean_output, Target.OUTPUT, "doneOutputCleanerNotify"),
        ):
            if enabled:
                SHARED_CLEANER.clean_configs(found, target, lambda key=key: _log.info(lang(key)))

        for err in run_with_error(flags, found, SHARED_CLEANER):
            _log.error("%s %s", lang("errorNotify"), err)

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of the command-line program."""
    args = list(sys.argv[1:] if argv is None else argv)
    setup_language()
    flags = setup_flags(args)

    with open_log_file(flags) as log_file:
        setup()
        return start_console_app(flags, args, log_file, _version)


if __name__ == "__main__":
    sys.exit(main())