"""Command-line options."""

from __future__ import annotations

import argparse
import logging
import posixpath
from collections.abc import Sequence
from dataclasses import dataclass

from pd2mm.lang import LanguageNotFoundError, set_language
from pd2mm.lang import lang as translate

_log = logging.getLogger(__name__)


@dataclass
class Flags:
    """Options that control a run."""

    version: bool = False
    config: str = ""
    log: str = ""
    lang: str = "en"
    bin: str = ""
    clean_extract: bool = False
    clean_export: bool = False
    clean_output: bool = False


def default_flags() -> Flags:
    """Return the options used when nothing is given on the command line."""
    return Flags(
        version=False,
        config=translate("defaultConfigPath"),
        log=translate("defaultLogPath"),
        lang="en",
        bin=posixpath.join(translate("programName"), "bin"),
    )


def setup_flags(argv: Sequence[str] | None = None) -> Flags:
    """Parse ``-version`` and ``-config`` from ``argv`` on top of the defaults.

    An unknown flag makes the parser exit with status 2.
    """
    flags = default_flags()

    parser = argparse.ArgumentParser(prog=translate("programName"), allow_abbrev=False)
    parser.add_argument(
        "-version", "--version", dest="version", action="store_true",
        help=translate("versionUsage"),
    )
    parser.add_argument(
        "-config", "--config", dest="config", default=flags.config,
        help=translate("configUsage"),
    )
    parser.add_argument("args", nargs="*", help=argparse.SUPPRESS)

    if flags.lang:
        try:
            set_language(flags.lang)
        except LanguageNotFoundError:
            _log.info(translate("languageNotFound"))

    namespace = parser.parse_args(None if argv is None else list(argv))
    flags.version = namespace.version
    flags.config = namespace.config
    return flags