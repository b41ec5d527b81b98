"""User-facing strings and the active display language."""

from __future__ import annotations

import locale
import os
import threading
from collections.abc import Mapping
from types import MappingProxyType

_ENGLISH_STRINGS = dict(
    programName="pd2mm",
    defaultConfigPath="pd2mm/pd2.json",
    defaultLogPath="pd2mm_log.txt",
    versionUsage="The program version",
    configUsage="The config file path",
    languageNotFound="Language not found",
    errorNotify="ERROR:",
    workingNotify="... WORKING",
    deleteNotify="... DELETING",
    copyingNotify="... COPYING",
    extractNotify="... EXTRACTING",
    extractingNotify="... EXTRACTING",
    startingRunnerNotify="... [RUNNER] STARTING",
    doneRunnerNotify="... [RUNNER] DONE",
    startingCleanerNotify="... [CLEANER] STARTING",
    doneCleanerNotify="... [CLEANER] DONE",
    doneExtractCleanerNotify="... EXTRACT CLEANER DONE ...",
    doneExportCleanerNotify="... EXPORT CLEANER DONE ...",
    doneOutputCleanerNotify="... OUTPUT CLEANER DONE ...",
    watermarkPart1="This work is free of charge",
    watermarkPart2="If you paid money, you were scammed",
    configLabel="Select from available configs",
    configCustomLabel="Set a custom config path",
    logLabel="The log file path",
    binLabel="The 7z file path",
    startButton="Start",
    cleanExtractButton="Clean Extract Directories",
    cleanExportButton="Clean Export Directories",
    cleanOutputButton="Clean Output Directories",
)

EN: Mapping[str, str] = MappingProxyType(_ENGLISH_STRINGS)

# Chinese has no translations yet and shares the English table.
ZH: Mapping[str, str] = EN

_LANGUAGES: dict[str, Mapping[str, str]] = {"zh": ZH, "en": EN}
_LOCALE_VARIABLES = ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG")

_lock = threading.Lock()
_current: Mapping[str, str] = {}


class LanguageNotFoundError(LookupError):
    """Raised when no string table exists for a requested language."""

    def __init__(self, language: str) -> None:
        super().__init__(f"language not found: {language!r}")
        self.language = language


def _base_language(tag: str) -> str:
    tag = tag.strip().split(".", 1)[0].split("@", 1)[0]
    return tag.replace("_", "-").split("-", 1)[0].lower()


def set_language(language: str) -> str:
    """Make ``language`` (a tag such as ``en`` or ``zh-CN``) the active one.

    Returns the base language code that was selected.
    """
    global _current
    base = _base_language(language)
    table = _LANGUAGES.get(base)
    if table is None:
        raise LanguageNotFoundError(language)
    with _lock:
        _current = table
    return base


def lang(key: str) -> str:
    """Return the string for ``key`` in the active language.

    Falls back to English, and to an empty string for unknown keys.
    """
    with _lock:
        table = _current
    word = table.get(key)
    if word is None:
        return EN.get(key, "")
    return word


def _detect_locale() -> str | None:
    for name in _LOCALE_VARIABLES:
        for candidate in os.environ.get(name, "").split(":"):
            if candidate and candidate not in ("C", "POSIX"):
                return candidate
    try:
        code = locale.getlocale()[0]
    except ValueError:
        code = None
    return code or None


def setup_language() -> str:
    """Select the language of the user's locale, falling back to English.

    Returns the base language code that was selected.
    """
    detected = _detect_locale()
    if detected:
        try:
            return set_language(detected)
        except LanguageNotFoundError:
            pass
    return set_language("en")