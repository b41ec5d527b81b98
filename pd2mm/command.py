"""Command-line argument helpers."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

BIN_SIZE = 2

T = TypeVar("T")

_log = logging.getLogger(__name__)


class CommandError(ValueError):
    """Raised when command arguments are missing or of the wrong count."""


class NoFunctionNameError(CommandError):
    """Raised when the requested command name is not among the arguments."""

    def __init__(self) -> None:
        super().__init__("no function name")


def _expected_args(expected: int, got: int) -> CommandError:
    return CommandError(f"expected: {expected} arguments but got {got}")


def is_flag_passed(argv: Sequence[str], name: str) -> bool:
    """Return True if the flag ``name`` was given on the command line."""
    for arg in argv:
        if arg == "--":
            break
        if not arg.startswith("-") or arg == "-":
            continue
        body = arg[2:] if arg.startswith("--") else arg[1:]
        if body.partition("=")[0] == name:
            return True
    return False


def new_command(args: Sequence[str], name: str, count: int) -> list[str]:
    """Return the arguments that follow ``name``.

    Raises NoFunctionNameError if ``name`` is absent and CommandError if
    there are fewer than ``count`` arguments besides the program and command.
    """
    if name not in args:
        raise NoFunctionNameError()

    index = list(args).index(name)
    if len(args) < count + BIN_SIZE:
        raise _expected_args(count, len(args) - BIN_SIZE)
    return list(args[index + 1 :])


def split_arguments(text: str) -> list[str]:
    """Split ``text`` on spaces, keeping double-quoted spans together."""
    parts: list[str] = []
    current: list[str] = []
    quoted = False

    for char in text:
        if char == '"':
            quoted = not quoted
        elif char == " " and not quoted:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)

    parts.append("".join(current))
    return parts


def check_argument_count(args: Sequence[str], expected: int) -> None:
    """Raise CommandError unless ``args`` holds exactly ``expected`` items."""
    if len(args) != expected:
        raise _expected_args(expected, len(args))


def wrap_error(fn: Callable[[], T]) -> T:
    """Call ``fn`` and return its result; on failure log it and exit with status 1."""
    try:
        return fn()
    except Exception as err:  # noqa: BLE001 - any failure is fatal here
        _log.critical("Error: %s", err)
        raise SystemExit(1) from err