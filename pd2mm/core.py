"""Placing extracted mod files into the output directory."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

from pd2mm.config import Expect, PathSearch
from pd2mm.fileops import (
    copy_file,
    from_cwd,
    get_file_extension,
    get_files,
    get_top_directories,
    normalize,
    to_normalized_slice,
)
from pd2mm.lang import lang
from pd2mm.sliceutil import contains_subslice, matches, replace_subslice

_log = logging.getLogger(__name__)


def _at(items: Sequence[str], index: int) -> str:
    return items[index] if 0 <= index < len(items) else ""


def _span(items: Sequence[str], start: int, end: int) -> list[str]:
    start, end = max(start, 0), min(end, len(items))
    return list(items[start:end]) if start < end else []


def _index(items: Sequence[str], value: str) -> int:
    try:
        return list(items).index(value)
    except ValueError:
        return -1


def _join(*parts: str) -> str:
    present = [part for part in parts if part]
    if not present:
        return ""
    return normalize(os.path.normpath(os.path.join(*present)))


def _copy(src: str, dest: str, where: str) -> None:
    try:
        copy_file(src, dest)
    except OSError as err:
        raise OSError(f"{where}: failed to copy '{src}' to '{dest}': {err}") from err


def process(search: PathSearch) -> None:
    """Copy the extracted mods of ``search`` to its output, then its extra copies."""
    _process_extracted(search)
    copy_additional(search)


def _process_extracted(search: PathSearch) -> None:
    root = from_cwd(search.extract.path)
    try:
        directories = get_top_directories(root)
    except OSError as err:
        _log.warning("failed to get directories path=%s err=%s", search.extract.path, err)
        raise OSError(f"failed to get directories '{search.extract.path}': {err}") from err

    for directory in directories:
        _check_include_data(normalize(os.path.join(search.extract.path, directory)), search)

    if search.export.path:
        _copy(search.output.path, search.export.path, "process")


def _check_include_data(path: str, search: PathSearch) -> None:
    for file in get_files(from_cwd(path)):
        source = normalize(file)

        for include in search.include:
            if search.format_string(include.path) not in source:
                continue
            destination = search.format_string(include.to)
            try:
                copy_expected(source, destination, False, search)
            except OSError as err:
                _log.error("failed to copy source=%s destination=%s err=%s", source, destination, err)

        if _check_exclude_data(source, search):
            break


def _check_exclude_data(path: str, search: PathSearch) -> bool:
    parts = normalize(path).split("/")

    for exclude in search.exclude:
        if contains_subslice(parts, search.format_slice(to_normalized_slice(exclude))):
            return False

    try:
        return _check_expects_data(path, search)
    except OSError as err:
        _log.error("failed to copy expected paths err=%s", err)
        return True


def _check_expects_data(path: str, search: PathSearch) -> bool:
    source = path.split("/")

    for expect in search.expects:
        expect_path = to_normalized_slice(expect.path)
        if len(source) < len(expect_path):
            continue
        if get_file_extension(_at(source, len(source) - 1)) in expect_path:
            return _expected_is_file(source, search, expect)
        if matches(source, expect_path) == len(expect_path):
            return _expected_is_directory(source, search, expect)

    return False


def _expected_is_file(source: list[str], search: PathSearch, expect: Expect) -> bool:
    path = "/".join(source)
    destination = _join(search.output.path, fix_destination(source, search, expect, False))
    if not destination:
        return False

    destination = normalize(from_cwd(destination))
    require = to_normalized_slice(expect.require)

    if contains_subslice(source, require) and contains_subslice(destination.split("/"), require):
        path = "/".join(_span(source, 0, len(source) - len(require)))
        parts = destination.split("/")
        destination = "/".join(_span(parts, 0, len(parts) - len(require)))

    try:
        copy_expected(path, destination, False, search)
    except OSError as err:
        raise OSError(f"expects: failed to copy '{path}' to '{destination}': {err}") from err
    return True


def _expected_is_directory(source: list[str], search: PathSearch, expect: Expect) -> bool:
    destination = fix_destination(source, search, expect, True)
    if not destination:
        return False
    destination = from_cwd(destination)

    index = _index(source, _at(to_normalized_slice(expect.path), 0))
    end = index + 1 if expect.exclusive else index
    src = "/".join(_span(source, 0, end))

    try:
        copy_expected(src, destination, False, search)
    except OSError as err:
        raise OSError(f"expectedIsDirectory: failed to copy '{src}' to '{destination}': {err}") from err
    return True


def copy_additional(search: PathSearch) -> None:
    """Perform the extra copies listed in ``search.copy``."""
    for item in search.copy:
        src, dest = search.format_string(item.source), search.format_string(item.to)
        _log.info("%s source=%s destination=%s", lang("copyingNotify"), src, dest)
        _copy(src, dest, "copyAdditional")


def fix_destination(
    parts: Sequence[str], search: PathSearch, expect: Expect, is_dir: bool
) -> str:
    """Work out where a matched file or mod directory is placed.

    For a file the result is relative; for a directory it is joined onto
    the output path, dropping ``expect.base`` trailing components.
    """
    result = "/".join(parts)

    if is_dir:
        index = _index(parts, _at(to_normalized_slice(expect.path), 0))
        end = index + 1 if expect.exclusive else index
        result = "/".join(_span(parts, 0, end))

    results = result.split("/")
    required = [*to_normalized_slice(expect.require), _at(results, len(results) - 1)]

    if is_dir:
        base = "/".join(_span(required, 0, len(required) - expect.base))
        return _join(search.output.path, base)
    return "/".join(required)


def copy_expected(src: str, dest: str, expected: bool, search: PathSearch) -> None:
    """Copy ``src`` to ``dest`` after applying the rename rules of ``search``.

    With ``expected`` the parent directory of ``src`` is copied as well.
    """
    src, dest = normalize(src), normalize(dest)

    for rename in search.rename:
        path_fmt = search.format_slice(to_normalized_slice(rename.path))
        from_fmt = search.format_slice(to_normalized_slice(rename.source))
        to_fmt = search.format_slice(to_normalized_slice(rename.to))
        if contains_subslice(src.split("/"), path_fmt):
            dest = "/".join(replace_subslice(dest.split("/"), from_fmt, to_fmt))

    if expected:
        _parse_expected_and_copy(src, dest)

    _log.info("%s source=%s destination=%s", lang("copyingNotify"), src, dest)
    _copy(src, dest, "copyExpected")


def _parse_expected_and_copy(src: str, dest: str) -> None:
    parts = src.split("/")
    source = _span(parts, 0, len(parts) - 1)
    src, dest = "/".join(source), _join(dest, _at(source, len(source) - 1))
    _log.info("%s source=%s destination=%s", lang("copyingNotify"), src, dest)
    _copy(src, dest, "parseExpectedAndCopy")