"""Text helpers: placeholder substitution, matching and the console banner."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping

import regex

_WIDE_CHARS = regex.compile(r"[\p{Han}\p{Katakana}\p{Hiragana}\p{Hangul}]")


def format_string(text: str, replacements: Mapping[str, str]) -> str:
    """Replace every key of ``replacements`` in ``text`` with its value, in order."""
    for key, value in replacements.items():
        text = text.replace(key, value)
    return text


def is_match(data: bytes | str, pattern: str) -> bool:
    """Return True if ``pattern`` matches anywhere in ``data``."""
    if isinstance(data, bytes):
        data = data.decode("utf-8", errors="replace")
    return regex.search(pattern, data) is not None


def map_key_value_pairs(lines: Iterable[str]) -> dict[str, str]:
    """Build a dict from ``key=value`` lines; lines without ``=`` are skipped."""
    pairs: dict[str, str] = {}
    for line in lines:
        key, sep, value = line.partition("=")
        if sep:
            pairs[key] = value
    return pairs


def text_length(text: str) -> int:
    """Return the display width used for the banner.

    CJK characters count as two columns; everything else counts by its
    UTF-8 byte length.
    """
    return len(_WIDE_CHARS.sub("ab", text).encode("utf-8"))


def draw_watermark(lines: Iterable[str], draw: Callable[[str], object]) -> list[str]:
    """Draw ``lines`` inside a box, passing each row to ``draw``; return the rows."""
    lines = list(lines)
    longest = max((text_length(line) for line in lines), default=0)
    rule = "-" * longest

    rows = [f"┌─{rule}─┐"]
    rows.extend(f"│ {line}{' ' * (longest - text_length(line))} │" for line in lines)
    rows.append(f"└─{rule}─┘")

    for row in rows:
        draw(row)
    return rows