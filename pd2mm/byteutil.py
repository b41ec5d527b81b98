"""Helpers for searching, patching and decoding raw byte data."""

from __future__ import annotations

import re
import struct

_HEX_PAIR = re.compile(r"[0-9A-Fa-f]{1,2}")


def hex_string_to_bytes(hex_text: str) -> bytes:
    """Convert a string of two-digit hexadecimal values into bytes.

    Each pair is read as far as it holds hex digits; a pair that starts
    with a non-hex character, or an odd-length input, raises ValueError.
    """
    if len(hex_text) % 2:
        raise ValueError(f"hex string has odd length: {len(hex_text)}")

    chars = iter(hex_text)
    result = bytearray()
    for high, low in zip(chars, chars):
        pair = high + low
        found = _HEX_PAIR.match(pair)
        if found is None:
            raise ValueError(f"invalid hex pair: {pair!r}")
        result.append(int(found.group(), 16))
    return bytes(result)


def find_all_byte_occurrences(data: bytes, pattern: bytes) -> list[int]:
    """Return every offset in ``data`` at which ``pattern`` starts."""
    return [offset for offset in range(len(data)) if data.startswith(pattern, offset)]


def replace_byte_occurrences(
    original: bytes, expected: bytes, replacement: bytes, occurrence: int
) -> bytes:
    """Replace matches of ``expected`` in ``original``.

    With ``occurrence`` 0 every match is replaced; otherwise only the match
    whose zero-based position equals ``occurrence``. The replacement is cut
    to the length of ``expected``.
    """
    if not expected:
        raise ValueError("expected pattern must not be empty")

    patch = replacement[: min(len(replacement), len(expected))]
    parts: list[bytes] = []
    position = 0
    count = 0

    while position < len(original):
        index = original.find(expected, position)
        if index == -1:
            parts.append(original[position:])
            break
        parts.append(original[position:index])
        parts.append(patch if occurrence in (0, count) else expected)
        position = index + len(expected)
        count += 1

    return b"".join(parts)


def string_to_bytes(text: str) -> bytes:
    """Encode ``text`` as UTF-8 and pad with zero bytes to an even length.

    An already even-length encoding still receives two zero bytes.
    """
    raw = text.encode("utf-8")
    return raw + b"\x00" * (2 - len(raw) % 2)


def get_string_from_bytes(data: bytes, start: int, end: int) -> str:
    """Decode a zero-terminated little-endian UTF-16 string from ``data[start:end]``."""
    end = min(end, len(data))
    raw = data[start:end]
    if not raw:
        raise ValueError("no data to decode in the given range")

    whole = raw[: len(raw) // 2 * 2]
    units = [unit for (unit,) in struct.iter_unpack("<H", whole)]
    try:
        whole = whole[: units.index(0) * 2]
    except ValueError:
        pass
    return whole.decode("utf-16-le", errors="replace")