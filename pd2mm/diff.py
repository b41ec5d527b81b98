"""Compare two directory trees by file checksums."""

from __future__ import annotations

import hashlib
import os
import sys
from collections.abc import Iterator, Sequence

_CHUNK = 1 << 16


def calculate_checksum(path: str | os.PathLike[str]) -> str:
    """Return the hex MD5 digest of the file at ``path``."""
    digest = hashlib.md5(usedforsecurity=False)
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_CHUNK), b""):
            digest.update(chunk)
    return digest.hexdigest()


def _walk_files(root: str) -> Iterator[str]:
    """Yield every non-directory path below ``root``; errors propagate."""
    if not os.path.isdir(root):
        yield root
        return
    with os.scandir(root) as entries:
        for entry in entries:
            if entry.is_dir(follow_symlinks=False):
                yield from _walk_files(entry.path)
            else:
                yield entry.path


def _checksums(folder: str | os.PathLike[str]) -> dict[str, str]:
    root = os.fspath(folder)
    return {
        os.path.relpath(path, root): calculate_checksum(path)
        for path in _walk_files(root)
    }


def diff_folders(folder_a: str | os.PathLike[str], folder_b: str | os.PathLike[str]) -> list[str]:
    """Return report lines describing how the files of two folders differ."""
    sums_a = _checksums(folder_a)
    sums_b = _checksums(folder_b)
    lines: list[str] = []

    for path in sorted(sums_a):
        checksum_a = sums_a[path]
        checksum_b = sums_b.get(path)
        if checksum_b is None:
            lines.append(f"File {path} exists in folder1 but not in folder2")
            continue
        if checksum_a != checksum_b:
            lines.append(f"Checksums for file {path} do not match:")
            lines.append(f"  Folder1: {checksum_a}")
            lines.append(f"  Folder2: {checksum_b}")

    lines.extend(
        f"File {path} exists in folder2 but not in folder1"
        for path in sorted(sums_b)
        if path not in sums_a
    )
    return lines


def compare_folders(folder_a: str | os.PathLike[str], folder_b: str | os.PathLike[str]) -> None:
    """Print the differences between two folders."""
    for line in diff_folders(folder_a, folder_b):
        print(line)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the folder comparison command; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        print("Usage: diff <folder1> <folder2>")
        return 1
    try:
        compare_folders(args[0], args[1])
    except OSError as err:
        print(f"Error: {err}")
    return 0


if __name__ == "__main__":
    sys.exit(main())