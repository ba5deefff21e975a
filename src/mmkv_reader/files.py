"""Locating dump files and describing them for display."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .exceptions import NotFoundError

CHECKSUM_SUFFIX: Final = ".crc"
"""Name suffix of the companion checksum file, e.g. `mmkv.default.crc`."""

_SIZE_UNITS: Final = ("B", "KB", "MB", "GB")


@dataclass(frozen=True, slots=True)
class DumpFiles:
    """A data file and its optional checksum companion."""

    data_path: Path
    """The MMKV data file. MMKV data files usually have no extension."""

    checksum_path: Path | None = None
    """The `.crc` file, if one was supplied."""


def is_checksum_file(path: Path | str) -> bool:
    """Check whether a path names a checksum file, ignoring case."""
    return Path(path).name.lower().endswith(CHECKSUM_SUFFIX)


def pair_dump_files(paths: Iterable[Path | str]) -> DumpFiles:
    """
    Sort a set of user-supplied paths into data and checksum files.

    Paths ending in `.crc` are checksum files; everything else is a data
    file. When several of either kind are given, the last one wins.

    Raises:
        NotFoundError: If no data file is among the paths.
    """
    data_path: Path | None = None
    checksum_path: Path | None = None

    for raw in paths:
        path = Path(raw)
        if is_checksum_file(path):
            checksum_path = path
        else:
            data_path = path

    if data_path is None:
        raise NotFoundError(None, detail="no data file among the given paths")

    return DumpFiles(data_path=data_path, checksum_path=checksum_path)


def format_file_size(size: int) -> str:
    """
    Format a byte count for display.

    Scales by 1024 up to gigabytes and keeps at most two decimals,
    e.g. `512 B`, `1.5 KB`, `3.25 MB`.
    """
    scaled = float(size)
    order = 0
    while scaled >= 1024 and order < len(_SIZE_UNITS) - 1:
        scaled /= 1024
        order += 1

    number = f"{scaled:.2f}".rstrip("0").rstrip(".")
    return f"{number} {_SIZE_UNITS[order]}"
