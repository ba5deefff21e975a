"""Exception hierarchy for the MMKV dump reader."""

from __future__ import annotations

from pathlib import Path


class MMKVError(Exception):
    """
    Base exception for all reader errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class NotFoundError(MMKVError):
    """
    Raised when a dump file does not exist.

    Attributes:
        path: The path that could not be resolved, or `None` when no data
            file was named at all.
    """

    def __init__(self, path: Path | str | None, detail: str | None = None) -> None:
        self.path = None if path is None else Path(path)
        msg = "MMKV data file not found"
        if self.path is not None:
            msg = f"{msg}: {self.path}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)


class MalformedHeaderError(MMKVError):
    """
    Raised when a dump file is too small to hold the length header.

    Only the file reading path raises this. In-memory decoding treats a
    short buffer as an empty dump.

    Attributes:
        size: The actual size of the file in bytes.
    """

    def __init__(self, size: int) -> None:
        self.size = size
        super().__init__(f"Invalid MMKV file: {size} bytes is too small for the length header")


class VarintTooLongError(MMKVError):
    """
    Raised when a varint keeps its continuation bit past the target width.

    Attributes:
        max_bytes: The maximum encoded size for the target width (5 or 10).
    """

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"Varint too long: exceeds {max_bytes} bytes")


class ClassificationError(MMKVError):
    """
    Raised when a forced renderer cannot produce a value.

    The classifier catches this and falls back to a hexadecimal rendering.
    """
