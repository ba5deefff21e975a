"""
Framing reader for MMKV dump files.

Layout
------
::

    offset 0:   int32, little-endian    declared payload length N
    offset 4:   repeated until offset 4+N or end of buffer:
                  varint   key_length
                  bytes    key[key_length]        (UTF-8)
                  varint   value_length
                  bytes    value[value_length]

The header may overstate the payload size. The declared length is clamped to
the real buffer before the scan starts, so no read ever goes past the end.

Termination
-----------
The scan ends in one of two ways, and both return normally:

1. The cursor reaches the declared bound.
2. A record is malformed: a non-positive key length, a key or value that
   runs past the buffer, or an over-long varint.

A malformed record stops the whole scan. Records after it are not
recovered, even if they are intact. This matches the store's reference
reader and is kept on purpose rather than skipping ahead to the next record.
"""

from __future__ import annotations

import logging
import struct
from pathlib import Path
from typing import Final

from .classify import classify
from .config import HEX_PREVIEW_LIMIT
from .exceptions import MalformedHeaderError, NotFoundError, VarintTooLongError
from .models import Cursor, Entry, TypeHint
from .render import decode_text
from .varint import decode_varint32

logger = logging.getLogger(__name__)

HEADER_SIZE: Final = 4
"""Size of the little-endian int32 payload length at the start of the file."""


def _read_header(cursor: Cursor) -> None:
    """Read the declared payload length and clamp it to the buffer."""
    (declared,) = struct.unpack_from("<i", cursor.data, 0)
    cursor.position = HEADER_SIZE

    available = cursor.buffer_length - HEADER_SIZE
    if declared > available:
        logger.debug(
            "Header declares %d payload bytes but only %d are present; clamping",
            declared,
            available,
        )
        declared = available

    cursor.declared_length = declared


def _read_length(cursor: Cursor) -> int:
    """Read a varint length and advance past it."""
    length, consumed = decode_varint32(cursor.data, cursor.position)
    cursor.position += consumed
    return length


def read_entry(
    cursor: Cursor,
    index: int,
    hint: TypeHint = TypeHint.AUTO,
    *,
    hex_limit: int = HEX_PREVIEW_LIMIT,
) -> Entry | None:
    """
    Read one key/value record at the cursor.

    Args:
        cursor: Parse state, advanced past the record on success.
        index: Index to assign to the entry.
        hint: Type hint passed through to the classifier.
        hex_limit: Byte cap for hexadecimal renderings.

    Returns:
        The decoded entry, or `None` if the record is malformed and the scan
        must stop. No partial entry is ever returned.
    """
    try:
        key_length = _read_length(cursor)
        if key_length <= 0 or key_length > cursor.remaining:
            logger.debug(
                "Stopping at offset %d: key length %d with %d bytes remaining",
                cursor.position,
                key_length,
                cursor.remaining,
            )
            return None
        key = decode_text(cursor.take(key_length))

        value_length = _read_length(cursor)
        if value_length > cursor.remaining:
            logger.debug(
                "Stopping at offset %d: value length %d with %d bytes remaining",
                cursor.position,
                value_length,
                cursor.remaining,
            )
            return None
        value = cursor.take(value_length)
    except VarintTooLongError as e:
        logger.debug("Stopping at offset %d: %s", cursor.position, e)
        return None

    rendered, label = classify(value, hint, hex_limit=hex_limit)
    return Entry(
        index=index,
        key=key,
        rendered_value=rendered,
        type_label=label,
        raw_length=value_length,
    )


def decode_buffer(
    data: bytes,
    type_hint: TypeHint = TypeHint.AUTO,
    *,
    hex_limit: int = HEX_PREVIEW_LIMIT,
) -> tuple[Entry, ...]:
    """
    Decode an in-memory MMKV dump.

    Args:
        data: The raw dump bytes.
        type_hint: Type to force for every value, or `TypeHint.AUTO`.
        hex_limit: Byte cap for hexadecimal renderings.

    Returns:
        Entries in file order. A buffer shorter than the header yields an
        empty tuple. Malformed framing truncates the result instead of
        raising.
    """
    data = bytes(data)
    if len(data) < HEADER_SIZE:
        return ()

    cursor = Cursor(data)
    _read_header(cursor)
    end = HEADER_SIZE + cursor.declared_length

    entries: list[Entry] = []
    while cursor.position < end and cursor.position < cursor.buffer_length:
        entry = read_entry(cursor, len(entries), type_hint, hex_limit=hex_limit)
        if entry is None:
            break
        entries.append(entry)

    logger.debug("Decoded %d entries from %d bytes", len(entries), cursor.buffer_length)
    return tuple(entries)


def decode_file(
    path: Path | str,
    checksum_path: Path | str | None = None,
    type_hint: TypeHint = TypeHint.AUTO,
    *,
    hex_limit: int = HEX_PREVIEW_LIMIT,
) -> tuple[Entry, ...]:
    """
    Read and decode an MMKV dump file.

    The whole file is read in one go before decoding.

    Args:
        path: Path to the data file.
        checksum_path: Optional path to the companion `.crc` file. It is
            accepted for interface compatibility but never read.
        type_hint: Type to force for every value, or `TypeHint.AUTO`.
        hex_limit: Byte cap for hexadecimal renderings.

    Returns:
        Entries in file order.

    Raises:
        NotFoundError: If `path` is not an existing file.
        MalformedHeaderError: If the file is shorter than the header.
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)

    if checksum_path is not None and Path(checksum_path).is_file():
        logger.debug("Checksum file %s accepted without verification", checksum_path)

    data = path.read_bytes()
    if len(data) < HEADER_SIZE:
        raise MalformedHeaderError(len(data))

    logger.debug("Read %d bytes from %s", len(data), path)
    return decode_buffer(data, type_hint, hex_limit=hex_limit)
