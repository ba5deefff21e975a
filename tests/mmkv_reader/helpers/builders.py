"""Builders for MMKV dump fixtures."""

from __future__ import annotations

import struct
from collections.abc import Iterable

from mmkv_reader.varint import encode_varint


def encode_record(key: str | bytes, value: bytes) -> bytes:
    """Encode one length-prefixed key/value record."""
    key_bytes = key.encode("utf-8") if isinstance(key, str) else key
    return encode_varint(len(key_bytes)) + key_bytes + encode_varint(len(value)) + value


def make_dump(
    records: Iterable[tuple[str | bytes, bytes]],
    *,
    declared_length: int | None = None,
    trailer: bytes = b"",
) -> bytes:
    """
    Build a complete dump from key/value pairs.

    Args:
        records: Key/value pairs in file order.
        declared_length: Header value. Defaults to the real payload size,
            including any trailer.
        trailer: Raw bytes appended after the encoded records.
    """
    payload = b"".join(encode_record(key, value) for key, value in records) + trailer
    header = len(payload) if declared_length is None else declared_length
    return struct.pack("<i", header) + payload


def pack_int32(value: int) -> bytes:
    """Little-endian signed 32-bit integer."""
    return struct.pack("<i", value)


def pack_int64(value: int) -> bytes:
    """Little-endian signed 64-bit integer."""
    return struct.pack("<q", value)


def pack_float(value: float) -> bytes:
    """Little-endian IEEE single."""
    return struct.pack("<f", value)


def pack_double(value: float) -> bytes:
    """Little-endian IEEE double."""
    return struct.pack("<d", value)
