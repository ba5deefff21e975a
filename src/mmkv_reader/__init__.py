"""
Reader for MMKV key/value dump files.

Usage::

    from mmkv_reader import TypeHint, decode_buffer, decode_file

    # Heuristic type detection
    entries = decode_file("mmkv.default", "mmkv.default.crc")

    # Force every value to a single type
    entries = decode_buffer(raw_bytes, TypeHint.INT64)

    for entry in entries:
        print(entry.key, entry.type_label.value, entry.rendered_value)
"""

from __future__ import annotations

from .classify import classify
from .decoder import decode_buffer, decode_file
from .exceptions import (
    ClassificationError,
    MalformedHeaderError,
    MMKVError,
    NotFoundError,
    VarintTooLongError,
)
from .files import DumpFiles, format_file_size, pair_dump_files
from .models import Entry, TypeHint, TypeLabel

__all__ = [
    # Decoding
    "decode_buffer",
    "decode_file",
    "classify",
    # Data model
    "Entry",
    "TypeHint",
    "TypeLabel",
    # Input files
    "DumpFiles",
    "pair_dump_files",
    "format_file_size",
    # Exceptions
    "MMKVError",
    "NotFoundError",
    "MalformedHeaderError",
    "VarintTooLongError",
    "ClassificationError",
]
