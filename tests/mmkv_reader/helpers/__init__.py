"""Test helpers for mmkv_reader unit tests."""

from __future__ import annotations

from .builders import encode_record, make_dump, pack_double, pack_float, pack_int32, pack_int64

__all__ = [
    "encode_record",
    "make_dump",
    "pack_double",
    "pack_float",
    "pack_int32",
    "pack_int64",
]
