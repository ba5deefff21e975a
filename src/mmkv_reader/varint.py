"""
Unsigned base-128 varint encoding and decoding.

MMKV prefixes every key and value with its length as a varint, and some
values are themselves stored as a bare varint.

Byte structure::

    [C|D D D D D D D]
     ^-- Continuation bit (1 = more bytes, 0 = last byte)
       ^-----------^-- 7 bits of data

Groups are emitted low-order first. Decoding 0xAC 0x02::

    0xAC -> continuation, data 44,  contribution 44 << 0 = 44
    0x02 -> final,        data 2,   contribution 2 << 7  = 256
    result = 300

Two decoders exist because the store reads lengths as 32-bit integers and
bare values as 64-bit integers:

- 32-bit target: at most 5 bytes. Bits past 32 are dropped.
- 64-bit target: at most 10 bytes. Bits past 64 are dropped.

A varint that runs off the end of its input with the continuation bit still
set is not an error: the groups read so far are returned. Callers compare the
consumed byte count against what they expected.
"""

from __future__ import annotations

from typing import Final

from .exceptions import VarintTooLongError

VARINT_CONTINUATION_BIT: Final = 0x80
"""High bit of each byte: set when more bytes follow."""

VARINT_DATA_MASK: Final = 0x7F
"""Low 7 bits of each byte: the payload group."""

MAX_VARINT32_BYTES: Final = 5
"""Longest valid encoding for a 32-bit target."""

MAX_VARINT64_BYTES: Final = 10
"""Longest valid encoding for a 64-bit target."""

_MAX_UINT64: Final = 2**64 - 1


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned integer as a varint.

    Args:
        value: Non-negative integer to encode. Maximum: 2^64 - 1.

    Returns:
        Varint-encoded bytes, 1 to 10 bytes long.

    Raises:
        ValueError: If value is negative or exceeds 64 bits.
    """
    if value < 0:
        raise ValueError(f"Varint value must be non-negative, got {value}")
    if value > _MAX_UINT64:
        raise ValueError(f"Varint value exceeds 64 bits: {value}")

    result = bytearray()

    # Values of 128 and above need another byte after this one.
    while value >= VARINT_CONTINUATION_BIT:
        result.append((value & VARINT_DATA_MASK) | VARINT_CONTINUATION_BIT)
        value >>= 7

    result.append(value)
    return bytes(result)


def _decode(data: bytes, offset: int, bits: int, max_bytes: int) -> tuple[int, int]:
    """Shared decoder loop for both target widths."""
    result = 0
    shift = 0
    pos = offset

    while pos < len(data):
        byte = data[pos]
        pos += 1

        result |= (byte & VARINT_DATA_MASK) << shift

        if not (byte & VARINT_CONTINUATION_BIT):
            break

        # The next group would start at or past the target width.
        shift += 7
        if shift >= bits:
            raise VarintTooLongError(max_bytes)

    return result & ((1 << bits) - 1), pos - offset


def decode_varint32(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint with a 32-bit target.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, bytes_consumed). The value is unsigned and
        keeps only the low 32 bits.

    Raises:
        VarintTooLongError: If the fifth byte still has its continuation bit set.
    """
    return _decode(data, offset, 32, MAX_VARINT32_BYTES)


def decode_varint64(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint with a 64-bit target.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, bytes_consumed). The value is unsigned and
        keeps only the low 64 bits.

    Raises:
        VarintTooLongError: If the tenth byte still has its continuation bit set.
    """
    return _decode(data, offset, 64, MAX_VARINT64_BYTES)
