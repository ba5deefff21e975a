"""
Value classification.

MMKV stores values without any type information. The classifier recovers a
plausible interpretation from the byte pattern alone.

Two modes exist:

1. **Forced**: the caller names a type, and every value goes through that
   single renderer. If the renderer fails, the value is shown as hex.

2. **Auto**: an ordered list of rules is tried top to bottom, and the first
   rule that matches wins::

       bool -> prefixed string -> plain string -> int32 -> int64 -> varint -> bytes

   The order is a fixed tie-break. A 4-byte value that is a valid small
   integer is reported as Int32 even when it would also make a sensible float.
"""

from __future__ import annotations

import logging
import struct
from collections.abc import Callable
from typing import Final

from .config import HEX_PREVIEW_LIMIT
from .exceptions import ClassificationError, MMKVError
from .models import TypeHint, TypeLabel
from .render import decode_text, is_clean_text, render_bool, render_float, render_hex
from .varint import decode_varint32, decode_varint64

logger = logging.getLogger(__name__)

EMPTY_RENDERING: Final = "(empty)"
"""Rendering used for zero-length values."""

INT32_PLAUSIBLE_LIMIT: Final = 1_000_000_000
"""A 4-byte value is reported as Int32 only if its magnitude is below this."""

INT64_PLAUSIBLE_LIMIT: Final = 1_000_000_000_000_000
"""An 8-byte value is reported as Int64 only if its magnitude is below this."""

Classification = tuple[str, TypeLabel]
"""A rendered value paired with the label of the branch that produced it."""

Rule = Callable[[bytes], Classification | None]
"""An auto-mode rule: returns a classification on match, `None` otherwise."""

_RENDER_ERRORS: Final = (MMKVError, ValueError, OverflowError, struct.error)
"""Failures that downgrade a single value to the hexadecimal rendering."""


def _as_signed(number: int, bits: int) -> int:
    """Reinterpret an unsigned varint as a two's complement integer of the given width."""
    return number - (1 << bits) if number >= (1 << (bits - 1)) else number


# Auto-mode rules


def match_bool(value: bytes) -> Classification | None:
    """A single 0x00 or 0x01 byte is a boolean."""
    if len(value) == 1 and value[0] in (0, 1):
        return render_bool(value[0] == 1), TypeLabel.BOOL
    return None


def match_prefixed_string(value: bytes) -> Classification | None:
    """A varint length followed by exactly that many bytes of valid UTF-8."""
    try:
        length, consumed = decode_varint32(value)
    except MMKVError:
        return None

    if length <= 0 or consumed + length != len(value):
        return None

    text = decode_text(value[consumed:])
    if is_clean_text(text):
        return text, TypeLabel.STRING
    return None


def match_plain_string(value: bytes) -> Classification | None:
    """The whole slice is valid UTF-8 without stray control characters."""
    text = decode_text(value)
    if is_clean_text(text, allow_controls=False):
        return text, TypeLabel.STRING
    return None


def match_int32(value: bytes) -> Classification | None:
    """Exactly 4 bytes holding a little-endian integer of modest magnitude."""
    if len(value) != 4:
        return None
    (number,) = struct.unpack("<i", value)
    if abs(number) < INT32_PLAUSIBLE_LIMIT:
        return str(number), TypeLabel.INT32
    return None


def match_int64(value: bytes) -> Classification | None:
    """Exactly 8 bytes holding a little-endian integer of modest magnitude."""
    if len(value) != 8:
        return None
    (number,) = struct.unpack("<q", value)
    if abs(number) < INT64_PLAUSIBLE_LIMIT:
        return str(number), TypeLabel.INT64
    return None


def match_varint(value: bytes) -> Classification | None:
    """The whole slice is one varint, with nothing left over."""
    try:
        number, consumed = decode_varint64(value)
    except MMKVError:
        return None
    if consumed == len(value):
        # Values with bit 63 set print as negative 64-bit integers.
        return str(_as_signed(number, 64)), TypeLabel.VARINT
    return None


AUTO_RULES: Final[tuple[tuple[str, Rule], ...]] = (
    ("bool", match_bool),
    ("prefixed_string", match_prefixed_string),
    ("plain_string", match_plain_string),
    ("int32", match_int32),
    ("int64", match_int64),
    ("varint", match_varint),
)
"""Auto-mode rules in priority order. The hex fallback applies when none match."""


def classify_auto(value: bytes, *, hex_limit: int = HEX_PREVIEW_LIMIT) -> Classification:
    """Apply the auto-mode rules in order and return the first match."""
    for name, rule in AUTO_RULES:
        result = rule(value)
        if result is not None:
            logger.debug("Value of %d bytes matched rule %s", len(value), name)
            return result
    return render_hex(value, hex_limit), TypeLabel.BYTES


# Forced renderers


def _int32_from(value: bytes) -> int:
    if len(value) >= 4:
        return struct.unpack_from("<i", value)[0]
    number, _ = decode_varint32(value)
    return _as_signed(number, 32)


def _int64_from(value: bytes) -> int:
    if len(value) >= 8:
        return struct.unpack_from("<q", value)[0]
    number, _ = decode_varint64(value)
    return _as_signed(number, 64)


def render_as_string(value: bytes) -> str:
    """
    Render a value as text.

    A varint length prefix is honoured when it fits inside the slice. The
    whole slice is decoded otherwise. Invalid UTF-8 becomes U+FFFD.
    """
    try:
        length, consumed = decode_varint32(value)
    except MMKVError:
        return decode_text(value)

    if length > 0 and consumed + length <= len(value):
        return decode_text(value[consumed : consumed + length])
    return decode_text(value)


def render_as_int32(value: bytes) -> str:
    """Render a fixed-width little-endian int32, or a varint for short slices."""
    return str(_int32_from(value))


def render_as_int64(value: bytes) -> str:
    """Render a fixed-width little-endian int64, or a varint for short slices."""
    return str(_int64_from(value))


def render_as_float(value: bytes) -> str:
    """Render a little-endian single-precision float, or 0 for short slices."""
    if len(value) >= 4:
        return render_float(struct.unpack_from("<f", value)[0], width=4)
    return "0"


def render_as_double(value: bytes) -> str:
    """
    Render a little-endian double.

    Slices of 4 to 7 bytes are read as a single-precision float widened to
    a double. Anything shorter renders as 0.
    """
    if len(value) >= 8:
        return render_float(struct.unpack_from("<d", value)[0], width=8)
    if len(value) >= 4:
        return render_float(struct.unpack_from("<f", value)[0], width=8)
    return "0"


def render_as_bool(value: bytes) -> str:
    """
    Any non-zero first byte is true.

    Usable on its own as well as through `classify`, which never passes it
    an empty value.

    Raises:
        ClassificationError: If `value` is empty.
    """
    if not value:
        raise ClassificationError("Cannot read a boolean from an empty value")
    return render_bool(value[0] != 0)


FORCED_RENDERERS: Final[dict[TypeHint, tuple[Callable[[bytes], str], TypeLabel]]] = {
    TypeHint.STRING: (render_as_string, TypeLabel.STRING),
    TypeHint.INT32: (render_as_int32, TypeLabel.INT32),
    TypeHint.INT64: (render_as_int64, TypeLabel.INT64),
    TypeHint.FLOAT: (render_as_float, TypeLabel.FLOAT),
    TypeHint.DOUBLE: (render_as_double, TypeLabel.DOUBLE),
    TypeHint.BOOL: (render_as_bool, TypeLabel.BOOL),
}
"""Renderer and label for each explicit hint. `BYTES` goes straight to hex."""


def classify(
    value: bytes,
    hint: TypeHint = TypeHint.AUTO,
    *,
    hex_limit: int = HEX_PREVIEW_LIMIT,
) -> Classification:
    """
    Classify and render one raw value.

    Args:
        value: The raw value bytes.
        hint: Type to force, or `TypeHint.AUTO` for heuristic detection.
        hex_limit: Byte cap for the hexadecimal rendering.

    Returns:
        Tuple of (rendered_value, type_label).

        Empty values are always `("(empty)", EMPTY)`. A value whose forced
        renderer fails is rendered as hex with the `BYTES` label. This
        function never raises for malformed value bytes.
    """
    if not value:
        return EMPTY_RENDERING, TypeLabel.EMPTY

    if hint is TypeHint.AUTO:
        return classify_auto(value, hex_limit=hex_limit)

    if hint is TypeHint.BYTES:
        return render_hex(value, hex_limit), TypeLabel.BYTES

    renderer, label = FORCED_RENDERERS[hint]
    try:
        return renderer(value), label
    except _RENDER_ERRORS as e:
        logger.debug("Forced %s rendering failed, falling back to hex: %s", hint.value, e)
        return render_hex(value, hex_limit), TypeLabel.BYTES
