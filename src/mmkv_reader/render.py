"""
Text renderings for decoded values.

These helpers turn raw numbers and byte strings into the display text
carried by each entry. They do not decide which interpretation applies;
that is the classifier's job.
"""

from __future__ import annotations

import math
import struct
import unicodedata
from decimal import Decimal
from typing import Final

from .config import HEX_PREVIEW_LIMIT

HEX_ELLIPSIS: Final = "..."
"""Marker appended to a truncated hexadecimal rendering."""

REPLACEMENT_CHARACTER: Final = "\ufffd"
"""Character substituted for invalid UTF-8 sequences."""

_ALLOWED_CONTROLS: Final = frozenset("\t\n\r")

_SCIENTIFIC_THRESHOLD: Final = {4: 7, 8: 15}
"""Decimal exponent at which the general format switches to scientific notation, per width."""


def render_hex(data: bytes, limit: int = HEX_PREVIEW_LIMIT) -> str:
    """
    Render bytes as space-separated uppercase hexadecimal pairs.

    Only the first `limit` bytes are shown. Longer input gets a trailing
    ellipsis, e.g. `"00 01 02..."`.
    """
    if len(data) > limit:
        return data[:limit].hex(" ").upper() + HEX_ELLIPSIS
    return data.hex(" ").upper()


def render_bool(flag: bool) -> str:
    """Render a boolean as `"True"` or `"False"`."""
    return "True" if flag else "False"


def decode_text(data: bytes) -> str:
    """Decode UTF-8, replacing invalid sequences with U+FFFD."""
    return data.decode("utf-8", errors="replace")


def is_clean_text(text: str, *, allow_controls: bool = True) -> bool:
    """
    Check whether decoded text looks like a genuine string.

    Text qualifies when it is non-empty and has no replacement characters.
    With `allow_controls=False` it must also be free of control characters
    other than tab, newline and carriage return.
    """
    if not text or REPLACEMENT_CHARACTER in text:
        return False
    if allow_controls:
        return True
    return not any(
        unicodedata.category(char) == "Cc" and char not in _ALLOWED_CONTROLS for char in text
    )


def _round_trips(text: str, value: float, width: int) -> bool:
    """Check that `text` parses back to exactly `value` at the given width."""
    if width == 4:
        try:
            return struct.pack("<f", float(text)) == struct.pack("<f", value)
        except OverflowError:
            return False
    return float(text) == value


def _shortest_digits(value: float, width: int) -> Decimal:
    """Find the shortest decimal that round-trips to `value` at the given width."""
    # Single precision needs at most 9 significant digits, double at most 17.
    for precision in range(1, 18):
        text = f"{value:.{precision}g}"
        if _round_trips(text, value, width):
            return Decimal(text)
    return Decimal(repr(value))


def render_float(value: float, width: int = 8) -> str:
    """
    Render an IEEE value in general format.

    Uses the fewest significant digits that identify the value at its
    storage width (4 bytes for single, 8 for double). Integral values have
    no fractional part. Very small or very large magnitudes use scientific
    notation with a signed two-digit exponent, e.g. `1E+15` or `2.5E-07`.

    Args:
        value: The number to render.
        width: Storage width in bytes, 4 or 8.

    Returns:
        The rendered number.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    number = _shortest_digits(value, width).normalize()
    sign, digits, exponent = number.as_tuple()
    assert isinstance(exponent, int)

    # Exponent of the leading digit in scientific notation.
    magnitude = len(digits) + exponent - 1
    prefix = "-" if sign else ""

    if magnitude < -4 or magnitude >= _SCIENTIFIC_THRESHOLD[width]:
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(str(digit) for digit in digits[1:])
        exponent_sign = "+" if magnitude >= 0 else "-"
        return f"{prefix}{mantissa}E{exponent_sign}{abs(magnitude):02d}"

    return format(number, "f")
