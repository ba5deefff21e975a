"""Tests for value classification in auto and forced modes."""

from __future__ import annotations

import pytest

from mmkv_reader.classify import (
    AUTO_RULES,
    FORCED_RENDERERS,
    classify,
    match_bool,
    match_int32,
    match_int64,
    match_plain_string,
    match_prefixed_string,
    match_varint,
    render_as_bool,
)
from mmkv_reader.exceptions import ClassificationError
from mmkv_reader.models import TypeHint, TypeLabel
from mmkv_reader.varint import encode_varint
from tests.mmkv_reader.helpers import pack_double, pack_float, pack_int32, pack_int64


class TestEmptyValue:
    """Empty values short-circuit every mode."""

    @pytest.mark.parametrize("hint", list(TypeHint))
    def test_empty_ignores_hint(self, hint: TypeHint) -> None:
        """A zero-length value is always (empty), whatever the hint."""
        assert classify(b"", hint) == ("(empty)", TypeLabel.EMPTY)


class TestAutoRuleOrder:
    """The rule table is evaluated top to bottom."""

    def test_rule_names_in_priority_order(self) -> None:
        """Precedence is fixed: bool, strings, fixed-width ints, varint."""
        assert [name for name, _ in AUTO_RULES] == [
            "bool",
            "prefixed_string",
            "plain_string",
            "int32",
            "int64",
            "varint",
        ]

    def test_bool_beats_varint(self) -> None:
        """0x01 is both a one-byte varint and a boolean; boolean wins."""
        assert match_varint(b"\x01") is not None
        assert classify(b"\x01") == ("True", TypeLabel.BOOL)

    def test_prefixed_string_beats_plain_string(self) -> None:
        """A printable length prefix still reads as a prefixed string."""
        # "!" is 0x21 = 33, followed by 33 bytes of text.
        value = b"!" + b"x" * 33
        assert match_plain_string(value) is not None
        assert classify(value) == ("x" * 33, TypeLabel.STRING)

    def test_int32_wins_over_float(self) -> None:
        """A small integer that is also a valid float is reported as Int32."""
        assert classify(pack_int32(42)) == ("42", TypeLabel.INT32)


class TestAutoBool:
    """Rule 1: single 0x00 or 0x01 byte."""

    def test_false(self) -> None:
        """A single zero byte is False."""
        assert classify(b"\x00") == ("False", TypeLabel.BOOL)

    def test_true(self) -> None:
        """A single one byte is True."""
        assert classify(b"\x01") == ("True", TypeLabel.BOOL)

    def test_two_is_not_bool(self) -> None:
        """0x02 falls through to the varint rule."""
        assert match_bool(b"\x02") is None
        assert classify(b"\x02") == ("2", TypeLabel.VARINT)


class TestAutoStrings:
    """Rules 2 and 3: prefixed and plain UTF-8 text."""

    def test_prefixed_hello(self) -> None:
        """Length byte 0x05 followed by 'hello'."""
        assert classify(b"\x05hello") == ("hello", TypeLabel.STRING)

    def test_prefixed_multibyte(self) -> None:
        """The prefix counts bytes, not characters."""
        text = "你好"
        encoded = text.encode("utf-8")
        assert classify(bytes([len(encoded)]) + encoded) == (text, TypeLabel.STRING)

    def test_prefixed_must_fill_slice(self) -> None:
        """A prefix shorter than the remaining bytes does not match."""
        assert match_prefixed_string(b"\x02hello") is None

    def test_prefixed_allows_control_characters(self) -> None:
        """Only replacement characters disqualify prefixed text."""
        assert classify(b"\x03a\x00b") == ("a\x00b", TypeLabel.STRING)

    def test_prefixed_invalid_utf8_rejected(self) -> None:
        """A well-framed payload of invalid UTF-8 is not a string."""
        assert match_prefixed_string(b"\x02\xff\xfe") is None
        assert classify(b"\x02\xff\xfe") == ("02 FF FE", TypeLabel.BYTES)

    def test_overlong_prefix_does_not_match(self) -> None:
        """A prefix that overruns the varint width simply fails the rule."""
        text = "你好"
        assert match_prefixed_string(text.encode("utf-8")) is None
        assert classify(text.encode("utf-8")) == (text, TypeLabel.STRING)

    def test_plain_text(self) -> None:
        """Printable ASCII without a prefix is a plain string."""
        assert classify(b"hello") == ("hello", TypeLabel.STRING)

    def test_plain_text_with_whitespace_controls(self) -> None:
        """Tabs and line breaks are allowed in plain text."""
        assert classify(b"line1\nline2\t") == ("line1\nline2\t", TypeLabel.STRING)

    def test_plain_text_with_bell_rejected(self) -> None:
        """Other control characters push the value past the string rules."""
        assert match_plain_string(b"a\x07b") is None
        assert classify(b"a\x07b") == ("61 07 62", TypeLabel.BYTES)


class TestAutoIntegers:
    """Rules 4 and 5: fixed-width little-endian integers."""

    @pytest.mark.parametrize("number", [0, 42, -5, 999_999_999, -999_999_999])
    def test_int32(self, number: int) -> None:
        """Magnitudes below one billion are plausible Int32 values."""
        assert match_int32(pack_int32(number)) == (str(number), TypeLabel.INT32)

    def test_int32_negative(self) -> None:
        """Negative values keep their sign."""
        assert classify(pack_int32(-5)) == ("-5", TypeLabel.INT32)

    def test_int32_limit_is_exclusive(self) -> None:
        """A magnitude of one billion is not plausible for Int32."""
        assert match_int32(pack_int32(1_000_000_000)) is None
        assert classify(pack_int32(1_000_000_000)) == ("00 CA 9A 3B", TypeLabel.BYTES)

    def test_int32_minimum_falls_through(self) -> None:
        """The most negative int32 is far outside the plausible range."""
        assert classify(pack_int32(-(2**31))) == ("00 00 00 80", TypeLabel.BYTES)

    def test_float_bits_fall_through(self) -> None:
        """1.5f is 0x3FC00000, too large to be a plausible Int32."""
        assert classify(pack_float(1.5)) == ("00 00 C0 3F", TypeLabel.BYTES)

    def test_int32_requires_four_bytes(self) -> None:
        """Three bytes never match the Int32 rule."""
        assert match_int32(b"\x01\x02\x03") is None

    @pytest.mark.parametrize("number", [1_234_567_890_123, -7_000_000_000, 999_999_999_999_999])
    def test_int64(self, number: int) -> None:
        """Magnitudes below 10^15 are plausible Int64 values."""
        assert classify(pack_int64(number)) == (str(number), TypeLabel.INT64)

    def test_int64_limit_is_exclusive(self) -> None:
        """A magnitude of 10^15 is not plausible for Int64."""
        assert match_int64(pack_int64(10**15)) is None
        assert classify(pack_int64(10**15)) == (
            "00 80 C6 A4 7E 8D 03 00",
            TypeLabel.BYTES,
        )


class TestAutoVarint:
    """Rule 6: a bare varint spanning the whole slice."""

    def test_two_byte_varint(self) -> None:
        """0xAC 0x02 is the varint 300."""
        assert classify(b"\xac\x02") == ("300", TypeLabel.VARINT)

    def test_leftover_bytes_do_not_match(self) -> None:
        """A varint that ends before the slice does not match."""
        assert match_varint(b"\x80\x00\xff") is None
        assert classify(b"\x80\x00\xff") == ("80 00 FF", TypeLabel.BYTES)

    def test_unterminated_varint_spanning_slice(self) -> None:
        """Running off the end still consumes the whole slice."""
        assert classify(b"\x80\x80\x80") == ("0", TypeLabel.VARINT)

    def test_bit_63_reads_as_negative(self) -> None:
        """A varint with the top bit of 64 set renders as a signed 64-bit integer."""
        assert classify(encode_varint(2**64 - 1)) == ("-1", TypeLabel.VARINT)
        assert classify(encode_varint(2**63)) == ("-9223372036854775808", TypeLabel.VARINT)

    def test_largest_positive_varint(self) -> None:
        """Below bit 63 the value stays positive."""
        assert classify(encode_varint(2**63 - 1)) == ("9223372036854775807", TypeLabel.VARINT)

    def test_overlong_varint_falls_back(self) -> None:
        """Eleven continuation bytes overflow the 64-bit target."""
        value = b"\x80" * 11
        assert match_varint(value) is None
        assert classify(value) == (" ".join(["80"] * 11), TypeLabel.BYTES)


class TestAutoBytes:
    """Rule 7: hexadecimal fallback."""

    def test_long_value_truncated(self) -> None:
        """Only the first 100 bytes are rendered."""
        rendered, label = classify(b"\x00" * 150)
        assert label == TypeLabel.BYTES
        assert rendered == " ".join(["00"] * 100) + "..."

    def test_custom_hex_limit(self) -> None:
        """The hex cap can be lowered per call."""
        rendered, label = classify(b"\x00" * 10, hex_limit=3)
        assert (rendered, label) == ("00 00 00...", TypeLabel.BYTES)


class TestForcedHints:
    """Explicit hints bypass the heuristics."""

    def test_string_prefixed(self) -> None:
        """A forced string strips the length prefix."""
        assert classify(b"\x05hello", TypeHint.STRING) == ("hello", TypeLabel.STRING)

    def test_string_prefix_may_be_shorter_than_slice(self) -> None:
        """A forced string honours any prefix that fits."""
        assert classify(b"\x02hello", TypeHint.STRING) == ("he", TypeLabel.STRING)

    def test_string_without_prefix(self) -> None:
        """'h' is 104, too long to be a prefix, so the whole slice is text."""
        assert classify(b"hello", TypeHint.STRING) == ("hello", TypeLabel.STRING)

    def test_string_invalid_utf8(self) -> None:
        """Invalid bytes are replaced, not rejected."""
        assert classify(b"\xff\xfe", TypeHint.STRING) == ("\ufffd\ufffd", TypeLabel.STRING)

    def test_string_overlong_prefix(self) -> None:
        """An over-long prefix is ignored and the slice decoded whole."""
        assert classify(b"\xff" * 6, TypeHint.STRING) == ("\ufffd" * 6, TypeLabel.STRING)

    def test_int32_fixed_width(self) -> None:
        """Only the first four bytes are read."""
        assert classify(pack_int32(-42) + b"\xff\xff", TypeHint.INT32) == ("-42", TypeLabel.INT32)

    def test_int32_short_slice_reads_varint(self) -> None:
        """Fewer than four bytes are read as a varint."""
        assert classify(b"\x96\x01", TypeHint.INT32) == ("150", TypeLabel.INT32)

    def test_int32_skips_plausibility_limit(self) -> None:
        """Forced Int32 prints values auto mode would reject."""
        assert classify(pack_int32(2_000_000_000), TypeHint.INT32) == (
            "2000000000",
            TypeLabel.INT32,
        )

    def test_int64_fixed_width(self) -> None:
        """Eight bytes are read as a signed little-endian int64."""
        assert classify(pack_int64(-7), TypeHint.INT64) == ("-7", TypeLabel.INT64)

    def test_int64_short_slice_reads_varint(self) -> None:
        """Fewer than eight bytes are read as a varint."""
        assert classify(b"\xac\x02", TypeHint.INT64) == ("300", TypeLabel.INT64)

    def test_float(self) -> None:
        """Four bytes are read as a single with its shortest digits."""
        assert classify(pack_float(3.14), TypeHint.FLOAT) == ("3.14", TypeLabel.FLOAT)

    def test_float_short_slice_is_zero(self) -> None:
        """Fewer than four bytes render as 0."""
        assert classify(b"\x01\x02", TypeHint.FLOAT) == ("0", TypeLabel.FLOAT)

    def test_double(self) -> None:
        """Eight bytes are read as a double."""
        assert classify(pack_double(0.1), TypeHint.DOUBLE) == ("0.1", TypeLabel.DOUBLE)

    def test_double_from_four_bytes(self) -> None:
        """A 4-byte slice is read as a single and widened."""
        assert classify(pack_float(1.5), TypeHint.DOUBLE) == ("1.5", TypeLabel.DOUBLE)
        assert classify(pack_float(0.1), TypeHint.DOUBLE) == (
            "0.10000000149011612",
            TypeLabel.DOUBLE,
        )

    def test_double_short_slice_is_zero(self) -> None:
        """Fewer than four bytes render as 0."""
        assert classify(b"\x01", TypeHint.DOUBLE) == ("0", TypeLabel.DOUBLE)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(b"\x00", "False"), (b"\x01", "True"), (b"\x05", "True"), (b"\x00\x01", "False")],
    )
    def test_bool(self, value: bytes, expected: str) -> None:
        """Only the first byte is tested against zero."""
        assert classify(value, TypeHint.BOOL) == (expected, TypeLabel.BOOL)

    def test_bytes(self) -> None:
        """A forced hex rendering applies even to readable text."""
        assert classify(b"hello", TypeHint.BYTES) == ("68 65 6C 6C 6F", TypeLabel.BYTES)

    def test_forced_hint_ignores_heuristics(self) -> None:
        """0x01 is not reported as a boolean when Int32 is forced."""
        assert classify(b"\x01", TypeHint.INT32) == ("1", TypeLabel.INT32)

    def test_renderer_failure_falls_back_to_hex(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A failing forced renderer degrades that value to hex."""

        def broken(value: bytes) -> str:
            raise ClassificationError("unreadable")

        monkeypatch.setitem(
            FORCED_RENDERERS,
            TypeHint.INT32,
            (broken, TypeLabel.INT32),
        )
        assert classify(b"\x01\x02", TypeHint.INT32) == ("01 02", TypeLabel.BYTES)

    def test_bool_renderer_rejects_empty_value(self) -> None:
        """Called directly, the boolean renderer refuses an empty slice."""
        with pytest.raises(ClassificationError, match="empty"):
            render_as_bool(b"")
