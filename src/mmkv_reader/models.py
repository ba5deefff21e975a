"""Data model for decoded MMKV dumps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Self


class StrictBaseModel(BaseModel):
    """
    A strict, immutable pydantic base model.

    Field names are exported in camel case, so `raw_length` is
    serialised as `rawLength` in JSON output.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_default=True,
        extra="forbid",
        frozen=True,
        strict=True,
    )


class TypeHint(Enum):
    """
    Caller-supplied type for every value in a dump.

    `AUTO` runs the heuristic classifier. Any other member forces a single
    rendering branch for all values.
    """

    AUTO = "Auto"
    STRING = "String"
    INT32 = "Int32"
    INT64 = "Int64"
    FLOAT = "Float"
    DOUBLE = "Double"
    BOOL = "Bool"
    BYTES = "Bytes"

    @classmethod
    def parse(cls, name: str) -> Self:
        """
        Look up a hint by display name, ignoring case.

        Raises:
            ValueError: If `name` does not name a hint.
        """
        for member in cls:
            if member.value.lower() == name.strip().lower():
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown type hint '{name}'. Expected one of: {choices}")


class TypeLabel(Enum):
    """
    Classifier branch that produced a rendered value.

    This is not a verified original type. It names the interpretation
    that won for the value's byte pattern.
    """

    EMPTY = "Empty"
    STRING = "String"
    INT32 = "Int32"
    INT64 = "Int64"
    FLOAT = "Float"
    DOUBLE = "Double"
    BOOL = "Bool"
    VARINT = "Varint"
    BYTES = "Bytes"


class Entry(StrictBaseModel):
    """One decoded key/value record."""

    index: int
    """0-based position among successfully decoded entries (not a byte offset)."""

    key: str
    """Key text, decoded from UTF-8."""

    rendered_value: str
    """Human-readable rendering of the value."""

    type_label: TypeLabel
    """Classifier branch that produced `rendered_value`."""

    raw_length: int
    """Length in bytes of the raw value before classification."""


@dataclass(slots=True)
class Cursor:
    """
    Transient parse state over one immutable buffer.

    A cursor is created for a single decode call and discarded afterwards.
    The position never moves past the end of the buffer.
    """

    data: bytes
    """The buffer being decoded."""

    position: int = 0
    """Offset of the next unread byte."""

    declared_length: int = 0
    """Payload length claimed by the header, clamped to the real buffer."""

    @property
    def buffer_length(self) -> int:
        """Actual size of the buffer."""
        return len(self.data)

    @property
    def remaining(self) -> int:
        """Number of bytes left after the current position."""
        return self.buffer_length - self.position

    def take(self, size: int) -> bytes:
        """
        Return the next `size` bytes and advance past them.

        Raises:
            ValueError: If fewer than `size` bytes remain.
        """
        if size < 0 or size > self.remaining:
            raise ValueError(f"Cannot take {size} bytes with {self.remaining} remaining")
        chunk = self.data[self.position : self.position + size]
        self.position += size
        return chunk
