"""Template-driven data record decoding.

A data flow set carries no layout of its own: the cached definition
for (source_id, flowset_id) says how many bytes each field takes, and
therefore where each record ends.

Variable-length fields (template length 65535) are prefixed in each
record by their actual length:
  - 1 byte, if the length is below 255
  - 0xFF followed by a 2 byte length otherwise
"""

from collections.abc import Iterator
from dataclasses import dataclass, field as dataclass_field
from typing import Any

from flowschema.common.logging import get_logger
from flowschema.decoding.cursor import ByteCursor
from flowschema.decoding.fields import (
    decode_field_value,
    decode_unsigned,
    field_name,
    scope_field_name,
)
from flowschema.decoding.templates import Definition, FieldSpec

logger = get_logger(__name__)

# Prefix byte announcing a 2 byte length
LONG_LENGTH_MARKER = 255

# Flow sets are padded to a 32 bit boundary
PADDING_ALIGNMENT = 4


@dataclass(frozen=True, slots=True)
class DataRecord:
    """One decoded data record.

    ``fields`` holds (field_type, raw bytes) pairs in template order.
    For records described by an options template, the first
    ``scope_count`` pairs are scope fields.
    """

    template_id: int
    fields: tuple[tuple[int, bytes], ...] = dataclass_field(default_factory=tuple)
    scope_count: int = 0

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[tuple[int, bytes]]:
        return iter(self.fields)

    @property
    def scope_fields(self) -> tuple[tuple[int, bytes], ...]:
        return self.fields[:self.scope_count]

    @property
    def option_fields(self) -> tuple[tuple[int, bytes], ...]:
        """Non-scope fields; for plain templates this is every field."""
        return self.fields[self.scope_count:]

    def get(self, field_type: int, default: bytes | None = None) -> bytes | None:
        """Raw bytes of the first non-scope field of ``field_type``."""
        for ftype, value in self.option_fields:
            if ftype == field_type:
                return value
        return default

    def values(self) -> dict[int, Any]:
        """Typed values of the non-scope fields keyed by field type.

        When a template repeats a field type the first occurrence wins.
        """
        decoded: dict[int, Any] = {}
        for ftype, value in self.option_fields:
            if ftype not in decoded:
                decoded[ftype] = decode_field_value(ftype, value)
        return decoded

    def to_dict(self) -> dict[str, Any]:
        """Typed values keyed by field name, scope fields included."""
        result: dict[str, Any] = {}
        for ftype, value in self.scope_fields:
            result.setdefault(scope_field_name(ftype), decode_unsigned(value))
        for ftype, value in self.option_fields:
            result.setdefault(field_name(ftype), decode_field_value(ftype, value))
        return result


class DataRecordDecoder:
    """Slices a data flow set body into records using one definition."""

    def __init__(self, definition: Definition) -> None:
        """Initialize decoder.

        Args:
            definition: Template or options template the records follow.
        """
        self._definition = definition
        self._fields: tuple[FieldSpec, ...] = definition.record_fields
        self._scope_count = len(definition.scope_fields)
        self._min_record_length = definition.min_record_length
        self._has_variable = any(spec.is_variable for spec in self._fields)

    @property
    def definition(self) -> Definition:
        return self._definition

    def decode(self, body: bytes) -> list[DataRecord]:
        """Decode every record in a data flow set body.

        Args:
            body: Flow set body, without the 4 byte flow set header.

        Returns:
            Decoded records in wire order.

        Raises:
            NotEnoughDataError: If a variable-length record runs past the body.
        """
        cursor = ByteCursor(body)
        records: list[DataRecord] = []

        while cursor.remaining >= self._min_record_length:
            if self._has_variable and self._at_padding(body, cursor):
                break
            records.append(self.decode_record(cursor))

        if not cursor.at_end:
            padding = cursor.rest()
            logger.debug(
                "Discarded data flow set padding",
                template_id=self._definition.template_id,
                padding=len(padding),
            )

        return records

    @staticmethod
    def _at_padding(body: bytes, cursor: ByteCursor) -> bool:
        """Zero bytes short of the alignment are padding, not empty records."""
        return cursor.remaining < PADDING_ALIGNMENT and not any(body[cursor.position:])

    def decode_record(self, cursor: ByteCursor) -> DataRecord:
        """Decode a single record at the cursor position.

        On failure the cursor may have advanced past the fields read so
        far; the flow set cannot be resynchronised anyway.
        """
        values: list[tuple[int, bytes]] = []

        for spec in self._fields:
            if spec.is_variable:
                length = cursor.u8()
                if length == LONG_LENGTH_MARKER:
                    length = cursor.u16()
            else:
                length = spec.length
            values.append((spec.field_type, cursor.read_bytes(length)))

        return DataRecord(
            template_id=self._definition.template_id,
            fields=tuple(values),
            scope_count=self._scope_count,
        )
