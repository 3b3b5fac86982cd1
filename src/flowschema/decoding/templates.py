"""Template and options template decoders.

Template FlowSet (flowset_id=0), repeated until the set is exhausted:
  - template_id: 2 bytes
  - field_count: 2 bytes
  - fields: field_count * (type: 2 bytes, length: 2 bytes)

Options Template FlowSet (flowset_id=1), repeated until the set is exhausted:
  - template_id: 2 bytes
  - option_scope_length: 2 bytes (bytes of scope field specs)
  - option_length: 2 bytes (bytes of option field specs)
  - scope fields, then option fields: (type: 2 bytes, length: 2 bytes) each

These functions only turn bytes into definitions. Storing them is up
to the packet assembler.
"""

from dataclasses import dataclass, field as dataclass_field

from flowschema.common.exceptions import InvalidTemplateError, NotEnoughDataError
from flowschema.decoding.cursor import ByteCursor
from flowschema.decoding.fields import VARIABLE_LENGTH, field_name

TEMPLATE_ID_MIN = 256
TEMPLATE_HEADER_SIZE = 4
OPTIONS_TEMPLATE_HEADER_SIZE = 6
FIELD_SPEC_SIZE = 4


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """A single field in a template: what it means and how many bytes it takes."""

    field_type: int
    length: int

    @property
    def is_variable(self) -> bool:
        """Length is carried by each record instead of the template."""
        return self.length == VARIABLE_LENGTH

    @property
    def min_length(self) -> int:
        """Fewest bytes this field can occupy in a record."""
        # A variable-length field needs at least its 1-byte length prefix
        return 1 if self.is_variable else self.length

    @property
    def name(self) -> str:
        return field_name(self.field_type)


def _read_field_specs(cursor: ByteCursor, count: int) -> tuple[FieldSpec, ...]:
    return tuple(FieldSpec(field_type=cursor.u16(), length=cursor.u16()) for _ in range(count))


def _validate(template_id: int, fields: tuple[FieldSpec, ...]) -> None:
    if template_id < TEMPLATE_ID_MIN:
        raise InvalidTemplateError(template_id, f"template id must be >= {TEMPLATE_ID_MIN}")
    if not fields:
        raise InvalidTemplateError(template_id, "template defines no fields")
    if sum(f.min_length for f in fields) == 0:
        raise InvalidTemplateError(template_id, "template records would be zero bytes long")


@dataclass(frozen=True, slots=True)
class TemplateDefinition:
    """NetFlow v9 template definition."""

    template_id: int
    fields: tuple[FieldSpec, ...] = dataclass_field(default_factory=tuple)

    @classmethod
    def from_bytes(cls, data: bytes) -> "TemplateDefinition":
        """Parse one template record from the start of ``data``.

        Args:
            data: Template flow set body (without the flow set header),
                positioned at a template record.

        Raises:
            NotEnoughDataError: If data is shorter than the record it announces.
            InvalidTemplateError: If the record is structurally unusable.
        """
        cursor = ByteCursor(data)
        if cursor.remaining < TEMPLATE_HEADER_SIZE:
            raise NotEnoughDataError(expected=TEMPLATE_HEADER_SIZE, actual=len(data))

        template_id = cursor.u16()
        field_count = cursor.u16()

        # Need 4 bytes per field
        expected = TEMPLATE_HEADER_SIZE + field_count * FIELD_SPEC_SIZE
        if len(data) < expected:
            raise NotEnoughDataError(expected=expected, actual=len(data))

        fields = _read_field_specs(cursor, field_count)
        _validate(template_id, fields)
        return cls(template_id=template_id, fields=fields)

    @property
    def wire_length(self) -> int:
        """Bytes this definition occupies inside a template flow set."""
        return TEMPLATE_HEADER_SIZE + len(self.fields) * FIELD_SPEC_SIZE

    @property
    def scope_fields(self) -> tuple[FieldSpec, ...]:
        return ()

    @property
    def record_fields(self) -> tuple[FieldSpec, ...]:
        """Fields in the order they appear in a data record."""
        return self.fields

    @property
    def min_record_length(self) -> int:
        """Smallest possible data record for this template."""
        return sum(f.min_length for f in self.fields)


@dataclass(frozen=True, slots=True)
class OptionsTemplateDefinition:
    """NetFlow v9 options template definition.

    Scope fields say what the option record describes (the exporter,
    an interface, a line card...); option fields carry the metadata.
    """

    template_id: int
    scope_fields: tuple[FieldSpec, ...] = dataclass_field(default_factory=tuple)
    option_fields: tuple[FieldSpec, ...] = dataclass_field(default_factory=tuple)

    @classmethod
    def from_bytes(cls, data: bytes) -> "OptionsTemplateDefinition":
        """Parse one options template record from the start of ``data``.

        Raises:
            NotEnoughDataError: If data is shorter than the record it announces.
            InvalidTemplateError: If a field budget is not a multiple of 4,
                or the record is otherwise unusable.
        """
        cursor = ByteCursor(data)
        if cursor.remaining < OPTIONS_TEMPLATE_HEADER_SIZE:
            raise NotEnoughDataError(expected=OPTIONS_TEMPLATE_HEADER_SIZE, actual=len(data))

        template_id = cursor.u16()
        scope_length = cursor.u16()
        option_length = cursor.u16()

        for label, budget in (("scope", scope_length), ("option", option_length)):
            if budget % FIELD_SPEC_SIZE:
                raise InvalidTemplateError(
                    template_id,
                    f"{label} length {budget} is not a multiple of {FIELD_SPEC_SIZE}",
                )

        expected = OPTIONS_TEMPLATE_HEADER_SIZE + scope_length + option_length
        if len(data) < expected:
            raise NotEnoughDataError(expected=expected, actual=len(data))

        scope_fields = _read_field_specs(cursor, scope_length // FIELD_SPEC_SIZE)
        option_fields = _read_field_specs(cursor, option_length // FIELD_SPEC_SIZE)
        _validate(template_id, scope_fields + option_fields)
        return cls(
            template_id=template_id,
            scope_fields=scope_fields,
            option_fields=option_fields,
        )

    @property
    def wire_length(self) -> int:
        return OPTIONS_TEMPLATE_HEADER_SIZE + self.field_count * FIELD_SPEC_SIZE

    @property
    def field_count(self) -> int:
        return len(self.scope_fields) + len(self.option_fields)

    @property
    def record_fields(self) -> tuple[FieldSpec, ...]:
        """Scope fields followed by option fields, as laid out in a record."""
        return self.scope_fields + self.option_fields

    @property
    def min_record_length(self) -> int:
        return sum(f.min_length for f in self.record_fields)


Definition = TemplateDefinition | OptionsTemplateDefinition


def parse_template_flowset(body: bytes) -> list[TemplateDefinition]:
    """Parse every template record in a template flow set body.

    Exporters commonly batch several templates into one flow set.
    A remainder too short to hold a template header is padding.
    """
    templates: list[TemplateDefinition] = []
    offset = 0

    while len(body) - offset >= TEMPLATE_HEADER_SIZE:
        template = TemplateDefinition.from_bytes(body[offset:])
        templates.append(template)
        offset += template.wire_length

    return templates


def parse_options_template_flowset(body: bytes) -> list[OptionsTemplateDefinition]:
    """Parse every options template record in an options template flow set body.

    Options template records are 6 + 4n bytes, so exporters pad the
    set to a 4-byte boundary; a remainder shorter than 6 bytes is padding.
    """
    templates: list[OptionsTemplateDefinition] = []
    offset = 0

    while len(body) - offset >= OPTIONS_TEMPLATE_HEADER_SIZE:
        template = OptionsTemplateDefinition.from_bytes(body[offset:])
        templates.append(template)
        offset += template.wire_length

    return templates
