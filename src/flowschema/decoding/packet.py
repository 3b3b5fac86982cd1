"""NetFlow v9 packet assembly.

Walks the flow sets of a packet, feeding template and options template
flow sets into the TemplateCache and decoding data flow sets against
it. Templates defined earlier in a packet apply to data flow sets
later in the same packet.

Failure policy:
  - bad header or flow set framing: the packet is rejected
  - malformed template body: the packet is rejected
  - data flow set without a cached template: reported on that flow
    set, the rest of the packet is still decoded
"""

from dataclasses import dataclass, field as dataclass_field

from flowschema.common.config import DecoderSettings
from flowschema.common.exceptions import DecodeError, NotEnoughDataError, UnknownTemplateError
from flowschema.common.logging import get_logger
from flowschema.common.metrics import (
    PACKET_DECODE_ERRORS,
    PACKETS_DECODED,
    RECORDS_DECODED,
    TEMPLATES_RECEIVED,
    UNKNOWN_TEMPLATE_FLOWSETS,
)
from flowschema.decoding.cache import TemplateCache
from flowschema.decoding.header import (
    FLOWSET_DATA_MIN,
    FLOWSET_HEADER_SIZE,
    FLOWSET_OPTIONS_TEMPLATE,
    FLOWSET_TEMPLATE,
    NETFLOW_V9_HEADER_SIZE,
    FlowSetHeader,
    PacketHeader,
)
from flowschema.decoding.records import DataRecord, DataRecordDecoder
from flowschema.decoding.templates import (
    OptionsTemplateDefinition,
    TemplateDefinition,
    parse_options_template_flowset,
    parse_template_flowset,
)

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class TemplateFlowSet:
    """Template flow set (id 0)."""

    templates: tuple[TemplateDefinition, ...] = dataclass_field(default_factory=tuple)

    @property
    def flowset_id(self) -> int:
        return FLOWSET_TEMPLATE


@dataclass(frozen=True, slots=True)
class OptionsTemplateFlowSet:
    """Options template flow set (id 1)."""

    templates: tuple[OptionsTemplateDefinition, ...] = dataclass_field(default_factory=tuple)

    @property
    def flowset_id(self) -> int:
        return FLOWSET_OPTIONS_TEMPLATE


@dataclass(frozen=True, slots=True)
class DataFlowSet:
    """Data flow set (id >= 256).

    ``error`` is set, and ``records`` empty, when no template for the
    flow set was cached at decode time.
    """

    template_id: int
    records: tuple[DataRecord, ...] = dataclass_field(default_factory=tuple)
    error: UnknownTemplateError | None = None

    @property
    def flowset_id(self) -> int:
        return self.template_id

    @property
    def decoded(self) -> bool:
        return self.error is None


FlowSet = TemplateFlowSet | OptionsTemplateFlowSet | DataFlowSet


@dataclass(frozen=True, slots=True)
class Packet:
    """A decoded NetFlow v9 packet."""

    header: PacketHeader
    flowsets: tuple[FlowSet, ...] = dataclass_field(default_factory=tuple)

    @property
    def records(self) -> list[DataRecord]:
        """Every decoded data record, in wire order."""
        return [
            record
            for flowset in self.flowsets
            if isinstance(flowset, DataFlowSet)
            for record in flowset.records
        ]

    @property
    def templates(self) -> list[TemplateDefinition | OptionsTemplateDefinition]:
        """Every template and options template defined by this packet."""
        return [
            template
            for flowset in self.flowsets
            if isinstance(flowset, (TemplateFlowSet, OptionsTemplateFlowSet))
            for template in flowset.templates
        ]

    @property
    def unknown_templates(self) -> list[UnknownTemplateError]:
        """Data flow sets that could not be decoded for lack of a template."""
        return [
            flowset.error
            for flowset in self.flowsets
            if isinstance(flowset, DataFlowSet) and flowset.error is not None
        ]


def decode_packet(
    data: bytes,
    cache: TemplateCache,
    source_id: int | None = None,
    *,
    raise_on_unknown_template: bool = False,
    stop_at_flowset_count: bool = True,
) -> Packet:
    """Decode a NetFlow v9 packet against a template cache.

    Args:
        data: Raw UDP packet payload.
        cache: Session template cache; updated with any templates found.
        source_id: Cache key for this packet's templates. Defaults to the
            header's source ID.
        raise_on_unknown_template: Raise UnknownTemplateError instead of
            attaching it to the data flow set.
        stop_at_flowset_count: Stop after ``header.count`` flow sets. When
            False, flow sets are read until the bytes run out.

    Returns:
        The decoded packet.

    Raises:
        NotEnoughDataError: If the header or a flow set is truncated.
        InvalidVersionError: If the packet is not NetFlow v9.
        InvalidTemplateError: If a template body is malformed.
        UnknownTemplateError: Only when ``raise_on_unknown_template`` is set.
    """
    header = PacketHeader.from_bytes(data)
    if source_id is None:
        source_id = header.source_id

    flowsets: list[FlowSet] = []
    consumed = 0
    offset = NETFLOW_V9_HEADER_SIZE

    # Offsets come from flow set lengths only; count just bounds the walk
    while offset < len(data):
        if stop_at_flowset_count and consumed >= header.count:
            break

        remaining = len(data) - offset
        flowset_header = FlowSetHeader.from_bytes(data[offset:])

        if flowset_header.length < FLOWSET_HEADER_SIZE:
            raise NotEnoughDataError(expected=FLOWSET_HEADER_SIZE, actual=flowset_header.length)
        if flowset_header.length > remaining:
            raise NotEnoughDataError(expected=flowset_header.length, actual=remaining)

        body = data[offset + FLOWSET_HEADER_SIZE:offset + flowset_header.length]
        flowset = _decode_flowset(
            flowset_header,
            body,
            source_id,
            cache,
            raise_on_unknown_template,
        )
        if flowset is not None:
            flowsets.append(flowset)

        consumed += 1
        offset += flowset_header.length

    return Packet(header=header, flowsets=tuple(flowsets))


def _decode_flowset(
    flowset_header: FlowSetHeader,
    body: bytes,
    source_id: int,
    cache: TemplateCache,
    raise_on_unknown_template: bool,
) -> FlowSet | None:
    """Decode one flow set body and apply template updates to the cache."""
    flowset_id = flowset_header.flowset_id

    if flowset_id == FLOWSET_TEMPLATE:
        templates = parse_template_flowset(body)
        for template in templates:
            cache.put(source_id, template.template_id, template)
        TEMPLATES_RECEIVED.labels(kind="template").inc(len(templates))
        return TemplateFlowSet(templates=tuple(templates))

    if flowset_id == FLOWSET_OPTIONS_TEMPLATE:
        options = parse_options_template_flowset(body)
        for template in options:
            cache.put(source_id, template.template_id, template)
        TEMPLATES_RECEIVED.labels(kind="options_template").inc(len(options))
        return OptionsTemplateFlowSet(templates=tuple(options))

    if flowset_id >= FLOWSET_DATA_MIN:
        definition = cache.get(source_id, flowset_id)

        if definition is None:
            error = UnknownTemplateError(source_id=source_id, template_id=flowset_id)
            UNKNOWN_TEMPLATE_FLOWSETS.inc()
            if raise_on_unknown_template:
                raise error
            logger.debug(
                "No template for data flowset",
                source_id=source_id,
                template_id=flowset_id,
                length=flowset_header.length,
            )
            return DataFlowSet(template_id=flowset_id, error=error)

        records = DataRecordDecoder(definition).decode(body)
        RECORDS_DECODED.inc(len(records))
        return DataFlowSet(template_id=flowset_id, records=tuple(records))

    # IDs 2-255 are reserved by RFC 3954
    logger.warning(
        "Skipping reserved flowset id",
        source_id=source_id,
        flowset_id=flowset_id,
        length=flowset_header.length,
    )
    return None


class NetFlowV9Parser:
    """Decoding session for NetFlow version 9 packets.

    Owns (or shares) the template cache that carries schema knowledge
    from one packet to the next.
    """

    def __init__(
        self,
        template_cache: TemplateCache | None = None,
        settings: DecoderSettings | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            template_cache: Shared template cache instance.
            settings: Decoder settings. Defaults are used if not provided.
        """
        self._template_cache = template_cache if template_cache is not None else TemplateCache()
        self._settings = settings or DecoderSettings()

    @property
    def protocol_name(self) -> str:
        return "netflow_v9"

    @property
    def template_cache(self) -> TemplateCache:
        """Get the template cache."""
        return self._template_cache

    def parse(self, data: bytes, source_id: int | None = None) -> Packet:
        """Parse a NetFlow v9 packet.

        Args:
            data: Raw UDP packet payload.
            source_id: Optional cache key overriding the header's source ID.

        Returns:
            The decoded packet.

        Raises:
            DecodeError: If the packet is malformed.
            UnknownTemplateError: If configured to treat missing templates as fatal.
        """
        try:
            packet = decode_packet(
                data,
                self._template_cache,
                source_id,
                raise_on_unknown_template=self._settings.raise_on_unknown_template,
                stop_at_flowset_count=self._settings.stop_at_flowset_count,
            )
        except (DecodeError, UnknownTemplateError) as e:
            PACKET_DECODE_ERRORS.labels(error_type=e.error_code).inc()
            logger.warning(
                "Failed to decode NetFlow v9 packet",
                protocol=self.protocol_name,
                length=len(data),
                **e.to_dict(),
            )
            raise

        PACKETS_DECODED.inc()
        if packet.unknown_templates:
            logger.debug(
                "Packet has data flowsets without templates",
                source_id=packet.header.source_id,
                sequence_number=packet.header.sequence_number,
                template_ids=[e.template_id for e in packet.unknown_templates],
            )
        return packet
