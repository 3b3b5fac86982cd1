"""NetFlow v9 decoding.

Supports:
- Packet and flow set framing
- Template and options template ingestion into a TemplateCache
- Template-driven data record decoding, including variable-length fields
"""

from flowschema.decoding.cache import TemplateCache
from flowschema.decoding.cursor import ByteCursor
from flowschema.decoding.header import FlowSetHeader, PacketHeader, peek_version
from flowschema.decoding.packet import (
    DataFlowSet,
    FlowSet,
    NetFlowV9Parser,
    OptionsTemplateFlowSet,
    Packet,
    TemplateFlowSet,
    decode_packet,
)
from flowschema.decoding.records import DataRecord, DataRecordDecoder
from flowschema.decoding.templates import (
    FieldSpec,
    OptionsTemplateDefinition,
    TemplateDefinition,
    parse_options_template_flowset,
    parse_template_flowset,
)

__all__ = [
    "ByteCursor",
    "DataFlowSet",
    "DataRecord",
    "DataRecordDecoder",
    "FieldSpec",
    "FlowSet",
    "FlowSetHeader",
    "NetFlowV9Parser",
    "OptionsTemplateDefinition",
    "OptionsTemplateFlowSet",
    "Packet",
    "PacketHeader",
    "TemplateCache",
    "TemplateDefinition",
    "TemplateFlowSet",
    "decode_packet",
    "parse_options_template_flowset",
    "parse_template_flowset",
    "peek_version",
]
