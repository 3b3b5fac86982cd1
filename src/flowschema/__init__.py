"""flowschema - template-aware NetFlow v9 decoder.

Tracks the templates each exporter announces and uses them to decode
the data records that follow.
"""

from flowschema.common.exceptions import (
    DecodeError,
    FlowSchemaError,
    InvalidTemplateError,
    InvalidVersionError,
    NotEnoughDataError,
    UnknownTemplateError,
)
from flowschema.decoding import (
    ByteCursor,
    DataFlowSet,
    DataRecord,
    DataRecordDecoder,
    FieldSpec,
    FlowSet,
    FlowSetHeader,
    NetFlowV9Parser,
    OptionsTemplateDefinition,
    OptionsTemplateFlowSet,
    Packet,
    PacketHeader,
    TemplateCache,
    TemplateDefinition,
    TemplateFlowSet,
    decode_packet,
    peek_version,
)

__version__ = "0.1.0"

__all__ = [
    "ByteCursor",
    "DataFlowSet",
    "DataRecord",
    "DataRecordDecoder",
    "DecodeError",
    "FieldSpec",
    "FlowSchemaError",
    "FlowSet",
    "FlowSetHeader",
    "InvalidTemplateError",
    "InvalidVersionError",
    "NetFlowV9Parser",
    "NotEnoughDataError",
    "OptionsTemplateDefinition",
    "OptionsTemplateFlowSet",
    "Packet",
    "PacketHeader",
    "TemplateCache",
    "TemplateDefinition",
    "TemplateFlowSet",
    "UnknownTemplateError",
    "decode_packet",
    "peek_version",
]
