"""NetFlow v9 field type registry (RFC 3954, section 8).

Maps numeric field types to names and interprets raw field bytes as
typed values. Decoding never depends on this module: record boundaries
come from template lengths alone, and unknown field types fall back
to integers or raw bytes.
"""

from ipaddress import IPv4Address, IPv6Address
from typing import Any

# Field type constants (RFC 3954)
NF9_FIELD_IN_BYTES = 1
NF9_FIELD_IN_PKTS = 2
NF9_FIELD_FLOWS = 3
NF9_FIELD_PROTOCOL = 4
NF9_FIELD_SRC_TOS = 5
NF9_FIELD_TCP_FLAGS = 6
NF9_FIELD_L4_SRC_PORT = 7
NF9_FIELD_IPV4_SRC_ADDR = 8
NF9_FIELD_SRC_MASK = 9
NF9_FIELD_INPUT_SNMP = 10
NF9_FIELD_L4_DST_PORT = 11
NF9_FIELD_IPV4_DST_ADDR = 12
NF9_FIELD_DST_MASK = 13
NF9_FIELD_OUTPUT_SNMP = 14
NF9_FIELD_IPV4_NEXT_HOP = 15
NF9_FIELD_SRC_AS = 16
NF9_FIELD_DST_AS = 17
NF9_FIELD_BGP_IPV4_NEXT_HOP = 18
NF9_FIELD_LAST_SWITCHED = 21
NF9_FIELD_FIRST_SWITCHED = 22
NF9_FIELD_OUT_BYTES = 23
NF9_FIELD_OUT_PKTS = 24
NF9_FIELD_IPV6_SRC_ADDR = 27
NF9_FIELD_IPV6_DST_ADDR = 28
NF9_FIELD_IPV6_FLOW_LABEL = 31
NF9_FIELD_ICMP_TYPE = 32
NF9_FIELD_SAMPLING_INTERVAL = 34
NF9_FIELD_SAMPLING_ALGORITHM = 35
NF9_FIELD_ENGINE_TYPE = 38
NF9_FIELD_ENGINE_ID = 39
NF9_FIELD_MPLS_TOP_LABEL_IP_ADDR = 47
NF9_FIELD_FLOW_SAMPLER_ID = 48
NF9_FIELD_FLOW_SAMPLER_MODE = 49
NF9_FIELD_FLOW_SAMPLER_RANDOM_INTERVAL = 50
NF9_FIELD_IN_SRC_MAC = 56
NF9_FIELD_OUT_DST_MAC = 57
NF9_FIELD_DIRECTION = 61
NF9_FIELD_IPV6_NEXT_HOP = 62
NF9_FIELD_BGP_IPV6_NEXT_HOP = 63
NF9_FIELD_IN_DST_MAC = 80
NF9_FIELD_OUT_SRC_MAC = 81
NF9_FIELD_IF_NAME = 82
NF9_FIELD_IF_DESC = 83
NF9_FIELD_SAMPLER_NAME = 84
NF9_FIELD_APPLICATION_DESCRIPTION = 94
NF9_FIELD_APPLICATION_NAME = 96

# Length value reserved for fields whose size is given per record
VARIABLE_LENGTH = 65535

FIELD_NAMES: dict[int, str] = {
    1: "IN_BYTES",
    2: "IN_PKTS",
    3: "FLOWS",
    4: "PROTOCOL",
    5: "SRC_TOS",
    6: "TCP_FLAGS",
    7: "L4_SRC_PORT",
    8: "IPV4_SRC_ADDR",
    9: "SRC_MASK",
    10: "INPUT_SNMP",
    11: "L4_DST_PORT",
    12: "IPV4_DST_ADDR",
    13: "DST_MASK",
    14: "OUTPUT_SNMP",
    15: "IPV4_NEXT_HOP",
    16: "SRC_AS",
    17: "DST_AS",
    18: "BGP_IPV4_NEXT_HOP",
    19: "MUL_DST_PKTS",
    20: "MUL_DST_BYTES",
    21: "LAST_SWITCHED",
    22: "FIRST_SWITCHED",
    23: "OUT_BYTES",
    24: "OUT_PKTS",
    25: "MIN_PKT_LNGTH",
    26: "MAX_PKT_LNGTH",
    27: "IPV6_SRC_ADDR",
    28: "IPV6_DST_ADDR",
    29: "IPV6_SRC_MASK",
    30: "IPV6_DST_MASK",
    31: "IPV6_FLOW_LABEL",
    32: "ICMP_TYPE",
    33: "MUL_IGMP_TYPE",
    34: "SAMPLING_INTERVAL",
    35: "SAMPLING_ALGORITHM",
    36: "FLOW_ACTIVE_TIMEOUT",
    37: "FLOW_INACTIVE_TIMEOUT",
    38: "ENGINE_TYPE",
    39: "ENGINE_ID",
    40: "TOTAL_BYTES_EXP",
    41: "TOTAL_PKTS_EXP",
    42: "TOTAL_FLOWS_EXP",
    44: "IPV4_SRC_PREFIX",
    45: "IPV4_DST_PREFIX",
    46: "MPLS_TOP_LABEL_TYPE",
    47: "MPLS_TOP_LABEL_IP_ADDR",
    48: "FLOW_SAMPLER_ID",
    49: "FLOW_SAMPLER_MODE",
    50: "FLOW_SAMPLER_RANDOM_INTERVAL",
    52: "MIN_TTL",
    53: "MAX_TTL",
    54: "IPV4_IDENT",
    55: "DST_TOS",
    56: "IN_SRC_MAC",
    57: "OUT_DST_MAC",
    58: "SRC_VLAN",
    59: "DST_VLAN",
    60: "IP_PROTOCOL_VERSION",
    61: "DIRECTION",
    62: "IPV6_NEXT_HOP",
    63: "BGP_IPV6_NEXT_HOP",
    64: "IPV6_OPTION_HEADERS",
    70: "MPLS_LABEL_1",
    71: "MPLS_LABEL_2",
    72: "MPLS_LABEL_3",
    73: "MPLS_LABEL_4",
    74: "MPLS_LABEL_5",
    75: "MPLS_LABEL_6",
    76: "MPLS_LABEL_7",
    77: "MPLS_LABEL_8",
    78: "MPLS_LABEL_9",
    79: "MPLS_LABEL_10",
    80: "IN_DST_MAC",
    81: "OUT_SRC_MAC",
    82: "IF_NAME",
    83: "IF_DESC",
    84: "SAMPLER_NAME",
    85: "IN_PERMANENT_BYTES",
    86: "IN_PERMANENT_PKTS",
    88: "FRAGMENT_OFFSET",
    89: "FORWARDING_STATUS",
    90: "MPLS_PAL_RD",
    91: "MPLS_PREFIX_LEN",
    92: "SRC_TRAFFIC_INDEX",
    93: "DST_TRAFFIC_INDEX",
    94: "APPLICATION_DESCRIPTION",
    95: "APPLICATION_TAG",
    96: "APPLICATION_NAME",
    98: "POSTIPDIFFSERVCODEPOINT",
    99: "REPLICATION_FACTOR",
    102: "LAYER2_PACKET_SECTION_OFFSET",
    103: "LAYER2_PACKET_SECTION_SIZE",
    104: "LAYER2_PACKET_SECTION_DATA",
}

# Options template scope types share numbers with field types but not meaning
SCOPE_FIELD_NAMES: dict[int, str] = {
    1: "SCOPE_SYSTEM",
    2: "SCOPE_INTERFACE",
    3: "SCOPE_LINE_CARD",
    4: "SCOPE_CACHE",
    5: "SCOPE_TEMPLATE",
}

IPV4_FIELDS = frozenset({
    NF9_FIELD_IPV4_SRC_ADDR,
    NF9_FIELD_IPV4_DST_ADDR,
    NF9_FIELD_IPV4_NEXT_HOP,
    NF9_FIELD_BGP_IPV4_NEXT_HOP,
    NF9_FIELD_MPLS_TOP_LABEL_IP_ADDR,
})

IPV6_FIELDS = frozenset({
    NF9_FIELD_IPV6_SRC_ADDR,
    NF9_FIELD_IPV6_DST_ADDR,
    NF9_FIELD_IPV6_NEXT_HOP,
    NF9_FIELD_BGP_IPV6_NEXT_HOP,
})

MAC_FIELDS = frozenset({
    NF9_FIELD_IN_SRC_MAC,
    NF9_FIELD_OUT_DST_MAC,
    NF9_FIELD_IN_DST_MAC,
    NF9_FIELD_OUT_SRC_MAC,
})

TEXT_FIELDS = frozenset({
    NF9_FIELD_IF_NAME,
    NF9_FIELD_IF_DESC,
    NF9_FIELD_SAMPLER_NAME,
    NF9_FIELD_APPLICATION_DESCRIPTION,
    NF9_FIELD_APPLICATION_NAME,
})


def field_name(field_type: int) -> str:
    """Return the RFC 3954 name of a field type, or ``FIELD_<n>``."""
    return FIELD_NAMES.get(field_type, f"FIELD_{field_type}")


def scope_field_name(field_type: int) -> str:
    """Return the name of an options template scope type, or ``SCOPE_<n>``."""
    return SCOPE_FIELD_NAMES.get(field_type, f"SCOPE_{field_type}")


def decode_unsigned(data: bytes) -> int | bytes:
    """Big-endian unsigned integer for 1-8 byte values, raw bytes otherwise."""
    if 1 <= len(data) <= 8:
        return int.from_bytes(data, "big")
    return data


def decode_field_value(field_type: int, data: bytes) -> Any:
    """Decode a field value based on type and actual length.

    Args:
        field_type: NetFlow v9 field type.
        data: Raw field bytes, already sliced to the field's length.

    Returns:
        IPv4Address/IPv6Address for address fields of matching length,
        a colon-separated string for MAC fields, text for name fields,
        an int for other fields up to 8 bytes, raw bytes otherwise.
    """
    length = len(data)

    if field_type in IPV4_FIELDS and length == 4:
        return IPv4Address(data)

    if field_type in IPV6_FIELDS and length == 16:
        return IPv6Address(data)

    if field_type in MAC_FIELDS and length == 6:
        return ":".join(f"{b:02x}" for b in data)

    if field_type in TEXT_FIELDS:
        return data.rstrip(b"\x00").decode("utf-8", errors="replace")

    return decode_unsigned(data)
