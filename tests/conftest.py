"""Pytest configuration and fixtures for flowschema tests."""

import struct
from collections.abc import Sequence

import pytest

from flowschema.decoding.cache import TemplateCache

# Sample header values
SOURCE_ID = 2081
SYS_UPTIME = 3462915953
UNIX_SECS = 1571059124
SEQUENCE_NUMBER = 3228052148

# IPV4_SRC_ADDR, IPV4_DST_ADDR, L4_SRC_PORT, L4_DST_PORT, PROTOCOL, IN_BYTES, IN_PKTS
SAMPLE_FIELDS: list[tuple[int, int]] = [
    (8, 4),
    (12, 4),
    (7, 2),
    (11, 2),
    (4, 1),
    (1, 4),
    (2, 4),
]
SAMPLE_RECORD_LENGTH = 21


def make_header(
    count: int,
    source_id: int = SOURCE_ID,
    version: int = 9,
    sys_uptime: int = SYS_UPTIME,
    unix_secs: int = UNIX_SECS,
    sequence_number: int = SEQUENCE_NUMBER,
) -> bytes:
    return struct.pack(
        "!HHIIII",
        version,
        count,
        sys_uptime,
        unix_secs,
        sequence_number,
        source_id,
    )


def make_flowset(flowset_id: int, body: bytes) -> bytes:
    return struct.pack("!HH", flowset_id, len(body) + 4) + body


def make_template(template_id: int, fields: Sequence[tuple[int, int]]) -> bytes:
    data = struct.pack("!HH", template_id, len(fields))
    for field_type, length in fields:
        data += struct.pack("!HH", field_type, length)
    return data


def make_options_template(
    template_id: int,
    scope_fields: Sequence[tuple[int, int]],
    option_fields: Sequence[tuple[int, int]],
) -> bytes:
    data = struct.pack("!HHH", template_id, len(scope_fields) * 4, len(option_fields) * 4)
    for field_type, length in list(scope_fields) + list(option_fields):
        data += struct.pack("!HH", field_type, length)
    return data


def make_sample_record(
    src: tuple[int, int, int, int] = (192, 168, 1, 100),
    dst: tuple[int, int, int, int] = (10, 0, 0, 1),
    src_port: int = 54321,
    dst_port: int = 443,
    protocol: int = 6,
    octets: int = 50000,
    packets: int = 100,
) -> bytes:
    """One record laid out per SAMPLE_FIELDS (21 bytes)."""
    return (
        bytes(src)
        + bytes(dst)
        + struct.pack("!HHBII", src_port, dst_port, protocol, octets, packets)
    )


def make_packet(flowsets: Sequence[bytes], count: int | None = None, **header_kwargs) -> bytes:
    if count is None:
        count = len(flowsets)
    return make_header(count, **header_kwargs) + b"".join(flowsets)


@pytest.fixture
def cache() -> TemplateCache:
    """Fresh template cache per test."""
    return TemplateCache()


@pytest.fixture
def sample_template_flowset() -> bytes:
    """Template flow set defining template 300 with SAMPLE_FIELDS."""
    return make_flowset(0, make_template(300, SAMPLE_FIELDS))


@pytest.fixture
def sample_v9_packet(sample_template_flowset: bytes) -> bytes:
    """Template 300 followed by a data flow set with two records."""
    data = make_flowset(
        300,
        make_sample_record()
        + make_sample_record(src=(192, 168, 1, 101), dst_port=80, octets=1200, packets=3),
    )
    return make_packet([sample_template_flowset, data])
