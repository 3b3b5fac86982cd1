"""Unit tests for the field type registry."""

from ipaddress import IPv4Address, IPv6Address

import pytest

from flowschema.decoding.fields import (
    NF9_FIELD_IF_NAME,
    NF9_FIELD_IN_BYTES,
    NF9_FIELD_IN_SRC_MAC,
    NF9_FIELD_IPV4_SRC_ADDR,
    NF9_FIELD_IPV6_DST_ADDR,
    decode_field_value,
    decode_unsigned,
    field_name,
    scope_field_name,
)


@pytest.mark.unit
class TestFieldNames:
    """Test cases for field naming."""

    def test_known_fields(self):
        assert field_name(1) == "IN_BYTES"
        assert field_name(22) == "FIRST_SWITCHED"
        assert field_name(96) == "APPLICATION_NAME"

    def test_unknown_field(self):
        assert field_name(5000) == "FIELD_5000"

    def test_scope_names(self):
        assert scope_field_name(1) == "SCOPE_SYSTEM"
        assert scope_field_name(5) == "SCOPE_TEMPLATE"
        assert scope_field_name(9) == "SCOPE_9"


@pytest.mark.unit
class TestDecodeFieldValue:
    """Test cases for typed field values."""

    def test_ipv4(self):
        assert decode_field_value(NF9_FIELD_IPV4_SRC_ADDR, bytes([10, 1, 2, 3])) == IPv4Address("10.1.2.3")

    def test_ipv6(self):
        raw = IPv6Address("2001:db8::1").packed

        assert decode_field_value(NF9_FIELD_IPV6_DST_ADDR, raw) == IPv6Address("2001:db8::1")

    def test_address_with_unexpected_length(self):
        """Test an address field of the wrong size falls back to an integer."""
        assert decode_field_value(NF9_FIELD_IPV4_SRC_ADDR, b"\x0a\x01") == 0x0A01

    def test_mac(self):
        raw = bytes.fromhex("001122aabbcc")

        assert decode_field_value(NF9_FIELD_IN_SRC_MAC, raw) == "00:11:22:aa:bb:cc"

    def test_text(self):
        assert decode_field_value(NF9_FIELD_IF_NAME, b"Gi0/1\x00\x00\x00") == "Gi0/1"

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (b"\x2a", 42),
            (b"\x01\x00", 256),
            (b"\x01\x00\x00", 65536),
            (b"\x00\x00\xc3\x50", 50000),
            (b"\x00\x00\x00\x01\x00\x00\x00\x00", 2**32),
        ],
    )
    def test_unsigned_integers(self, raw: bytes, expected: int):
        assert decode_field_value(NF9_FIELD_IN_BYTES, raw) == expected

    def test_long_values_stay_bytes(self):
        raw = b"\x01" * 12

        assert decode_field_value(NF9_FIELD_IN_BYTES, raw) == raw
        assert decode_unsigned(b"") == b""
