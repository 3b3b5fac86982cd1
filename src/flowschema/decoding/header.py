"""NetFlow v9 packet and flow set framing.

Header format (20 bytes):
  - version: 2 bytes (must be 9)
  - count: 2 bytes (number of FlowSets)
  - sys_uptime: 4 bytes (ms since boot)
  - unix_secs: 4 bytes (current time)
  - sequence_number: 4 bytes
  - source_id: 4 bytes

FlowSet header (4 bytes):
  - flowset_id: 2 bytes (0=template, 1=options, >255=data)
  - length: 2 bytes (total length including header)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from flowschema.common.exceptions import InvalidVersionError, NotEnoughDataError
from flowschema.decoding.cursor import ByteCursor

# NetFlow v9 constants
NETFLOW_V9_HEADER_SIZE = 20
NETFLOW_V9_VERSION = 9

FLOWSET_HEADER_SIZE = 4

# FlowSet IDs
FLOWSET_TEMPLATE = 0
FLOWSET_OPTIONS_TEMPLATE = 1
FLOWSET_DATA_MIN = 256


def peek_version(data: bytes) -> int:
    """Return the export version of a flow packet without decoding it.

    Useful for collectors that receive several export formats on one
    port and route by version.

    Raises:
        NotEnoughDataError: If fewer than 2 bytes are available.
    """
    return ByteCursor(data[:2]).u16()


@dataclass(frozen=True, slots=True)
class PacketHeader:
    """NetFlow v9 packet header."""

    version: int
    count: int
    sys_uptime_ms: int
    unix_secs: int
    sequence_number: int
    source_id: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "PacketHeader":
        """Parse a NetFlow v9 packet header.

        Args:
            data: Packet bytes; only the first 20 are read.

        Returns:
            Parsed header.

        Raises:
            NotEnoughDataError: If data is shorter than 20 bytes.
            InvalidVersionError: If version is not 9.
        """
        if len(data) < NETFLOW_V9_HEADER_SIZE:
            raise NotEnoughDataError(expected=NETFLOW_V9_HEADER_SIZE, actual=len(data))

        cursor = ByteCursor(data[:NETFLOW_V9_HEADER_SIZE])
        version = cursor.u16()
        if version != NETFLOW_V9_VERSION:
            raise InvalidVersionError(expected=[NETFLOW_V9_VERSION], actual=version)

        return cls(
            version=version,
            count=cursor.u16(),
            sys_uptime_ms=cursor.u32(),
            unix_secs=cursor.u32(),
            sequence_number=cursor.u32(),
            source_id=cursor.u32(),
        )

    @property
    def timestamp(self) -> datetime:
        """Export time of the packet."""
        return datetime.fromtimestamp(self.unix_secs, tz=timezone.utc)

    def uptime_to_datetime(self, uptime_ms: int) -> datetime:
        """Convert a sysUptime-relative value to wall-clock time.

        FIRST_SWITCHED and LAST_SWITCHED are expressed in milliseconds
        since the exporter booted; anchor them on this packet's export
        time.
        """
        return self.timestamp - timedelta(milliseconds=self.sys_uptime_ms - uptime_ms)


@dataclass(frozen=True, slots=True)
class FlowSetHeader:
    """Framing shared by every flow set."""

    flowset_id: int
    length: int

    @classmethod
    def from_bytes(cls, data: bytes) -> "FlowSetHeader":
        """Parse a flow set header.

        The caller checks ``length`` against the bytes left in the packet.

        Raises:
            NotEnoughDataError: If data is shorter than 4 bytes.
        """
        if len(data) < FLOWSET_HEADER_SIZE:
            raise NotEnoughDataError(expected=FLOWSET_HEADER_SIZE, actual=len(data))

        cursor = ByteCursor(data[:FLOWSET_HEADER_SIZE])
        return cls(flowset_id=cursor.u16(), length=cursor.u16())

    @property
    def is_template(self) -> bool:
        return self.flowset_id == FLOWSET_TEMPLATE

    @property
    def is_options_template(self) -> bool:
        return self.flowset_id == FLOWSET_OPTIONS_TEMPLATE

    @property
    def is_data(self) -> bool:
        return self.flowset_id >= FLOWSET_DATA_MIN

    @property
    def body_length(self) -> int:
        return self.length - FLOWSET_HEADER_SIZE
