"""Prometheus metrics for the NetFlow v9 decoder."""

from prometheus_client import Counter, Gauge

PACKETS_DECODED = Counter(
    "flowschema_packets_decoded_total",
    "Total number of NetFlow v9 packets decoded",
)

PACKET_DECODE_ERRORS = Counter(
    "flowschema_packet_decode_errors_total",
    "Total number of packets rejected by the decoder",
    ["error_type"],
)

TEMPLATES_RECEIVED = Counter(
    "flowschema_templates_received_total",
    "Total number of template definitions received",
    ["kind"],
)

RECORDS_DECODED = Counter(
    "flowschema_records_decoded_total",
    "Total number of data records decoded",
)

UNKNOWN_TEMPLATE_FLOWSETS = Counter(
    "flowschema_unknown_template_flowsets_total",
    "Total number of data flow sets skipped for lack of a template",
)

TEMPLATE_CACHE_SIZE = Gauge(
    "flowschema_template_cache_size",
    "Number of template definitions held across all template caches",
)
