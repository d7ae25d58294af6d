"""Prometheus metrics."""

from .metrics import (
    DEFAULT_METRICS_PORT,
    start_metrics_server,
    set_builder_info,
    record_payload_attributes,
    record_payload_attributes_rejected,
    record_event_stream_reconnect,
    record_bid_issued,
    record_no_payload,
    record_payload_revealed,
    record_unblind_failure,
    update_payload_cache_size,
    record_builder_api_request,
)

__all__ = [
    "DEFAULT_METRICS_PORT",
    "start_metrics_server",
    "set_builder_info",
    "record_payload_attributes",
    "record_payload_attributes_rejected",
    "record_event_stream_reconnect",
    "record_bid_issued",
    "record_no_payload",
    "record_payload_revealed",
    "record_unblind_failure",
    "update_payload_cache_size",
    "record_builder_api_request",
]
