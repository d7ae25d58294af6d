"""Prometheus metrics for the builder."""

import logging
import threading
from typing import Optional

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    Info,
    start_http_server,
)

logger = logging.getLogger(__name__)

DEFAULT_METRICS_PORT = 8008

# Builder info
builder_info = Info(
    "dummy_builder",
    "Builder information",
)

# Payload attributes stream
payload_attributes_received = Counter(
    "dummy_builder_payload_attributes_received_total",
    "Total payload attributes events cached",
    ["fork"],
)

payload_attributes_rejected = Counter(
    "dummy_builder_payload_attributes_rejected_total",
    "Total payload attributes events skipped as malformed",
)

event_stream_reconnects = Counter(
    "dummy_builder_event_stream_reconnects_total",
    "Total reconnections to the beacon node event stream",
)

attributes_cache_size = Gauge(
    "dummy_builder_attributes_cache_size",
    "Number of payload attributes held in the cache",
)

# Bids and reveals
bids_issued = Counter(
    "dummy_builder_bids_issued_total",
    "Total signed bids returned to proposers",
    ["fork"],
)

bid_requests_no_payload = Counter(
    "dummy_builder_bid_requests_no_payload_total",
    "Total bid requests answered with no content",
)

bid_build_time = Histogram(
    "dummy_builder_bid_build_seconds",
    "Time to build, sign and commit a bid",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

payloads_revealed = Counter(
    "dummy_builder_payloads_revealed_total",
    "Total payloads revealed for blinded blocks",
    ["fork"],
)

unblind_failures = Counter(
    "dummy_builder_unblind_failures_total",
    "Total blinded blocks with no committed payload",
)

payload_cache_size = Gauge(
    "dummy_builder_payload_cache_size",
    "Number of unrevealed payloads held in the cache",
)

# Builder API metrics
builder_api_requests = Counter(
    "dummy_builder_api_requests_total",
    "Total builder API requests",
    ["endpoint", "status"],
)


_server_started = False
_server_lock = threading.Lock()


def start_metrics_server(port: int = DEFAULT_METRICS_PORT) -> bool:
    """Start the Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default 8008)

    Returns:
        True if server started successfully, False if already running
    """
    global _server_started

    with _server_lock:
        if _server_started:
            logger.warning("Metrics server already running")
            return False

        try:
            start_http_server(port)
            _server_started = True
            logger.info(f"Prometheus metrics server started on port {port}")
            return True
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return False


def set_builder_info(version: str, network: str, pubkey: str) -> None:
    """Set builder information metric."""
    builder_info.info({
        "version": version,
        "network": network,
        "pubkey": pubkey,
    })


def record_payload_attributes(fork: Optional[str], cache_size: int) -> None:
    """Record a payload attributes event written to the cache."""
    payload_attributes_received.labels(fork=fork or "unknown").inc()
    attributes_cache_size.set(cache_size)


def record_payload_attributes_rejected() -> None:
    """Record a malformed payload attributes event."""
    payload_attributes_rejected.inc()


def record_event_stream_reconnect() -> None:
    """Record a reconnection to the event stream."""
    event_stream_reconnects.inc()


def record_bid_issued(fork: str, latency: float) -> None:
    """Record a signed bid handed out.

    Args:
        fork: Fork name of the bid
        latency: Time spent building the bid in seconds
    """
    bids_issued.labels(fork=fork).inc()
    bid_build_time.observe(latency)


def record_no_payload() -> None:
    """Record a bid request with no payload available."""
    bid_requests_no_payload.inc()


def record_payload_revealed(fork: str) -> None:
    """Record a payload revealed for a blinded block."""
    payloads_revealed.labels(fork=fork).inc()


def record_unblind_failure() -> None:
    """Record a blinded block with no matching payload."""
    unblind_failures.inc()


def update_payload_cache_size(size: int) -> None:
    """Update the unrevealed payload count."""
    payload_cache_size.set(size)


def record_builder_api_request(endpoint: str, status: int) -> None:
    """Record a builder API request."""
    builder_api_requests.labels(endpoint=endpoint, status=str(status)).inc()
