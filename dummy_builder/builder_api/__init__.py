"""Builder API HTTP server."""

from .server import BuilderAPI, DEFAULT_BUILDER_API_PORT
from .utils import (
    header_from_json,
    header_to_json,
    payload_to_json,
    signed_bid_to_json,
    blobs_bundle_to_json,
    payload_contents_to_json,
    payload_contents_to_ssz,
)

__all__ = [
    "BuilderAPI",
    "DEFAULT_BUILDER_API_PORT",
    "header_from_json",
    "header_to_json",
    "payload_to_json",
    "signed_bid_to_json",
    "blobs_bundle_to_json",
    "payload_contents_to_json",
    "payload_contents_to_ssz",
]
