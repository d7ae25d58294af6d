"""Mock block builder: attribute cache, bid factory and payload reveal."""

from .attributes import (
    AttributesCache,
    PayloadAttributes,
    PayloadAttributesEvent,
    WithdrawalRecord,
    DEFAULT_ATTRIBUTES_CACHE_SIZE,
)
from .payload_cache import FullPayloadContents, PayloadVault, DEFAULT_PAYLOAD_CACHE_SIZE
from .bid import (
    BidFactory,
    VersionedResponse,
    build_execution_payload,
    payload_to_header,
    sign_bid,
    verify_bid_signature,
)
from .builder import Builder

__all__ = [
    "AttributesCache",
    "PayloadAttributes",
    "PayloadAttributesEvent",
    "WithdrawalRecord",
    "DEFAULT_ATTRIBUTES_CACHE_SIZE",
    "FullPayloadContents",
    "PayloadVault",
    "DEFAULT_PAYLOAD_CACHE_SIZE",
    "BidFactory",
    "VersionedResponse",
    "build_execution_payload",
    "payload_to_header",
    "sign_bid",
    "verify_bid_signature",
    "Builder",
]
