"""Payload attributes announcements and the cache they are served from."""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

from ..utils import parse_hex, parse_uint

logger = logging.getLogger(__name__)

DEFAULT_ATTRIBUTES_CACHE_SIZE = 16

# (parent_block_hash, proposal_slot)
AttributesKey = tuple[bytes, int]


def _require_mapping(value, what: str) -> None:
    if not isinstance(value, dict):
        raise TypeError(f"Expected {what} object, got {type(value).__name__}")


def _require_list(value) -> list:
    if not isinstance(value, list):
        raise TypeError(f"Expected withdrawals list, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class WithdrawalRecord:
    """A withdrawal announced in payload attributes."""

    index: int
    validator_index: int
    address: bytes
    amount: int

    @classmethod
    def from_dict(cls, data: dict) -> "WithdrawalRecord":
        _require_mapping(data, "withdrawal")
        return cls(
            index=parse_uint(data["index"]),
            validator_index=parse_uint(data["validator_index"]),
            address=parse_hex(data["address"], 20),
            amount=parse_uint(data["amount"]),
        )


@dataclass(frozen=True)
class PayloadAttributes:
    """Attributes a proposer asks the execution layer to build on."""

    timestamp: int
    prev_randao: bytes
    suggested_fee_recipient: bytes
    withdrawals: Optional[tuple[WithdrawalRecord, ...]] = None
    parent_beacon_block_root: Optional[bytes] = None

    @classmethod
    def from_dict(cls, data: dict) -> "PayloadAttributes":
        _require_mapping(data, "payload_attributes")
        withdrawals = data.get("withdrawals")
        parent_beacon_block_root = data.get("parent_beacon_block_root")
        return cls(
            timestamp=parse_uint(data["timestamp"]),
            prev_randao=parse_hex(data["prev_randao"], 32),
            suggested_fee_recipient=parse_hex(data["suggested_fee_recipient"], 20),
            withdrawals=(
                tuple(WithdrawalRecord.from_dict(w) for w in _require_list(withdrawals))
                if withdrawals is not None
                else None
            ),
            parent_beacon_block_root=(
                parse_hex(parent_beacon_block_root, 32)
                if parent_beacon_block_root is not None
                else None
            ),
        )


@dataclass(frozen=True)
class PayloadAttributesEvent:
    """A `payload_attributes` event from the beacon node event stream.

    The version is the fork name the beacon node tagged the event with; it is
    kept as announced and checked only when a bid is built.
    """

    version: Optional[str]
    proposer_index: int
    proposal_slot: int
    parent_block_number: int
    parent_block_root: bytes
    parent_block_hash: bytes
    payload_attributes: PayloadAttributes

    @property
    def key(self) -> AttributesKey:
        return (self.parent_block_hash, self.proposal_slot)

    @classmethod
    def from_dict(cls, data: dict) -> "PayloadAttributesEvent":
        _require_mapping(data, "event")
        version = data.get("version")
        if version is not None and not isinstance(version, str):
            raise TypeError(f"Invalid version: {version!r}")
        body = data["data"]
        _require_mapping(body, "event data")
        return cls(
            version=version.lower() if version is not None else None,
            proposer_index=parse_uint(body["proposer_index"]),
            proposal_slot=parse_uint(body["proposal_slot"]),
            parent_block_number=parse_uint(body["parent_block_number"]),
            parent_block_root=parse_hex(body["parent_block_root"], 32),
            parent_block_hash=parse_hex(body["parent_block_hash"], 32),
            payload_attributes=PayloadAttributes.from_dict(body["payload_attributes"]),
        )


class AttributesCache:
    """Bounded LRU map from (parent block hash, slot) to the latest announcement."""

    def __init__(self, capacity: int = DEFAULT_ATTRIBUTES_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._entries: OrderedDict[AttributesKey, PayloadAttributesEvent] = OrderedDict()
        self._lock = asyncio.Lock()

    async def put(self, key: AttributesKey, record: PayloadAttributesEvent) -> None:
        """Insert or overwrite the record for key, evicting the LRU key when full."""
        async with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted payload attributes for slot {evicted[1]}")
            self._entries[key] = record

    async def get(self, key: AttributesKey) -> Optional[PayloadAttributesEvent]:
        """Return the record for key and mark it recently used."""
        async with self._lock:
            record = self._entries.get(key)
            if record is not None:
                self._entries.move_to_end(key)
            return record

    def __len__(self) -> int:
        return len(self._entries)
