"""Builder bid construction for the builder API.

A bid commits to a placeholder execution payload: the payload is built from
the cached payload attributes, its header is signed over the application
builder domain, and the full payload is committed to the payload cache
before the bid is handed out.

Reference: https://github.com/ethereum/builder-specs/blob/main/specs/bellatrix/builder.md
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from ..crypto import compute_signing_root, hash_tree_root, pubkey_from_privkey, sign, verify
from ..exceptions import LogicError, NoPayloadError
from ..spec.constants import (
    DUMMY_BLOCK_HASH,
    GAS_LIMIT,
    MAX_BYTES_PER_TRANSACTION,
    MAX_WITHDRAWALS_PER_PAYLOAD,
    SUPPORTED_FORKS,
)
from ..spec.network_config import NetworkConfig
from ..spec.types import (
    BUILDER_BID_TYPES,
    EXECUTION_PAYLOAD_HEADER_TYPES,
    SIGNED_BUILDER_BID_TYPES,
    BlobsBundle,
    ExecutionPayloadBellatrix,
    ExecutionPayloadCapella,
    ExecutionPayloadDeneb,
    Withdrawal,
    uint256,
)
from .attributes import AttributesCache, PayloadAttributesEvent
from .payload_cache import FullPayloadContents, PayloadVault
from .. import metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class VersionedResponse(Generic[T]):
    """Response data tagged with the fork it belongs to."""

    version: str
    data: T


def build_execution_payload(
    fork: str,
    event: PayloadAttributesEvent,
    parent_hash: bytes,
    payload_body_bytes: int = 0,
) -> tuple[Any, Optional[BlobsBundle]]:
    """Build the placeholder payload (and blobs bundle) for the given fork.

    Raises:
        LogicError: If a withdrawals fork is announced without withdrawals,
            or the attributes do not fit the payload's SSZ limits
        NoPayloadError: If the fork is not supported
    """
    if fork not in SUPPORTED_FORKS:
        raise NoPayloadError(f"unsupported fork {fork}")

    attributes = event.payload_attributes
    if payload_body_bytes > MAX_BYTES_PER_TRANSACTION:
        raise LogicError(f"payload body of {payload_body_bytes} bytes exceeds the transaction limit")

    base_fields = {
        "parent_hash": parent_hash,
        "fee_recipient": attributes.suggested_fee_recipient,
        "prev_randao": attributes.prev_randao,
        "block_number": event.parent_block_number + 1,
        "gas_limit": GAS_LIMIT,
        "timestamp": attributes.timestamp,
        # Consensus clients reject an all-zero block hash.
        "block_hash": DUMMY_BLOCK_HASH,
        "transactions": [list(bytes(payload_body_bytes))],
    }

    if fork != "bellatrix":
        if attributes.withdrawals is None:
            raise LogicError(f"{fork} payload attributes for slot {event.proposal_slot} have no withdrawals")
        if len(attributes.withdrawals) > MAX_WITHDRAWALS_PER_PAYLOAD():
            raise LogicError(
                f"{len(attributes.withdrawals)} withdrawals for slot {event.proposal_slot} "
                f"exceed the limit of {MAX_WITHDRAWALS_PER_PAYLOAD()}"
            )

    # remerkleable raises plain exceptions for values that do not fit a type.
    try:
        if fork == "bellatrix":
            return ExecutionPayloadBellatrix(**base_fields), None

        base_fields["withdrawals"] = [
            Withdrawal(
                index=w.index,
                validator_index=w.validator_index,
                address=w.address,
                amount=w.amount,
            )
            for w in attributes.withdrawals
        ]

        if fork == "capella":
            return ExecutionPayloadCapella(**base_fields), None

        return ExecutionPayloadDeneb(**base_fields), BlobsBundle()
    except Exception as e:
        raise LogicError(f"cannot build {fork} payload for slot {event.proposal_slot}: {e}") from e


def payload_to_header(fork: str, payload):
    """Derive the execution payload header committing to a payload.

    List fields are replaced by their hash tree roots, so the header has the
    same hash tree root as the payload.
    """
    header_fields = {
        "parent_hash": payload.parent_hash,
        "fee_recipient": payload.fee_recipient,
        "state_root": payload.state_root,
        "receipts_root": payload.receipts_root,
        "logs_bloom": payload.logs_bloom,
        "prev_randao": payload.prev_randao,
        "block_number": payload.block_number,
        "gas_limit": payload.gas_limit,
        "gas_used": payload.gas_used,
        "timestamp": payload.timestamp,
        "extra_data": list(bytes(payload.extra_data)),
        "base_fee_per_gas": payload.base_fee_per_gas,
        "block_hash": payload.block_hash,
        "transactions_root": hash_tree_root(payload.transactions),
    }
    if hasattr(payload, "withdrawals"):
        header_fields["withdrawals_root"] = hash_tree_root(payload.withdrawals)
    if hasattr(payload, "blob_gas_used"):
        header_fields["blob_gas_used"] = payload.blob_gas_used
        header_fields["excess_blob_gas"] = payload.excess_blob_gas

    return EXECUTION_PAYLOAD_HEADER_TYPES[fork](**header_fields)


def sign_bid(fork: str, bid, privkey: int, domain: bytes):
    """Sign a builder bid over the builder domain."""
    signing_root = compute_signing_root(bid, domain)
    signature = sign(privkey, signing_root)
    return SIGNED_BUILDER_BID_TYPES[fork](message=bid, signature=signature)


def verify_bid_signature(signed_bid, domain: bytes) -> bool:
    """Check a signed bid against the pubkey it carries."""
    signing_root = compute_signing_root(signed_bid.message, domain)
    return verify(
        bytes(signed_bid.message.pubkey),
        signing_root,
        bytes(signed_bid.signature),
    )


class BidFactory:
    """Builds signed bids from cached payload attributes."""

    def __init__(
        self,
        privkey: int,
        network_config: NetworkConfig,
        attributes_cache: AttributesCache,
        payload_vault: PayloadVault,
        payload_value: int = 0,
        payload_body_bytes: int = 0,
    ):
        if not 0 <= payload_value < 2**256:
            raise ValueError(f"Payload value out of uint256 range: {payload_value}")
        if not 0 <= payload_body_bytes <= MAX_BYTES_PER_TRANSACTION:
            raise ValueError(f"Payload body bytes out of range: {payload_body_bytes}")
        self._privkey = privkey
        self.pubkey = pubkey_from_privkey(privkey)
        self.network_config = network_config
        self.domain = network_config.builder_domain()
        self.attributes_cache = attributes_cache
        self.payload_vault = payload_vault
        self.payload_value = payload_value
        self.payload_body_bytes = payload_body_bytes

    async def build_bid(self, slot: int, parent_hash: bytes) -> VersionedResponse:
        """Build, sign and commit a bid for the given slot and parent hash.

        Raises:
            NoPayloadError: No attributes are cached for (parent_hash, slot),
                or they were announced for an unsupported fork
            LogicError: The cached attributes are inconsistent with their fork
        """
        event = await self.attributes_cache.get((parent_hash, slot))
        if event is None:
            raise NoPayloadError(f"no payload attributes for slot {slot} parent 0x{parent_hash.hex()}")

        fork = event.version
        if fork is None:
            raise LogicError(f"payload attributes for slot {slot} carry no fork version")
        if fork not in SUPPORTED_FORKS:
            raise NoPayloadError(f"unsupported fork {fork} for slot {slot}")

        start = time.time()
        payload, blobs_bundle = build_execution_payload(
            fork, event, parent_hash, self.payload_body_bytes
        )
        try:
            header = payload_to_header(fork, payload)
        except Exception as e:
            raise LogicError(f"cannot derive {fork} header for slot {slot}: {e}") from e

        bid_fields = {
            "header": header,
            "value": uint256(self.payload_value),
            "pubkey": self.pubkey,
        }
        if fork == "deneb":
            bid_fields["blob_kzg_commitments"] = list(blobs_bundle.commitments)
        bid = BUILDER_BID_TYPES[fork](**bid_fields)
        signed_bid = sign_bid(fork, bid, self._privkey, self.domain)

        # The payload must be committed before the bid can reach a proposer.
        await self.payload_vault.put(FullPayloadContents(fork, payload, blobs_bundle))
        metrics.update_payload_cache_size(len(self.payload_vault))

        metrics.record_bid_issued(fork, time.time() - start)
        logger.info(
            f"Issued {fork} bid: slot={slot}, block_number={int(payload.block_number)}, "
            f"value={self.payload_value}, root=0x{hash_tree_root(header).hex()[:16]}"
        )

        return VersionedResponse(version=fork, data=signed_bid)
