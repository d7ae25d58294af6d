"""JSON encoding for builder API objects.

Follows the beacon API conventions: integers as decimal strings, byte
strings as 0x-prefixed hex and snake_case keys.
"""

from ..builder.payload_cache import FullPayloadContents
from ..spec.constants import BYTES_PER_LOGS_BLOOM, MAX_EXTRA_DATA_BYTES
from ..spec.types import EXECUTION_PAYLOAD_HEADER_TYPES, ExecutionPayloadAndBlobsBundle, uint256
from ..utils import parse_hex, parse_uint, to_hex


def _execution_fields_to_json(payload) -> dict:
    return {
        "parent_hash": "0x" + bytes(payload.parent_hash).hex(),
        "fee_recipient": "0x" + bytes(payload.fee_recipient).hex(),
        "state_root": "0x" + bytes(payload.state_root).hex(),
        "receipts_root": "0x" + bytes(payload.receipts_root).hex(),
        "logs_bloom": "0x" + bytes(payload.logs_bloom).hex(),
        "prev_randao": "0x" + bytes(payload.prev_randao).hex(),
        "block_number": str(payload.block_number),
        "gas_limit": str(payload.gas_limit),
        "gas_used": str(payload.gas_used),
        "timestamp": str(payload.timestamp),
        "extra_data": "0x" + bytes(payload.extra_data).hex(),
        "base_fee_per_gas": str(payload.base_fee_per_gas),
        "block_hash": "0x" + bytes(payload.block_hash).hex(),
    }


def payload_to_json(payload) -> dict:
    """Encode an execution payload of any supported fork."""
    result = _execution_fields_to_json(payload)
    result["transactions"] = ["0x" + bytes(tx).hex() for tx in payload.transactions]
    if hasattr(payload, "withdrawals"):
        result["withdrawals"] = [
            {
                "index": str(w.index),
                "validator_index": str(w.validator_index),
                "address": "0x" + bytes(w.address).hex(),
                "amount": str(w.amount),
            }
            for w in payload.withdrawals
        ]
    if hasattr(payload, "blob_gas_used"):
        result["blob_gas_used"] = str(payload.blob_gas_used)
        result["excess_blob_gas"] = str(payload.excess_blob_gas)
    return result


def header_to_json(header) -> dict:
    """Encode an execution payload header of any supported fork."""
    result = _execution_fields_to_json(header)
    result["transactions_root"] = "0x" + bytes(header.transactions_root).hex()
    if hasattr(header, "withdrawals_root"):
        result["withdrawals_root"] = "0x" + bytes(header.withdrawals_root).hex()
    if hasattr(header, "blob_gas_used"):
        result["blob_gas_used"] = str(header.blob_gas_used)
        result["excess_blob_gas"] = str(header.excess_blob_gas)
    return result


def header_from_json(fork: str, data: dict):
    """Decode an execution payload header for the given fork.

    Raises:
        KeyError: If a field of the fork's header is missing
        ValueError, TypeError: If a field is malformed
    """
    header_type = EXECUTION_PAYLOAD_HEADER_TYPES[fork]
    extra_data = parse_hex(data["extra_data"])
    if len(extra_data) > MAX_EXTRA_DATA_BYTES:
        raise ValueError(f"extra_data too long: {len(extra_data)} bytes")

    fields = {
        "parent_hash": parse_hex(data["parent_hash"], 32),
        "fee_recipient": parse_hex(data["fee_recipient"], 20),
        "state_root": parse_hex(data["state_root"], 32),
        "receipts_root": parse_hex(data["receipts_root"], 32),
        "logs_bloom": parse_hex(data["logs_bloom"], BYTES_PER_LOGS_BLOOM),
        "prev_randao": parse_hex(data["prev_randao"], 32),
        "block_number": parse_uint(data["block_number"]),
        "gas_limit": parse_uint(data["gas_limit"]),
        "gas_used": parse_uint(data["gas_used"]),
        "timestamp": parse_uint(data["timestamp"]),
        "extra_data": list(extra_data),
        "base_fee_per_gas": uint256(parse_uint(data["base_fee_per_gas"], 256)),
        "block_hash": parse_hex(data["block_hash"], 32),
        "transactions_root": parse_hex(data["transactions_root"], 32),
    }
    if fork in ("capella", "deneb"):
        fields["withdrawals_root"] = parse_hex(data["withdrawals_root"], 32)
    if fork == "deneb":
        fields["blob_gas_used"] = parse_uint(data["blob_gas_used"])
        fields["excess_blob_gas"] = parse_uint(data["excess_blob_gas"])

    return header_type(**fields)


def signed_bid_to_json(signed_bid) -> dict:
    """Encode a signed builder bid."""
    bid = signed_bid.message
    message = {"header": header_to_json(bid.header)}
    if hasattr(bid, "blob_kzg_commitments"):
        message["blob_kzg_commitments"] = [
            "0x" + bytes(c).hex() for c in bid.blob_kzg_commitments
        ]
    message["value"] = str(bid.value)
    message["pubkey"] = "0x" + bytes(bid.pubkey).hex()
    return {
        "message": message,
        "signature": "0x" + bytes(signed_bid.signature).hex(),
    }


def blobs_bundle_to_json(blobs_bundle) -> dict:
    return {
        "commitments": [to_hex(bytes(c)) for c in blobs_bundle.commitments],
        "proofs": [to_hex(bytes(p)) for p in blobs_bundle.proofs],
        "blobs": [to_hex(bytes(b)) for b in blobs_bundle.blobs],
    }


def payload_contents_to_json(contents: FullPayloadContents) -> dict:
    """Encode revealed payload contents.

    Deneb reveals the payload together with its blobs bundle; earlier forks
    reveal the bare payload.
    """
    if contents.blobs_bundle is not None:
        return {
            "execution_payload": payload_to_json(contents.execution_payload),
            "blobs_bundle": blobs_bundle_to_json(contents.blobs_bundle),
        }
    return payload_to_json(contents.execution_payload)


def payload_contents_to_ssz(contents: FullPayloadContents) -> bytes:
    if contents.blobs_bundle is not None:
        return ExecutionPayloadAndBlobsBundle(
            execution_payload=contents.execution_payload,
            blobs_bundle=contents.blobs_bundle,
        ).encode_bytes()
    return contents.execution_payload.encode_bytes()
