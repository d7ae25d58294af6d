"""SSZ types for the builder API.

Types are organized by the fork that introduced them:
- base.py: Basic types and primitives
- bellatrix.py: Bellatrix types (execution payload)
- capella.py: Capella types (withdrawals)
- deneb.py: Deneb types (blob gas, blobs bundle)
- builder.py: Builder bids for each fork
"""

from .base import (
    uint8, uint64, uint256,
    Bytes4, Bytes20, Bytes32, Bytes48, Bytes96, ByteVector,
    Container, List,
    Slot, Epoch, ValidatorIndex, Gwei, Wei,
    Root, Hash32, Version, DomainType, Domain,
    BLSPubkey, BLSSignature, ExecutionAddress, WithdrawalIndex,
    KZGCommitment, KZGProof,
    Transaction,
    ForkData, SigningData, Withdrawal,
)
from .bellatrix import ExecutionPayloadHeaderBellatrix, ExecutionPayloadBellatrix
from .capella import ExecutionPayloadHeaderCapella, ExecutionPayloadCapella
from .deneb import (
    Blob,
    ExecutionPayloadHeaderDeneb,
    ExecutionPayloadDeneb,
    BlobsBundle,
    ExecutionPayloadAndBlobsBundle,
)
from .builder import (
    BuilderBidBellatrix,
    SignedBuilderBidBellatrix,
    BuilderBidCapella,
    SignedBuilderBidCapella,
    BuilderBidDeneb,
    SignedBuilderBidDeneb,
)

EXECUTION_PAYLOAD_TYPES = {
    "bellatrix": ExecutionPayloadBellatrix,
    "capella": ExecutionPayloadCapella,
    "deneb": ExecutionPayloadDeneb,
}

EXECUTION_PAYLOAD_HEADER_TYPES = {
    "bellatrix": ExecutionPayloadHeaderBellatrix,
    "capella": ExecutionPayloadHeaderCapella,
    "deneb": ExecutionPayloadHeaderDeneb,
}

BUILDER_BID_TYPES = {
    "bellatrix": BuilderBidBellatrix,
    "capella": BuilderBidCapella,
    "deneb": BuilderBidDeneb,
}

SIGNED_BUILDER_BID_TYPES = {
    "bellatrix": SignedBuilderBidBellatrix,
    "capella": SignedBuilderBidCapella,
    "deneb": SignedBuilderBidDeneb,
}

__all__ = [
    "uint8", "uint64", "uint256",
    "Bytes4", "Bytes20", "Bytes32", "Bytes48", "Bytes96", "ByteVector",
    "Container", "List",
    "Slot", "Epoch", "ValidatorIndex", "Gwei", "Wei",
    "Root", "Hash32", "Version", "DomainType", "Domain",
    "BLSPubkey", "BLSSignature", "ExecutionAddress", "WithdrawalIndex",
    "KZGCommitment", "KZGProof",
    "Transaction",
    "ForkData", "SigningData", "Withdrawal",
    "ExecutionPayloadHeaderBellatrix", "ExecutionPayloadBellatrix",
    "ExecutionPayloadHeaderCapella", "ExecutionPayloadCapella",
    "Blob", "ExecutionPayloadHeaderDeneb", "ExecutionPayloadDeneb",
    "BlobsBundle", "ExecutionPayloadAndBlobsBundle",
    "BuilderBidBellatrix", "SignedBuilderBidBellatrix",
    "BuilderBidCapella", "SignedBuilderBidCapella",
    "BuilderBidDeneb", "SignedBuilderBidDeneb",
    "EXECUTION_PAYLOAD_TYPES",
    "EXECUTION_PAYLOAD_HEADER_TYPES",
    "BUILDER_BID_TYPES",
    "SIGNED_BUILDER_BID_TYPES",
]
