"""Builder API operations: bid requests and blinded block submission."""

import logging

from ..crypto import hash_tree_root
from ..exceptions import UnbindPayloadError
from ..spec.network_config import NetworkConfig
from .. import metrics
from .bid import BidFactory, VersionedResponse
from .payload_cache import FullPayloadContents, PayloadVault

logger = logging.getLogger(__name__)


class Builder:
    """Serves bids from the bid factory and reveals the payloads they commit to."""

    def __init__(
        self,
        bid_factory: BidFactory,
        payload_vault: PayloadVault,
        network_config: NetworkConfig,
    ):
        self.bid_factory = bid_factory
        self.payload_vault = payload_vault
        self.network_config = network_config

    @property
    def pubkey(self) -> bytes:
        return self.bid_factory.pubkey

    def fork_for_slot(self, slot: int) -> str:
        """Fork used for a blinded block that does not announce its version."""
        return self.network_config.fork_name_at_slot(slot)

    async def get_header(self, slot: int, parent_hash: bytes) -> VersionedResponse:
        """Return a signed bid for building on parent_hash at slot."""
        return await self.bid_factory.build_bid(slot, parent_hash)

    async def submit_blinded_block(
        self, fork: str, execution_payload_header
    ) -> VersionedResponse[FullPayloadContents]:
        """Reveal the payload committed to by a blinded block's execution payload header.

        The header has the same hash tree root as the payload it was derived
        from, so the root is the payload cache key. The proposer signature is
        not checked.

        Raises:
            UnbindPayloadError: If no payload is committed under the header root
        """
        root = hash_tree_root(execution_payload_header)
        contents = await self.payload_vault.pop(root)
        metrics.update_payload_cache_size(len(self.payload_vault))
        if contents is None:
            metrics.record_unblind_failure()
            raise UnbindPayloadError(root)

        metrics.record_payload_revealed(fork)
        logger.info(
            f"Revealed {fork} payload: block_number={int(contents.execution_payload.block_number)}, "
            f"root=0x{root.hex()[:16]}"
        )
        return VersionedResponse(version=fork, data=contents)
