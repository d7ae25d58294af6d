"""Builder service orchestration."""

import asyncio
import logging
from typing import Optional

from .config import Config
from .builder import AttributesCache, BidFactory, Builder, PayloadVault
from .builder_api import BuilderAPI
from .crypto import generate_privkey
from .events import PayloadAttributesListener
from .spec.network_config import NetworkConfig, load_network_config
from .version import get_version
from . import metrics

logger = logging.getLogger(__name__)


class BuilderService:
    """Wires the event listener, the builder and the builder API together."""

    def __init__(self, config: Config, network_config: Optional[NetworkConfig] = None):
        self.config = config
        self.network_config = network_config or load_network_config(
            config.network, config.custom_network_path
        )

        privkey = config.secret_key_int
        if privkey is None:
            privkey = generate_privkey()
            logger.info("No secret key configured, generated a random builder key")

        self.attributes_cache = AttributesCache(config.payload_attributes_cache_size)
        self.payload_vault = PayloadVault(config.payload_cache_size)
        self.bid_factory = BidFactory(
            privkey,
            self.network_config,
            self.attributes_cache,
            self.payload_vault,
            payload_value=config.payload_value,
            payload_body_bytes=config.payload_body_bytes,
        )
        self.builder = Builder(self.bid_factory, self.payload_vault, self.network_config)
        self.listener = PayloadAttributesListener(
            config.beacon_node_url,
            self.attributes_cache,
            reconnect=config.sse_reconnect,
        )
        self.builder_api = BuilderAPI(self.builder, config.listen_host, config.listen_port)

    @property
    def pubkey(self) -> bytes:
        return self.builder.pubkey

    async def start(self) -> None:
        """Start the builder service."""
        logger.info(f"Starting builder for network {self.network_config.config_name}")
        logger.info(f"Builder pubkey: 0x{self.pubkey.hex()}")

        if self.config.metrics_enabled:
            metrics.start_metrics_server(self.config.metrics_port)
        metrics.set_builder_info(
            version=get_version(),
            network=self.network_config.config_name,
            pubkey="0x" + self.pubkey.hex(),
        )

        await self.builder_api.start()
        await self.listener.start()

    async def stop(self) -> None:
        """Stop the builder service."""
        logger.info("Stopping builder")
        await self.listener.stop()
        await self.builder_api.stop()


async def run_service(config: Config, network_config: Optional[NetworkConfig] = None) -> None:
    """Run the builder until cancelled."""
    service = BuilderService(config, network_config)

    try:
        await service.start()
        while True:
            await asyncio.sleep(1)
    except asyncio.CancelledError:
        pass
    finally:
        await service.stop()
