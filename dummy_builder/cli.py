"""CLI entry point for the dummy builder."""

import asyncio
import logging
import sys
from typing import Optional

import click

from .config import Config


def setup_logging(level: str) -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    if level.upper() != "DEBUG":
        logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def _validate_secret_key(ctx, param, value: Optional[str]) -> Optional[str]:
    if not value:
        return value
    try:
        key = bytes.fromhex(value.replace("0x", ""))
    except ValueError:
        raise click.BadParameter("must be a hex string")
    if len(key) != 32:
        raise click.BadParameter(f"must be 32 bytes, got {len(key)}")
    return value


@click.group()
@click.version_option(package_name="dummy-builder")
def cli():
    """Dummy builder - mock block builder for the Ethereum builder API."""
    pass


@cli.command()
@click.option(
    "--beacon-node",
    default="http://localhost:5052",
    help="Beacon node URL to subscribe to payload_attributes events from",
    envvar="DUMMY_BUILDER_BEACON_NODE",
)
@click.option(
    "--address",
    default="127.0.0.1",
    help="Host to bind the builder API",
    envvar="DUMMY_BUILDER_ADDRESS",
)
@click.option(
    "--port",
    default=18550,
    type=int,
    help="Port for the builder API HTTP server",
    envvar="DUMMY_BUILDER_PORT",
)
@click.option(
    "--payload-attributes-cache",
    default=16,
    type=click.IntRange(min=1),
    help="Number of payload attributes events to keep",
    envvar="DUMMY_BUILDER_PAYLOAD_ATTRIBUTES_CACHE",
)
@click.option(
    "--payload-cache",
    default=10,
    type=click.IntRange(min=1),
    help="Number of unrevealed payloads to keep",
    envvar="DUMMY_BUILDER_PAYLOAD_CACHE",
)
@click.option(
    "--payload-body-bytes",
    default=0,
    type=click.IntRange(min=0, max=2**30),
    help="Size of the placeholder transaction in each payload",
    envvar="DUMMY_BUILDER_PAYLOAD_BODY_BYTES",
)
@click.option(
    "--payload-value",
    default=0,
    type=click.IntRange(min=0, max=2**256 - 1),
    help="Bid value in Wei",
    envvar="DUMMY_BUILDER_PAYLOAD_VALUE",
)
@click.option(
    "--network",
    default="mainnet",
    type=click.Choice(["mainnet", "sepolia", "holesky", "hoodi", "minimal"], case_sensitive=False),
    help="Built-in network whose fork schedule and genesis fork version to use",
    envvar="DUMMY_BUILDER_NETWORK",
)
@click.option(
    "--custom-network",
    type=click.Path(exists=True),
    help="Path to network config YAML file (overrides --network)",
    envvar="DUMMY_BUILDER_CUSTOM_NETWORK",
)
@click.option(
    "--secret-key",
    callback=_validate_secret_key,
    help="Builder BLS secret key as hex (random per process if not set)",
    envvar="DUMMY_BUILDER_SECRET_KEY",
)
@click.option(
    "--sse-reconnect/--no-sse-reconnect",
    default=True,
    help="Reconnect to the beacon node event stream when it ends",
    envvar="DUMMY_BUILDER_SSE_RECONNECT",
)
@click.option(
    "--metrics/--no-metrics",
    "metrics_enabled",
    default=True,
    help="Serve Prometheus metrics",
    envvar="DUMMY_BUILDER_METRICS",
)
@click.option(
    "--metrics-port",
    default=8008,
    type=int,
    help="Port for the Prometheus metrics server",
    envvar="DUMMY_BUILDER_METRICS_PORT",
)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
    envvar="DUMMY_BUILDER_LOG_LEVEL",
)
def run(
    beacon_node: str,
    address: str,
    port: int,
    payload_attributes_cache: int,
    payload_cache: int,
    payload_body_bytes: int,
    payload_value: int,
    network: str,
    custom_network: Optional[str],
    secret_key: Optional[str],
    sse_reconnect: bool,
    metrics_enabled: bool,
    metrics_port: int,
    log_level: str,
):
    """Run the builder."""
    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    config = Config(
        beacon_node_url=beacon_node,
        listen_host=address,
        listen_port=port,
        payload_attributes_cache_size=payload_attributes_cache,
        payload_cache_size=payload_cache,
        payload_body_bytes=payload_body_bytes,
        payload_value=payload_value,
        network=network.lower(),
        custom_network_path=custom_network or "",
        secret_key=secret_key or "",
        sse_reconnect=sse_reconnect,
        metrics_enabled=metrics_enabled,
        metrics_port=metrics_port,
        log_level=log_level,
    )

    from .spec.network_config import load_network_config
    from .spec.constants import set_preset

    network_config = load_network_config(config.network, config.custom_network_path)
    set_preset(network_config.preset_base)
    logger.info(f"Preset set to: {network_config.preset_base}")

    from .service import run_service
    from .version import get_version_string

    logger.info(f"Starting {get_version_string()}")
    logger.info(f"  Network: {config.network_name}")
    logger.info(f"  Beacon node: {beacon_node}")
    logger.info(f"  Builder API: {address}:{port}")
    logger.info(f"  Payload value: {payload_value} wei")
    logger.info(f"  Payload body bytes: {payload_body_bytes}")
    logger.info(f"  Caches: attributes={payload_attributes_cache}, payloads={payload_cache}")
    if metrics_enabled:
        logger.info(f"  Metrics: port {metrics_port}")

    try:
        asyncio.run(run_service(config, network_config))
    except KeyboardInterrupt:
        logger.info("Shutting down")
        sys.exit(0)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
