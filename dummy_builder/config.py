"""Configuration for the dummy builder."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Builder configuration."""

    beacon_node_url: str = "http://localhost:5052"
    listen_host: str = "127.0.0.1"
    listen_port: int = 18550
    payload_attributes_cache_size: int = 16
    payload_cache_size: int = 10
    payload_body_bytes: int = 0
    payload_value: int = 0
    network: str = "mainnet"
    custom_network_path: str = ""
    secret_key: str = ""
    sse_reconnect: bool = True
    metrics_enabled: bool = True
    metrics_port: int = 8008
    log_level: str = "INFO"

    @property
    def secret_key_int(self) -> Optional[int]:
        """Secret key as an integer, or None to generate one."""
        if not self.secret_key:
            return None
        return int.from_bytes(bytes.fromhex(self.secret_key.replace("0x", "")), "big")

    @property
    def network_name(self) -> str:
        return self.custom_network_path or self.network
