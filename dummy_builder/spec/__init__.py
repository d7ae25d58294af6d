"""Consensus spec subset needed by the builder API.

Note: The 'types' module must be imported after calling constants.set_preset()
to ensure SSZ types have correct sizes for the chosen preset.
"""

from . import constants
from .network_config import NetworkConfig, load_network_config

__all__ = ["constants", "NetworkConfig", "load_network_config"]
