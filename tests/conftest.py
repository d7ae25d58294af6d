"""Pytest configuration for builder tests."""

import sys

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--preset",
        action="store",
        default="mainnet",
        choices=["minimal", "mainnet"],
        help="Preset to use for tests (minimal or mainnet)",
    )


def pytest_configure(config):
    """Set preset BEFORE any type modules are imported during collection.

    SSZ list limits such as MAX_WITHDRAWALS_PER_PAYLOAD() are evaluated at
    class definition time.
    """
    preset = config.getoption("--preset", default="mainnet")

    for mod in list(sys.modules):
        if mod.startswith("dummy_builder.spec.types"):
            del sys.modules[mod]

    from dummy_builder.spec.constants import set_preset
    set_preset(preset)


# Fixed key so bids are reproducible.
BUILDER_PRIVKEY = int("2a" * 32, 16)

PARENT_HASH = bytes.fromhex("11" * 32)
PARENT_ROOT = bytes.fromhex("22" * 32)
PREV_RANDAO = bytes.fromhex("33" * 32)
FEE_RECIPIENT = bytes.fromhex("44" * 20)


def make_event_dict(
    version="capella",
    slot=100,
    parent_hash=PARENT_HASH,
    parent_block_number=41,
    timestamp=1_700_000_000,
    withdrawals=(),
    include_withdrawals=True,
) -> dict:
    """Build a payload_attributes event as the beacon node serializes it."""
    attributes = {
        "timestamp": str(timestamp),
        "prev_randao": "0x" + PREV_RANDAO.hex(),
        "suggested_fee_recipient": "0x" + FEE_RECIPIENT.hex(),
    }
    if include_withdrawals:
        attributes["withdrawals"] = [
            {
                "index": str(index),
                "validator_index": str(validator_index),
                "address": "0x" + address.hex(),
                "amount": str(amount),
            }
            for index, validator_index, address, amount in withdrawals
        ]
    if version == "deneb":
        attributes["parent_beacon_block_root"] = "0x" + PARENT_ROOT.hex()

    event = {
        "data": {
            "proposer_index": "7",
            "proposal_slot": str(slot),
            "parent_block_number": str(parent_block_number),
            "parent_block_root": "0x" + PARENT_ROOT.hex(),
            "parent_block_hash": "0x" + parent_hash.hex(),
            "payload_attributes": attributes,
        }
    }
    if version is not None:
        event["version"] = version
    return event


def make_event(**kwargs):
    from dummy_builder.builder import PayloadAttributesEvent

    return PayloadAttributesEvent.from_dict(make_event_dict(**kwargs))


@pytest.fixture
def mainnet_config():
    from dummy_builder.spec.network_config import NetworkConfig

    return NetworkConfig.for_network("mainnet")


@pytest.fixture
def make_builder(mainnet_config):
    """Factory for a (builder, attributes cache, payload vault) triple."""
    from dummy_builder.builder import AttributesCache, BidFactory, Builder, PayloadVault

    def _make(payload_value=0, payload_body_bytes=0, attributes_capacity=16, payload_capacity=10):
        attributes_cache = AttributesCache(attributes_capacity)
        payload_vault = PayloadVault(payload_capacity)
        factory = BidFactory(
            BUILDER_PRIVKEY,
            mainnet_config,
            attributes_cache,
            payload_vault,
            payload_value=payload_value,
            payload_body_bytes=payload_body_bytes,
        )
        return Builder(factory, payload_vault, mainnet_config), attributes_cache, payload_vault

    return _make
