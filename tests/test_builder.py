"""Tests for the bid and reveal round trip."""

import asyncio

import pytest

from conftest import PARENT_HASH, make_event
from dummy_builder.crypto import hash_tree_root
from dummy_builder.exceptions import UnbindPayloadError


def test_reveal_returns_committed_payload_once(make_builder):
    async def run():
        builder, attributes_cache, payload_vault = make_builder(payload_body_bytes=16)
        event = make_event(version="capella", slot=300)
        await attributes_cache.put(event.key, event)

        bid = await builder.get_header(300, PARENT_HASH)
        header = bid.data.message.header

        revealed = await builder.submit_blinded_block("capella", header)
        assert revealed.version == "capella"
        assert hash_tree_root(revealed.data.execution_payload) == hash_tree_root(header)
        assert bytes(revealed.data.execution_payload.transactions[0]) == b"\x00" * 16

        with pytest.raises(UnbindPayloadError) as exc_info:
            await builder.submit_blinded_block("capella", header)
        assert exc_info.value.root == hash_tree_root(header)
        assert len(payload_vault) == 0

    asyncio.run(run())


def test_repeated_bids_share_one_payload(make_builder):
    async def run():
        builder, attributes_cache, payload_vault = make_builder()
        event = make_event(version="bellatrix", slot=300)
        await attributes_cache.put(event.key, event)

        first = await builder.get_header(300, PARENT_HASH)
        second = await builder.get_header(300, PARENT_HASH)

        # Same attributes give the same payload, so the second bid replaces the entry.
        assert hash_tree_root(first.data.message.header) == hash_tree_root(second.data.message.header)
        assert len(payload_vault) == 1

    asyncio.run(run())


def test_evicted_payload_cannot_be_revealed(make_builder):
    async def run():
        builder, attributes_cache, _ = make_builder(payload_capacity=1)
        first_event = make_event(version="bellatrix", slot=300, timestamp=1_700_000_000)
        second_event = make_event(version="bellatrix", slot=301, timestamp=1_700_000_012)
        await attributes_cache.put(first_event.key, first_event)
        await attributes_cache.put(second_event.key, second_event)

        first = await builder.get_header(300, PARENT_HASH)
        second = await builder.get_header(301, PARENT_HASH)

        with pytest.raises(UnbindPayloadError):
            await builder.submit_blinded_block("bellatrix", first.data.message.header)
        revealed = await builder.submit_blinded_block("bellatrix", second.data.message.header)
        assert int(revealed.data.execution_payload.timestamp) == 1_700_000_012

    asyncio.run(run())


def test_deneb_reveal_includes_blobs_bundle(make_builder):
    async def run():
        builder, attributes_cache, _ = make_builder()
        event = make_event(version="deneb", slot=300)
        await attributes_cache.put(event.key, event)

        bid = await builder.get_header(300, PARENT_HASH)
        revealed = await builder.submit_blinded_block("deneb", bid.data.message.header)

        assert revealed.version == "deneb"
        assert revealed.data.blobs_bundle is not None
        assert len(revealed.data.blobs_bundle.blobs) == 0

    asyncio.run(run())


def test_fork_for_slot(make_builder):
    builder, _, _ = make_builder()

    assert builder.fork_for_slot(144896 * 32) == "bellatrix"
    assert builder.fork_for_slot(194048 * 32 - 1) == "bellatrix"
    assert builder.fork_for_slot(269568 * 32) == "deneb"
