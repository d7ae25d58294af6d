"""Payloads committed to by issued bids, revealed at most once."""

import asyncio
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Optional

from ..crypto import hash_tree_root

logger = logging.getLogger(__name__)

DEFAULT_PAYLOAD_CACHE_SIZE = 10


@dataclass(frozen=True)
class FullPayloadContents:
    """A full execution payload plus the blobs bundle for forks that carry one."""

    fork: str
    execution_payload: Any
    blobs_bundle: Optional[Any] = None

    @property
    def root(self) -> bytes:
        return hash_tree_root(self.execution_payload)


class PayloadVault:
    """Bounded LRU map from payload hash tree root to full payload contents.

    There is no non-destructive read: `pop` is the only way to get a payload
    back out, so each committed payload is revealed at most once.
    """

    def __init__(self, capacity: int = DEFAULT_PAYLOAD_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._payloads: OrderedDict[bytes, FullPayloadContents] = OrderedDict()
        self._lock = asyncio.Lock()

    async def put(self, contents: FullPayloadContents) -> Optional[FullPayloadContents]:
        """Commit a payload under its root; returns the entry it replaced, if any."""
        root = contents.root
        async with self._lock:
            previous = self._payloads.pop(root, None)
            if previous is None and len(self._payloads) >= self.capacity:
                evicted, _ = self._payloads.popitem(last=False)
                logger.debug(f"Evicted unrevealed payload 0x{evicted.hex()}")
            self._payloads[root] = contents
            return previous

    async def pop(self, root: bytes) -> Optional[FullPayloadContents]:
        """Remove and return the payload committed under root."""
        async with self._lock:
            return self._payloads.pop(root, None)

    def __len__(self) -> int:
        return len(self._payloads)
