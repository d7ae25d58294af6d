"""Payload attributes subscription against an upstream beacon node."""

import asyncio
import json
import logging
from typing import Optional

import aiohttp

from ..builder.attributes import AttributesCache, PayloadAttributesEvent
from .. import metrics

logger = logging.getLogger(__name__)

PAYLOAD_ATTRIBUTES_TOPIC = "payload_attributes"


class PayloadAttributesListener:
    """Feeds `payload_attributes` events from a beacon node into the attributes cache."""

    def __init__(
        self,
        beacon_node_url: str,
        cache: AttributesCache,
        reconnect: bool = True,
    ):
        self.base_url = beacon_node_url.rstrip("/")
        self.cache = cache
        self.reconnect = reconnect
        self._session: Optional[aiohttp.ClientSession] = None
        self._task: Optional[asyncio.Task] = None
        self._running = False
        self._reconnect_delay = 1.0
        self._max_reconnect_delay = 30.0

    @property
    def url(self) -> str:
        return f"{self.base_url}/eth/v1/events?topics={PAYLOAD_ATTRIBUTES_TOPIC}"

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def start(self) -> None:
        """Spawn the subscription loop as a background task."""
        self._running = True
        self._task = asyncio.create_task(self.listen())

    async def stop(self) -> None:
        """Cancel the subscription and close the HTTP session."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def listen(self) -> None:
        """Consume the event stream until stopped.

        With reconnect disabled this returns as soon as the first connection
        ends, whatever the cause.
        """
        self._running = True

        while self._running:
            try:
                await self._consume_stream()
                logger.warning("Event stream closed by beacon node")
            except asyncio.CancelledError:
                raise
            except aiohttp.ClientError as e:
                logger.error(f"Event stream connection error: {e}")
            except Exception as e:
                logger.error(f"Unexpected event stream error: {e}")

            if not self._running or not self.reconnect:
                break

            await asyncio.sleep(self._reconnect_delay)
            self._reconnect_delay = min(
                self._reconnect_delay * 2,
                self._max_reconnect_delay,
            )
            metrics.record_event_stream_reconnect()

        self._running = False
        logger.info("Payload attributes listener stopped")

    async def _consume_stream(self) -> None:
        session = await self._ensure_session()
        logger.info(f"Connecting to event stream: {self.url}")

        async with session.get(
            self.url,
            headers={"Accept": "text/event-stream"},
            timeout=aiohttp.ClientTimeout(total=None, sock_read=None),
        ) as response:
            if response.status != 200:
                text = await response.text()
                raise aiohttp.ClientResponseError(
                    response.request_info,
                    response.history,
                    status=response.status,
                    message=text[:200],
                )

            self._reconnect_delay = 1.0
            logger.info("Event stream connection established")

            event_type = None
            data_lines: list[str] = []

            async for raw_line in response.content:
                if not self._running:
                    break

                line = raw_line.decode("utf-8").rstrip("\r\n")

                if not line:
                    if data_lines:
                        await self.handle_event(event_type or "message", "\n".join(data_lines))
                    event_type = None
                    data_lines = []
                    continue

                if line.startswith(":"):
                    continue

                field, _, value = line.partition(":")
                if value.startswith(" "):
                    value = value[1:]

                if field == "event":
                    event_type = value
                elif field == "data":
                    data_lines.append(value)

    async def handle_event(self, event_type: str, event_data: str) -> Optional[PayloadAttributesEvent]:
        """Cache one event from the stream.

        Returns the parsed event, or None when it was skipped.
        """
        if event_type != PAYLOAD_ATTRIBUTES_TOPIC:
            logger.debug(f"Ignoring {event_type} event")
            return None

        try:
            event = PayloadAttributesEvent.from_dict(json.loads(event_data))
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"Skipping malformed payload_attributes event: {e}")
            metrics.record_payload_attributes_rejected()
            return None

        await self.cache.put(event.key, event)
        metrics.record_payload_attributes(event.version, len(self.cache))
        logger.debug(
            f"Cached payload attributes: slot={event.proposal_slot}, "
            f"parent=0x{event.parent_block_hash.hex()[:16]}, version={event.version}"
        )
        return event
