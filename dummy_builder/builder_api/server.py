"""Builder API HTTP server."""

import logging
from typing import Optional
from aiohttp import web

from .utils import (
    header_from_json,
    payload_contents_to_json,
    payload_contents_to_ssz,
    signed_bid_to_json,
)
from ..builder import Builder
from ..exceptions import (
    BuilderError,
    InvalidRequestError,
    LogicError,
    NoPayloadError,
    UnbindPayloadError,
)
from ..spec.constants import SUPPORTED_FORKS
from ..utils import parse_hex, parse_uint
from .. import metrics

logger = logging.getLogger(__name__)

DEFAULT_BUILDER_API_PORT = 18550


def _error_response(status: int, message: str) -> web.Response:
    return web.json_response({"code": status, "message": message}, status=status)


def _wants_ssz(request: web.Request) -> bool:
    return "application/octet-stream" in request.headers.get("Accept", "application/json")


class BuilderAPI:
    """Builder API server (the relay side of the proposer-builder split)."""

    def __init__(self, builder: Builder, host: str = "127.0.0.1", port: int = DEFAULT_BUILDER_API_PORT):
        self.builder = builder
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._setup_routes()

    def _setup_routes(self):
        """Set up API routes."""
        self.app.router.add_post("/eth/v1/builder/validators", self.register_validators)
        self.app.router.add_get("/eth/v1/builder/header/{slot}/{parent_hash}/{pubkey}", self.get_header)
        self.app.router.add_post("/eth/v1/builder/blinded_blocks", self.submit_blinded_block)
        self.app.router.add_get("/eth/v1/builder/status", self.get_status)

    async def start(self):
        """Start the API server."""
        self.runner = web.AppRunner(self.app)
        await self.runner.setup()
        site = web.TCPSite(self.runner, self.host, self.port)
        await site.start()
        logger.info(f"Builder API listening on {self.host}:{self.port}")

    async def stop(self):
        """Stop the API server."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None

    async def register_validators(self, request: web.Request) -> web.Response:
        """POST /eth/v1/builder/validators

        Registrations are accepted and discarded.
        """
        metrics.record_builder_api_request("register_validators", 200)
        return web.Response(status=200)

    async def get_status(self, request: web.Request) -> web.Response:
        """GET /eth/v1/builder/status"""
        metrics.record_builder_api_request("status", 200)
        return web.Response(status=200)

    async def get_header(self, request: web.Request) -> web.Response:
        """GET /eth/v1/builder/header/{slot}/{parent_hash}/{pubkey}"""
        response = await self._get_header(request)
        metrics.record_builder_api_request("get_header", response.status)
        return response

    async def _get_header(self, request: web.Request) -> web.Response:
        try:
            slot = parse_uint(request.match_info["slot"])
            parent_hash = parse_hex(request.match_info["parent_hash"], 32)
            parse_hex(request.match_info["pubkey"], 48)
        except (ValueError, TypeError) as e:
            return _error_response(400, f"Invalid request parameters: {e}")

        try:
            result = await self.builder.get_header(slot, parent_hash)
        except NoPayloadError as e:
            logger.debug(f"No bid for slot {slot}: {e.message}")
            metrics.record_no_payload()
            return web.Response(status=204)
        except LogicError as e:
            logger.warning(f"Bid for slot {slot} failed: {e.message}")
            return _error_response(500, e.message)
        except BuilderError as e:
            logger.warning(f"Bid for slot {slot} failed: {e}")
            return _error_response(500, str(e))

        if _wants_ssz(request):
            return web.Response(
                body=result.data.encode_bytes(),
                content_type="application/octet-stream",
                headers={"Eth-Consensus-Version": result.version},
            )

        return web.json_response(
            {
                "version": result.version,
                "data": signed_bid_to_json(result.data),
            },
            headers={"Eth-Consensus-Version": result.version},
        )

    async def submit_blinded_block(self, request: web.Request) -> web.Response:
        """POST /eth/v1/builder/blinded_blocks"""
        response = await self._submit_blinded_block(request)
        metrics.record_builder_api_request("submit_blinded_block", response.status)
        return response

    async def _submit_blinded_block(self, request: web.Request) -> web.Response:
        try:
            body = await request.json()
            fork, header = self._decode_blinded_block(
                body, request.headers.get("Eth-Consensus-Version")
            )
        except InvalidRequestError as e:
            return _error_response(400, e.message)
        except ValueError as e:
            # Covers both JSON and UTF-8 decode errors.
            return _error_response(400, f"Invalid JSON body: {e}")

        try:
            result = await self.builder.submit_blinded_block(fork, header)
        except UnbindPayloadError as e:
            logger.warning(f"Unblinding failed: {e}")
            return _error_response(500, str(e))
        except BuilderError as e:
            logger.warning(f"Unblinding failed: {e}")
            return _error_response(500, str(e))

        if _wants_ssz(request):
            return web.Response(
                body=payload_contents_to_ssz(result.data),
                content_type="application/octet-stream",
                headers={"Eth-Consensus-Version": result.version},
            )

        return web.json_response(
            {
                "version": result.version,
                "data": payload_contents_to_json(result.data),
            },
            headers={"Eth-Consensus-Version": result.version},
        )

    def _decode_blinded_block(self, body, version_header: Optional[str]):
        """Extract the fork and execution payload header from a signed blinded block.

        Only the fields needed to find the committed payload are decoded.
        """
        try:
            if "signed_blinded_block" in body:
                body = body["signed_blinded_block"]
            block = body["message"]
            if version_header:
                fork = version_header.lower()
            else:
                fork = self.builder.fork_for_slot(parse_uint(block["slot"]))
            if fork not in SUPPORTED_FORKS:
                raise InvalidRequestError(f"Unsupported fork: {fork}")
            header = header_from_json(fork, block["body"]["execution_payload_header"])
        except (KeyError, ValueError, TypeError) as e:
            raise InvalidRequestError(f"Invalid signed blinded block: {e}") from e
        return fork, header
