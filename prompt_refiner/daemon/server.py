"""Async Unix socket server for the prompt-refiner daemon.

The daemon keeps one HTTP client and an in-memory LRU cache alive between
requests, so repeated prompts are answered without a webhook round trip.

Usage:
    prompt-refiner daemon [--socket PATH]
"""

import asyncio
import logging
import os
import signal
import time
from pathlib import Path
from typing import Awaitable, Callable, Optional

import httpx

from ..cache import LRUCache
from ..config import DaemonConfig, RefinerConfig
from ..providers.webhook import WebhookProvider
from .protocol import (
    NO_PROMPT_MESSAGE,
    decode_request,
    encode_error,
    encode_result,
)

logger = logging.getLogger(__name__)

RefineFn = Callable[[str], Awaitable[str]]


class DaemonServer:
    """
    Async Unix socket server for the daemon.

    Handles concurrent client connections on one event loop; each connection
    carries exactly one request. The cache is shared across connections.
    """

    def __init__(
        self,
        config: DaemonConfig,
        refiner_config: RefinerConfig,
        send: Optional[RefineFn] = None,
    ):
        """
        Initialize daemon server.

        Args:
            config: Socket path and cache settings
            refiner_config: Webhook settings used on cache misses
            send: Coroutine function used to refine a prompt; defaults to the
                webhook provider with a client shared for the daemon lifetime
        """
        self.config = config
        self.refiner_config = refiner_config
        self.socket_path = Path(config.socket_path)
        self.cache: LRUCache[str] = LRUCache(
            ttl_ms=config.cache_ttl_ms,
            max_entries=config.cache_max_entries,
        )

        self._send = send
        self._http_client: Optional[httpx.AsyncClient] = None
        self._server: Optional[asyncio.AbstractServer] = None
        self._shutdown_event: Optional[asyncio.Event] = None

    @property
    def is_running(self) -> bool:
        return self._server is not None

    async def start(self) -> None:
        """Bind the socket and begin accepting connections."""
        if self._server is not None:
            logger.warning("Daemon server is already running")
            return

        # Clean up stale socket
        if self.socket_path.exists() or self.socket_path.is_symlink():
            self.socket_path.unlink()
        self.socket_path.parent.mkdir(parents=True, exist_ok=True)

        if self._send is None:
            self._http_client = httpx.AsyncClient(timeout=None)
            provider = WebhookProvider(self.refiner_config, client=self._http_client)
            self._send = provider.refine

        self._shutdown_event = asyncio.Event()
        self._server = await asyncio.start_unix_server(
            self._handle_client,
            path=str(self.socket_path),
        )

        # Set socket permissions (owner only)
        os.chmod(self.socket_path, 0o600)

        logger.info("Daemon listening on %s", self.socket_path)

    async def stop(self) -> None:
        """Close the listener and remove the socket file."""
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None

        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
            self._send = None

        if self.socket_path.exists():
            self.socket_path.unlink()

        logger.info("Daemon stopped")

    def request_shutdown(self) -> None:
        """Ask serve_forever to stop; safe to call from a signal handler."""
        logger.info("Received shutdown signal")
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    async def serve_forever(self, install_signal_handlers: bool = True) -> None:
        """Start, serve until shutdown is requested, then clean up."""
        await self.start()

        if install_signal_handlers:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(sig, self.request_shutdown)

        try:
            await self._shutdown_event.wait()
        finally:
            await self.stop()

    async def handle_prompt(self, prompt: str) -> bytes:
        """Produce the response payload for one trimmed prompt."""
        if not prompt:
            return encode_error(NO_PROMPT_MESSAGE)

        start = time.monotonic()

        cached = self.cache.get(prompt)
        if cached is not None:
            logger.info("Cache hit (%.0fms)", (time.monotonic() - start) * 1000)
            return encode_result(cached)

        try:
            refined = await self._send(prompt)
        except Exception as e:
            logger.error(
                "Refinement failed (%.0fms): %s", (time.monotonic() - start) * 1000, e
            )
            return encode_error(str(e))

        self.cache.set(prompt, refined)
        logger.info("Refined prompt (%.0fms)", (time.monotonic() - start) * 1000)
        return encode_result(refined)

    async def _handle_client(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        """Handle a single client connection."""
        try:
            # Read until the client half-closes
            data = await reader.read()
            response = await self.handle_prompt(decode_request(data))
            writer.write(response)
            await writer.drain()
        except ConnectionError as e:
            logger.warning("Client disconnected early: %s", e)
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except ConnectionError as e:
                logger.debug("Error closing client connection: %s", e)


def run_daemon(config: DaemonConfig, refiner_config: RefinerConfig) -> None:
    """
    Run the daemon in the foreground until SIGINT/SIGTERM.

    Args:
        config: Socket path and cache settings
        refiner_config: Webhook settings used on cache misses
    """
    server = DaemonServer(config, refiner_config)
    asyncio.run(server.serve_forever())
