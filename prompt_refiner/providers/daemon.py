"""Daemon provider: hands the prompt to a local daemon over a Unix socket."""

import asyncio
import logging
from typing import Optional

from ..daemon.protocol import decode_response, encode_request
from ..deadline import Aborted, run_with_deadline
from ..errors import RefineErrorCode, RefinerError
from .base import BaseProvider

logger = logging.getLogger(__name__)


class DaemonProvider(BaseProvider):
    """Provider backed by a running prompt-refiner daemon"""

    def __init__(self, socket_path: str, timeout_ms: int):
        self.socket_path = socket_path
        self.timeout_ms = timeout_ms

    @property
    def name(self) -> str:
        return 'daemon'

    async def refine(self, prompt: str, cancel_event: Optional[asyncio.Event] = None) -> str:
        """Send the prompt to the daemon and wait for the full reply."""
        try:
            return await run_with_deadline(self._exchange(prompt), self.timeout_ms, cancel_event)
        except Aborted as e:
            message = "Daemon request cancelled" if e.cancelled else "Daemon request timed out"
            raise RefinerError(message, RefineErrorCode.TIMEOUT, e) from e

    async def _exchange(self, prompt: str) -> str:
        try:
            reader, writer = await asyncio.open_unix_connection(self.socket_path)
        except OSError as e:
            raise RefinerError(
                f"Daemon connection error: {e}", RefineErrorCode.DAEMON_ERROR, e
            ) from e

        try:
            writer.write(encode_request(prompt))
            await writer.drain()
            # Half-close marks the end of the request
            writer.write_eof()
            data = await reader.read()
        except OSError as e:
            raise RefinerError(
                f"Daemon connection error: {e}", RefineErrorCode.DAEMON_ERROR, e
            ) from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug("Error closing daemon connection: %s", e)

        return decode_response(data)


async def send_to_daemon(
    prompt: str,
    socket_path: str,
    timeout_ms: int,
    cancel_event: Optional[asyncio.Event] = None
) -> str:
    """Send a prompt to the daemon and return the refined result."""
    return await DaemonProvider(socket_path, timeout_ms).refine(prompt, cancel_event=cancel_event)
