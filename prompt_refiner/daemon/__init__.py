"""Daemon for prompt-refiner.

A long-running local process that fronts the refinement webhook with an
in-memory cache, answering repeated prompts without a network round trip.

- DaemonServer: Async Unix socket server handling one request per connection
- protocol: Plain-text framing shared with the daemon provider
"""

from prompt_refiner.daemon.protocol import (
    ERROR_PREFIX,
    decode_request,
    decode_response,
    encode_error,
    encode_request,
    encode_result,
)
from prompt_refiner.daemon.server import DaemonServer, run_daemon

__all__ = [
    "DaemonServer",
    "run_daemon",
    "ERROR_PREFIX",
    "decode_request",
    "decode_response",
    "encode_error",
    "encode_request",
    "encode_result",
]
