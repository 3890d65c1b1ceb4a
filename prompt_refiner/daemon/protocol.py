"""Plain-text protocol for daemon IPC.

One request per connection, framed by half-close:

    client -> server:  <trimmed prompt, UTF-8>  then EOF
    server -> client:  <refined text>           then close
                   or  "ERROR: <message>"       then close

There is no length prefix and no multiplexing. Errors cross the socket as
text and are turned back into a RefinerError by the client.
"""

from typing import Optional

from ..errors import RefineErrorCode, RefinerError

ERROR_PREFIX = 'ERROR:'
NO_PROMPT_MESSAGE = 'no prompt provided'
ENCODING = 'utf-8'


def encode_request(prompt: str) -> bytes:
    return prompt.encode(ENCODING)


def decode_request(data: bytes) -> str:
    """Decode request bytes into a trimmed prompt (may be empty)."""
    return data.decode(ENCODING, errors='replace').strip()


def encode_result(result: str) -> bytes:
    return result.encode(ENCODING)


def encode_error(message: Optional[str]) -> bytes:
    """Serialize an error message, e.g. ``ERROR: no prompt provided``."""
    return f"{ERROR_PREFIX} {message or 'Unknown error'}".encode(ENCODING)


def decode_response(data: bytes) -> str:
    """
    Decode a daemon response payload.

    Returns:
        The refined text, verbatim

    Raises:
        RefinerError: DAEMON_ERROR if the payload carries the error prefix
    """
    text = data.decode(ENCODING, errors='replace')
    if text.startswith(ERROR_PREFIX):
        raise RefinerError(text[len(ERROR_PREFIX):].strip(), RefineErrorCode.DAEMON_ERROR)
    return text
