"""Error types for prompt-refiner."""

from enum import Enum
from typing import Optional


class RefineErrorCode(str, Enum):
    EMPTY_PROMPT = 'EMPTY_PROMPT'
    TIMEOUT = 'TIMEOUT'
    RATE_LIMITED = 'RATE_LIMITED'
    WEBHOOK_ERROR = 'WEBHOOK_ERROR'
    INVALID_RESPONSE = 'INVALID_RESPONSE'
    EMPTY_RESPONSE = 'EMPTY_RESPONSE'
    NETWORK_ERROR = 'NETWORK_ERROR'
    DAEMON_ERROR = 'DAEMON_ERROR'


class RefinerError(Exception):
    """Raised for every failure of a refinement request.

    Args:
        message: Human readable description
        code: The kind of failure
        cause: Underlying exception, if any
    """

    def __init__(self, message: str, code: RefineErrorCode, cause: Optional[BaseException] = None):
        super().__init__(message)
        self._message = message
        self._code = RefineErrorCode(code)
        self._cause = cause

    @property
    def message(self) -> str:
        return self._message

    @property
    def code(self) -> RefineErrorCode:
        return self._code

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    def __repr__(self) -> str:
        return f"RefinerError({self._message!r}, {self._code.value})"
