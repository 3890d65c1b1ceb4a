"""Retry helpers with exponential backoff and jitter."""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

T = TypeVar('T')

logger = logging.getLogger(__name__)

DEFAULT_MAX_RETRIES = 3
DEFAULT_BASE_DELAY_MS = 500
DEFAULT_MAX_JITTER_MS = 300


def calculate_backoff_delay(
    attempt: int,
    base_delay_ms: int,
    max_jitter_ms: int = DEFAULT_MAX_JITTER_MS,
    rng: Callable[[], float] = random.random
) -> int:
    """Return the delay in milliseconds before retry number ``attempt``.

    Args:
        attempt: Zero-based attempt index
        base_delay_ms: Delay for the first retry
        max_jitter_ms: Upper bound of the random jitter added on top
        rng: Source of floats in [0, 1)

    Returns:
        ``base_delay_ms * 2**attempt`` plus rounded jitter
    """
    if attempt < 0:
        raise ValueError("attempt must be non-negative")
    exponential = base_delay_ms * (2 ** attempt)
    jitter = round(rng() * max_jitter_ms)
    return int(exponential + jitter)


async def sleep(ms: float) -> None:
    """Sleep for ``ms`` milliseconds."""
    await asyncio.sleep(ms / 1000)


async def with_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay_ms: int = DEFAULT_BASE_DELAY_MS,
    max_jitter_ms: int = DEFAULT_MAX_JITTER_MS,
    should_retry: Optional[Callable[[BaseException, int], bool]] = None
) -> T:
    """Await ``fn`` until it succeeds or the retry budget is spent.

    ``should_retry`` receives the error and the attempt index; returning
    False re-raises immediately.
    """
    for attempt in range(max_retries + 1):
        try:
            return await fn()
        except Exception as e:
            if should_retry is not None and not should_retry(e, attempt):
                raise
            if attempt == max_retries:
                raise
            delay = calculate_backoff_delay(attempt, base_delay_ms, max_jitter_ms)
            logger.debug("Attempt %d failed (%s), retrying in %dms", attempt + 1, e, delay)
            await sleep(delay)

    raise RuntimeError("unreachable")  # pragma: no cover
