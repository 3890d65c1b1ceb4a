"""Run a coroutine under a timeout and an optional caller-owned cancel event."""

import asyncio
from typing import Awaitable, Optional, TypeVar

T = TypeVar('T')


class Aborted(Exception):
    """The awaited operation was cut short by its deadline or by the caller."""

    def __init__(self, message: str, cancelled: bool = False):
        super().__init__(message)
        self.cancelled = cancelled


async def run_with_deadline(
    aw: Awaitable[T],
    timeout_ms: float,
    cancel_event: Optional[asyncio.Event] = None
) -> T:
    """
    Await ``aw`` for at most ``timeout_ms`` milliseconds.

    Whichever fires first of the timeout and ``cancel_event`` cancels the
    in-flight task and raises Aborted. Exceptions from ``aw`` propagate.
    """
    task = asyncio.ensure_future(aw)
    waiters = {task}
    cancelled = None
    if cancel_event is not None:
        cancelled = asyncio.ensure_future(cancel_event.wait())
        waiters.add(cancelled)

    try:
        done, pending = await asyncio.wait(
            waiters,
            timeout=timeout_ms / 1000,
            return_when=asyncio.FIRST_COMPLETED,
        )
    except asyncio.CancelledError:
        for waiter in waiters:
            waiter.cancel()
        raise

    for waiter in pending:
        waiter.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)

    if task in done:
        return task.result()

    if cancelled is not None and cancelled in done:
        raise Aborted("Request cancelled", cancelled=True)
    raise Aborted("Request timed out")
