"""
Cooperative cancellation for a measurement run.

The controller runs each phase as its own task and attaches it to the
token.  ``cancel()`` flags the token and cancels the attached task, which
aborts any in-flight aiohttp request (the response context manager closes
the connection) and interrupts simulator ticks mid-sleep.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from .exceptions import TestCancelledError

T = TypeVar("T")


class CancelToken:
    """Cancellation handle shared between a caller and a running test."""

    def __init__(self) -> None:
        self._cancelled = False
        self._task: Optional[asyncio.Future] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation; safe to call more than once or from a loop callback."""
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise TestCancelledError("Measurement cancelled")

    async def run(self, aw: Awaitable[T]) -> T:
        """
        Await *aw* as a cancellable unit of work.

        Raises ``TestCancelledError`` if the token fires before or during
        the await.  A cancellation of the *caller* (not via the token)
        propagates as a plain ``asyncio.CancelledError``.
        """
        if self._cancelled:
            if asyncio.iscoroutine(aw):
                aw.close()
            raise TestCancelledError("Measurement cancelled")

        task = asyncio.ensure_future(aw)
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._cancelled and task.cancelled():
                raise TestCancelledError("Measurement cancelled") from None
            raise
        finally:
            self._task = None
