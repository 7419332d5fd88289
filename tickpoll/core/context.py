"""Cancellable execution context passed to every poller capability.

A PollContext is the cooperative shutdown signal for the tick loop and for
anything a poll cycle calls. Cancelling a context cancels all contexts
derived from it; cancelling a derived context leaves its parent alone.

A parent only holds weak references to its children, so a derived context
that is dropped without being cancelled does not stay attached to a
long-lived parent such as the tick loop's context.
"""

import asyncio
import logging
import weakref
from collections.abc import Awaitable
from typing import TypeVar

from .errors import ContextCancelled, DeadlineExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PollContext:
    """Cancellation scope threaded through getters, pushers and error handlers."""

    def __init__(self, parent: "PollContext | None" = None):
        self._parent = parent
        self._children: weakref.WeakSet[PollContext] = weakref.WeakSet()
        self._event = asyncio.Event()
        self._error: ContextCancelled | None = None
        self._deadline_handle: asyncio.TimerHandle | None = None

        if parent is not None:
            if parent.cancelled:
                self._cancel(parent._error)
            else:
                parent._children.add(self)

    @property
    def cancelled(self) -> bool:
        """True once the context (or one of its ancestors) was cancelled."""
        return self._error is not None

    @property
    def error(self) -> ContextCancelled | None:
        """Why the context ended, or None while it is still live."""
        return self._error

    def cancel(self) -> None:
        """Cancel this context and every context derived from it.

        Calling cancel more than once has no further effect.
        """
        self._cancel(ContextCancelled())

    def _cancel(self, error: ContextCancelled | None) -> None:
        if self._error is not None:
            return

        self._error = error or ContextCancelled()
        self._event.set()

        if self._deadline_handle is not None:
            self._deadline_handle.cancel()
            self._deadline_handle = None

        children = list(self._children)
        self._children.clear()
        for child in children:
            child._cancel(self._error)

        if self._parent is not None:
            self._parent._children.discard(self)

    def with_cancel(self) -> "PollContext":
        """Derive a child context that can be cancelled on its own.

        The child is released once the caller drops it; calling ``cancel``
        when done ends it earlier and wakes anything waiting on it.
        """
        return PollContext(parent=self)

    def with_timeout(self, seconds: float) -> "PollContext":
        """Derive a child context that cancels itself after ``seconds``.

        Must be called while an event loop is running.

        Raises:
            ValueError: If seconds is negative.
        """
        if seconds < 0:
            raise ValueError("timeout must be non-negative")

        child = PollContext(parent=self)
        if not child.cancelled:
            loop = asyncio.get_running_loop()
            child._deadline_handle = loop.call_later(
                seconds, child._cancel, DeadlineExceeded()
            )
        return child

    async def wait(self, timeout: float | None = None) -> bool:
        """Suspend until the context is cancelled or ``timeout`` seconds pass.

        Returns:
            True if the context is cancelled when the wait ends.
        """
        if self.cancelled:
            return True

        if timeout is None:
            await self._event.wait()
            return True

        try:
            await asyncio.wait_for(self._event.wait(), timeout=timeout)
        except TimeoutError:
            pass
        return self.cancelled

    async def run(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the context is cancelled first.

        If cancellation wins the race, the awaitable is cancelled and the
        context's error is raised.

        Raises:
            ContextCancelled: If the context is (or becomes) cancelled before
                the awaitable completes.
        """
        if self._error is not None:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise self._error

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())

        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            waiter.cancel()

        if task.done():
            return task.result()

        logger.debug("Context cancelled while awaiting, cancelling operation")
        task.cancel()
        await asyncio.wait({task})
        raise self._error or ContextCancelled()
