"""Capability types and port interfaces for the tickpoll engine.

The engine itself only needs three capabilities:

1. **Getter**: retrieves the polled value, raising on failure.
2. **Pusher**: consumes the retrieved value, raising on failure.
3. **OnError**: receives every failure raised by the other two.

Getters and pushers may be coroutine functions or plain functions; an
awaitable result is awaited by the poll cycle. Error handlers are plain
functions.

Adapters that talk to external systems implement the SourcePort and
SinkPort abstract base classes below. Instances are callable, so they can
be handed to ``new`` and ``set_pusher`` directly.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Generic, TypeAlias, TypeVar

from .context import PollContext

T = TypeVar("T")

Getter: TypeAlias = Callable[[PollContext], T | Awaitable[T]]
Pusher: TypeAlias = Callable[[PollContext, T], Awaitable[None] | None]
OnError: TypeAlias = Callable[[PollContext, BaseException], None]


class SourcePort(ABC, Generic[T]):
    """Port for retrieving the value a poll cycle distributes.

    Implementations should honour the context they receive, either by
    checking ``ctx.cancelled`` or by awaiting I/O through ``ctx.run``.
    """

    @abstractmethod
    async def fetch(self, ctx: PollContext) -> T:
        """Retrieve one value.

        Args:
            ctx: Execution context of the current poll cycle.

        Returns:
            The retrieved payload. The engine does not inspect it.

        Raises:
            Exception: Any failure; the poll cycle routes it to the
                poller's error handler and skips all pushers.
        """

    async def __call__(self, ctx: PollContext) -> T:
        return await self.fetch(ctx)


class SinkPort(ABC, Generic[T]):
    """Port for consuming a retrieved value.

    The value is shared with every other sink of the same cycle and must be
    treated as read-only.
    """

    @abstractmethod
    async def push(self, ctx: PollContext, value: T) -> None:
        """Consume one retrieved value.

        Args:
            ctx: Execution context of the current poll cycle.
            value: Payload returned by the getter.

        Raises:
            Exception: Any failure; it is reported to the poller's error
                handler and the remaining sinks still run.
        """

    async def __call__(self, ctx: PollContext, value: T) -> None:
        await self.push(ctx, value)
