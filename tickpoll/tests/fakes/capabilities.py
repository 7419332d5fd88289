"""Fake getter, pusher and error handler implementations for testing."""

import asyncio
from typing import Any

from tickpoll.core.context import PollContext
from tickpoll.core.ports import SinkPort, SourcePort


class FakeSource(SourcePort[Any]):
    """In-memory source for testing.

    Returns queued values first, then the default value.
    """

    def __init__(self, default: Any = None, delay: float = 0.0, held: bool = False):
        """Initialize with a default value and an optional artificial delay.

        A held source blocks every fetch until ``release`` is called.
        """
        self.default = default
        self.delay = delay
        self._released = asyncio.Event()
        if not held:
            self._released.set()
        self.values: list[Any] = []
        self.fetch_call_count = 0
        self.contexts: list[PollContext] = []
        self.should_fail: bool = False
        self.fail_error: Exception = RuntimeError("Fetch failed")

    def add_value(self, value: Any) -> None:
        """Queue a value to be returned on next call."""
        self.values.append(value)

    def set_should_fail(self, should_fail: bool, error: Exception | None = None) -> None:
        """Configure the source to fail on the next fetch."""
        self.should_fail = should_fail
        if error is not None:
            self.fail_error = error

    def release(self) -> None:
        """Let held fetches, current and future, complete."""
        self._released.set()

    async def fetch(self, ctx: PollContext) -> Any:
        self.fetch_call_count += 1
        self.contexts.append(ctx)

        await self._released.wait()
        if self.delay:
            await asyncio.sleep(self.delay)

        if self.should_fail:
            raise self.fail_error

        if self.values:
            return self.values.pop(0)
        return self.default


class FakeSink(SinkPort[Any]):
    """In-memory sink for testing.

    Captures every pushed value, and optionally appends its name to a
    shared call log so ordering across sinks can be asserted.
    """

    def __init__(
        self,
        name: str = "sink",
        call_log: list[str] | None = None,
        error: Exception | None = None,
    ):
        self.name = name
        self.call_log = call_log
        self.error = error
        self.received: list[Any] = []
        self.push_call_count = 0

    async def push(self, ctx: PollContext, value: Any) -> None:
        self.push_call_count += 1
        if self.call_log is not None:
            self.call_log.append(self.name)

        if self.error is not None:
            raise self.error

        self.received.append(value)


class ErrorCapturer:
    """Error handler that records every failure it receives."""

    def __init__(self) -> None:
        self.errors: list[BaseException] = []
        self.contexts: list[PollContext] = []

    def __call__(self, ctx: PollContext, err: BaseException) -> None:
        self.contexts.append(ctx)
        self.errors.append(err)

    @property
    def called(self) -> bool:
        return bool(self.errors)

    @property
    def call_count(self) -> int:
        return len(self.errors)

    @property
    def last_error(self) -> BaseException | None:
        return self.errors[-1] if self.errors else None
