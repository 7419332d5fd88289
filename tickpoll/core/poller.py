"""Interval-driven polling engine.

Polling is actively retrieving data at a set interval. Each poll cycle is
split in two steps: get the data, then push it to every configured pusher.

- The getter is called once per cycle. If it raises, the error handler is
  called and the cycle ends without running any pusher.
- Pushers run sequentially, in configuration order, all receiving the same
  value. A failing pusher is reported to the error handler and does not
  stop the pushers after it.

::

                              +--------------+
                              |  on_error()  |
        +-------------------- |    called    | <-----+
        |                     +--------------+       |
        v                            ^               |
  +--------------+      +--------------+      +----------------+
  | ticker waits |      |   getter()   |      |    pushers     |
  |   interval   |----->|    called    |----->|   called in    |
  +--------------+      +--------------+      |    sequence    |
        ^                                     +----------------+
        |                                            |
        +--------------------------------------------+

The tick loop launches each cycle as its own asyncio task, so cycles may
overlap when one takes longer than the interval.
"""

import asyncio
import inspect
import logging
from typing import Any, Generic, TypeVar

from .context import PollContext
from .errors import ConfigurationError, MissingGetterError
from .options import Option
from .ports import Getter, OnError, Pusher

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_INTERVAL_MS = 30_000


def default_on_error(ctx: PollContext, err: BaseException) -> None:
    """Log the failure and carry on."""
    logger.error(f"Poll cycle failure: {type(err).__name__}: {err}")


async def _invoke(fn: Any, *args: Any) -> Any:
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Poller(Generic[T]):
    """Retrieves data at a fixed interval and distributes it to pushers.

    Build instances with ``new`` and configure them with options. The
    configuration is not meant to change once ``start`` is running.
    """

    def __init__(
        self,
        getter: Getter[T] | None = None,
        interval: int = DEFAULT_INTERVAL_MS,
        pushers: tuple[Pusher[T], ...] = (),
        on_error: OnError = default_on_error,
    ):
        self.interval = interval
        self.getter = getter
        self.pushers = tuple(pushers)
        self.on_error = on_error
        self._in_flight: set[asyncio.Task[None]] = set()

    @property
    def interval_seconds(self) -> float:
        """Tick interval in seconds."""
        return self.interval / 1000

    @property
    def in_flight(self) -> int:
        """Number of cycles launched by ``start`` that have not finished yet."""
        return len(self._in_flight)

    async def poll(self, ctx: PollContext) -> None:
        """Run one cycle: call the getter, then every pusher with its value.

        Failures never propagate to the caller; each one is handed to
        ``on_error`` exactly once. Task cancellation is not a failure and
        does propagate.
        """
        if self.getter is None:
            self.on_error(ctx, MissingGetterError())
            return

        try:
            value = await _invoke(self.getter, ctx)
        except Exception as e:
            self.on_error(ctx, e)
            return

        for pusher in self.pushers:
            try:
                await _invoke(pusher, ctx, value)
            except Exception as e:
                self.on_error(ctx, e)

    async def start(self, ctx: PollContext) -> None:
        """Launch a poll cycle every interval until ``ctx`` is cancelled.

        This call blocks until cancellation. Ticks follow the loop's own
        clock, not cycle completion, and cycles are not awaited. Cycles
        still running when ``ctx`` is cancelled are left to finish; use
        ``drain`` to wait for them.

        Raises:
            MissingGetterError: If the poller has no getter.
        """
        if self.getter is None:
            raise MissingGetterError()

        loop = asyncio.get_running_loop()
        interval = self.interval_seconds
        next_tick = loop.time() + interval
        tick = 0

        logger.info(f"Starting poller with {self.interval}ms interval")

        while True:
            delay = max(0.0, next_tick - loop.time())
            if await ctx.wait(timeout=delay):
                break

            tick += 1
            self._launch(ctx, tick)
            next_tick += interval

            # Drop ticks the loop slept through instead of firing a burst.
            now = loop.time()
            if now >= next_tick:
                missed = int((now - next_tick) // interval) + 1
                next_tick += missed * interval
                logger.warning(f"Poller fell behind, dropped {missed} tick(s)")

        logger.info(f"Poller stopped after {tick} tick(s), {self.in_flight} cycle(s) in flight")

    async def drain(self, timeout: float | None = None) -> int:
        """Wait for cycles launched by ``start`` to finish.

        Args:
            timeout: Maximum seconds to wait; None waits indefinitely.

        Returns:
            Number of cycles still running when the wait ended.
        """
        if not self._in_flight:
            return 0

        _, pending = await asyncio.wait(set(self._in_flight), timeout=timeout)
        return len(pending)

    def _launch(self, ctx: PollContext, tick: int) -> None:
        logger.debug(f"Launching poll cycle #{tick}")
        task = asyncio.create_task(self.poll(ctx), name=f"poll-cycle-{tick}")
        self._in_flight.add(task)
        task.add_done_callback(self._on_cycle_done)

    def _on_cycle_done(self, task: "asyncio.Task[None]") -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # Only reachable when the error handler itself raises.
            logger.error(f"Error in {task.get_name()}: {exc}", exc_info=exc)


def new(getter: Getter[T] | None, *options: Option) -> Poller[T]:
    """Create a Poller with default values, modified by ``options``.

    Defaults: 30000 ms interval, no pushers, errors logged. A getter of
    None is accepted so a poller can be configured before its source exists;
    polling it reports MissingGetterError.

    Raises:
        ConfigurationError: If the getter is not callable, or from the first
            option that rejects its input. Later options are not applied.
    """
    if getter is not None and not callable(getter):
        raise ConfigurationError(f"getter must be callable, got {getter!r}")

    poller: Poller[T] = Poller(getter)
    for option in options:
        option(poller)
    return poller


__all__ = ["DEFAULT_INTERVAL_MS", "Poller", "default_on_error", "new"]
