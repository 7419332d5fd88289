"""Unit tests for the Poller tick loop.

Timing tests use intervals of tens of milliseconds and pick run durations
halfway between tick boundaries so scheduler jitter does not move a tick
across the cancellation point.
"""

import asyncio
import logging
import math
import time

import pytest

from tickpoll.core.context import PollContext
from tickpoll.core.errors import MissingGetterError
from tickpoll.core.options import set_interval, set_on_error, set_pusher
from tickpoll.core.poller import new
from tickpoll.tests.fakes import ErrorCapturer, FakeSink, FakeSource


@pytest.mark.asyncio
async def test_tick_count_within_bounds() -> None:
    """A run of duration D at interval I emits floor(D/I)..ceil(D/I)+1 ticks."""
    source = FakeSource(default={"total": 0})
    poller = new(source, set_interval(50))
    loop = asyncio.get_running_loop()

    started = loop.time()
    await poller.start(PollContext().with_timeout(0.275))
    duration = loop.time() - started
    await poller.drain()

    ticks = source.fetch_call_count
    interval = poller.interval_seconds
    assert math.floor(duration / interval) <= ticks <= math.ceil(duration / interval) + 1


@pytest.mark.asyncio
async def test_start_blocks_until_cancelled() -> None:
    poller = new(FakeSource(), set_interval(20))
    ctx = PollContext()

    task = asyncio.create_task(poller.start(ctx))
    await asyncio.sleep(0.05)
    assert not task.done()

    ctx.cancel()
    await asyncio.wait_for(task, timeout=1.0)
    await poller.drain()


@pytest.mark.asyncio
async def test_cancel_before_first_tick_launches_nothing() -> None:
    """Cancellation wins over a long pending interval."""
    source = FakeSource()
    poller = new(source, set_interval(10_000))
    ctx = PollContext()

    asyncio.get_running_loop().call_later(0.01, ctx.cancel)
    await asyncio.wait_for(poller.start(ctx), timeout=1.0)

    assert source.fetch_call_count == 0
    assert poller.in_flight == 0


@pytest.mark.asyncio
async def test_already_cancelled_context_returns_immediately() -> None:
    source = FakeSource()
    poller = new(source, set_interval(10))
    ctx = PollContext()
    ctx.cancel()

    await asyncio.wait_for(poller.start(ctx), timeout=0.5)

    assert source.fetch_call_count == 0


@pytest.mark.asyncio
async def test_start_without_getter_raises() -> None:
    poller = new(None, set_interval(10))

    with pytest.raises(MissingGetterError):
        await poller.start(PollContext())


@pytest.mark.asyncio
async def test_ticks_follow_timer_not_cycle_completion() -> None:
    """Slow cycles overlap instead of delaying the next tick."""
    calls = 0
    active = 0
    max_active = 0

    async def slow_getter(ctx: PollContext) -> int:
        nonlocal calls, active, max_active
        calls += 1
        active += 1
        max_active = max(max_active, active)
        await asyncio.sleep(0.12)
        active -= 1
        return 1

    sink = FakeSink()
    poller = new(slow_getter, set_interval(30), set_pusher(sink))

    await poller.start(PollContext().with_timeout(0.165))
    await poller.drain()

    # Sequential cycles would have fit at most two ticks in this window.
    assert calls >= 4
    assert max_active > 1
    assert len(sink.received) == calls


@pytest.mark.asyncio
async def test_in_flight_cycle_survives_cancellation() -> None:
    """Cancelling the loop does not abort a cycle that already started."""
    source = FakeSource(default="payload", delay=0.1)
    sink = FakeSink()
    poller = new(source, set_interval(20), set_pusher(sink))

    await poller.start(PollContext().with_timeout(0.03))

    assert poller.in_flight == 1
    assert sink.received == []

    assert await poller.drain(timeout=1.0) == 0
    assert sink.received == ["payload"]
    assert poller.in_flight == 0


@pytest.mark.asyncio
async def test_drain_timeout_reports_pending_cycles() -> None:
    source = FakeSource(held=True)
    poller = new(source, set_interval(10))

    await poller.start(PollContext().with_timeout(0.015))

    assert await poller.drain(timeout=0.01) == 1

    source.release()
    assert await poller.drain(timeout=1.0) == 0


@pytest.mark.asyncio
async def test_failing_cycles_do_not_stop_the_loop() -> None:
    source = FakeSource()
    source.set_should_fail(True, ConnectionError("unreachable"))
    capturer = ErrorCapturer()
    poller = new(source, set_interval(20), set_on_error(capturer))

    await poller.start(PollContext().with_timeout(0.11))
    await poller.drain()

    assert capturer.call_count >= 3
    assert all(isinstance(e, ConnectionError) for e in capturer.errors)


@pytest.mark.asyncio
async def test_raising_error_handler_is_logged_and_loop_continues(
    caplog: pytest.LogCaptureFixture,
) -> None:
    source = FakeSource()
    source.set_should_fail(True)

    def broken_handler(ctx: PollContext, err: BaseException) -> None:
        raise RuntimeError("handler broke")

    poller = new(source, set_interval(20), set_on_error(broken_handler))

    with caplog.at_level(logging.ERROR, logger="tickpoll.core.poller"):
        await poller.start(PollContext().with_timeout(0.07))
        await poller.drain()

    assert source.fetch_call_count >= 2
    assert "handler broke" in caplog.text


@pytest.mark.asyncio
async def test_cycles_receive_loop_context() -> None:
    source = FakeSource()
    poller = new(source, set_interval(20))
    ctx = PollContext().with_timeout(0.05)

    await poller.start(ctx)
    await poller.drain()

    assert source.contexts
    assert all(c is ctx for c in source.contexts)


@pytest.mark.asyncio
async def test_ticks_missed_while_loop_blocked_are_dropped(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """A getter that blocks the event loop makes later ticks late; they are not replayed."""
    calls = 0

    def blocking_getter(ctx: PollContext) -> int:
        nonlocal calls
        calls += 1
        if calls == 1:
            time.sleep(0.1)
        return calls

    poller = new(blocking_getter, set_interval(20))

    with caplog.at_level(logging.WARNING, logger="tickpoll.core.poller"):
        await poller.start(PollContext().with_timeout(0.15))
        await poller.drain(timeout=1.0)

    assert "dropped" in caplog.text
    assert calls <= 5
