"""tickpoll: an interval-driven polling engine.

A Poller calls one getter every interval and hands the result to each of
its pushers, reporting every failure through one error handler.
"""

from tickpoll.core import (
    PollContext,
    Poller,
    new,
    set_interval,
    set_on_error,
    set_pusher,
)

__all__ = [
    "PollContext",
    "Poller",
    "new",
    "set_interval",
    "set_on_error",
    "set_pusher",
]
