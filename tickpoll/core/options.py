"""Configuration directives for building a Poller.

Each option mutates exactly one Poller attribute and raises
ConfigurationError when it rejects its input. ``new`` applies options in
order and stops at the first one that raises.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeAlias

from .errors import ConfigurationError
from .ports import OnError, Pusher

if TYPE_CHECKING:
    from .poller import Poller

Option: TypeAlias = Callable[["Poller[Any]"], None]


def set_interval(milliseconds: int) -> Option:
    """Replace the tick interval, expressed in milliseconds.

    Raises:
        ConfigurationError: When applied, if the value is not a positive integer.
    """

    def apply(poller: "Poller[Any]") -> None:
        if isinstance(milliseconds, bool) or not isinstance(milliseconds, int):
            raise ConfigurationError(
                f"interval must be an integer number of milliseconds, got {milliseconds!r}"
            )
        if milliseconds <= 0:
            raise ConfigurationError(f"interval must be positive, got {milliseconds}")
        poller.interval = milliseconds

    return apply


def set_pusher(fn: Pusher[Any]) -> Option:
    """Append one pusher to the poller's ordered pusher sequence.

    Pushers run sequentially, in the order their options were applied. A
    pusher that needs another pusher's effect should do that work itself
    rather than rely on its neighbours.
    """

    def apply(poller: "Poller[Any]") -> None:
        if not callable(fn):
            raise ConfigurationError(f"pusher must be callable, got {fn!r}")
        poller.pushers = (*poller.pushers, fn)

    return apply


def set_on_error(fn: OnError) -> Option:
    """Replace the error handler. The default handler is discarded, not chained."""

    def apply(poller: "Poller[Any]") -> None:
        if not callable(fn):
            raise ConfigurationError(f"error handler must be callable, got {fn!r}")
        poller.on_error = fn

    return apply


__all__ = ["Option", "set_interval", "set_on_error", "set_pusher"]
