"""Core polling engine for tickpoll.

This package contains zero external dependencies. Adapters that reach
external systems live in the adapters package.
"""

from .context import PollContext
from .errors import (
    ConfigurationError,
    ContextCancelled,
    DeadlineExceeded,
    MissingGetterError,
    PollerError,
    SinkError,
    SourceError,
)
from .options import Option, set_interval, set_on_error, set_pusher
from .poller import DEFAULT_INTERVAL_MS, Poller, default_on_error, new
from .ports import Getter, OnError, Pusher, SinkPort, SourcePort

__all__ = [
    "ConfigurationError",
    "ContextCancelled",
    "DEFAULT_INTERVAL_MS",
    "DeadlineExceeded",
    "Getter",
    "MissingGetterError",
    "OnError",
    "Option",
    "PollContext",
    "Poller",
    "PollerError",
    "Pusher",
    "SinkError",
    "SinkPort",
    "SourceError",
    "SourcePort",
    "default_on_error",
    "new",
    "set_interval",
    "set_on_error",
    "set_pusher",
]
