"""Failure taxonomy for the tickpoll engine.

Configuration failures are raised to the caller of ``new``. Everything that
happens inside a poll cycle is routed to the poller's error handler instead
of being raised.
"""


class PollerError(Exception):
    """Base class for all tickpoll errors."""


class ConfigurationError(PollerError, ValueError):
    """An option rejected its input while building a Poller."""


class MissingGetterError(PollerError):
    """A poll cycle or tick loop was requested on a Poller without a getter."""

    def __init__(self, message: str = "poller has no getter configured"):
        super().__init__(message)


class ContextCancelled(PollerError):
    """The execution context was cancelled."""

    def __init__(self, message: str = "context cancelled"):
        super().__init__(message)


class DeadlineExceeded(ContextCancelled):
    """The execution context's deadline passed."""

    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class SourceError(PollerError):
    """A source adapter could not retrieve data."""


class SinkError(PollerError):
    """A sink adapter could not deliver data."""
