"""Source adapters retrieving the polled payload."""

from .http import HttpJsonSource

__all__ = ["HttpJsonSource"]
