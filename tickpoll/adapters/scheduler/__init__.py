"""Scheduler adapters for driving the tick loop.

- Daemon (asyncio event loop with signal-driven graceful shutdown)
"""

from .daemon import DaemonScheduler

__all__ = ["DaemonScheduler"]
