"""Daemon scheduler adapter.

Runs a Poller's tick loop as a long-lived process: owns the root context,
cancels it on SIGTERM/SIGINT, and gives in-flight cycles a grace period to
finish before returning.
"""

import asyncio
import logging
import signal
from typing import Any

from tickpoll.core.context import PollContext
from tickpoll.core.poller import Poller

logger = logging.getLogger(__name__)

_SHUTDOWN_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class DaemonScheduler:
    """Drives a Poller until stopped by a signal or by ``stop``."""

    def __init__(
        self,
        poller: Poller[Any],
        shutdown_grace_seconds: float = 5.0,
        handle_signals: bool = True,
    ):
        """Initialize daemon scheduler.

        Args:
            poller: Poller whose tick loop this daemon runs.
            shutdown_grace_seconds: How long to wait for in-flight cycles
                after the tick loop stops.
            handle_signals: Install SIGTERM/SIGINT handlers while running.
        """
        self.poller = poller
        self.shutdown_grace_seconds = shutdown_grace_seconds
        self.handle_signals = handle_signals
        self.running = False
        self._ctx: PollContext | None = None
        self._installed_signals: list[signal.Signals] = []

    async def start(self) -> None:
        """Run the tick loop until stopped, then drain in-flight cycles."""
        if self.running:
            logger.warning("Daemon scheduler already running")
            return

        self.running = True
        self._ctx = PollContext()
        logger.info(
            f"Starting daemon scheduler with {self.poller.interval}ms interval"
        )

        if self.handle_signals:
            self._setup_signal_handlers()

        try:
            await self.poller.start(self._ctx)
        except asyncio.CancelledError:
            logger.info("Daemon scheduler cancelled")
            raise
        except Exception as e:
            logger.error(f"Daemon scheduler error: {e}", exc_info=True)
            raise
        finally:
            self._ctx.cancel()
            self._remove_signal_handlers()
            await self._drain()
            self.running = False
            logger.info("Daemon scheduler stopped")

    async def stop(self) -> None:
        """Stop the tick loop. In-flight cycles are left to finish."""
        if not self.running or self._ctx is None:
            return

        logger.info("Stopping daemon scheduler...")
        self._ctx.cancel()

    async def run_single_cycle(self) -> None:
        """Run one poll cycle outside the tick loop (non-daemon mode)."""
        logger.info("Running single poll cycle")
        await self.poller.poll(PollContext())
        logger.info("Poll cycle completed")

    async def _drain(self) -> None:
        if self.poller.in_flight == 0:
            return

        logger.info(
            f"Waiting up to {self.shutdown_grace_seconds}s for "
            f"{self.poller.in_flight} in-flight cycle(s)"
        )
        remaining = await self.poller.drain(timeout=self.shutdown_grace_seconds)
        if remaining:
            logger.warning(f"Abandoning {remaining} poll cycle(s) still running")

    def _setup_signal_handlers(self) -> None:
        """Set up signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        def _handle_signal(sig: signal.Signals) -> None:
            logger.info(f"Received signal {sig.name}, initiating graceful shutdown...")
            if self._ctx is not None:
                self._ctx.cancel()

        for sig in _SHUTDOWN_SIGNALS:
            try:
                loop.add_signal_handler(sig, _handle_signal, sig)
                self._installed_signals.append(sig)
            except NotImplementedError:
                # Signal handlers not available on Windows
                logger.debug("Signal handlers not available on this platform")
                return
            except (RuntimeError, ValueError) as e:
                logger.warning(f"Failed to set up handler for {sig.name}: {e}")

    def _remove_signal_handlers(self) -> None:
        if not self._installed_signals:
            return

        loop = asyncio.get_running_loop()
        for sig in self._installed_signals:
            loop.remove_signal_handler(sig)
        self._installed_signals.clear()
