"""Stdout sink adapter.

Implements SinkPort by printing each payload to the terminal as JSON.
"""

import asyncio
import json
import logging
from datetime import UTC, datetime
from typing import Any

from tickpoll.core.context import PollContext
from tickpoll.core.ports import SinkPort

logger = logging.getLogger(__name__)


class StdoutSink(SinkPort[Any]):
    """Prints retrieved payloads to stdout."""

    def __init__(self, verbose: bool = False):
        """Initialize stdout sink.

        Args:
            verbose: If True, pretty-print the payload under a timestamped header.
        """
        self.verbose = verbose

    async def push(self, ctx: PollContext, value: Any) -> None:
        """Print one payload."""
        await asyncio.to_thread(print, self._format(value))

    def _format(self, value: Any) -> str:
        if not self.verbose:
            return json.dumps(value, default=str)

        lines = [
            "=" * 80,
            f"POLL RESULT @ {datetime.now(UTC).isoformat()}",
            "=" * 80,
            json.dumps(value, indent=2, default=str),
        ]
        return "\n".join(lines)
