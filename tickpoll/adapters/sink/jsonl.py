"""JSON lines file sink adapter.

Implements SinkPort by appending one JSON record per payload to a file.
"""

import asyncio
import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from tickpoll.core.context import PollContext
from tickpoll.core.ports import SinkPort


class JsonLinesSink(SinkPort[Any]):
    """Appends payloads to a JSON lines file.

    Each line is ``{"polled_at": <ISO timestamp>, "payload": <value>}``.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def push(self, ctx: PollContext, value: Any) -> None:
        """Append one record. Parent directories are created on demand."""
        record = {
            "polled_at": datetime.now(UTC).isoformat(),
            "payload": value,
        }
        line = json.dumps(record, default=str)
        await asyncio.to_thread(self._append, line)

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
