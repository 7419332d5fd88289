"""Sink adapters consuming retrieved payloads.

Implementations:
- Stdout (JSON printed to the terminal)
- JSON lines file (one record appended per payload)
- Webhook (payload POSTed to an HTTP endpoint)
"""

from .jsonl import JsonLinesSink
from .stdout import StdoutSink
from .webhook import WebhookSink

__all__ = ["JsonLinesSink", "StdoutSink", "WebhookSink"]
