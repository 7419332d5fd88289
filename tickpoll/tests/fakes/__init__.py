"""Fake/mock implementations of core capabilities for testing.

These in-memory implementations allow the engine to be tested without
external dependencies:

- FakeSource: Queued or default values, optional failure and delay
- FakeSink: Captured payloads and a shared call-order log
- ErrorCapturer: Captured failures for assertion
"""

from .capabilities import ErrorCapturer, FakeSink, FakeSource

__all__ = [
    "ErrorCapturer",
    "FakeSink",
    "FakeSource",
]
