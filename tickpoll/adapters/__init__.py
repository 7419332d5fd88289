"""External adapters for tickpoll.

This package contains all external dependencies (HTTP endpoints, files,
process signals) and provides implementations of the core port interfaces.

Adapter Organization:

- source/: Getters retrieving the polled payload (HTTP JSON)
- sink/: Pushers consuming the payload (stdout, JSON lines, webhook)
- scheduler/: Drivers for the tick loop (daemon with signal handling)
"""
