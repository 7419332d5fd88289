"""Test suite for tickpoll.

Organized into three categories:

1. core/: Unit tests for the polling engine
   - No external dependencies, fast execution
   - Uses in-memory fakes for capabilities

2. adapters/: Tests for adapter implementations
   - HTTP adapters run against httpx.MockTransport
   - Validates adapter behavior and error handling

3. fakes/: Capability implementations for testing
   - In-memory sources, sinks and error capturers
"""
