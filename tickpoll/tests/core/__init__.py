"""Unit tests for the core polling engine."""
