"""Shared test utilities for unit and integration tests."""

from tests.utils.sse import parse_sse_event


__all__ = ["parse_sse_event"]
