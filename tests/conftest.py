"""Pytest configuration and shared fixtures for tests.

This module provides common pytest fixtures that are shared across
unit and integration tests.
"""

from collections.abc import Iterator

import pytest
from loguru import logger

from lmstudio_provider.cancellation import CancellationHandle
from lmstudio_provider.protocol import FunctionTool, TextPart, UserMessage


# ============================================================
# Logging
# ============================================================


@pytest.fixture
def captured_logs() -> Iterator[list[str]]:
    """Collect formatted loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, level="DEBUG", format="{level} {message}")
    yield messages
    logger.remove(handler_id)


# ============================================================
# Prompts and Call Options
# ============================================================


@pytest.fixture
def simple_prompt() -> list:
    return [UserMessage(content=[TextPart(text="2+2?")])]


@pytest.fixture
def calculator_tool() -> FunctionTool:
    return FunctionTool(
        name="calculator",
        description="Add two numbers",
        input_schema={
            "type": "object",
            "properties": {"a": {"type": "number"}, "b": {"type": "number"}},
            "required": ["a", "b"],
        },
    )


@pytest.fixture
def weather_tool() -> FunctionTool:
    return FunctionTool(
        name="get_weather",
        input_schema={"type": "object", "properties": {"city": {"type": "string"}}},
    )


@pytest.fixture
def caller_signal() -> CancellationHandle:
    return CancellationHandle()

