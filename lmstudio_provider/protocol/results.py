"""Return shapes of ``do_generate`` and ``do_stream``."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .call_warnings import CallWarning
from .message_types import Content, ToolCallContent
from .stream_parts import FinishReason, StreamPart, Usage


class RequestMetadata(BaseModel):
    """What was actually sent to the engine: converted messages, tools and settings."""

    model_config = ConfigDict(frozen=True)

    body: dict[str, Any]


class ResponseMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_id: str | None = Field(default=None, alias="modelId")
    # Raw completed prediction from the engine, kept for diagnostics.
    body: Any = None


class GenerateResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    content: list[Content]
    text: str | None = None
    reasoning: str | None = None
    tool_calls: list[ToolCallContent] = Field(default_factory=list, alias="toolCalls")
    finish_reason: FinishReason = Field(alias="finishReason")
    usage: Usage
    request: RequestMetadata
    response: ResponseMetadata
    warnings: list[CallWarning] = Field(default_factory=list)


@dataclass
class StreamResult:
    """
    Result of ``do_stream``.

    ``stream`` yields parts as the engine produces them. Content warnings found
    while streaming are appended to ``warnings``.
    """

    stream: AsyncIterator[StreamPart]
    request: RequestMetadata
    warnings: list[CallWarning] = field(default_factory=list)
