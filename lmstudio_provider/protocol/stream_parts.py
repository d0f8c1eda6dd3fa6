"""
Generic Language Model Contract - Stream Parts.

Ordered events emitted by ``do_stream``:

- text-start / text-delta / text-end: visible answer text, one span id
- reasoning-start / reasoning-delta / reasoning-end: model reasoning, one span id
- tool-call: a complete tool call issued by the model
- finish: exactly one, always last

Every delta and end part reuses the id of the start part that opened its span.
"""

import enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class FinishReason(str, enum.Enum):
    """Generic finish reasons (the target of LM Studio stop reasons)."""

    STOP = "stop"
    LENGTH = "length"
    CONTENT_FILTER = "content-filter"
    TOOL_CALLS = "tool-calls"
    ERROR = "error"
    OTHER = "other"
    UNKNOWN = "unknown"


class Usage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    input_tokens: int | None = Field(default=None, alias="inputTokens")
    output_tokens: int | None = Field(default=None, alias="outputTokens")
    total_tokens: int | None = Field(default=None, alias="totalTokens")


class _StreamPartModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class TextStartPart(_StreamPartModel):
    type: Literal["text-start"] = "text-start"
    id: str


class TextDeltaPart(_StreamPartModel):
    type: Literal["text-delta"] = "text-delta"
    id: str
    delta: str


class TextEndPart(_StreamPartModel):
    type: Literal["text-end"] = "text-end"
    id: str


class ReasoningStartPart(_StreamPartModel):
    type: Literal["reasoning-start"] = "reasoning-start"
    id: str


class ReasoningDeltaPart(_StreamPartModel):
    type: Literal["reasoning-delta"] = "reasoning-delta"
    id: str
    delta: str


class ReasoningEndPart(_StreamPartModel):
    type: Literal["reasoning-end"] = "reasoning-end"
    id: str


class ToolCallStreamPart(_StreamPartModel):
    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    input: str


class FinishPart(_StreamPartModel):
    type: Literal["finish"] = "finish"
    finish_reason: FinishReason = Field(alias="finishReason")
    usage: Usage


StreamPart = Annotated[
    TextStartPart
    | TextDeltaPart
    | TextEndPart
    | ReasoningStartPart
    | ReasoningDeltaPart
    | ReasoningEndPart
    | ToolCallStreamPart
    | FinishPart,
    Field(discriminator="type"),
]
