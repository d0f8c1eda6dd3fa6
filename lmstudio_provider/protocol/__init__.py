"""
Generic Language Model Contract Types

Pydantic models for the provider-agnostic side of the bridge:

- message_types: prompt messages, prompt parts and generated content
- call_options: per-call options, tool declarations, tool choice
- call_warnings: non-fatal warnings attached to results
- stream_parts: ordered streaming events and finish reasons
- results: do_generate / do_stream return shapes
"""

from .call_options import CallOptions, FunctionTool, ProviderDefinedTool, ResponseFormat, Tool, ToolChoice
from .call_warnings import (
    CallWarning,
    OtherWarning,
    UnsupportedSettingWarning,
    UnsupportedToolWarning,
)
from .message_types import (
    AssistantMessage,
    Content,
    FilePart,
    GenericPart,
    Message,
    Prompt,
    ReasoningPart,
    SystemMessage,
    TextContent,
    TextPart,
    ToolCallContent,
    ToolCallPart,
    ToolMessage,
    ToolResultPart,
    UserMessage,
)
from .results import GenerateResult, RequestMetadata, ResponseMetadata, StreamResult
from .stream_parts import (
    FinishPart,
    FinishReason,
    ReasoningDeltaPart,
    ReasoningEndPart,
    ReasoningStartPart,
    StreamPart,
    TextDeltaPart,
    TextEndPart,
    TextStartPart,
    ToolCallStreamPart,
    Usage,
)


__all__ = [
    "AssistantMessage",
    "CallOptions",
    "CallWarning",
    "Content",
    "FilePart",
    "FinishPart",
    "FinishReason",
    "FunctionTool",
    "GenerateResult",
    "GenericPart",
    "Message",
    "OtherWarning",
    "Prompt",
    "ProviderDefinedTool",
    "ReasoningDeltaPart",
    "ReasoningEndPart",
    "ReasoningPart",
    "ReasoningStartPart",
    "RequestMetadata",
    "ResponseFormat",
    "ResponseMetadata",
    "StreamPart",
    "StreamResult",
    "SystemMessage",
    "TextContent",
    "TextDeltaPart",
    "TextEndPart",
    "TextPart",
    "TextStartPart",
    "Tool",
    "ToolCallContent",
    "ToolCallPart",
    "ToolCallStreamPart",
    "ToolChoice",
    "ToolMessage",
    "ToolResultPart",
    "UnsupportedSettingWarning",
    "UnsupportedToolWarning",
    "Usage",
    "UserMessage",
]
