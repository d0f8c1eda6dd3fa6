"""
Prompt → LM Studio Chat Messages

Converts the generic prompt into ``ChatMessageData`` for ``act()``.

Mapping:
- system: string content → one text part
- user: text parts 1:1
- assistant: text parts 1:1, tool-call parts → toolCallRequest parts
- tool: tool-result parts → toolCallResult parts with the output JSON-encoded
  (LM Studio carries tool results as strings)

Anything else is skipped and reported as an "Unsupported content type"
warning. The one hard failure is an assistant tool call whose arguments are
not an object: the engine could never have produced or executed it.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from loguru import logger

from .engine.types import (
    ChatMessageData,
    ChatMessagePartTextData,
    ChatMessagePartToolCallRequestData,
    ChatMessagePartToolCallResultData,
    FunctionToolCallRequest,
)
from .errors import InvalidToolArgumentsError
from .protocol.call_warnings import CallWarning, unsupported_content
from .protocol.message_types import (
    AssistantContentPart,
    AssistantMessage,
    Message,
    SystemMessage,
    TextPart,
    ToolCallPart,
    ToolContentPart,
    ToolMessage,
    ToolResultPart,
    UserContentPart,
    UserMessage,
)


def _dump_tool_args(value: Any) -> str:
    try:  # nosemgrep: forbid-try-except
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _tool_call_arguments(part: ToolCallPart) -> dict[str, Any]:
    """Top-level tool arguments must be a mapping with string keys."""
    tool_input = part.input
    if isinstance(tool_input, Mapping) and all(isinstance(key, str) for key in tool_input):
        return dict(tool_input)

    logger.error(
        f"[MESSAGES] Tool call {part.tool_name} has non-object arguments: {type(tool_input).__name__}"
    )
    raise InvalidToolArgumentsError(
        tool_name=part.tool_name,
        tool_args=_dump_tool_args(tool_input),
        cause="Top-level arguments must be a record with string keys",
    )


def _convert_user_content(
    content: str | Sequence[UserContentPart],
) -> tuple[list[ChatMessagePartTextData], list[CallWarning]]:
    if isinstance(content, str):
        return [ChatMessagePartTextData(text=content)], []

    parts: list[ChatMessagePartTextData] = []
    warnings: list[CallWarning] = []
    for part in content:
        if isinstance(part, TextPart):
            parts.append(ChatMessagePartTextData(text=part.text))
        else:
            warnings.append(unsupported_content(part.type))
    return parts, warnings


def _convert_assistant_content(
    content: str | Sequence[AssistantContentPart],
) -> tuple[list[ChatMessagePartTextData | ChatMessagePartToolCallRequestData], list[CallWarning]]:
    if isinstance(content, str):
        return [ChatMessagePartTextData(text=content)], []

    parts: list[ChatMessagePartTextData | ChatMessagePartToolCallRequestData] = []
    warnings: list[CallWarning] = []
    for part in content:
        if isinstance(part, TextPart):
            parts.append(ChatMessagePartTextData(text=part.text))
        elif isinstance(part, ToolCallPart):
            parts.append(
                ChatMessagePartToolCallRequestData(
                    tool_call_request=FunctionToolCallRequest(
                        id=part.tool_call_id,
                        name=part.tool_name,
                        arguments=_tool_call_arguments(part),
                    )
                )
            )
        else:
            warnings.append(unsupported_content(part.type))
    return parts, warnings


def _convert_tool_content(
    content: Sequence[ToolContentPart],
) -> tuple[list[ChatMessagePartToolCallResultData], list[CallWarning]]:
    parts: list[ChatMessagePartToolCallResultData] = []
    warnings: list[CallWarning] = []
    for part in content:
        if isinstance(part, ToolResultPart):
            parts.append(
                ChatMessagePartToolCallResultData(
                    tool_call_id=part.tool_call_id,
                    content=json.dumps(part.output, ensure_ascii=False),
                )
            )
        else:
            warnings.append(unsupported_content(part.type))
    return parts, warnings


def convert_to_lmstudio_messages(
    prompt: Sequence[Message],
) -> tuple[list[ChatMessageData], list[CallWarning]]:
    """
    Convert a generic prompt into LM Studio chat messages.

    Args:
        prompt: Messages in the generic contract's format

    Returns:
        (messages, warnings): one ``ChatMessageData`` per prompt message, and a
        warning for every skipped part

    Raises:
        InvalidToolArgumentsError: An assistant tool call's arguments are not a
            string-keyed mapping
    """
    messages: list[ChatMessageData] = []
    warnings: list[CallWarning] = []

    for message in prompt:
        if isinstance(message, SystemMessage):
            messages.append(
                ChatMessageData(
                    role="system", content=[ChatMessagePartTextData(text=message.content)]
                )
            )
        elif isinstance(message, UserMessage):
            user_parts, user_warnings = _convert_user_content(message.content)
            messages.append(ChatMessageData(role="user", content=user_parts))
            warnings.extend(user_warnings)
        elif isinstance(message, AssistantMessage):
            assistant_parts, assistant_warnings = _convert_assistant_content(message.content)
            messages.append(ChatMessageData(role="assistant", content=assistant_parts))
            warnings.extend(assistant_warnings)
        elif isinstance(message, ToolMessage):
            tool_parts, tool_warnings = _convert_tool_content(message.content)
            messages.append(ChatMessageData(role="tool", content=tool_parts))
            warnings.extend(tool_warnings)

    logger.debug(
        f"[MESSAGES] Converted {len(prompt)} prompt messages, {len(warnings)} warnings"
    )
    return messages, warnings
