"""
Generic Language Model Contract - Prompt and Content Types.

Python models for the provider-agnostic prompt that callers pass to
``do_generate`` / ``do_stream`` and for the content the provider returns.
Field aliases follow the contract's camelCase wire names so payloads
produced by JavaScript clients validate as-is.

Type Hierarchy:
- Message (discriminated by role)
  - SystemMessage: content is a plain string
  - UserMessage: text and file parts
  - AssistantMessage: text, file, reasoning, tool-call and tool-result parts
  - ToolMessage: tool-result parts
- Content (returned by the provider)
  - TextContent, ToolCallContent (reasoning is reported separately on the result)
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag


class _ContractModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ============================================================
# Prompt Parts
# ============================================================


class TextPart(_ContractModel):
    type: Literal["text"] = "text"
    text: str


class ReasoningPart(_ContractModel):
    type: Literal["reasoning"] = "reasoning"
    text: str


class FilePart(_ContractModel):
    """File content (images, documents). Not supported by the engine bridge."""

    type: Literal["file"] = "file"
    data: str | bytes
    media_type: str = Field(alias="mediaType")
    filename: str | None = None


class ToolCallPart(_ContractModel):
    """
    Tool call issued by the assistant in an earlier turn.

    ``input`` is whatever the caller recorded: normally a mapping of argument
    names to values, sometimes its JSON text.
    """

    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    input: Any = None


class ToolResultPart(_ContractModel):
    type: Literal["tool-result"] = "tool-result"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    output: Any = None


class GenericPart(_ContractModel):
    """
    Catch-all for part types this provider does not know.

    Keeps unknown parts from failing validation so the bridge can report them
    as warnings instead.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    type: str


UNKNOWN_PART_TAG = "unknown"


def _part_discriminator(known: frozenset[str]) -> Discriminator:
    """Route a part to its model by ``type``; unknown types go to ``GenericPart``."""

    def tag(value: Any) -> str:
        part_type = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
        return part_type if part_type in known else UNKNOWN_PART_TAG

    return Discriminator(tag)


UserContentPart = Annotated[
    Annotated[TextPart, Tag("text")]
    | Annotated[FilePart, Tag("file")]
    | Annotated[GenericPart, Tag(UNKNOWN_PART_TAG)],
    _part_discriminator(frozenset({"text", "file"})),
]
AssistantContentPart = Annotated[
    Annotated[TextPart, Tag("text")]
    | Annotated[FilePart, Tag("file")]
    | Annotated[ReasoningPart, Tag("reasoning")]
    | Annotated[ToolCallPart, Tag("tool-call")]
    | Annotated[ToolResultPart, Tag("tool-result")]
    | Annotated[GenericPart, Tag(UNKNOWN_PART_TAG)],
    _part_discriminator(frozenset({"text", "file", "reasoning", "tool-call", "tool-result"})),
]
ToolContentPart = Annotated[
    Annotated[ToolResultPart, Tag("tool-result")] | Annotated[GenericPart, Tag(UNKNOWN_PART_TAG)],
    _part_discriminator(frozenset({"tool-result"})),
]


# ============================================================
# Messages
# ============================================================


class SystemMessage(_ContractModel):
    role: Literal["system"] = "system"
    content: str


class UserMessage(_ContractModel):
    role: Literal["user"] = "user"
    content: str | list[UserContentPart]


class AssistantMessage(_ContractModel):
    role: Literal["assistant"] = "assistant"
    content: str | list[AssistantContentPart]


class ToolMessage(_ContractModel):
    role: Literal["tool"] = "tool"
    content: list[ToolContentPart]


Message = Annotated[
    SystemMessage | UserMessage | AssistantMessage | ToolMessage,
    Field(discriminator="role"),
]

type Prompt = list[Message]


# ============================================================
# Generated Content
# ============================================================


class TextContent(_ContractModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallContent(_ContractModel):
    """Tool call produced by the model. ``input`` is the JSON-encoded argument object."""

    type: Literal["tool-call"] = "tool-call"
    tool_call_id: str = Field(alias="toolCallId")
    tool_name: str = Field(alias="toolName")
    input: str


Content = Annotated[TextContent | ToolCallContent, Field(discriminator="type")]
