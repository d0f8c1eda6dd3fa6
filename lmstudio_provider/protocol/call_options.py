"""
Generic Language Model Contract - Call Options.

``CallOptions`` is the flat per-call record passed to ``do_generate`` and
``do_stream``. Every field is tri-state and pydantic tracks which ones the
caller actually supplied (``model_fields_set``):

- field not supplied: no opinion, inherit lower configuration layers
- field supplied as ``None``: explicitly cleared
- field supplied with a value: set
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..cancellation import CancellationHandle
from .message_types import Message


class FunctionTool(BaseModel):
    """Function tool declaration. ``input_schema`` is a JSON schema for the arguments."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["function"] = "function"
    name: str
    description: str | None = None
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ProviderDefinedTool(BaseModel):
    """Tool implemented by a specific provider (e.g. web search). LM Studio has none."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["provider-defined"] = "provider-defined"
    id: str
    name: str
    args: dict[str, Any] = Field(default_factory=dict)


Tool = Annotated[FunctionTool | ProviderDefinedTool, Field(discriminator="type")]


class ToolChoice(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["auto", "none", "required", "tool"]
    tool_name: str | None = Field(default=None, alias="toolName")

    @model_validator(mode="after")
    def validate_tool_name(self) -> "ToolChoice":
        """A ``tool`` choice must name the tool."""
        if self.type == "tool" and not self.tool_name:
            msg = "toolChoice of type 'tool' requires toolName"
            raise ValueError(msg)
        return self


class ResponseFormat(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["text", "json"] = "text"
    json_schema: dict[str, Any] | None = Field(default=None, alias="schema")
    name: str | None = None
    description: str | None = None


class CallOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, arbitrary_types_allowed=True)

    prompt: list[Message]

    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")
    temperature: float | None = None
    stop_sequences: list[str] | None = Field(default=None, alias="stopSequences")
    top_p: float | None = Field(default=None, alias="topP")
    top_k: int | None = Field(default=None, alias="topK")
    presence_penalty: float | None = Field(default=None, alias="presencePenalty")
    frequency_penalty: float | None = Field(default=None, alias="frequencyPenalty")
    seed: int | None = None

    response_format: ResponseFormat | None = Field(default=None, alias="responseFormat")

    tools: list[Tool] | None = None
    tool_choice: ToolChoice | None = Field(default=None, alias="toolChoice")

    abort_signal: CancellationHandle | None = Field(default=None, alias="abortSignal", exclude=True)

    # Opaque per-provider blocks, keyed by provider name ("lmstudio").
    provider_options: dict[str, dict[str, Any]] | None = Field(
        default=None, alias="providerOptions"
    )
