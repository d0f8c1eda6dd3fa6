"""
LM Studio Engine Data Types.

Python models for the data the LM Studio ``act()`` loop consumes and produces.
Aliases follow LM Studio's camelCase JSON names.

Message shape:
- ChatMessageData(role, content=[part, ...])
  - text:            {"type": "text", "text": "..."}
  - toolCallRequest: {"type": "toolCallRequest", "toolCallRequest": {"id", "type", "name", "arguments"}}
  - toolCallResult:  {"type": "toolCallResult", "toolCallId", "content": "<string>"}
  - file:            {"type": "file", "name", "identifier", ...}

Callbacks deliver ``PredictionFragment`` (streamed tokens), ``ChatMessage``
(a finished message), the round index at each round end, and
``PredictionResult`` (the completed prediction with stats).
"""

import enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class _EngineModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())


# ============================================================
# Chat Messages
# ============================================================


class ChatMessagePartTextData(_EngineModel):
    type: Literal["text"] = "text"
    text: str


class FunctionToolCallRequest(_EngineModel):
    id: str | None = None
    type: Literal["function"] = "function"
    name: str
    arguments: dict[str, Any] | None = None


class ChatMessagePartToolCallRequestData(_EngineModel):
    type: Literal["toolCallRequest"] = "toolCallRequest"
    tool_call_request: FunctionToolCallRequest = Field(alias="toolCallRequest")


class ChatMessagePartToolCallResultData(_EngineModel):
    type: Literal["toolCallResult"] = "toolCallResult"
    content: str
    tool_call_id: str | None = Field(default=None, alias="toolCallId")


class ChatMessagePartFileData(_EngineModel):
    type: Literal["file"] = "file"
    name: str
    identifier: str
    size_bytes: int | None = Field(default=None, alias="sizeBytes")
    file_type: str | None = Field(default=None, alias="fileType")


ChatMessagePartData = Annotated[
    ChatMessagePartTextData
    | ChatMessagePartToolCallRequestData
    | ChatMessagePartToolCallResultData
    | ChatMessagePartFileData,
    Field(discriminator="type"),
]

ChatMessageRole = Literal["assistant", "user", "system", "tool"]


class ChatMessageData(_EngineModel):
    role: ChatMessageRole
    content: list[ChatMessagePartData] = Field(default_factory=list)


class ChatMessage:
    """
    Message handed out by the engine while a prediction runs.

    The engine keeps mutating its own instance; ``get_data()`` returns a deep
    copy so nothing the provider stores aliases engine state.
    """

    def __init__(self, data: ChatMessageData):
        self._data = data

    @property
    def role(self) -> ChatMessageRole:
        return self._data.role

    def get_data(self) -> ChatMessageData:
        return self._data.model_copy(deep=True)

    def __repr__(self) -> str:
        return f"ChatMessage(role={self._data.role!r}, parts={len(self._data.content)})"


# ============================================================
# Prediction Progress and Results
# ============================================================


class ReasoningType(str, enum.Enum):
    """Classification of a streamed fragment by the engine's reasoning parser."""

    NONE = "none"
    REASONING = "reasoning"
    REASONING_START_TAG = "reasoningStartTag"
    REASONING_END_TAG = "reasoningEndTag"


class PredictionFragment(_EngineModel):
    content: str
    tokens_count: int = Field(default=0, alias="tokensCount")
    contains_drafted: bool = Field(default=False, alias="containsDrafted")
    reasoning_type: ReasoningType = Field(default=ReasoningType.NONE, alias="reasoningType")
    round_index: int = Field(default=0, alias="roundIndex")


class StopReason(str, enum.Enum):
    USER_STOPPED = "userStopped"
    MODEL_UNLOADED = "modelUnloaded"
    FAILED = "failed"
    EOS_FOUND = "eosFound"
    STOP_STRING_FOUND = "stopStringFound"
    TOOL_CALLS = "toolCalls"
    MAX_PREDICTED_TOKENS_REACHED = "maxPredictedTokensReached"
    CONTEXT_LENGTH_REACHED = "contextLengthReached"


class PredictionStats(_EngineModel):
    stop_reason: StopReason = Field(alias="stopReason")
    prompt_tokens_count: int | None = Field(default=None, alias="promptTokensCount")
    predicted_tokens_count: int | None = Field(default=None, alias="predictedTokensCount")
    total_tokens_count: int | None = Field(default=None, alias="totalTokensCount")
    tokens_per_second: float | None = Field(default=None, alias="tokensPerSecond")
    time_to_first_token_sec: float | None = Field(default=None, alias="timeToFirstTokenSec")


class ModelInfo(_EngineModel):
    identifier: str
    model_key: str | None = Field(default=None, alias="modelKey")
    display_name: str | None = Field(default=None, alias="displayName")


class PredictionResult(_EngineModel):
    content: str = ""
    reasoning_content: str = Field(default="", alias="reasoningContent")
    non_reasoning_content: str = Field(default="", alias="nonReasoningContent")
    stats: PredictionStats
    model_info: ModelInfo = Field(alias="modelInfo")
    round_index: int = Field(default=0, alias="roundIndex")


# ============================================================
# Tool Declarations
# ============================================================


class RawFunctionTool(_EngineModel):
    """
    Declaration-only function tool.

    Carries the name, description and JSON schema the model needs to emit a
    call; it has no implementation. Tool execution belongs to the caller of
    the generic contract, which receives the call as output.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: Literal["rawFunction"] = "rawFunction"
    name: str
    description: str = ""
    parameters_json_schema: dict[str, Any] = Field(
        default_factory=dict, alias="parametersJsonSchema"
    )
