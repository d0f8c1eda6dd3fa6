"""LM Studio engine data types and the interfaces the provider consumes."""

from .protocol import MODEL_NOT_FOUND_PREFIX, ClientFactory, EngineClient, EngineModel
from .types import (
    ChatMessage,
    ChatMessageData,
    ChatMessagePartData,
    ChatMessagePartFileData,
    ChatMessagePartTextData,
    ChatMessagePartToolCallRequestData,
    ChatMessagePartToolCallResultData,
    FunctionToolCallRequest,
    ModelInfo,
    PredictionFragment,
    PredictionResult,
    PredictionStats,
    RawFunctionTool,
    ReasoningType,
    StopReason,
)


__all__ = [
    "MODEL_NOT_FOUND_PREFIX",
    "ChatMessage",
    "ChatMessageData",
    "ClientFactory",
    "ChatMessagePartData",
    "ChatMessagePartFileData",
    "ChatMessagePartTextData",
    "ChatMessagePartToolCallRequestData",
    "ChatMessagePartToolCallResultData",
    "EngineClient",
    "EngineModel",
    "FunctionToolCallRequest",
    "ModelInfo",
    "PredictionFragment",
    "PredictionResult",
    "PredictionStats",
    "RawFunctionTool",
    "ReasoningType",
    "StopReason",
]
