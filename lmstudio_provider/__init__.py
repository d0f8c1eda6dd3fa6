"""
LM Studio provider for the AI SDK language model contract.

Adapts ``do_generate`` / ``do_stream`` calls onto LM Studio's multi-round
``act()`` loop, stopping it after the first round so tool calls are returned
to the caller instead of executed.
"""

from .cancellation import CancellationHandle, CancellationKind, CancellationReason
from .chat_model import LMStudioChatLanguageModel
from .errors import (
    InvalidArgumentError,
    InvalidToolArgumentsError,
    LMStudioProviderError,
    ModelLoadError,
    NoContentGeneratedError,
    NoSuchModelError,
)
from .provider import LMStudioProvider, create_lmstudio
from .settings import LMStudioChatConfig, LMStudioChatSettings
from .sse import format_sse_event, stream_to_sse


__all__ = [
    "CancellationHandle",
    "CancellationKind",
    "CancellationReason",
    "InvalidArgumentError",
    "InvalidToolArgumentsError",
    "LMStudioChatConfig",
    "LMStudioChatLanguageModel",
    "LMStudioChatSettings",
    "LMStudioProvider",
    "LMStudioProviderError",
    "ModelLoadError",
    "NoContentGeneratedError",
    "NoSuchModelError",
    "create_lmstudio",
    "format_sse_event",
    "stream_to_sse",
]
