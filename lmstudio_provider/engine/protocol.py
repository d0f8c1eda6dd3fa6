"""
Interfaces the provider needs from the LM Studio engine.

The provider never constructs a transport itself: callers hand it an
``EngineClient`` (the LM Studio SDK client, or a fake in tests).

``EngineModel.act`` receives the engine options as keyword arguments. Options
the provider decided not to set are *not passed at all*; the engine treats an
absent keyword differently from one passed as ``None``.
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol, runtime_checkable

from .types import ChatMessageData, RawFunctionTool


# The engine reports unknown models with an error whose message starts with this.
MODEL_NOT_FOUND_PREFIX = "Model not found: "


@runtime_checkable
class EngineModel(Protocol):
    async def act(
        self,
        messages: Sequence[ChatMessageData],
        tools: Sequence[RawFunctionTool],
        **options: Any,
    ) -> Any:
        """
        Run the multi-round prediction loop.

        Callbacks arrive as ``on_prediction_fragment``, ``on_message``,
        ``on_round_end``, ``on_prediction_completed`` and ``on_failure``
        keyword arguments, the cancellation handle as ``signal``. Callbacks
        are invoked one at a time, in order. Raises once the signal is
        cancelled.
        """
        ...


@runtime_checkable
class EngineClient(Protocol):
    async def load(self, model_id: str) -> EngineModel: ...


# Builds a client for the LM Studio instance at the given base URL (None: local default).
type ClientFactory = Callable[[str | None], EngineClient]
