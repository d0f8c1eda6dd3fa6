"""
LM Studio Chat Language Model

Implements the generic language model contract (``do_generate`` /
``do_stream``) on top of LM Studio's ``act()``.

Both entry points do all validation and conversion before touching the engine:

1. Merge options (convert_options) - InvalidArgumentError on a bad provider block
2. Convert the prompt (convert_messages) - InvalidToolArgumentsError on bad tool args
3. Convert tools (tools)
4. Load the model (once per instance) - NoSuchModelError / ModelLoadError
5. Execute one PredictionRun
"""

import asyncio
import contextlib
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from loguru import logger

from .cancellation import CancellationReason
from .convert_content import convert_content
from .convert_messages import convert_to_lmstudio_messages
from .convert_options import convert_call_options
from .engine.protocol import MODEL_NOT_FOUND_PREFIX, EngineClient, EngineModel
from .engine.types import ChatMessageData, RawFunctionTool
from .errors import ModelLoadError, NoSuchModelError
from .finish_reason import resolve_finish_reason
from .prediction_run import PredictionRun
from .protocol.call_options import CallOptions
from .protocol.call_warnings import CallWarning
from .protocol.message_types import ToolCallContent
from .protocol.results import GenerateResult, RequestMetadata, ResponseMetadata, StreamResult
from .protocol.stream_parts import StreamPart
from .settings import LMStudioChatSettings
from .stream_protocol import StreamEventSynthesizer, usage_from_prediction
from .tools import prepare_tools


@dataclass(frozen=True)
class _PreparedCall:
    engine_options: dict[str, Any]
    messages: list[ChatMessageData]
    tools: list[RawFunctionTool]
    warnings: list[CallWarning]

    def request_metadata(self) -> RequestMetadata:
        return RequestMetadata(
            body={
                "messages": [m.model_dump(mode="json", by_alias=True) for m in self.messages],
                "tools": [t.model_dump(mode="json", by_alias=True) for t in self.tools],
                "settings": self.engine_options,
            }
        )


@dataclass(frozen=True)
class _EndOfStream:
    error: Exception | None = None


class LMStudioChatLanguageModel:
    specification_version = "v2"

    def __init__(
        self,
        model_id: str,
        settings: LMStudioChatSettings,
        client: EngineClient,
        provider: str = "lmstudio",
    ):
        self.model_id = model_id
        self.settings = settings
        self.client = client
        self.provider = provider
        self._model: EngineModel | None = None

    async def get_model(self) -> EngineModel:
        """Load the model on first use and reuse it afterwards."""
        if self._model is not None:
            return self._model

        try:
            model = await self.client.load(self.model_id)
        except Exception as e:
            message = str(getattr(e, "title", None) or e)
            if message.startswith(MODEL_NOT_FOUND_PREFIX):
                logger.error(f"[MODEL] {message}")
                raise NoSuchModelError(model_id=self.model_id, message=message) from e
            logger.error(f"[MODEL] Failed to load {self.model_id}: {e!r}")
            raise ModelLoadError(model_id=self.model_id, message=str(e)) from e

        logger.info(f"[MODEL] Loaded {self.model_id}")
        self._model = model
        return model

    def _prepare_call(self, options: CallOptions) -> _PreparedCall:
        engine_options, warnings = convert_call_options(self.provider, options, self.settings)
        messages, message_warnings = convert_to_lmstudio_messages(options.prompt)
        tools, tool_warnings = prepare_tools(options.tools, options.tool_choice)
        return _PreparedCall(
            engine_options=engine_options,
            messages=messages,
            tools=tools,
            warnings=[*warnings, *message_warnings, *tool_warnings],
        )

    async def do_generate(self, options: CallOptions) -> GenerateResult:
        prepared = self._prepare_call(options)
        model = await self.get_model()

        run = PredictionRun(abort_signal=options.abort_signal, mode="generate")
        prediction = await run.execute(
            model, prepared.messages, prepared.tools, prepared.engine_options
        )

        content, content_warnings = convert_content(run.received_messages)
        tool_calls = [item for item in content if isinstance(item, ToolCallContent)]
        finish_reason = resolve_finish_reason(
            prediction.stats.stop_reason, tool_was_called=bool(tool_calls)
        )
        logger.info(
            f"[GENERATE] {self.model_id}: finish={finish_reason.value}, tool_calls={len(tool_calls)}"
        )

        return GenerateResult(
            content=content,
            text=prediction.non_reasoning_content or None,
            reasoning=prediction.reasoning_content or None,
            tool_calls=tool_calls,
            finish_reason=finish_reason,
            usage=usage_from_prediction(prediction),
            request=prepared.request_metadata(),
            response=ResponseMetadata(model_id=prediction.model_info.identifier, body=prediction),
            warnings=[*prepared.warnings, *content_warnings],
        )

    async def do_stream(self, options: CallOptions) -> StreamResult:
        prepared = self._prepare_call(options)
        model = await self.get_model()
        warnings = list(prepared.warnings)

        return StreamResult(
            stream=self._stream_parts(model, prepared, options, warnings),
            request=prepared.request_metadata(),
            warnings=warnings,
        )

    async def _stream_parts(
        self,
        model: EngineModel,
        prepared: _PreparedCall,
        options: CallOptions,
        warnings: list[CallWarning],
    ) -> AsyncIterator[StreamPart]:
        """
        Drive the run in a background task and yield parts as callbacks emit them.

        Engine failures are raised from the iterator after the parts emitted
        before the failure. Closing the iterator early cancels the run.
        """
        queue: asyncio.Queue[StreamPart | _EndOfStream] = asyncio.Queue()
        synthesizer = StreamEventSynthesizer(queue.put_nowait, warnings=warnings)
        run = PredictionRun(abort_signal=options.abort_signal, observer=synthesizer, mode="stream")

        async def drive() -> None:
            try:
                prediction = await run.execute(
                    model, prepared.messages, prepared.tools, prepared.engine_options
                )
                synthesizer.finalize(prediction)
            except Exception as e:
                queue.put_nowait(_EndOfStream(error=e))
            else:
                queue.put_nowait(_EndOfStream())

        task = asyncio.create_task(drive())
        try:
            while True:
                item = await queue.get()
                if isinstance(item, _EndOfStream):
                    if item.error is not None:
                        raise item.error
                    break
                yield item
        finally:
            if not task.done():
                logger.info("[STREAM] Consumer closed the stream early, cancelling the run")
                run.handle.cancel(CancellationReason.caller("stream closed by consumer"))
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

