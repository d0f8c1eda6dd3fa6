"""
LM Studio act() Callbacks → Generic Stream Parts

``StreamEventSynthesizer`` receives the engine's fragment, message and
completion callbacks during ``do_stream`` and emits stream parts in the order
the engine delivered them.

Supports:
- Text streaming (text-start/delta/end), span opened lazily on the first plain fragment
- Reasoning (reasoning-start/delta/end), span bounded by the engine's delimiter fragments
- Tool calls (one tool-call part per toolCallRequest in a finished message)
- Finish (exactly one, last), with mapped finish reason and token usage

The synthesizer holds no buffer: the only state is which span is open and
its id. One text id and one reasoning id are generated per run.
"""

from collections.abc import Callable

from loguru import logger

from .chunk_logger import chunk_logger
from .convert_content import convert_content
from .engine.types import ChatMessageData, PredictionFragment, PredictionResult, ReasoningType
from .finish_reason import resolve_finish_reason
from .protocol.call_warnings import CallWarning
from .protocol.message_types import ToolCallContent
from .protocol.stream_parts import (
    FinishPart,
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
from .utils import generate_id


def usage_from_prediction(result: PredictionResult) -> Usage:
    input_tokens = result.stats.prompt_tokens_count or 0
    output_tokens = result.stats.predicted_tokens_count or 0
    return Usage(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
    )


class StreamEventSynthesizer:
    def __init__(
        self,
        emit: Callable[[StreamPart], None],
        warnings: list[CallWarning] | None = None,
        text_id: str | None = None,
        reasoning_id: str | None = None,
    ):
        """
        Args:
            emit: Receives every stream part, in order
            warnings: List that content warnings found while streaming are appended to
            text_id: Id for the text span. Generated if not provided.
            reasoning_id: Id for the reasoning span. Generated if not provided.
        """
        self._emit = emit
        self.warnings = warnings if warnings is not None else []
        self.text_id = text_id or generate_id("txt")
        self.reasoning_id = reasoning_id or generate_id("reasoning")
        self._text_open = False
        self._reasoning_open = False
        self.finished = False
        self.tool_was_called = False

    def _send(self, part: StreamPart) -> None:
        if self.finished:
            logger.warning(f"[STREAM] Dropping {part.type} received after finish")
            return
        chunk_logger.log_chunk(
            location="stream-part",
            direction="out",
            chunk=part.model_dump(mode="json", by_alias=True),
            mode="stream",
        )
        self._emit(part)

    def _open_reasoning(self) -> None:
        if not self._reasoning_open:
            self._reasoning_open = True
            self._send(ReasoningStartPart(id=self.reasoning_id))

    def _close_reasoning(self) -> None:
        if self._reasoning_open:
            self._reasoning_open = False
            self._send(ReasoningEndPart(id=self.reasoning_id))

    def on_fragment(self, fragment: PredictionFragment) -> None:
        """Route one fragment by its reasoning classification. Delimiters are never forwarded as text."""
        match fragment.reasoning_type:
            case ReasoningType.REASONING_START_TAG:
                self._open_reasoning()
            case ReasoningType.REASONING_END_TAG:
                self._close_reasoning()
            case ReasoningType.REASONING:
                self._open_reasoning()
                self._send(ReasoningDeltaPart(id=self.reasoning_id, delta=fragment.content))
            case ReasoningType.NONE:
                if not self._text_open:
                    self._text_open = True
                    self._send(TextStartPart(id=self.text_id))
                self._send(TextDeltaPart(id=self.text_id, delta=fragment.content))

    def on_message(self, message: ChatMessageData) -> None:
        """Emit a tool-call part for every tool call in a finished message."""
        content, warnings = convert_content([message])
        self.warnings.extend(warnings)

        for item in content:
            if not isinstance(item, ToolCallContent):
                continue
            self.tool_was_called = True
            logger.debug(f"[TOOL CALL] {item.tool_name}(id={item.tool_call_id}, input={item.input})")
            self._send(
                ToolCallStreamPart(
                    tool_call_id=item.tool_call_id,
                    tool_name=item.tool_name,
                    input=item.input,
                )
            )

    def finalize(self, result: PredictionResult) -> FinishPart:
        """Close open spans and send the single finish part."""
        self._close_reasoning()
        if self._text_open:
            self._text_open = False
            self._send(TextEndPart(id=self.text_id))

        finish = FinishPart(
            finish_reason=resolve_finish_reason(
                result.stats.stop_reason, tool_was_called=self.tool_was_called
            ),
            usage=usage_from_prediction(result),
        )
        self._send(finish)
        self.finished = True
        logger.info(
            f"[STREAM] Finished: reason={finish.finish_reason.value}, usage={finish.usage!r}"
        )
        return finish
