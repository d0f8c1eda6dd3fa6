"""
Prediction Run - one act() invocation with the round-boundary stop.

The generic contract is single-shot: a call returns text and/or tool calls and
the caller executes the tools. LM Studio's ``act()`` instead keeps looping
(predict → execute tools → predict ...). ``PredictionRun`` therefore cancels
its own handle from ``on_round_end`` with a ``ROUND_BOUNDARY`` reason as soon
as the first round completes. When ``act()`` then fails, the handle's reason
tells the two cases apart:

- ROUND_BOUNDARY: the stop we asked for, the run succeeded
- anything else (including a caller abort): a real failure, re-raised unchanged

States: idle → running → completed | aborted_intentionally | failed
"""

import enum
from collections.abc import Sequence
from typing import Any, Protocol

from loguru import logger

from .cancellation import CancellationHandle, CancellationKind, CancellationReason
from .chunk_logger import Mode, chunk_logger
from .engine.protocol import EngineModel
from .engine.types import ChatMessage, ChatMessageData, PredictionFragment, PredictionResult, RawFunctionTool
from .errors import NoContentGeneratedError


class RunState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED_INTENTIONALLY = "aborted-intentionally"
    FAILED = "failed"


class RunObserver(Protocol):
    """Receives fragments and finished messages as they arrive (the stream synthesizer)."""

    def on_fragment(self, fragment: PredictionFragment) -> None: ...

    def on_message(self, message: ChatMessageData) -> None: ...


class PredictionRun:
    """
    Owns the state of one invocation: its cancellation handle, the messages
    received so far, the completed prediction and any engine-reported failure.
    Never reused across calls.
    """

    def __init__(
        self,
        abort_signal: CancellationHandle | None = None,
        observer: RunObserver | None = None,
        mode: Mode = "generate",
    ):
        self.handle = CancellationHandle()
        self.state = RunState.IDLE
        self.received_messages: list[ChatMessageData] = []
        self.prediction_result: PredictionResult | None = None
        self.failure: Exception | None = None
        self._abort_signal = abort_signal
        self._observer = observer
        self._mode = mode

    # ========================================================================
    # Engine callbacks (invoked one at a time, in order, never concurrently)
    # ========================================================================

    def _on_prediction_fragment(self, fragment: PredictionFragment) -> None:
        chunk_logger.log_chunk(
            location="engine-fragment",
            direction="in",
            chunk=fragment.model_dump(mode="json", by_alias=True),
            mode=self._mode,
        )
        if self._observer is not None:
            self._observer.on_fragment(fragment)

    def _on_message(self, message: ChatMessage) -> None:
        data = message.get_data()
        chunk_logger.log_chunk(
            location="engine-message",
            direction="in",
            chunk=data.model_dump(mode="json", by_alias=True),
            mode=self._mode,
        )
        self.received_messages.append(data)
        if self._observer is not None:
            self._observer.on_message(data)

    def _on_round_end(self, round_index: int) -> None:
        logger.debug(f"[RUN] Round {round_index} ended, stopping the prediction loop")
        self.handle.cancel(CancellationReason.round_boundary())

    def _on_prediction_completed(self, result: PredictionResult) -> None:
        chunk_logger.log_chunk(
            location="engine-completion",
            direction="in",
            chunk=result.model_dump(mode="json", by_alias=True),
            mode=self._mode,
        )
        self.prediction_result = result

    def _on_failure(self, error: Exception) -> None:
        logger.warning(f"[RUN] Engine reported failure: {error!r}")
        self.failure = error

    def _forward_caller_abort(self, reason: CancellationReason) -> None:
        logger.info(f"[RUN] Caller aborted: {reason.detail!r}")
        self.handle.cancel(CancellationReason.caller(reason.detail))

    # ========================================================================

    @property
    def stopped_at_round_boundary(self) -> bool:
        reason = self.handle.reason
        return reason is not None and reason.kind is CancellationKind.ROUND_BOUNDARY

    @property
    def succeeded(self) -> bool:
        return self.state in {RunState.COMPLETED, RunState.ABORTED_INTENTIONALLY}

    def act_options(self, engine_options: dict[str, Any]) -> dict[str, Any]:
        """Merged engine options plus this run's callbacks and cancellation handle."""
        return {
            **engine_options,
            "on_prediction_fragment": self._on_prediction_fragment,
            "on_message": self._on_message,
            "on_round_end": self._on_round_end,
            "on_prediction_completed": self._on_prediction_completed,
            "on_failure": self._on_failure,
            "signal": self.handle,
        }

    async def execute(
        self,
        model: EngineModel,
        messages: Sequence[ChatMessageData],
        tools: Sequence[RawFunctionTool],
        engine_options: dict[str, Any],
    ) -> PredictionResult:
        """
        Run ``act()`` once and return the completed prediction.

        Raises:
            NoContentGeneratedError: act() ended without on_prediction_completed
            Exception: Any engine failure other than the round-boundary stop,
                unchanged
        """
        if self.state is not RunState.IDLE:
            msg = f"PredictionRun can only execute once (state={self.state.value})"
            raise RuntimeError(msg)

        self.state = RunState.RUNNING
        unlink = (
            self._abort_signal.add_listener(self._forward_caller_abort)
            if self._abort_signal is not None
            else None
        )
        logger.info(f"[RUN] act(): {len(messages)} messages, {len(tools)} tools")

        try:
            await model.act(messages, tools, **self.act_options(engine_options))
        except Exception as e:
            if not self.stopped_at_round_boundary:
                self.state = RunState.FAILED
                logger.error(f"[RUN] act() failed: {e!r} (cancel reason={self.handle.reason!r})")
                raise
            logger.debug(f"[RUN] act() stopped at round boundary: {e!r}")
            self.state = RunState.ABORTED_INTENTIONALLY
        else:
            if self.failure is not None and not self.stopped_at_round_boundary:
                self.state = RunState.FAILED
                logger.error(f"[RUN] act() returned after reporting failure: {self.failure!r}")
                raise self.failure
            self.state = RunState.COMPLETED
        finally:
            if unlink is not None:
                unlink()

        if self.prediction_result is None:
            self.state = RunState.FAILED
            logger.error("[RUN] act() ended without a completed prediction")
            raise NoContentGeneratedError()

        return self.prediction_result
