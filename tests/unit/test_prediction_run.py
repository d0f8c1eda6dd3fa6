"""
Prediction Run Tests

The run stops act() after the first round by cancelling its own handle with a
round-boundary reason. The resulting engine error means success; any other
cancellation or failure propagates unchanged.
"""

import pytest

from lmstudio_provider.cancellation import (
    CancellationKind,
    CancellationReason,
    PredictionCancelledError,
)
from lmstudio_provider.engine.types import (
    ChatMessage,
    ChatMessageData,
    ChatMessagePartTextData,
    StopReason,
)
from lmstudio_provider.errors import NoContentGeneratedError
from lmstudio_provider.prediction_run import PredictionRun, RunState
from tests.utils.fake_engine import (
    FakeEngineModel,
    abort,
    completed,
    fragment,
    raise_error,
    report_failure,
    round_end,
    text_message,
)


MESSAGES = [ChatMessageData(role="user", content=[])]


class SignalIgnoringEngine:
    """Engine that never checks the handle and delivers every step, like a slow abort."""

    def __init__(self, model: FakeEngineModel):
        self._model = model

    async def act(self, messages, tools, **options):
        for step in self._model.steps:
            step(options)


async def _execute(run: PredictionRun, model, options: dict | None = None):
    return await run.execute(model, MESSAGES, [], options or {})


class TestRoundBoundary:
    @pytest.mark.asyncio
    async def test_round_boundary_stop_is_success(self) -> None:
        # given
        model = FakeEngineModel(
            [
                text_message("assistant", "4"),
                completed(StopReason.EOS_FOUND, content="4"),
                round_end(0),
                text_message("assistant", "second round must not run"),
            ]
        )
        run = PredictionRun()

        # when
        result = await _execute(run, model)

        # then
        assert result.content == "4"
        assert run.state is RunState.ABORTED_INTENTIONALLY
        assert run.succeeded
        assert run.handle.reason.kind is CancellationKind.ROUND_BOUNDARY
        assert [m.content[0].text for m in run.received_messages] == ["4"]

    @pytest.mark.asyncio
    async def test_act_returning_normally_is_completed(self) -> None:
        # given an engine that ends without a round-end callback
        model = FakeEngineModel([completed(StopReason.EOS_FOUND, content="ok")])
        run = PredictionRun()

        # when
        await _execute(run, model)

        # then
        assert run.state is RunState.COMPLETED

    @pytest.mark.asyncio
    async def test_engine_failure_after_round_boundary_is_success(self) -> None:
        # given an engine that reports its own error once the handle is cancelled
        model = FakeEngineModel(
            [
                completed(StopReason.TOOL_CALLS),
                round_end(0),
                report_failure(RuntimeError("aborted")),
                raise_error(RuntimeError("aborted")),
            ]
        )

        # when
        run = PredictionRun()
        await _execute(run, SignalIgnoringEngine(model))

        # then
        assert run.state is RunState.ABORTED_INTENTIONALLY


class TestFailures:
    @pytest.mark.asyncio
    async def test_caller_abort_propagates_unchanged(self, caller_signal) -> None:
        # given
        model = FakeEngineModel([fragment("par"), abort(caller_signal, "user pressed stop")])
        run = PredictionRun(abort_signal=caller_signal)

        # when
        with pytest.raises(PredictionCancelledError) as exc_info:
            await _execute(run, model)

        # then
        assert exc_info.value.reason == CancellationReason.caller("user pressed stop")
        assert run.state is RunState.FAILED
        assert not run.succeeded

    @pytest.mark.asyncio
    async def test_caller_abort_wins_over_later_round_end(self, caller_signal) -> None:
        # given the caller aborts and the round ends before the engine checks the handle
        def abort_then_round_end(options: dict) -> None:
            abort(caller_signal)(options)
            round_end(0)(options)

        model = FakeEngineModel([abort_then_round_end, completed(StopReason.EOS_FOUND)])
        run = PredictionRun(abort_signal=caller_signal)

        # when / then
        with pytest.raises(PredictionCancelledError) as exc_info:
            await _execute(run, model)
        assert exc_info.value.reason.kind is CancellationKind.CALLER_REQUESTED
        assert run.handle.reason.kind is CancellationKind.CALLER_REQUESTED

    @pytest.mark.asyncio
    async def test_pre_cancelled_caller_signal_fails_immediately(self, caller_signal) -> None:
        # given
        caller_signal.cancel(CancellationReason.caller("before start"))
        model = FakeEngineModel([completed(StopReason.EOS_FOUND)])

        # when / then
        with pytest.raises(PredictionCancelledError):
            await _execute(PredictionRun(abort_signal=caller_signal), model)

    @pytest.mark.asyncio
    async def test_engine_exception_is_reraised_unchanged(self) -> None:
        # given
        error = ConnectionError("lost websocket")
        model = FakeEngineModel([fragment("x"), raise_error(error)])

        # when / then
        with pytest.raises(ConnectionError) as exc_info:
            await _execute(PredictionRun(), model)
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_reported_failure_without_exception_is_raised(self) -> None:
        # given
        error = RuntimeError("model crashed")
        model = FakeEngineModel([report_failure(error), completed(StopReason.FAILED)])

        # when / then
        with pytest.raises(RuntimeError) as exc_info:
            await _execute(PredictionRun(), model)
        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_missing_completion_raises_no_content(self) -> None:
        model = FakeEngineModel([fragment("x"), round_end(0)])
        run = PredictionRun()

        with pytest.raises(NoContentGeneratedError):
            await _execute(run, model)
        assert run.state is RunState.FAILED

    @pytest.mark.asyncio
    async def test_run_cannot_execute_twice(self) -> None:
        model = FakeEngineModel([completed(StopReason.EOS_FOUND)])
        run = PredictionRun()
        await _execute(run, model)

        with pytest.raises(RuntimeError, match="only execute once"):
            await _execute(run, model)


class TestActOptions:
    @pytest.mark.asyncio
    async def test_callbacks_and_signal_are_installed(self) -> None:
        # given
        model = FakeEngineModel([completed(StopReason.EOS_FOUND)])
        run = PredictionRun()

        # when
        await _execute(run, model, {"temperature": 0.1})

        # then
        options = model.calls[0].options
        assert options["temperature"] == 0.1
        assert options["signal"] is run.handle
        for callback in (
            "on_prediction_fragment",
            "on_message",
            "on_round_end",
            "on_prediction_completed",
            "on_failure",
        ):
            assert callable(options[callback])

    @pytest.mark.asyncio
    async def test_caller_listener_is_removed_after_run(self, caller_signal) -> None:
        # given
        model = FakeEngineModel([completed(StopReason.EOS_FOUND)])
        run = PredictionRun(abort_signal=caller_signal)
        await _execute(run, model)

        # when the caller cancels after the run finished
        caller_signal.cancel()

        # then the run's handle is untouched
        assert not run.handle.cancelled

    @pytest.mark.asyncio
    async def test_received_messages_are_copies(self) -> None:
        # given a message object the engine keeps owning
        engine_data = ChatMessageData(role="assistant", content=[ChatMessagePartTextData(text="4")])

        def deliver(options: dict) -> None:
            options["on_message"](ChatMessage(engine_data))

        model = FakeEngineModel([deliver, completed(StopReason.EOS_FOUND)])
        run = PredictionRun()

        # when
        await _execute(run, model)
        run.received_messages[0].content.clear()

        # then
        assert engine_data.content == [ChatMessagePartTextData(text="4")]
