"""Tests for LM Studio stop reason → generic finish reason mapping."""

import pytest

from lmstudio_provider.engine.types import StopReason
from lmstudio_provider.finish_reason import map_lmstudio_finish_reason, resolve_finish_reason
from lmstudio_provider.protocol import FinishReason


class TestMapFinishReason:
    @pytest.mark.parametrize(
        ("stop_reason", "expected"),
        [
            ("userStopped", FinishReason.STOP),
            ("eosFound", FinishReason.STOP),
            ("stopStringFound", FinishReason.STOP),
            ("maxPredictedTokensReached", FinishReason.LENGTH),
            ("contextLengthReached", FinishReason.LENGTH),
            ("failed", FinishReason.ERROR),
            ("modelUnloaded", FinishReason.OTHER),
            ("toolCalls", FinishReason.TOOL_CALLS),
        ],
    )
    def test_mapping(self, stop_reason: str, expected: FinishReason) -> None:
        assert map_lmstudio_finish_reason(stop_reason) is expected

    def test_every_stop_reason_is_mapped(self) -> None:
        for stop_reason in StopReason:
            assert isinstance(map_lmstudio_finish_reason(stop_reason), FinishReason)

    def test_unknown_stop_reason_raises(self) -> None:
        with pytest.raises(ValueError):
            map_lmstudio_finish_reason("gremlins")


class TestResolveFinishReason:
    @pytest.mark.parametrize("stop_reason", list(StopReason))
    def test_observed_tool_call_overrides_stop_reason(self, stop_reason: StopReason) -> None:
        assert resolve_finish_reason(stop_reason, tool_was_called=True) is FinishReason.TOOL_CALLS

    def test_without_tool_call_native_reason_is_used(self) -> None:
        assert (
            resolve_finish_reason(StopReason.MAX_PREDICTED_TOKENS_REACHED, tool_was_called=False)
            is FinishReason.LENGTH
        )

    def test_tool_calls_without_tool_call_is_not_reported(self, captured_logs) -> None:
        # given / when
        reason = resolve_finish_reason(StopReason.TOOL_CALLS, tool_was_called=False)

        # then
        assert reason is FinishReason.OTHER
        assert any("[FINISH]" in line for line in captured_logs)
