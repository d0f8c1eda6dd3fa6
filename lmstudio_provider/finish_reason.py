"""LM Studio stop reasons → generic finish reasons."""

from loguru import logger

from .engine.types import StopReason
from .protocol.stream_parts import FinishReason


# Complete mapping for every StopReason member
_STOP_REASON_MAP: dict[StopReason, FinishReason] = {
    # Normal completion
    StopReason.USER_STOPPED: FinishReason.STOP,
    StopReason.EOS_FOUND: FinishReason.STOP,
    StopReason.STOP_STRING_FOUND: FinishReason.STOP,
    # Token limits
    StopReason.MAX_PREDICTED_TOKENS_REACHED: FinishReason.LENGTH,
    StopReason.CONTEXT_LENGTH_REACHED: FinishReason.LENGTH,
    # Failures
    StopReason.FAILED: FinishReason.ERROR,
    StopReason.MODEL_UNLOADED: FinishReason.OTHER,
    # Tool round
    StopReason.TOOL_CALLS: FinishReason.TOOL_CALLS,
}


def map_lmstudio_finish_reason(stop_reason: StopReason | str) -> FinishReason:
    """
    Map an LM Studio stop reason to the generic finish reason.

    Mappings:
        - userStopped, eosFound, stopStringFound → stop
        - maxPredictedTokensReached, contextLengthReached → length
        - failed → error
        - modelUnloaded → other
        - toolCalls → tool-calls
    """
    return _STOP_REASON_MAP[StopReason(stop_reason)]


def resolve_finish_reason(stop_reason: StopReason | str, *, tool_was_called: bool) -> FinishReason:
    """
    Finish reason reported for a run.

    A round that issued tool calls can end with any native stop reason (usually
    eosFound), so any observed tool call forces ``tool-calls``. Conversely
    ``tool-calls`` is never reported without a tool call to go with it.
    """
    if tool_was_called:
        return FinishReason.TOOL_CALLS

    finish_reason = map_lmstudio_finish_reason(stop_reason)
    if finish_reason is FinishReason.TOOL_CALLS:
        logger.warning("[FINISH] Engine reported toolCalls but no tool call was received")
        return FinishReason.OTHER
    return finish_reason
