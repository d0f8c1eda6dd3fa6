"""
Stream Parts → AI SDK Data Stream Protocol (SSE)

Renders the parts yielded by ``do_stream`` as Server-Sent Events so a stream
can be forwarded to an AI SDK client over HTTP unchanged:

    data: {"type":"text-delta","id":"txt_...","delta":"Hello"}\\n\\n
    ...
    data: [DONE]\\n\\n
"""

import json
from collections.abc import AsyncGenerator, AsyncIterator

from loguru import logger

from .protocol.stream_parts import StreamPart


# Example: 'data: {"type":"text-delta","id":"1","delta":"Hello"}\n\n'
type SseFormattedEvent = str

DONE_EVENT: SseFormattedEvent = "data: [DONE]\n\n"

# Maximum length for debug log messages before truncation
DEBUG_LOG_MAX_LENGTH = 100


def format_sse_event(part: StreamPart) -> SseFormattedEvent:
    """Format one stream part as an SSE ``data:`` event (camelCase keys, nulls dropped)."""
    payload = json.dumps(part.model_dump(mode="json", by_alias=True, exclude_none=True))
    logger.debug(
        f"[SSE] {payload[:DEBUG_LOG_MAX_LENGTH]}"
        f"{'... (truncated)' if len(payload) > DEBUG_LOG_MAX_LENGTH else ''}"
    )
    return f"data: {payload}\n\n"


async def stream_to_sse(stream: AsyncIterator[StreamPart]) -> AsyncGenerator[SseFormattedEvent]:
    """
    Render every part of ``stream`` and terminate with ``[DONE]``.

    ``[DONE]`` is only sent when the stream ends normally; an engine failure
    propagates to the consumer instead.
    """
    count = 0
    async for part in stream:
        count += 1
        yield format_sse_event(part)
    logger.info(f"[SSE] Stream complete: {count} events")
    yield DONE_EVENT
