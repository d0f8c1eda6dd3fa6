"""SSE (Server-Sent Events) test utilities."""

import json
from typing import Any


def parse_sse_event(sse_string: str) -> dict[str, Any]:
    """Parse SSE format 'data: {json}\\n\\n' to dict.

    Examples:
        >>> parse_sse_event('data: {"type": "finish"}\\n\\n')
        {'type': 'finish'}
        >>> parse_sse_event('data: [DONE]\\n\\n')
        {'type': 'DONE'}
    """
    if sse_string.startswith("data: "):
        data_part = sse_string[6:].strip()
        if data_part == "[DONE]":
            return {"type": "DONE"}
        return json.loads(data_part)
    msg = f"Invalid SSE format: {sse_string}"
    raise ValueError(msg)
