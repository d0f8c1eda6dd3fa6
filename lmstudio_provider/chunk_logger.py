"""
Chunk Logger for the LM Studio bridge

Records what crosses the bridge during a call, for debugging and for building
replay fixtures. Outputs JSONL (1 line = 1 chunk).

Usage:
    from lmstudio_provider.chunk_logger import chunk_logger

    chunk_logger.log_chunk(
        location="engine-fragment",
        direction="in",
        chunk=fragment.model_dump(mode="json", by_alias=True),
        mode="stream",
    )

Environment Variables:
    CHUNK_LOGGER_ENABLED: Enable/disable logging (default: false)
    CHUNK_LOGGER_OUTPUT_DIR: Output directory (default: ./chunk_logs)
    CHUNK_LOGGER_SESSION_ID: Session identifier (default: auto-generated)

Output Structure:
    chunk_logs/
      └─ {session_id}/
          ├─ engine-fragment.jsonl
          ├─ engine-message.jsonl
          ├─ engine-completion.jsonl
          └─ stream-part.jsonl
"""

import json
import os
import time
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal, TextIO


LogLocation = Literal[
    "engine-fragment",  # PredictionFragment from on_prediction_fragment (input)
    "engine-message",  # ChatMessageData from on_message (input)
    "engine-completion",  # PredictionResult from on_prediction_completed (input)
    "stream-part",  # Stream part emitted to the caller (output)
]

Direction = Literal["in", "out"]

Mode = Literal["generate", "stream"]


@dataclass
class ChunkLogEntry:
    timestamp: int  # Unix timestamp (ms)
    session_id: str
    mode: Mode
    location: LogLocation
    direction: Direction
    sequence_number: int  # Per-location order
    chunk: Any  # JSON-compatible payload
    metadata: dict[str, Any] | None = None


class ChunkLogger:
    """Writes chunks to one JSONL file per location under a session directory."""

    def __init__(
        self,
        enabled: bool | None = None,
        output_dir: str | None = None,
        session_id: str | None = None,
    ):
        """
        Args:
            enabled: Enable/disable logging (default: from env CHUNK_LOGGER_ENABLED)
            output_dir: Output directory (default: env CHUNK_LOGGER_OUTPUT_DIR or ./chunk_logs)
            session_id: Session ID (default: env CHUNK_LOGGER_SESSION_ID or timestamp-based)
        """
        self._enabled = (
            enabled
            if enabled is not None
            else os.getenv("CHUNK_LOGGER_ENABLED", "false").lower() == "true"
        )
        self._output_dir = Path(
            output_dir
            if output_dir is not None
            else os.getenv("CHUNK_LOGGER_OUTPUT_DIR", "./chunk_logs")
        )
        self._session_id = (
            session_id or os.getenv("CHUNK_LOGGER_SESSION_ID") or self._generate_session_id()
        )
        self._sequence_counters: dict[LogLocation, int] = {}
        self._file_handles: dict[LogLocation, TextIO] = {}

    @staticmethod
    def _generate_session_id() -> str:
        timestamp = datetime.now(UTC).strftime("%Y-%m-%d-%H%M%S")
        return f"session-{timestamp}"

    def _get_file_handle(self, location: LogLocation) -> TextIO:
        if location not in self._file_handles:
            session_dir = self.get_output_path()
            session_dir.mkdir(parents=True, exist_ok=True)
            file_path = session_dir / f"{location}.jsonl"
            self._file_handles[location] = file_path.open("a", encoding="utf-8", buffering=1)
        return self._file_handles[location]

    def is_enabled(self) -> bool:
        return self._enabled

    def log_chunk(
        self,
        location: LogLocation,
        direction: Direction,
        chunk: Any,
        mode: Mode = "generate",
        metadata: dict[str, Any] | None = None,
    ) -> None:
        if not self._enabled:
            return

        sequence_number = self._sequence_counters.get(location, 0) + 1
        self._sequence_counters[location] = sequence_number

        entry = ChunkLogEntry(
            timestamp=int(time.time() * 1000),
            session_id=self._session_id,
            mode=mode,
            location=location,
            direction=direction,
            sequence_number=sequence_number,
            chunk=chunk,
            metadata=metadata,
        )
        self._get_file_handle(location).write(
            json.dumps(asdict(entry), ensure_ascii=False, default=str) + "\n"
        )

    def get_output_path(self) -> Path:
        return self._output_dir / self._session_id

    def get_info(self) -> dict[str, Any]:
        return {
            "enabled": self._enabled,
            "output_dir": str(self._output_dir),
            "session_id": self._session_id,
            "output_path": str(self.get_output_path()),
        }

    def close(self) -> None:
        for handle in self._file_handles.values():
            handle.close()
        self._file_handles.clear()

    def __enter__(self) -> "ChunkLogger":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


# Global singleton instance
chunk_logger = ChunkLogger()
