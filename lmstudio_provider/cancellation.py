"""
Cooperative cancellation for a single prediction run.

A ``CancellationHandle`` is handed to the engine as its ``signal``. The engine
polls it (or registers a listener) and fails the run with
``PredictionCancelledError`` once it is cancelled.

Reasons are tagged: the provider stops the engine's multi-round loop with a
``ROUND_BOUNDARY`` reason, and anything the caller triggers is re-tagged as
``CALLER_REQUESTED``. Reasons are compared by kind, never by message text.
"""

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from loguru import logger


class CancellationKind(str, enum.Enum):
    """Why a run was cancelled."""

    CALLER_REQUESTED = "caller-requested"
    ROUND_BOUNDARY = "round-boundary"


@dataclass(frozen=True)
class CancellationReason:
    kind: CancellationKind
    detail: Any = None

    @classmethod
    def caller(cls, detail: Any = None) -> "CancellationReason":
        return cls(kind=CancellationKind.CALLER_REQUESTED, detail=detail)

    @classmethod
    def round_boundary(cls) -> "CancellationReason":
        return cls(kind=CancellationKind.ROUND_BOUNDARY, detail="prediction round ended")


class PredictionCancelledError(RuntimeError):
    """Raised by an engine that observed a cancelled handle."""

    def __init__(self, reason: CancellationReason):
        self.reason = reason
        super().__init__(f"Prediction cancelled ({reason.kind.value}): {reason.detail}")


type CancellationListener = Callable[[CancellationReason], None]


class CancellationHandle:
    """
    Write-once cancellation signal.

    The first ``cancel()`` wins; later calls are ignored so the reason the
    engine observes cannot change underneath it. Listeners run synchronously
    inside ``cancel()``.
    """

    def __init__(self) -> None:
        self._reason: CancellationReason | None = None
        self._listeners: list[CancellationListener] = []

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> CancellationReason | None:
        return self._reason

    def cancel(self, reason: CancellationReason | None = None) -> None:
        if self._reason is not None:
            logger.debug(
                f"[CANCEL] Ignoring {reason!r}, already cancelled with {self._reason!r}"
            )
            return
        self._reason = reason or CancellationReason.caller()
        listeners = list(self._listeners)
        self._listeners.clear()
        for listener in listeners:
            listener(self._reason)

    def add_listener(self, listener: CancellationListener) -> Callable[[], None]:
        """
        Register a listener called once with the reason on cancellation.

        Runs immediately if the handle is already cancelled.

        Returns:
            A function that unregisters the listener.
        """
        if self._reason is not None:
            listener(self._reason)
            return lambda: None

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def raise_if_cancelled(self) -> None:
        if self._reason is not None:
            raise PredictionCancelledError(self._reason)

    def __repr__(self) -> str:
        return f"CancellationHandle(reason={self._reason!r})"
