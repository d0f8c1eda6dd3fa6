"""Ok/Error values for parsers that report failure instead of raising.

``parse_lmstudio_config`` returns the validated provider block or the
pydantic issues it found; ``convert_call_options`` decides how the issues
become an ``InvalidArgumentError``.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T


@dataclass(frozen=True, slots=True)
class Error[E]:
    """Failure carrying whatever the parser found wrong."""

    value: E


type Result[T, E] = Ok[T] | Error[E]
