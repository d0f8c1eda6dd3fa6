"""
Three-valued option fields for building engine options.

While merging, every engine option is held as ``Explicit[T]``: either a value
or ``OMIT``. ``OMIT`` is a dedicated sentinel, distinct from ``None``, so a
field the merge decided not to set can never leak into the engine call as
``field=None``. ``strip_omitted`` projects the record to "present" / "absent"
at the boundary.
"""

import enum
from collections.abc import Mapping
from typing import Any, Final, Literal


class _Omit(enum.Enum):
    OMIT = "omit"

    def __repr__(self) -> str:
        return "OMIT"


OMIT: Final = _Omit.OMIT

type Explicit[T] = T | Literal[_Omit.OMIT]


def explicit[T](value: T | None) -> Explicit[T]:
    """Map ``None`` (cleared or never given) to ``OMIT``."""
    return OMIT if value is None else value


def is_omitted(value: object) -> bool:
    return value is OMIT


def strip_omitted(mapped: Mapping[str, Any]) -> dict[str, Any]:
    """Drop every field still holding ``OMIT``; all other values pass through unchanged."""
    return {key: value for key, value in mapped.items() if value is not OMIT}
