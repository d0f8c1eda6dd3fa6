"""Warnings returned alongside results. They are never raised."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from .call_options import FunctionTool, ProviderDefinedTool


class UnsupportedSettingWarning(BaseModel):
    """A call setting that LM Studio cannot honour."""

    model_config = ConfigDict(frozen=True)

    type: Literal["unsupported-setting"] = "unsupported-setting"
    setting: str
    details: str | None = None


class UnsupportedToolWarning(BaseModel):
    """A declared tool that was not forwarded to the engine."""

    model_config = ConfigDict(frozen=True)

    type: Literal["unsupported-tool"] = "unsupported-tool"
    tool: FunctionTool | ProviderDefinedTool
    details: str | None = None


class OtherWarning(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["other"] = "other"
    message: str


CallWarning = Annotated[
    UnsupportedSettingWarning | UnsupportedToolWarning | OtherWarning,
    Field(discriminator="type"),
]


def unsupported_content(part_type: str) -> OtherWarning:
    """Warning for a content part the bridge skipped."""
    return OtherWarning(message=f"Unsupported content type: {part_type}")
