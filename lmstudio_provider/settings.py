"""
LM Studio Provider Settings

Two layers of LM Studio-specific configuration:

- ``LMStudioChatSettings``: provider-level defaults given to ``create_lmstudio()``
- ``LMStudioChatConfig``: the per-call block read from
  ``CallOptions.provider_options["lmstudio"]``, validated on every call

Both accept LM Studio's camelCase names (``xtcProbability``) as well as the
Python field names. Unknown keys are ignored.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


ContextOverflowPolicy = Literal["stopAtLimit", "truncateMiddle", "rollingWindow"]


class _SettingsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class ReasoningParsing(_SettingsModel):
    """Delimiters the engine uses to split reasoning from answer text."""

    enabled: bool
    start_string: str = Field(alias="startString")
    end_string: str = Field(alias="endString")


class LLMToolParameters(_SettingsModel):
    type: Literal["object"] = "object"
    properties: dict[str, Any]
    required: list[str] | None = None
    additional_properties: bool | None = Field(default=None, alias="additionalProperties")


class LLMToolFunction(_SettingsModel):
    name: str
    description: str | None = None
    parameters: LLMToolParameters | None = None


class LLMTool(_SettingsModel):
    type: Literal["function"] = "function"
    function: LLMToolFunction


class RawToolsNone(_SettingsModel):
    type: Literal["none"] = "none"


class RawToolsArray(_SettingsModel):
    type: Literal["toolArray"] = "toolArray"
    tools: list[LLMTool]
    force: bool = False


class KVConfigField(_SettingsModel):
    key: str
    value: Any = None


class KVConfig(_SettingsModel):
    fields: list[KVConfigField]


class LMStudioChatConfig(_SettingsModel):
    context_overflow_policy: ContextOverflowPolicy | None = Field(
        default=None, alias="contextOverflowPolicy"
    )
    tool_call_stop_strings: list[str] | None = Field(default=None, alias="toolCallStopStrings")
    xtc_probability: float | None = Field(default=None, alias="xtcProbability")
    xtc_threshold: float | None = Field(default=None, alias="xtcThreshold")
    cpu_threads: int | None = Field(default=None, alias="cpuThreads")
    draft_model: str | None = Field(default=None, alias="draftModel")
    reasoning_parsing: ReasoningParsing | None = Field(default=None, alias="reasoningParsing")
    preset: str | None = None
    min_p_sampling: float | None = Field(default=None, alias="minPSampling")

    # Deprecated by LM Studio, still forwarded when given
    log_probs: int | None = Field(default=None, alias="logProbs")
    prompt_template: Any = Field(default=None, alias="promptTemplate")
    raw_tools: RawToolsNone | RawToolsArray | None = Field(default=None, alias="rawTools")

    # Experimental
    speculative_decoding_num_draft_tokens_exact: int | None = Field(
        default=None, alias="speculativeDecodingNumDraftTokensExact"
    )
    speculative_decoding_min_draft_length_to_consider: int | None = Field(
        default=None, alias="speculativeDecodingMinDraftLengthToConsider"
    )
    speculative_decoding_min_continue_drafting_probability: float | None = Field(
        default=None, alias="speculativeDecodingMinContinueDraftingProbability"
    )
    raw: KVConfig | None = None


class LMStudioChatSettings(LMStudioChatConfig):
    # ws://host:port of a remote LM Studio instance, handed to create_lmstudio(client_factory=...)
    base_url: str | None = Field(default=None, alias="baseURL")


# Fields of LMStudioChatConfig forwarded to the engine under the same name.
PROVIDER_SPECIFIC_FIELDS: tuple[str, ...] = tuple(LMStudioChatConfig.model_fields)
