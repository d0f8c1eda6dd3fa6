"""
Call Options → LM Studio act() Options

Merges three configuration layers into the keyword options for
``EngineModel.act``:

    provider settings  <  call options  <  providerOptions["lmstudio"] block

Each layer contributes only the fields it explicitly set, so a higher layer
overrides a lower one field-by-field and an explicit ``None`` clears the
inherited value. Every target option is then computed as ``Explicit[T]`` and
the ``OMIT`` ones are stripped: an option is either present with a real value
or absent, never present as ``None``.
"""

from typing import Any, NoReturn

from loguru import logger
from pydantic import BaseModel, ValidationError
from pydantic_core import ErrorDetails

from .errors import InvalidArgumentError
from .explicit import OMIT, Explicit, explicit, strip_omitted
from .protocol.call_options import CallOptions, ResponseFormat
from .protocol.call_warnings import CallWarning, UnsupportedSettingWarning
from .result import Error, Ok, Result
from .settings import PROVIDER_SPECIFIC_FIELDS, LMStudioChatConfig, LMStudioChatSettings


# Generic call options that take part in the merge (prompt, tools and the abort
# signal are handled elsewhere).
MERGED_CALL_OPTION_FIELDS: frozenset[str] = frozenset(
    {
        "max_output_tokens",
        "temperature",
        "stop_sequences",
        "top_p",
        "top_k",
        "presence_penalty",
        "frequency_penalty",
        "seed",
        "response_format",
    }
)

# Generic options LM Studio has no equivalent for.
UNSUPPORTED_CALL_OPTION_FIELDS: dict[str, str] = {
    "presence_penalty": "presencePenalty",
    "seed": "seed",
}

# act() callbacks and round-control fields. The merger never sets them; the
# prediction run supplies its own callbacks and cancellation handle.
RESERVED_ENGINE_FIELDS: tuple[str, ...] = (
    "signal",
    "max_prediction_rounds",
    "on_first_token",
    "on_prediction_fragment",
    "on_message",
    "on_round_start",
    "on_round_end",
    "on_prediction_completed",
    "on_prompt_processing_progress",
    "on_tool_call_request_start",
    "on_tool_call_request_end",
    "on_tool_call_request_failure",
    "on_tool_call_request_dequeued",
    "handle_invalid_tool_request",
)


def _explicit_fields(
    model: BaseModel | None, include: frozenset[str] | None = None
) -> dict[str, Any]:
    """Fields the layer explicitly set, with their (possibly ``None``) values."""
    if model is None:
        return {}
    return {
        name: getattr(model, name)
        for name in model.model_fields_set
        if include is None or name in include
    }


def parse_lmstudio_config(
    provider: str, call_options: CallOptions
) -> Result[LMStudioChatConfig | None, list[ErrorDetails]]:
    """Validate the provider block of ``provider_options``, if the caller sent one."""
    provider_options = call_options.provider_options
    if not provider_options:
        return Ok(None)

    block = provider_options.get(provider)
    if block is None:
        return Ok(None)

    try:  # nosemgrep: forbid-try-except
        return Ok(LMStudioChatConfig.model_validate(block))
    except ValidationError as e:
        return Error(e.errors())


def _raise_config_error(provider: str, issues: list[ErrorDetails]) -> NoReturn:
    if not issues:
        msg = "Validation failed without reporting an issue"
        raise InvalidArgumentError(parameter=f"providerOptions.{provider}", value=None, message=msg)

    issue = issues[0]
    path = ".".join(str(segment) for segment in issue["loc"])
    logger.error(f"[OPTIONS] Invalid providerOptions.{provider}.{path}: {issue['msg']}")
    raise InvalidArgumentError(
        parameter=f"providerOptions.{provider}.{path}" if path else f"providerOptions.{provider}",
        value=issue.get("input"),
        message=f"{issue['msg']} (type={issue['type']})",
        path=path or None,
    )


def _get_structured(response_format: ResponseFormat | None) -> Explicit[dict[str, Any]]:
    if response_format is None or response_format.type != "json":
        return OMIT
    if response_format.json_schema is None:
        return {"type": "json"}
    return {"type": "json", "json_schema": response_format.json_schema}


def _dump_settings(value: Any) -> Any:
    """
    Dump nested settings with LM Studio's key names.

    A ``None`` left at its default is dropped, one the caller wrote (e.g. a
    ``raw.fields`` entry with ``value: null``) is kept.
    """
    if isinstance(value, BaseModel):
        return {
            (info.alias or name): _dump_settings(getattr(value, name))
            for name, info in type(value).model_fields.items()
            if getattr(value, name) is not None or name in value.model_fields_set
        }
    if isinstance(value, list):
        return [_dump_settings(item) for item in value]
    if isinstance(value, dict):
        return {key: _dump_settings(item) for key, item in value.items()}
    return value


def _engine_value(value: Any) -> Explicit[Any]:
    """Nested settings models are sent to the engine as LM Studio-shaped dicts."""
    if isinstance(value, BaseModel):
        return _dump_settings(value)
    return explicit(value)


def convert_call_options(
    provider: str,
    call_options: CallOptions,
    provider_settings: LMStudioChatSettings,
) -> tuple[dict[str, Any], list[CallWarning]]:
    """
    Resolve the final ``act()`` options for one call.

    Args:
        provider: Provider name; selects the block in ``provider_options``
        call_options: Call-time options
        provider_settings: Defaults given to the provider factory

    Returns:
        (engine_options, warnings): options with every unset field removed, and
        warnings for settings LM Studio cannot honour

    Raises:
        InvalidArgumentError: The provider block failed validation. Raised for
            the first failing field, before anything is merged.
    """
    match parse_lmstudio_config(provider, call_options):
        case Error(issues):
            _raise_config_error(provider, issues)
        case Ok(value):
            lmstudio_config = value

    merged: dict[str, Any] = {}
    merged.update(_explicit_fields(provider_settings, include=frozenset(PROVIDER_SPECIFIC_FIELDS)))
    merged.update(_explicit_fields(call_options, include=MERGED_CALL_OPTION_FIELDS))
    merged.update(_explicit_fields(lmstudio_config))

    warnings: list[CallWarning] = []
    for field_name, setting in UNSUPPORTED_CALL_OPTION_FIELDS.items():
        if merged.get(field_name) is not None:
            warnings.append(
                UnsupportedSettingWarning(
                    setting=setting, details=f"{setting} is not supported by LM Studio"
                )
            )

    explicit_options: dict[str, Explicit[Any]] = {
        "max_tokens": explicit(merged.get("max_output_tokens")),
        "temperature": explicit(merged.get("temperature")),
        "stop_strings": explicit(merged.get("stop_sequences")),
        "top_k_sampling": explicit(merged.get("top_k")),
        "top_p_sampling": explicit(merged.get("top_p")),
        "repeat_penalty": explicit(merged.get("frequency_penalty")),
        "structured": _get_structured(merged.get("response_format")),
        "allow_parallel_tool_execution": True,
    }
    for field_name in PROVIDER_SPECIFIC_FIELDS:
        explicit_options[field_name] = _engine_value(merged.get(field_name))
    for field_name in RESERVED_ENGINE_FIELDS:
        explicit_options[field_name] = OMIT

    engine_options = strip_omitted(explicit_options)
    logger.debug(
        f"[OPTIONS] Resolved {len(engine_options)} engine options: {sorted(engine_options)}"
    )
    return engine_options, warnings
