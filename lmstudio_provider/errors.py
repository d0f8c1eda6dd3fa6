"""
Exception types raised by the LM Studio provider.

Every error raised by the bridge derives from ``LMStudioProviderError``.
Conditions that are not fatal (unsupported content, tools or settings) are
never raised; they are returned as call warnings instead.

Errors raised by the engine during a prediction are not wrapped: they reach
the caller unchanged.
"""

from typing import Any


class LMStudioProviderError(Exception):
    """Base class for errors raised by the provider itself."""


class InvalidArgumentError(LMStudioProviderError):
    """A call or provider option failed validation.

    Raised before the engine is invoked. ``path`` is the dotted location of the
    offending field inside the validated block (e.g. ``"xtcProbability"``),
    ``parameter`` the fully qualified option name.
    """

    def __init__(self, parameter: str, value: Any, message: str, path: str | None = None):
        self.parameter = parameter
        self.value = value
        self.path = path or parameter
        super().__init__(f"Invalid argument for parameter {parameter}: {message}")


class InvalidToolArgumentsError(LMStudioProviderError):
    """An assistant tool call in the prompt carries arguments the engine cannot execute."""

    def __init__(self, tool_name: str, tool_args: str, cause: str):
        self.tool_name = tool_name
        self.tool_args = tool_args
        self.cause = cause
        super().__init__(
            f"Invalid arguments for tool {tool_name}: {cause}. Arguments: {tool_args}"
        )


class NoSuchModelError(LMStudioProviderError):
    """The engine does not know the requested model."""

    def __init__(self, model_id: str, message: str | None = None):
        self.model_id = model_id
        self.model_type = "languageModel"
        super().__init__(message or f"No such languageModel: {model_id}")


class ModelLoadError(LMStudioProviderError):
    """Loading the model failed for a reason other than an unknown model id."""

    def __init__(self, model_id: str, message: str):
        self.model_id = model_id
        super().__init__(f"Failed to load model {model_id}: {message}")


class NoContentGeneratedError(LMStudioProviderError):
    """The prediction ended without the engine reporting a completed prediction."""

    def __init__(self, message: str = "No content generated"):
        super().__init__(message)
