"""
Tool Declarations → LM Studio Tools

Function tools are forwarded as declaration-only ``RawFunctionTool``s: LM
Studio sees the name, description and JSON schema and may request a call,
but the provider never executes anything. The call is returned to the caller
and the round-boundary stop ends the run before the engine looks for a result.

Tool choice:
- auto / not given: all function tools
- none: no tools
- tool: only the named tool; every other tool gets an unsupported-tool warning
- required: LM Studio cannot force a tool call; all tools are passed and an
  unsupported-setting warning is returned
"""

from collections.abc import Sequence

from loguru import logger

from .engine.types import RawFunctionTool
from .protocol.call_options import FunctionTool, ProviderDefinedTool, ToolChoice
from .protocol.call_warnings import CallWarning, UnsupportedSettingWarning, UnsupportedToolWarning


def to_raw_function_tool(tool: FunctionTool) -> RawFunctionTool:
    return RawFunctionTool(
        name=tool.name,
        description=tool.description or "",
        parameters_json_schema=tool.input_schema,
    )


def prepare_tools(
    tools: Sequence[FunctionTool | ProviderDefinedTool] | None,
    tool_choice: ToolChoice | None,
) -> tuple[list[RawFunctionTool], list[CallWarning]]:
    """
    Select and convert the tools to send with ``act()``.

    Returns:
        (tools, warnings)
    """
    if tool_choice is not None and tool_choice.type == "none":
        return [], []

    warnings: list[CallWarning] = []
    prepared: list[RawFunctionTool] = []

    for tool in tools or []:
        if not isinstance(tool, FunctionTool):
            warnings.append(
                UnsupportedToolWarning(
                    tool=tool, details=f"Not implemented for tool type {tool.type}"
                )
            )
            continue

        if (
            tool_choice is not None
            and tool_choice.type == "tool"
            and tool_choice.tool_name != tool.name
        ):
            warnings.append(
                UnsupportedToolWarning(
                    tool=tool,
                    details=f"Tool {tool.name} is not the tool specified in toolChoice",
                )
            )
            continue

        prepared.append(to_raw_function_tool(tool))

    if tool_choice is not None and tool_choice.type == "required":
        warnings.append(
            UnsupportedSettingWarning(
                setting="toolChoice",
                details="Required tool choice is not supported in LM Studio; all tools were passed as optional",
            )
        )

    logger.debug(
        f"[TOOLS] Prepared {len(prepared)} tools "
        f"(choice={tool_choice.type if tool_choice else 'auto'}, warnings={len(warnings)})"
    )
    return prepared, warnings
