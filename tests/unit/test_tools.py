"""Tests for tool declaration conversion and tool choice handling."""

from lmstudio_provider.engine.types import RawFunctionTool
from lmstudio_provider.protocol import (
    ProviderDefinedTool,
    ToolChoice,
    UnsupportedSettingWarning,
    UnsupportedToolWarning,
)
from lmstudio_provider.tools import prepare_tools, to_raw_function_tool


class TestRawFunctionTool:
    def test_declaration_carries_schema_only(self, calculator_tool) -> None:
        # given / when
        raw = to_raw_function_tool(calculator_tool)

        # then
        assert raw == RawFunctionTool(
            name="calculator",
            description="Add two numbers",
            parameters_json_schema=calculator_tool.input_schema,
        )
        assert raw.type == "rawFunction"
        assert not hasattr(raw, "implementation")

    def test_missing_description_becomes_empty(self, weather_tool) -> None:
        assert to_raw_function_tool(weather_tool).description == ""


class TestPrepareTools:
    def test_no_tools(self) -> None:
        assert prepare_tools(None, None) == ([], [])

    def test_auto_passes_all_function_tools(self, calculator_tool, weather_tool) -> None:
        # given / when
        tools, warnings = prepare_tools([calculator_tool, weather_tool], ToolChoice(type="auto"))

        # then
        assert [t.name for t in tools] == ["calculator", "get_weather"]
        assert warnings == []

    def test_none_passes_nothing(self, calculator_tool) -> None:
        tools, warnings = prepare_tools([calculator_tool], ToolChoice(type="none"))

        assert tools == []
        assert warnings == []

    def test_specific_tool_filters_others_with_warning(
        self, calculator_tool, weather_tool
    ) -> None:
        # given / when
        tools, warnings = prepare_tools(
            [calculator_tool, weather_tool], ToolChoice(type="tool", tool_name="get_weather")
        )

        # then
        assert [t.name for t in tools] == ["get_weather"]
        (warning,) = warnings
        assert isinstance(warning, UnsupportedToolWarning)
        assert warning.tool == calculator_tool
        assert warning.details == "Tool calculator is not the tool specified in toolChoice"

    def test_required_warns_and_passes_all(self, calculator_tool) -> None:
        # given / when
        tools, warnings = prepare_tools([calculator_tool], ToolChoice(type="required"))

        # then
        assert [t.name for t in tools] == ["calculator"]
        assert [w.setting for w in warnings if isinstance(w, UnsupportedSettingWarning)] == [
            "toolChoice"
        ]

    def test_provider_defined_tool_is_dropped(self, calculator_tool) -> None:
        # given
        web_search = ProviderDefinedTool(id="openai.web_search", name="web_search", args={})

        # when
        tools, warnings = prepare_tools([web_search, calculator_tool], None)

        # then
        assert [t.name for t in tools] == ["calculator"]
        (warning,) = warnings
        assert warning.tool == web_search
        assert warning.details == "Not implemented for tool type provider-defined"
