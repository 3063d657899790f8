"""Tests for JSON input document loaders."""

import json

import pytest

from foundry_agents.core.exceptions import FormatError, InvalidToolPayloadError
from foundry_agents.services.definitions import (
    JSON_ONLY_MESSAGE,
    load_function_tools,
    load_json_document,
    load_mcp_servers,
    load_openapi_tool,
    load_resource_document,
    validate_mcp_servers,
)

OPENAPI_SPEC = {
    "openapi": "3.0.1",
    "info": {"title": "Weather", "version": "1"},
    "paths": {"/weather": {"get": {"operationId": "getWeather"}}},
}


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content if isinstance(content, str) else json.dumps(content), encoding="utf-8")
    return path


class TestJsonOnly:
    """YAML and malformed input are rejected with one message."""

    @pytest.mark.parametrize("name", ["spec.yaml", "spec.YML"])
    def test_yaml_extension(self, tmp_path, name):
        path = _write(tmp_path, name, OPENAPI_SPEC)
        with pytest.raises(FormatError) as exc_info:
            load_json_document(path)
        assert exc_info.value.message == "Input file must be JSON format"

    def test_yaml_content(self, tmp_path):
        path = _write(tmp_path, "spec.json", "openapi: 3.0.1\npaths: {}\n")
        with pytest.raises(FormatError) as exc_info:
            load_openapi_tool(path, "weather")
        assert exc_info.value.message == JSON_ONLY_MESSAGE

    def test_resource_document_must_be_object(self, tmp_path):
        with pytest.raises(FormatError):
            load_resource_document(_write(tmp_path, "agent.json", [1, 2]))


class TestFunctions:
    """Function definition files."""

    def test_plain_and_wire_shapes(self, tmp_path):
        path = _write(
            tmp_path,
            "functions.json",
            [
                {"name": "get_weather", "description": "Weather", "parameters": {"type": "object", "properties": {}}},
                {"type": "function", "function": {"name": "get_time", "parameters": {"type": "object"}}},
            ],
        )
        tools = load_function_tools(path)
        assert [tool.name for tool in tools] == ["get_weather", "get_time"]

    def test_invalid_parameters(self, tmp_path):
        path = _write(tmp_path, "functions.json", {"name": "bad", "parameters": {"type": "array"}})
        with pytest.raises(InvalidToolPayloadError):
            load_function_tools(path)


class TestOpenApi:
    """OpenAPI specification files."""

    def test_loads_spec(self, tmp_path):
        tool = load_openapi_tool(_write(tmp_path, "weather.json", OPENAPI_SPEC), "weather", "Weather API")
        assert tool.spec == OPENAPI_SPEC
        assert tool.auth == {"type": "anonymous"}

    def test_not_an_openapi_document(self, tmp_path):
        with pytest.raises(InvalidToolPayloadError):
            load_openapi_tool(_write(tmp_path, "x.json", {"hello": "world"}), "weather")


class TestMcpServers:
    """MCP server descriptor lists."""

    def test_each_entry_validated(self):
        outcomes = validate_mcp_servers(
            [
                {"server_label": "good", "server_url": "https://mcp.example.com"},
                {"server_label": "bad label", "server_url": "https://mcp.example.com"},
                {"server_label": "also_good", "server_url": "https://other.example.com", "require_approval": "never"},
                "not an object",
            ]
        )

        assert [outcome.is_valid for outcome in outcomes] == [True, False, True, False]
        assert outcomes[1].label == "bad label"
        assert outcomes[2].tool.require_approval == "never"

    def test_load_reports_all_failures(self, tmp_path):
        path = _write(
            tmp_path,
            "mcp.json",
            [
                {"server_label": "bad 1", "server_url": "https://a"},
                {"server_label": "ok", "server_url": "https://b"},
                {"server_label": "bad_2", "server_url": "ftp://c"},
            ],
        )
        with pytest.raises(InvalidToolPayloadError) as exc_info:
            load_mcp_servers(path)

        assert "2 of 3" in exc_info.value.message
        assert exc_info.value.details["invalid"] == [0, 2]

    def test_single_object(self):
        tools = load_mcp_servers([{"type": "mcp", "server_label": "docs", "server_url": "https://d"}])
        assert tools[0].server_label == "docs"
