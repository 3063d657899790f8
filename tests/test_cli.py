"""Tests for the command surface."""

import json

import httpx
import pytest
import respx
from typer.testing import CliRunner

from foundry_agents import __version__
from foundry_agents.cli import common
from foundry_agents.cli.main import app
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.context_store import ContextStore

from tests.conftest import UNIFIED_HOST, api_path

runner = CliRunner()


@pytest.fixture
def empty_store(context_cache, token_provider, monkeypatch):
    """Patch the CLI to use a store with nothing set."""
    store = ContextStore(cache=context_cache, token_provider=token_provider)
    monkeypatch.setattr(common, "build_store", lambda: store)
    return store


@pytest.fixture
def cli_store(store, token_provider, monkeypatch):
    """Patch the CLI to use the unified test context."""
    monkeypatch.setattr(common, "build_store", lambda: store)
    monkeypatch.setattr(common, "build_client", lambda store_=None: ApiClient(store, token_provider))
    return store


class TestGlobalOptions:
    """Application-level options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "context" in result.output
        assert "agent" in result.output


class TestContextCommands:
    """context set/show/clear."""

    def test_set_show_clear(self, empty_store, context_cache):
        result = runner.invoke(app, ["context", "set", "eastus.api.azureml.ms;sub;rg;ws", "--skip-validation"])
        assert result.exit_code == 0, result.output
        assert "legacy" in result.stdout
        assert context_cache.path.exists()

        shown = runner.invoke(app, ["context", "show", "--output", "json"])
        assert shown.exit_code == 0
        assert json.loads(shown.stdout)["Endpoint"].startswith("https://eastus.api.azureml.ms/agents/v1.0")

        cleared = runner.invoke(app, ["context", "clear"])
        assert cleared.exit_code == 0
        assert not context_cache.path.exists()

    def test_bad_connection_string(self, empty_store):
        result = runner.invoke(app, ["context", "set", "host;sub;rg"])
        assert result.exit_code == 1
        assert "Connection string" in result.stdout

    def test_show_without_context(self, empty_store):
        result = runner.invoke(app, ["context", "show"])
        assert result.exit_code == 1
        assert "No context set" in result.stdout


class TestAgentCommands:
    """agent create/get/list/update/delete."""

    @respx.mock
    def test_create_with_tools(self, cli_store):
        route = respx.post(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(200, json={"id": "asst_1", "model": "gpt-4o", "name": "helper"})
        )

        result = runner.invoke(
            app,
            [
                "agent", "create",
                "--model", "gpt-4o",
                "--name", "helper",
                "--metadata", "team=docs",
                "--bing-connection", "bing-1",
                "--code-interpreter-file", "file-1",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "asst_1" in result.stdout
        body = json.loads(route.calls.last.request.content)
        assert body["metadata"] == {"team": "docs"}
        assert [tool["type"] for tool in body["tools"]] == ["code_interpreter", "bing_grounding"]
        assert body["tool_resources"] == {"code_interpreter": {"file_ids": ["file-1"]}}

    def test_create_conflicting_agents(self, cli_store, tmp_path):
        agents_file = tmp_path / "agents.json"
        agents_file.write_text(
            json.dumps([{"id": "asst_b", "name": "b", "description": "Second"}]), encoding="utf-8"
        )

        result = runner.invoke(
            app,
            [
                "agent", "create",
                "--model", "gpt-4o",
                "--name", "lead",
                "--connected-agent", "asst_a:a:First",
                "--connected-agents", str(agents_file),
            ],
        )

        assert result.exit_code == 1
        assert "Cannot combine" in result.stdout

    def test_create_rejects_yaml_document(self, cli_store, tmp_path):
        document = tmp_path / "agent.yaml"
        document.write_text("model: gpt-4o\nname: helper\n", encoding="utf-8")

        result = runner.invoke(app, ["agent", "create", "--from-file", str(document)])

        assert result.exit_code == 1
        assert "Input file must be JSON format" in result.stdout

    @respx.mock
    def test_get_yaml(self, cli_store):
        respx.get(host=UNIFIED_HOST, path=api_path("assistants", "asst_1")).mock(
            return_value=httpx.Response(200, json={"id": "asst_1", "model": "gpt-4o", "name": "helper"})
        )

        result = runner.invoke(app, ["agent", "get", "asst_1", "--output", "yaml"])

        assert result.exit_code == 0, result.output
        assert "name: helper" in result.stdout

    @respx.mock
    def test_list_table(self, cli_store):
        respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(
                200,
                json={"data": [{"id": "asst_1", "name": "one", "model": "gpt-4o", "tools": [{"type": "code_interpreter"}]}]},
            )
        )

        result = runner.invoke(app, ["agent", "list"])

        assert result.exit_code == 0, result.output
        assert "asst_1" in result.stdout
        assert "code_interpreter" in result.stdout

    @respx.mock
    def test_update_missing_agent(self, cli_store):
        respx.get(host=UNIFIED_HOST, path=api_path("assistants", "asst_x")).mock(
            return_value=httpx.Response(404, json={"error": {"message": "not found"}})
        )

        result = runner.invoke(app, ["agent", "update", "asst_x", "--name", "renamed"])

        assert result.exit_code == 1
        assert "Agent 'asst_x' not found" in result.stdout

    def test_delete_needs_target(self, cli_store):
        result = runner.invoke(app, ["agent", "delete"])
        assert result.exit_code == 1
        assert "--all" in result.stdout


class TestConversationCommands:
    """thread, message and run commands."""

    @respx.mock
    def test_message_list(self, cli_store):
        respx.get(host=UNIFIED_HOST, path=api_path("threads", "thread_1", "messages")).mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": [{"id": "msg_1", "role": "user", "content": [{"type": "text", "text": {"value": "Hi"}}]}],
                    "has_more": False,
                },
            )
        )

        result = runner.invoke(app, ["message", "list", "thread_1", "--output", "json"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)[0]["id"] == "msg_1"

    @respx.mock
    def test_run_status(self, cli_store):
        respx.get(host=UNIFIED_HOST, path=api_path("threads", "thread_1", "runs", "run_1")).mock(
            return_value=httpx.Response(200, json={"id": "run_1", "thread_id": "thread_1", "status": "in_progress"})
        )

        result = runner.invoke(app, ["run", "status", "thread_1", "run_1"])

        assert result.exit_code == 0, result.output
        assert "in_progress" in result.stdout


class TestVectorStoreCommands:
    """vector-store create/list/delete."""

    @respx.mock
    def test_create_and_list(self, cli_store):
        create_route = respx.post(host=UNIFIED_HOST, path=api_path("vector_stores")).mock(
            return_value=httpx.Response(200, json={"id": "vs_1", "name": "docs", "status": "in_progress"})
        )
        respx.get(host=UNIFIED_HOST, path=api_path("vector_stores")).mock(
            return_value=httpx.Response(
                200, json={"data": [{"id": "vs_1", "name": "docs", "file_counts": {"total": 1}}], "has_more": False}
            )
        )

        created = runner.invoke(app, ["vector-store", "create", "docs", "--file-id", "file-1"])
        assert created.exit_code == 0, created.output
        assert json.loads(create_route.calls.last.request.content) == {"name": "docs", "file_ids": ["file-1"]}

        listed = runner.invoke(app, ["vector-store", "list", "--output", "json"])
        assert listed.exit_code == 0, listed.output
        assert json.loads(listed.stdout)[0]["file_counts"] == {"total": 1}

    @respx.mock
    def test_delete_missing(self, cli_store):
        respx.delete(host=UNIFIED_HOST, path=api_path("vector_stores", "vs_x")).mock(
            return_value=httpx.Response(404, json={"error": {"message": "not found"}})
        )

        result = runner.invoke(app, ["vector-store", "delete", "vs_x"])

        assert result.exit_code == 1
        assert "Vector store 'vs_x' not found" in result.stdout
