"""Tests for the HTTP invoker."""

import json

import httpx
import pytest
import respx

from foundry_agents.core.constants import ResourceKind, TokenAudience
from foundry_agents.core.exceptions import ApiError, ConfigurationError
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.context_store import ContextStore

from tests.conftest import ASSISTANT_HOST, UNIFIED_HOST, api_path


class TestCall:
    """Single request behavior."""

    def test_requires_context(self, context_cache, token_provider):
        client = ApiClient(ContextStore(cache=context_cache), token_provider)
        with pytest.raises(ConfigurationError):
            client.call("assistants", "get")
        token_provider.get_token.assert_not_called()

    @respx.mock
    def test_unified_audience_and_bearer(self, client, token_provider):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants", "asst_1")).mock(
            return_value=httpx.Response(200, json={"id": "asst_1"})
        )

        assert client.call("assistants", "get", "asst_1") == {"id": "asst_1"}
        token_provider.get_token.assert_called_once_with(TokenAudience.UNIFIED)
        assert route.calls.last.request.headers["Authorization"] == "Bearer mock-token"

    @respx.mock
    def test_legacy_assistant_audience(self, assistant_store, token_provider):
        respx.get(host=ASSISTANT_HOST, path="/openai/assistants").mock(
            return_value=httpx.Response(200, json={"data": []})
        )
        with ApiClient(assistant_store, token_provider) as client:
            client.call("assistants", "get", use_open_prefix=True)

        token_provider.get_token.assert_called_once_with(TokenAudience.LEGACY_ASSISTANT)
        assert assistant_store.get().resource_kind == ResourceKind.ASSISTANT

    @respx.mock
    def test_caller_headers_override_defaults(self, client):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(200, json={})
        )
        client.call("assistants", "get", headers={"Authorization": "Bearer other", "X-Trace": "1"})

        headers = route.calls.last.request.headers
        assert headers["Authorization"] == "Bearer other"
        assert headers["X-Trace"] == "1"

    @respx.mock
    def test_nested_json_body_round_trips(self, client):
        route = respx.post(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(200, json={"id": "asst_1"})
        )
        body = {"tools": [{"type": "openapi", "openapi": {"spec": {"paths": {"/a": {"get": {"x": [1, {"y": None}]}}}}}}]}
        client.call("assistants", "create", method="POST", body=body)

        request = route.calls.last.request
        assert json.loads(request.content) == body
        assert request.headers["Content-Type"] == "application/json"

    @respx.mock
    def test_multipart_form(self, client):
        route = respx.post(host=UNIFIED_HOST, path=api_path("files")).mock(
            return_value=httpx.Response(200, json={"id": "file-1"})
        )
        client.call(
            "files",
            "upload",
            method="POST",
            form={"purpose": "assistants"},
            files={"file": ("notes.txt", b"hello")},
        )

        request = route.calls.last.request
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="purpose"' in request.content
        assert b"hello" in request.content

    @respx.mock
    def test_params_keep_api_version(self, client):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(200, json={})
        )
        client.call("assistants", "get", params={"limit": 5})

        params = route.calls.last.request.url.params
        assert params["api-version"] == "2025-05-01"
        assert params["limit"] == "5"

    @respx.mock
    def test_empty_body_returns_empty_dict(self, client):
        respx.delete(host=UNIFIED_HOST, path=api_path("threads", "t1")).mock(
            return_value=httpx.Response(204)
        )
        assert client.call("threads", "thread", "t1", method="DELETE") == {}

    @respx.mock
    def test_raw_returns_bytes(self, client):
        respx.get(host=UNIFIED_HOST, path=api_path("files", "file-1", "content")).mock(
            return_value=httpx.Response(200, content=b"\x00\x01binary")
        )
        assert client.call("files", "get", "file-1/content", raw=True) == b"\x00\x01binary"


class TestErrors:
    """Failures surface as ApiError without retries."""

    @respx.mock
    def test_upstream_message_is_verbatim(self, client):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants", "nope")).mock(
            return_value=httpx.Response(404, json={"error": {"code": "NotFound", "message": "No assistant found with id 'nope'."}})
        )

        with pytest.raises(ApiError) as exc_info:
            client.call("assistants", "get", "nope")

        assert exc_info.value.message == "No assistant found with id 'nope'."
        assert exc_info.value.status_code == 404
        assert exc_info.value.is_not_found
        assert route.call_count == 1

    @respx.mock
    def test_plain_text_error(self, client):
        respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(500, text="upstream exploded")
        )
        with pytest.raises(ApiError, match="upstream exploded") as exc_info:
            client.call("assistants", "get")
        assert exc_info.value.status_code == 500

    @respx.mock
    def test_transport_error(self, client):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            side_effect=httpx.ConnectError("connection refused")
        )
        with pytest.raises(ApiError) as exc_info:
            client.call("assistants", "get")

        assert exc_info.value.status_code is None
        assert route.call_count == 1


class TestListAll:
    """Cursor pagination."""

    @respx.mock
    def test_follows_cursor(self, client):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            side_effect=[
                httpx.Response(200, json={"data": [{"id": "a1"}, {"id": "a2"}], "has_more": True, "last_id": "a2"}),
                httpx.Response(200, json={"data": [{"id": "a3"}], "has_more": False, "last_id": "a3"}),
            ]
        )

        items = client.list_all("assistants", "get")

        assert [item["id"] for item in items] == ["a1", "a2", "a3"]
        assert route.call_count == 2
        assert "after" not in route.calls[0].request.url.params
        assert route.calls[1].request.url.params["after"] == "a2"
