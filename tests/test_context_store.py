"""Tests for the context store and its cache."""

import json

import httpx
import pytest
import respx

from foundry_agents.core.constants import ResourceKind
from foundry_agents.core.context import Context, FileContextCache
from foundry_agents.core.exceptions import ApiError, ConfigurationError, FormatError
from foundry_agents.services.context_store import ContextStore

from tests.conftest import (
    ASSISTANT_ENDPOINT,
    LEGACY_AGENT_ENDPOINT,
    UNIFIED_ENDPOINT,
    UNIFIED_HOST,
    api_path,
)


class TestSet:
    """Setting the active context."""

    def test_set_persists_cache(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT, skip_validation=True)

        data = json.loads(context_cache.path.read_text(encoding="utf-8"))
        assert data["Endpoint"] == UNIFIED_ENDPOINT
        assert data["ApiType"] == "Agent"
        assert data["UseNewApi"] is True
        assert "CachedAt" in data

    def test_no_cache_skips_persistence(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT, skip_validation=True, no_cache=True)

        assert store.is_set
        assert not context_cache.path.exists()

    def test_connection_string_expands(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        context = store.set("eastus.api.azureml.ms;sub-1;rg-1;ws-1", skip_validation=True)

        assert context.endpoint == LEGACY_AGENT_ENDPOINT
        assert context.use_new_generation is False

    def test_bad_connection_string_fails_before_network(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        with pytest.raises(FormatError):
            store.set("host;sub;rg")

        token_provider.get_token.assert_not_called()
        assert not store.is_set

    @respx.mock
    def test_validation_round_trip(self, context_cache, token_provider):
        route = respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(200, json={"data": [], "has_more": False})
        )
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT)

        assert route.called
        request = route.calls.last.request
        assert request.url.params["limit"] == "1"
        assert request.url.params["api-version"] == "2025-05-01"
        assert request.headers["Authorization"] == "Bearer mock-token"

    @respx.mock
    def test_validation_failure_rolls_back(self, context_cache, token_provider):
        respx.get(host=UNIFIED_HOST, path=api_path("assistants")).mock(
            return_value=httpx.Response(401, json={"error": {"message": "Unauthorized access"}})
        )
        store = ContextStore(cache=context_cache, token_provider=token_provider)

        with pytest.raises(ConfigurationError) as exc_info:
            store.set(UNIFIED_ENDPOINT)

        assert "Unauthorized access" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, ApiError)
        assert not store.is_set
        assert not context_cache.path.exists()

    def test_replacing_context_is_wholesale(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT, api_version="2099-01-01", skip_validation=True)
        store.set(ASSISTANT_ENDPOINT, ResourceKind.ASSISTANT, skip_validation=True)

        context = store.get()
        assert context.endpoint == ASSISTANT_ENDPOINT
        assert context.api_version is None
        assert context.resource_kind == ResourceKind.ASSISTANT


class TestGet:
    """Resolving the active context."""

    def test_no_context(self, context_cache):
        with pytest.raises(ConfigurationError, match="No context set"):
            ContextStore(cache=context_cache).get()

    def test_loads_from_cache(self, context_cache, token_provider):
        ContextStore(cache=context_cache, token_provider=token_provider).set(
            ASSISTANT_ENDPOINT, ResourceKind.ASSISTANT, skip_validation=True
        )

        fresh = ContextStore(cache=context_cache)
        context = fresh.get()
        assert context.endpoint == ASSISTANT_ENDPOINT
        assert context.resource_kind == ResourceKind.ASSISTANT
        assert context.use_new_generation is False

    def test_memory_wins_over_cache(self, context_cache, token_provider):
        context_cache.save(Context.create(ASSISTANT_ENDPOINT, ResourceKind.ASSISTANT))
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT, skip_validation=True, no_cache=True)

        assert store.get().endpoint == UNIFIED_ENDPOINT

    def test_corrupt_cache_is_a_miss(self, context_cache):
        context_cache.path.parent.mkdir(parents=True, exist_ok=True)
        context_cache.path.write_text("{not json", encoding="utf-8")

        assert context_cache.load() is None
        with pytest.raises(ConfigurationError):
            ContextStore(cache=context_cache).get()


class TestClear:
    """Clearing the context."""

    def test_clear_removes_memory_and_cache(self, context_cache, token_provider):
        store = ContextStore(cache=context_cache, token_provider=token_provider)
        store.set(UNIFIED_ENDPOINT, skip_validation=True)
        store.clear()

        assert not store.is_set
        assert not context_cache.path.exists()
        with pytest.raises(ConfigurationError):
            store.get()

    def test_clear_without_cache_file(self, tmp_path):
        cache = FileContextCache(tmp_path / "missing.json")
        ContextStore(cache=cache).clear()
        assert not cache.path.exists()
