"""Pytest configuration and fixtures."""

import pytest
from unittest.mock import MagicMock

from foundry_agents.core.constants import ResourceKind
from foundry_agents.core.context import FileContextCache
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.context_store import ContextStore

UNIFIED_HOST = "myres.services.ai.azure.com"
UNIFIED_BASE_PATH = "/api/projects/proj"
UNIFIED_ENDPOINT = f"https://{UNIFIED_HOST}{UNIFIED_BASE_PATH}"

LEGACY_AGENT_ENDPOINT = (
    "https://eastus.api.azureml.ms/agents/v1.0/subscriptions/sub-1"
    "/resourceGroups/rg-1/providers/Microsoft.MachineLearningServices/workspaces/ws-1"
)
ASSISTANT_HOST = "my-aoai.openai.azure.com"
ASSISTANT_ENDPOINT = f"https://{ASSISTANT_HOST}"


def api_path(*parts: str) -> str:
    """Request path on the unified test endpoint."""
    return "/".join([UNIFIED_BASE_PATH, *parts])


@pytest.fixture
def mock_credential():
    """Create a mock Azure credential."""
    credential = MagicMock()
    credential.get_token.return_value = MagicMock(token="mock-token")
    return credential


@pytest.fixture
def token_provider():
    """Token provider returning a fixed bearer token."""
    provider = MagicMock()
    provider.get_token.return_value = "mock-token"
    return provider


@pytest.fixture
def context_cache(tmp_path):
    """Context cache in a temporary directory."""
    return FileContextCache(tmp_path / "config" / "context.json")


@pytest.fixture
def store(context_cache, token_provider):
    """Context store pointed at the unified test endpoint."""
    store = ContextStore(cache=context_cache, token_provider=token_provider)
    store.set(UNIFIED_ENDPOINT, ResourceKind.AGENT, skip_validation=True, no_cache=True)
    return store


@pytest.fixture
def assistant_store(context_cache, token_provider):
    """Context store pointed at a legacy Azure OpenAI assistants endpoint."""
    store = ContextStore(cache=context_cache, token_provider=token_provider)
    store.set(ASSISTANT_ENDPOINT, ResourceKind.ASSISTANT, skip_validation=True, no_cache=True)
    return store


@pytest.fixture
def client(store, token_provider):
    """API client bound to the unified test context."""
    api_client = ApiClient(store, token_provider)
    yield api_client
    api_client.close()


@pytest.fixture
def agent_payload():
    """An agent as returned by the service."""
    return {
        "id": "asst_1",
        "object": "assistant",
        "created_at": 1735689600,
        "model": "gpt-4o",
        "name": "helper",
        "description": "Answers questions",
        "instructions": "Be brief.",
        "metadata": {"team": "docs"},
        "temperature": 0.7,
        "tools": [
            {"type": "code_interpreter"},
            {
                "type": "function",
                "function": {
                    "name": "get_weather",
                    "description": "Weather for a city",
                    "parameters": {"type": "object", "properties": {"city": {"type": "string"}}},
                },
            },
        ],
        "tool_resources": {"code_interpreter": {"file_ids": ["file-1"]}},
    }
