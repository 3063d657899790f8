"""Services for the Foundry Agents client."""

from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.auth import AzureAuthService, TokenProvider, audience_for
from foundry_agents.services.context_store import ContextStore
from foundry_agents.services.conversation_ops import ConversationService, RunOutcome
from foundry_agents.services.endpoint import (
    api_version_for,
    endpoint_from_connection_string,
    resolve,
)
from foundry_agents.services.file_ops import FileService
from foundry_agents.services.reconciler import ReconcileResult, apply_directives, reconcile
from foundry_agents.services.resource_ops import DeleteOutcome, ResourceService

__all__ = [
    # Context and transport
    "ApiClient",
    "AzureAuthService",
    "ContextStore",
    "TokenProvider",
    "audience_for",
    "api_version_for",
    "endpoint_from_connection_string",
    "resolve",
    # Reconciliation
    "ReconcileResult",
    "apply_directives",
    "reconcile",
    # Operations
    "ConversationService",
    "DeleteOutcome",
    "FileService",
    "ResourceService",
    "RunOutcome",
]
