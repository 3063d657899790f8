"""Constants and API versions for the agent service surfaces."""

from enum import Enum


# API Versions
class ApiVersions:
    """Agent service API versions."""

    # Unified Foundry project surface (*.ai.azure.com)
    UNIFIED_DEFAULT = "2025-05-01"

    # Legacy agent/assistant surfaces, keyed by logical operation
    LEGACY_DEFAULT = "2024-12-01-preview"
    LEGACY_BY_OPERATION = {
        "upload": "2024-05-01-preview",
        "create": "2024-12-01-preview",
        "get": "2024-12-01-preview",
        "thread": "2024-12-01-preview",
        "threadStatus": "2024-12-01-preview",
        "messages": "2024-12-01-preview",
        "openapi": "2025-05-15-preview",
    }


# Azure Scopes for authentication
class AzureScopes:
    """OAuth scopes for the agent service audiences."""

    UNIFIED = "https://ai.azure.com/.default"
    LEGACY_AGENT = "https://ml.azure.com/.default"
    LEGACY_ASSISTANT = "https://cognitiveservices.azure.com/.default"


class ResourceKind(str, Enum):
    """Kind of resource the context manages."""

    AGENT = "Agent"
    ASSISTANT = "Assistant"


class TokenAudience(str, Enum):
    """Token audiences, one per backend surface."""

    UNIFIED = "unified"
    LEGACY_AGENT = "legacy-agent"
    LEGACY_ASSISTANT = "legacy-assistant"

    @property
    def scope(self) -> str:
        return {
            TokenAudience.UNIFIED: AzureScopes.UNIFIED,
            TokenAudience.LEGACY_AGENT: AzureScopes.LEGACY_AGENT,
            TokenAudience.LEGACY_ASSISTANT: AzureScopes.LEGACY_ASSISTANT,
        }[self]


# Authentication methods
class AuthMethod(str, Enum):
    """Azure authentication methods."""

    CLI = "cli"  # Azure CLI (az login)
    SERVICE_PRINCIPAL = "service_principal"  # Client ID + Secret
    MANAGED_IDENTITY = "managed_identity"  # System/User assigned MI
    DEFAULT = "default"  # DefaultAzureCredential chain


class Endpoints:
    """Endpoint shapes for the two backend generations."""

    # Hostnames of the unified surface end with this suffix
    UNIFIED_HOST_SUFFIX = ".ai.azure.com"
    UNIFIED_HOST = "ai.azure.com"

    # Legacy agent endpoint expanded from a connection string
    CONNECTION_STRING_TEMPLATE = (
        "https://{host}/agents/v1.0"
        "/subscriptions/{subscription}"
        "/resourceGroups/{resource_group}"
        "/providers/Microsoft.MachineLearningServices"
        "/workspaces/{workspace}"
    )
    CONNECTION_STRING_PARTS = 4

    # Legacy assistant paths are prefixed with this segment
    OPENAI_PREFIX = "openai/"


class ContentTypes:
    """Request content types."""

    JSON = "application/json"


class RunStatus(str, Enum):
    """Run state machine."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"

    @property
    def is_terminal(self) -> bool:
        return self in {
            RunStatus.COMPLETED,
            RunStatus.FAILED,
            RunStatus.CANCELLED,
            RunStatus.EXPIRED,
            RunStatus.INCOMPLETE,
        }


class Limits:
    """Field limits enforced before any request is sent."""

    NAME_MAX = 256
    DESCRIPTION_MAX = 512
    INSTRUCTIONS_MAX = 256_000
    METADATA_MAX_ENTRIES = 16
    METADATA_KEY_MAX = 64
    METADATA_VALUE_MAX = 512
    TEMPERATURE_RANGE = (0.0, 2.0)
    TOP_P_RANGE = (0.0, 1.0)

    # Synchronous run polling
    POLL_INTERVAL_SECONDS = 10
    MAX_POLLS = 100

    REQUEST_TIMEOUT_SECONDS = 100
    LIST_PAGE_SIZE = 100


class FilePurpose(str, Enum):
    """Purposes accepted for uploaded files."""

    ASSISTANTS = "assistants"
    AGENTS = "agents"
    VISION = "vision"


# CLI display constants
class Display:
    """Constants for CLI display formatting."""

    APP_NAME = "Foundry Agents"
    APP_DESCRIPTION = "Manage Azure AI agents, assistants, threads and files"

    # Status symbols
    SUCCESS = "[green]✓[/green]"
    FAILURE = "[red]✗[/red]"
    WARNING = "[yellow]![/yellow]"
    INFO = "[blue]ℹ[/blue]"

    # Table styles
    HEADER_STYLE = "bold cyan"


# Config paths
class Paths:
    """Default paths for configuration and the context cache."""

    CONFIG_DIR_NAME = ".foundry-agents"
    CONTEXT_FILE = "context.json"
