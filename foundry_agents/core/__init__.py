"""Core utilities and configuration for the Foundry Agents client."""

from foundry_agents.core.config import AppSettings, get_settings
from foundry_agents.core.exceptions import (
    AgentServiceError,
    ApiError,
    AuthenticationError,
    ConfigurationError,
    ConflictError,
    FormatError,
    InvalidToolPayloadError,
    MissingRequiredFieldError,
    ResourceNotFoundError,
    RunFailedError,
    RunTimeoutError,
    ServiceContractViolation,
    ValidationError,
)

__all__ = [
    "AppSettings",
    "get_settings",
    "AgentServiceError",
    "ApiError",
    "AuthenticationError",
    "ConfigurationError",
    "ConflictError",
    "FormatError",
    "InvalidToolPayloadError",
    "MissingRequiredFieldError",
    "ResourceNotFoundError",
    "RunFailedError",
    "RunTimeoutError",
    "ServiceContractViolation",
    "ValidationError",
]
