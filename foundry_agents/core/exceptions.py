"""Custom exceptions for the Foundry Agents client."""

from typing import Any


class AgentServiceError(Exception):
    """Base exception for all client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(AgentServiceError):
    """No context is set, or the context is unusable."""

    def __init__(
        self,
        message: str = "Configuration error",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class FormatError(AgentServiceError):
    """Malformed input: connection string, input document, etc."""

    def __init__(
        self,
        message: str = "Invalid input format",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class ValidationError(AgentServiceError):
    """A field violates a length, range or pattern rule."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class MissingRequiredFieldError(ValidationError):
    """A field required for creation was not supplied."""

    def __init__(
        self,
        field: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(f"'{field}' is required when creating a resource", details)
        self.field = field


class InvalidToolPayloadError(ValidationError):
    """A tool definition is incomplete or malformed."""

    def __init__(
        self,
        message: str = "Invalid tool definition",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class ResourceNotFoundError(AgentServiceError):
    """A referenced resource does not exist or is not accessible."""

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"{resource_type} '{resource_name}' not found"
        super().__init__(message, details)
        self.resource_type = resource_type
        self.resource_name = resource_name


class ConflictError(AgentServiceError):
    """Competing tool directives were requested together."""

    def __init__(
        self,
        message: str = "Conflicting directives",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class ServiceContractViolation(AgentServiceError):
    """A success response is missing data the service guarantees."""

    def __init__(
        self,
        message: str = "Service response is missing expected data",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class ApiError(AgentServiceError):
    """Transport failure or non-2xx response. Carries the upstream message."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or "Request failed", details)
        self.status_code = status_code

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class AuthenticationError(AgentServiceError):
    """Azure authentication failed."""

    def __init__(
        self,
        message: str = "Failed to authenticate with Azure",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class RunTimeoutError(AgentServiceError):
    """A run did not complete within the polling budget."""

    def __init__(
        self,
        run_id: str,
        polls: int,
        status: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Run '{run_id}' did not complete after {polls} polls (last status: {status})"
        super().__init__(message, details)
        self.run_id = run_id
        self.polls = polls
        self.status = status


class RunFailedError(AgentServiceError):
    """A run ended in a non-successful terminal state."""

    def __init__(
        self,
        run_id: str,
        status: str,
        reason: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"Run '{run_id}' ended with status '{status}'"
        if reason:
            message += f": {reason}"
        super().__init__(message, details)
        self.run_id = run_id
        self.status = status
        self.reason = reason
