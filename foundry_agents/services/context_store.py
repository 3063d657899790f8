"""The active service context and its lifecycle."""

from __future__ import annotations

import httpx

from foundry_agents.core.constants import ResourceKind
from foundry_agents.core.context import Context, ContextCache
from foundry_agents.core.exceptions import AgentServiceError, ConfigurationError
from foundry_agents.core.logging import get_logger
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.auth import TokenProvider
from foundry_agents.services.endpoint import (
    endpoint_from_connection_string,
    looks_like_connection_string,
)

logger = get_logger("services.context_store")


class ContextStore:
    """
    Holds the one active context.

    The in-memory context always wins; the cache is consulted only when
    nothing has been set in this process. Not thread-safe.
    """

    def __init__(
        self,
        cache: ContextCache | None = None,
        token_provider: TokenProvider | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            cache: Optional persistence for the context
            token_provider: Token source used to validate new contexts
            http_client: Optional httpx client used for validation
        """
        self.cache = cache
        self.token_provider = token_provider
        self._http_client = http_client
        self._context: Context | None = None

    @property
    def is_set(self) -> bool:
        return self._context is not None

    def set(
        self,
        target: str,
        resource_kind: ResourceKind = ResourceKind.AGENT,
        api_version: str | None = None,
        skip_validation: bool = False,
        no_cache: bool = False,
    ) -> Context:
        """
        Replace the active context.

        Args:
            target: Endpoint URL or ``host;subscription;resourceGroup;workspace``
            resource_kind: Kind of resource managed through the endpoint
            api_version: Optional API version override
            skip_validation: Skip the round-trip check
            no_cache: Do not persist the context

        Returns:
            The new context

        Raises:
            FormatError: If a connection string is malformed
            ConfigurationError: If the endpoint is empty or validation fails
        """
        if looks_like_connection_string(target):
            endpoint = endpoint_from_connection_string(target)
        else:
            endpoint = target
        context = Context.create(endpoint, resource_kind, api_version)

        self._context = context
        if not skip_validation:
            try:
                self._validate()
            except AgentServiceError as e:
                self._context = None
                logger.error(f"Context validation failed: {e.message}")
                raise ConfigurationError(
                    f"Failed to set context for {context.endpoint}: {e.message}",
                    details={"resource_kind": resource_kind.value},
                ) from e

        if not no_cache and self.cache is not None:
            self.cache.save(context)

        generation = "unified" if context.use_new_generation else "legacy"
        logger.info(f"Context set: {context.endpoint} ({resource_kind.value}, {generation})")
        return context

    def _validate(self) -> None:
        if self.token_provider is None:
            raise ConfigurationError("A token provider is required to validate the context")
        client = ApiClient(self, self.token_provider, http_client=self._http_client)
        try:
            client.call("assistants", "get", params={"limit": 1}, use_open_prefix=True)
        finally:
            client.close()

    def get(self) -> Context:
        """
        Get the active context, loading it from the cache if needed.

        Raises:
            ConfigurationError: If no context is set or cached
        """
        if self._context is not None:
            return self._context
        if self.cache is not None:
            cached = self.cache.load()
            if cached is not None:
                self._context = cached
                return cached
        raise ConfigurationError(
            "No context set. Run 'foundry-agents context set <endpoint>' first."
        )

    def clear(self) -> None:
        """Forget the active context and delete the cache."""
        self._context = None
        if self.cache is not None:
            self.cache.clear()
        logger.info("Context cleared")
