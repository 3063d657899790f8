"""Azure authentication service."""

from __future__ import annotations

from typing import Protocol

from azure.core.credentials import TokenCredential
from azure.identity import (
    AzureCliCredential,
    ClientSecretCredential,
    DefaultAzureCredential,
    ManagedIdentityCredential,
)

from foundry_agents.core.constants import AuthMethod, ResourceKind, TokenAudience
from foundry_agents.core.context import Context
from foundry_agents.core.exceptions import AuthenticationError
from foundry_agents.core.logging import get_logger

logger = get_logger("services.auth")


class TokenProvider(Protocol):
    """Supplies bearer tokens for a service audience."""

    def get_token(self, audience: TokenAudience) -> str: ...


def audience_for(context: Context) -> TokenAudience:
    """Token audience for the surface a context targets."""
    if context.use_new_generation:
        return TokenAudience.UNIFIED
    if context.resource_kind == ResourceKind.ASSISTANT:
        return TokenAudience.LEGACY_ASSISTANT
    return TokenAudience.LEGACY_AGENT


class AzureAuthService:
    """Token provider backed by azure-identity credentials."""

    def __init__(
        self,
        method: AuthMethod = AuthMethod.DEFAULT,
        tenant_id: str | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        managed_identity_client_id: str | None = None,
    ) -> None:
        self.method = method
        self.tenant_id = tenant_id
        self.client_id = client_id
        self.client_secret = client_secret
        self.managed_identity_client_id = managed_identity_client_id
        self._credential: TokenCredential | None = None

    def _build_credential(self) -> TokenCredential:
        if self.method == AuthMethod.CLI:
            logger.debug("Using Azure CLI authentication")
            return AzureCliCredential()
        if self.method == AuthMethod.SERVICE_PRINCIPAL:
            if not all([self.tenant_id, self.client_id, self.client_secret]):
                raise AuthenticationError(
                    "Service principal requires tenant_id, client_id, and client_secret"
                )
            logger.debug(f"Using service principal authentication for tenant {self.tenant_id}")
            return ClientSecretCredential(
                tenant_id=self.tenant_id,
                client_id=self.client_id,
                client_secret=self.client_secret,
            )
        if self.method == AuthMethod.MANAGED_IDENTITY:
            logger.debug("Using managed identity authentication")
            if self.managed_identity_client_id:
                return ManagedIdentityCredential(client_id=self.managed_identity_client_id)
            return ManagedIdentityCredential()
        logger.debug("Using default credential chain")
        return DefaultAzureCredential()

    def get_credential(self) -> TokenCredential:
        """
        Get the current credential, creating it on first use.

        Returns:
            Azure credential object
        """
        if self._credential is None:
            self._credential = self._build_credential()
        return self._credential

    def get_token(self, audience: TokenAudience) -> str:
        """
        Get a bearer token for a service audience.

        Args:
            audience: Surface the token is for

        Returns:
            Access token string

        Raises:
            AuthenticationError: If no token could be acquired
        """
        credential = self.get_credential()
        try:
            token = credential.get_token(audience.scope)
        except Exception as e:
            logger.error(f"Token acquisition failed for {audience.value}: {e}")
            raise AuthenticationError(
                f"Failed to acquire a token for {audience.scope}: {e}",
                details={"method": self.method.value},
            ) from e
        return token.token
