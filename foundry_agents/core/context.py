"""Service context and its on-disk cache."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from foundry_agents.core.constants import Endpoints, ResourceKind
from foundry_agents.core.exceptions import ConfigurationError
from foundry_agents.core.logging import get_logger

logger = get_logger("core.context")


def normalize_endpoint(endpoint: str | None) -> str:
    """Trim whitespace and trailing slashes from an endpoint URL."""
    normalized = (endpoint or "").strip().rstrip("/")
    if not normalized:
        raise ConfigurationError("Endpoint must not be empty")
    return normalized


def is_unified_endpoint(endpoint: str) -> bool:
    """Whether the endpoint targets the unified Foundry project surface."""
    host = (urlparse(endpoint).hostname or "").lower()
    return host == Endpoints.UNIFIED_HOST or host.endswith(Endpoints.UNIFIED_HOST_SUFFIX)


class Context(BaseModel):
    """
    The active service context.

    Immutable: a new context replaces the old one wholesale. The generation
    flag is always derived from the endpoint when the context is built, so a
    stale value in a cache file is never trusted.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    endpoint: str = Field(alias="Endpoint", description="Service endpoint URL")
    resource_kind: ResourceKind = Field(
        default=ResourceKind.AGENT,
        alias="ApiType",
        description="Kind of resource managed through this endpoint",
    )
    api_version: str | None = Field(
        default=None,
        alias="ApiVersion",
        description="API version override applied to every request",
    )
    use_new_generation: bool = Field(
        default=False,
        alias="UseNewApi",
        description="Whether the endpoint is on the unified surface",
    )
    cached_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="CachedAt",
    )

    @model_validator(mode="before")
    @classmethod
    def _derive_generation(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        key = "Endpoint" if "Endpoint" in data else "endpoint"
        endpoint = str(data.get(key) or "").strip().rstrip("/")
        data[key] = endpoint
        data.pop("UseNewApi", None)
        data["use_new_generation"] = bool(endpoint) and is_unified_endpoint(endpoint)
        return data

    @classmethod
    def create(
        cls,
        endpoint: str,
        resource_kind: ResourceKind = ResourceKind.AGENT,
        api_version: str | None = None,
    ) -> Context:
        """Build a context, failing on an empty endpoint."""
        return cls(
            endpoint=normalize_endpoint(endpoint),
            resource_kind=resource_kind,
            api_version=api_version or None,
        )

    def to_cache(self) -> dict[str, Any]:
        """Serialize with the cache file's field names."""
        return self.model_dump(mode="json", by_alias=True)


class ContextCache(Protocol):
    """Persistence for the active context."""

    def load(self) -> Context | None: ...

    def save(self, context: Context) -> None: ...

    def clear(self) -> None: ...


class FileContextCache:
    """Context cache stored as a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> Context | None:
        """Load the cached context. Missing or unreadable files are a miss."""
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            context = Context.model_validate(data)
        except (OSError, ValueError, PydanticValidationError) as e:
            logger.warning(f"Ignoring unreadable context cache {self.path}: {e}")
            return None
        if not context.endpoint:
            logger.warning(f"Ignoring context cache {self.path}: endpoint is empty")
            return None
        logger.debug(f"Loaded context from {self.path}")
        return context

    def save(self, context: Context) -> None:
        """Persist the context. Failures are logged, never raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(context.to_cache(), indent=2), encoding="utf-8")
            logger.debug(f"Saved context to {self.path}")
        except OSError as e:
            logger.warning(f"Could not persist context to {self.path}: {e}")

    def clear(self) -> None:
        """Delete the cache file if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove context cache {self.path}: {e}")
