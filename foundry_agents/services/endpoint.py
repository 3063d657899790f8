"""Request URI and API version resolution for both backend generations."""

from __future__ import annotations

from urllib.parse import quote

from foundry_agents.core.constants import ApiVersions, Endpoints, ResourceKind
from foundry_agents.core.context import Context, normalize_endpoint
from foundry_agents.core.exceptions import FormatError


def api_version_for(operation: str, resource_kind: ResourceKind) -> str:
    """
    API version used for an operation on the legacy generation.

    Both resource kinds currently share one table; the kind is accepted so
    the surfaces can diverge without changing callers.
    """
    return ApiVersions.LEGACY_BY_OPERATION.get(operation, ApiVersions.LEGACY_DEFAULT)


def resolve(
    context: Context,
    service: str,
    operation: str,
    path: str | None = None,
    use_open_prefix: bool = False,
) -> str:
    """
    Build the fully qualified request URI for a logical operation.

    Args:
        context: Active service context
        service: Service collection, e.g. ``assistants`` or ``threads``
        operation: Logical operation name used to pick the API version
        path: Optional path below the service, e.g. an ID
        use_open_prefix: Prefix ``openai/`` on the legacy assistant surface

    Returns:
        URI including the ``api-version`` query parameter

    Raises:
        ConfigurationError: If the context endpoint is empty
    """
    endpoint = normalize_endpoint(context.endpoint)
    suffix = f"/{path.strip('/')}" if path else ""

    if context.use_new_generation:
        version = context.api_version or ApiVersions.UNIFIED_DEFAULT
        return f"{endpoint}/{service}{suffix}?api-version={version}"

    prefix = ""
    if context.resource_kind == ResourceKind.ASSISTANT and use_open_prefix:
        prefix = Endpoints.OPENAI_PREFIX
    version = context.api_version or api_version_for(operation, context.resource_kind)
    return f"{endpoint}/{prefix}{service}{suffix}?api-version={version}"


def endpoint_from_connection_string(connection_string: str) -> str:
    """
    Expand a ``host;subscription;resourceGroup;workspace`` connection string.

    Raises:
        FormatError: Unless exactly four non-empty segments are present
    """
    parts = [part.strip() for part in (connection_string or "").strip().split(";")]
    if len(parts) != Endpoints.CONNECTION_STRING_PARTS or not all(parts):
        raise FormatError(
            "Connection string must have the form "
            "'<host>;<subscription_id>;<resource_group>;<project_name>'",
            details={"segments": len(parts)},
        )
    host, subscription, resource_group, workspace = parts
    return Endpoints.CONNECTION_STRING_TEMPLATE.format(
        host=host,
        subscription=quote(subscription, safe=""),
        resource_group=quote(resource_group, safe=""),
        workspace=quote(workspace, safe=""),
    )


def looks_like_connection_string(value: str) -> bool:
    """Endpoints carry a scheme; connection strings do not."""
    return "://" not in (value or "")
