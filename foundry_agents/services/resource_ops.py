"""Create, read, update and delete agents/assistants."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from foundry_agents.core.exceptions import (
    AgentServiceError,
    ApiError,
    ResourceNotFoundError,
    ServiceContractViolation,
    ValidationError,
)
from foundry_agents.core.logging import get_logger
from foundry_agents.models.directives import Directive, ReconcileRequest
from foundry_agents.models.resource import AgentResource, ResourceFields
from foundry_agents.models.tools import ToolKind
from foundry_agents.services.api_client import ApiClient
from foundry_agents.services.reconciler import ReconcileResult, check_directives, reconcile

logger = get_logger("services.resource_ops")

SERVICE = "assistants"


@dataclass
class DeleteOutcome:
    """Result of deleting one resource in a batch."""

    resource_id: str
    deleted: bool
    error: str | None = None


class ResourceService:
    """Lifecycle operations for agents and assistants."""

    def __init__(self, client: ApiClient) -> None:
        """
        Initialize the service.

        Args:
            client: API client bound to the active context
        """
        self.client = client
        self.last_warnings: list[str] = []

    @property
    def kind_label(self) -> str:
        return self.client.store.get().resource_kind.value

    def get(self, resource_id: str) -> AgentResource:
        """
        Get one resource.

        Raises:
            ResourceNotFoundError: If the ID does not exist
        """
        try:
            data = self.client.call(SERVICE, "get", path=resource_id, use_open_prefix=True)
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(self.kind_label, resource_id) from e
            raise
        return AgentResource.from_wire(data)

    def list(self) -> list[AgentResource]:
        """List every resource, following pagination."""
        items = self.client.list_all(SERVICE, "get", use_open_prefix=True)
        return [AgentResource.from_wire(item) for item in items]

    def create(
        self,
        fields: ResourceFields | None = None,
        directives: list[Directive] | None = None,
        document: dict[str, Any] | None = None,
        source: AgentResource | dict[str, Any] | None = None,
    ) -> AgentResource:
        """
        Create a resource from explicit fields, a document, or a copy.

        Args:
            fields: Requested scalar fields
            directives: Tool directives
            document: Full resource document (import mode)
            source: Existing resource to copy; fields and directives apply on top

        Returns:
            The created resource including its ID

        Raises:
            ValidationError: On invalid fields or mixed input modes
            ConflictError: On mutually exclusive directives
            ResourceNotFoundError: If a connected agent does not exist
            ServiceContractViolation: If the response has no ID
        """
        fields = fields or ResourceFields()
        directives = list(directives or [])
        self._check_modes(fields, directives, document, source)

        if document is not None:
            request = ReconcileRequest.from_document(document)
        else:
            baseline = _as_resource(source) if source is not None else None
            request = ReconcileRequest(baseline=baseline, fields=fields, directives=directives)

        result = self._reconcile(request)
        self._verify_connected_agents(result.body)

        data = self.client.call(
            SERVICE, "create", method="POST", body=result.body, use_open_prefix=True
        )
        resource = self._require_id(data, "create")
        logger.info(f"Created {self.kind_label.lower()} {resource.id} ({resource.name})")
        return resource

    def update(
        self,
        resource_id: str | None = None,
        fields: ResourceFields | None = None,
        directives: list[Directive] | None = None,
        document: dict[str, Any] | None = None,
        source: AgentResource | dict[str, Any] | None = None,
    ) -> AgentResource:
        """
        Update a resource, preserving everything not explicitly changed.

        Args:
            resource_id: ID to update (defaults to the source's ID)
            fields: Requested scalar fields
            directives: Tool directives
            document: Full replacement document; skips fetching the current state
            source: Resource piped from a previous read; identifies the target

        Returns:
            The updated resource

        Raises:
            ResourceNotFoundError: If the ID does not exist
        """
        fields = fields or ResourceFields()
        directives = list(directives or [])
        self._check_modes(fields, directives, document, None)
        check_directives(directives)

        if source is not None:
            resource_id = resource_id or _as_resource(source).id
        if not resource_id:
            raise ValidationError(f"An {self.kind_label.lower()} ID is required to update")

        if document is not None:
            request = ReconcileRequest.from_document(document, require_core=False)
            result = self._reconcile(request)
            # A document replaces the tool configuration wholesale
            result.body.setdefault("tools", [])
            result.body.setdefault("tool_resources", {})
            known_agents: set[str] = set()
        else:
            baseline = self.get(resource_id)
            request = ReconcileRequest(baseline=baseline, fields=fields, directives=directives)
            result = self._reconcile(request)
            known_agents = {
                tool.key for tool in baseline.tools if tool.type == ToolKind.CONNECTED_AGENT.value
            }

        self._verify_connected_agents(result.body, known_agents)

        data = self.client.call(
            SERVICE,
            "create",
            path=resource_id,
            method="POST",
            body=result.body,
            use_open_prefix=True,
        )
        resource = self._require_id(data, "update")
        logger.info(f"Updated {self.kind_label.lower()} {resource.id}")
        return resource

    def delete(self, resource_id: str) -> bool:
        """
        Delete one resource.

        Raises:
            ResourceNotFoundError: If the ID does not exist
        """
        try:
            data = self.client.call(
                SERVICE, "get", path=resource_id, method="DELETE", use_open_prefix=True
            )
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(self.kind_label, resource_id) from e
            raise
        deleted = bool(data.get("deleted", True)) if isinstance(data, dict) else True
        logger.info(f"Deleted {self.kind_label.lower()} {resource_id}")
        return deleted

    def delete_all(self) -> list[DeleteOutcome]:
        """
        Delete every resource, one at a time.

        A failure is recorded in that resource's outcome and the remaining
        deletions still run.
        """
        outcomes = []
        for resource in self.list():
            try:
                outcomes.append(DeleteOutcome(resource.id, self.delete(resource.id)))
            except AgentServiceError as e:
                logger.warning(f"Could not delete {resource.id}: {e.message}")
                outcomes.append(DeleteOutcome(resource.id, False, e.message))
        return outcomes

    def _reconcile(self, request: ReconcileRequest) -> ReconcileResult:
        result = reconcile(request)
        self.last_warnings = result.warnings
        return result

    def _check_modes(
        self,
        fields: ResourceFields,
        directives: list[Directive],
        document: dict[str, Any] | None,
        source: AgentResource | dict[str, Any] | None,
    ) -> None:
        if document is not None and source is not None:
            raise ValidationError("Use either an input document or a source resource, not both")
        if document is not None and (fields.model_fields_set or directives):
            raise ValidationError(
                "An input document cannot be combined with explicit fields or tool options"
            )

    def _verify_connected_agents(
        self, body: dict[str, Any], known: set[str] | None = None
    ) -> None:
        known = known or set()
        for entry in body.get("tools", []):
            if entry.get("type") != ToolKind.CONNECTED_AGENT.value:
                continue
            agent_id = (entry.get("connected_agent") or {}).get("id")
            if not agent_id or agent_id in known:
                continue
            try:
                self.client.call(SERVICE, "get", path=agent_id, use_open_prefix=True)
            except ApiError as e:
                if e.status_code in (403, 404):
                    raise ResourceNotFoundError("Connected agent", agent_id) from e
                raise
            known.add(agent_id)

    def _require_id(self, data: Any, operation: str) -> AgentResource:
        if not isinstance(data, dict) or not data.get("id"):
            raise ServiceContractViolation(
                f"The {operation} response did not include an {self.kind_label.lower()} ID"
            )
        return AgentResource.from_wire(data)


def _as_resource(source: AgentResource | dict[str, Any]) -> AgentResource:
    if isinstance(source, AgentResource):
        return source
    return AgentResource.from_wire(source)
