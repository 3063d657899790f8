"""Thread, message and run operations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Callable

from foundry_agents.core.constants import Limits, RunStatus
from foundry_agents.core.exceptions import (
    ApiError,
    ResourceNotFoundError,
    RunFailedError,
    RunTimeoutError,
    ServiceContractViolation,
)
from foundry_agents.core.logging import get_logger
from foundry_agents.models.conversation import Message, Run, Thread
from foundry_agents.services.api_client import ApiClient

logger = get_logger("services.conversation_ops")

SERVICE = "threads"


@dataclass
class RunOutcome:
    """A finished run and the messages it produced."""

    run: Run
    messages: list[Message] = field(default_factory=list)

    @property
    def response_text(self) -> str:
        """Text of the assistant messages, oldest first."""
        return "\n\n".join(
            message.text for message in self.messages if message.role == "assistant" and message.text
        )


class ConversationService:
    """Operations on threads and the runs executed on them."""

    def __init__(
        self,
        client: ApiClient,
        poll_interval: float = Limits.POLL_INTERVAL_SECONDS,
        max_polls: int = Limits.MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the service.

        Args:
            client: API client bound to the active context
            poll_interval: Seconds between run status polls
            max_polls: Polls before a synchronous run times out
            sleep: Blocking sleep used between polls
        """
        self.client = client
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self.sleep = sleep

    # Threads

    def create_thread(
        self,
        messages: list[dict[str, Any]] | None = None,
        metadata: dict[str, str] | None = None,
        tool_resources: dict[str, Any] | None = None,
    ) -> Thread:
        body: dict[str, Any] = {}
        if messages:
            body["messages"] = messages
        if metadata:
            body["metadata"] = metadata
        if tool_resources:
            body["tool_resources"] = tool_resources
        data = self.client.call(SERVICE, "thread", method="POST", body=body, use_open_prefix=True)
        thread = Thread.model_validate(_require_id(data, "thread"))
        logger.info(f"Created thread {thread.id}")
        return thread

    def get_thread(self, thread_id: str) -> Thread:
        data = self._get("Thread", thread_id, "thread", thread_id)
        return Thread.model_validate(data)

    def delete_thread(self, thread_id: str) -> bool:
        try:
            data = self.client.call(
                SERVICE, "thread", path=thread_id, method="DELETE", use_open_prefix=True
            )
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError("Thread", thread_id) from e
            raise
        logger.info(f"Deleted thread {thread_id}")
        return bool(data.get("deleted", True)) if isinstance(data, dict) else True

    # Messages

    def add_message(
        self,
        thread_id: str,
        content: str,
        role: str = "user",
        attachments: list[dict[str, Any]] | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Message:
        """Post a message to a thread."""
        body: dict[str, Any] = {"role": role, "content": content}
        if attachments:
            body["attachments"] = attachments
        if metadata:
            body["metadata"] = metadata
        data = self.client.call(
            SERVICE,
            "messages",
            path=f"{thread_id}/messages",
            method="POST",
            body=body,
            use_open_prefix=True,
        )
        return Message.model_validate(_require_id(data, "message"))

    def list_messages(
        self,
        thread_id: str,
        order: str = "asc",
        run_id: str | None = None,
    ) -> list[Message]:
        """List every message on a thread."""
        params: dict[str, Any] = {"order": order}
        if run_id:
            params["run_id"] = run_id
        items = self.client.list_all(
            SERVICE, "messages", path=f"{thread_id}/messages", params=params, use_open_prefix=True
        )
        return [Message.model_validate(item) for item in items]

    def get_message(self, thread_id: str, message_id: str) -> Message:
        data = self._get("Message", message_id, "messages", f"{thread_id}/messages/{message_id}")
        return Message.model_validate(data)

    # Runs

    def create_run(
        self,
        thread_id: str,
        assistant_id: str,
        instructions: str | None = None,
        additional_instructions: str | None = None,
        model: str | None = None,
        tools: list[dict[str, Any]] | None = None,
        metadata: dict[str, str] | None = None,
    ) -> Run:
        """Start a run; returns immediately with the queued run."""
        body: dict[str, Any] = {"assistant_id": assistant_id}
        optional = {
            "instructions": instructions,
            "additional_instructions": additional_instructions,
            "model": model,
            "tools": tools,
            "metadata": metadata,
        }
        body.update({key: value for key, value in optional.items() if value is not None})
        data = self.client.call(
            SERVICE,
            "thread",
            path=f"{thread_id}/runs",
            method="POST",
            body=body,
            use_open_prefix=True,
        )
        run = Run.model_validate(_require_id(data, "run"))
        logger.info(f"Started run {run.id} on thread {thread_id} ({run.status.value})")
        return run

    def get_run(self, thread_id: str, run_id: str) -> Run:
        """Current status of a run."""
        data = self._get("Run", run_id, "threadStatus", f"{thread_id}/runs/{run_id}")
        return Run.model_validate(data)

    def list_runs(self, thread_id: str) -> list[Run]:
        items = self.client.list_all(
            SERVICE, "threadStatus", path=f"{thread_id}/runs", use_open_prefix=True
        )
        return [Run.model_validate(item) for item in items]

    def cancel_run(self, thread_id: str, run_id: str) -> Run:
        data = self.client.call(
            SERVICE,
            "threadStatus",
            path=f"{thread_id}/runs/{run_id}/cancel",
            method="POST",
            use_open_prefix=True,
        )
        return Run.model_validate(data)

    def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: list[dict[str, str]]
    ) -> Run:
        """Answer a run waiting in ``requires_action`` with function results."""
        data = self.client.call(
            SERVICE,
            "thread",
            path=f"{thread_id}/runs/{run_id}/submit_tool_outputs",
            method="POST",
            body={"tool_outputs": outputs},
            use_open_prefix=True,
        )
        return Run.model_validate(data)

    def wait_for_run(self, run: Run) -> Run:
        """
        Poll a run until it completes.

        Returns the run once it is ``completed`` or ``requires_action``.

        Raises:
            RunFailedError: If the run fails, is cancelled, expires or is incomplete
            RunTimeoutError: If it is still running after ``max_polls`` polls
        """
        polls = 0
        while True:
            if run.status in (RunStatus.COMPLETED, RunStatus.REQUIRES_ACTION):
                return run
            if run.status.is_terminal:
                raise RunFailedError(run.id, run.status.value, run.error_message)
            if polls >= self.max_polls:
                raise RunTimeoutError(run.id, polls, run.status.value)
            self.sleep(self.poll_interval)
            polls += 1
            run = self.get_run(run.thread_id, run.id)
            logger.debug(f"Run {run.id} poll {polls}/{self.max_polls}: {run.status.value}")

    def run_sync(self, thread_id: str, assistant_id: str, **run_options: Any) -> RunOutcome:
        """Start a run, wait for it, and collect the messages it produced."""
        run = self.wait_for_run(self.create_run(thread_id, assistant_id, **run_options))
        messages = []
        if run.status == RunStatus.COMPLETED:
            messages = self.list_messages(thread_id, run_id=run.id)
        return RunOutcome(run=run, messages=messages)

    def ask(self, assistant_id: str, content: str, **run_options: Any) -> RunOutcome:
        """Create a thread with one user message and run it synchronously."""
        thread = self.create_thread()
        self.add_message(thread.id, content)
        return self.run_sync(thread.id, assistant_id, **run_options)

    def _get(self, label: str, object_id: str, operation: str, path: str) -> dict[str, Any]:
        try:
            return self.client.call(SERVICE, operation, path=path, use_open_prefix=True)
        except ApiError as e:
            if e.is_not_found:
                raise ResourceNotFoundError(label, object_id) from e
            raise


def _require_id(data: Any, label: str) -> dict[str, Any]:
    if not isinstance(data, dict) or not data.get("id"):
        raise ServiceContractViolation(f"The {label} response did not include an ID")
    return data
