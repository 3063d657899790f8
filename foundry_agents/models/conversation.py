"""Models for threads, messages and runs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from foundry_agents.core.constants import RunStatus


class Thread(BaseModel):
    """A conversation thread."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Thread ID")
    created_at: int | None = None
    metadata: dict[str, str] | None = None
    tool_resources: dict[str, Any] | None = None


class Message(BaseModel):
    """A message posted to a thread."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Message ID")
    thread_id: str | None = None
    role: str = Field(default="user", description="user or assistant")
    content: list[dict[str, Any]] = Field(default_factory=list)
    assistant_id: str | None = None
    run_id: str | None = None
    created_at: int | None = None
    attachments: list[dict[str, Any]] | None = None

    @property
    def text(self) -> str:
        """Concatenated text parts of the message."""
        parts = []
        for part in self.content:
            if part.get("type") == "text":
                text = part.get("text")
                parts.append(text.get("value", "") if isinstance(text, dict) else str(text or ""))
        return "\n".join(part for part in parts if part)


class Run(BaseModel):
    """An execution of an agent on a thread."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Run ID")
    thread_id: str = Field(description="Thread ID")
    assistant_id: str | None = None
    status: RunStatus = Field(description="Run status")
    created_at: int | None = None
    completed_at: int | None = None
    last_error: dict[str, Any] | None = None
    required_action: dict[str, Any] | None = None
    usage: dict[str, Any] | None = None

    @property
    def error_message(self) -> str | None:
        if not self.last_error:
            return None
        return self.last_error.get("message") or self.last_error.get("code")
